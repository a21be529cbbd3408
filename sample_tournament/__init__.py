"""
Sample Tournament - Swiss-style pairwise ranking of audio samples

Narrows a folder of samples down to the best ones: each round pairs samples
of similar score, a listener picks the better of each pair, and the top share
of the roster moves on to the next round.
"""

from .models import ELIMINATED_SCORE, Progress, Sample, TournamentState, Verdict
from .interfaces import Exporter, Judge, SampleFetcher, Storage
from .session import SessionConfig, TournamentSession
from .tournament import (
    advance_to_next_round,
    create_tournament,
    eliminate_both,
    generate_pairings,
    get_current_pairing,
    get_current_pairing_indices,
    get_progress,
    get_sorted_results,
    get_upcoming_pairings,
    is_round_complete,
    is_tournament_complete,
    next_round_size,
    record_comparison,
)

__version__ = "0.1.0"
__all__ = [
    "ELIMINATED_SCORE",
    "Progress",
    "Sample",
    "TournamentState",
    "Verdict",
    "Exporter",
    "Judge",
    "SampleFetcher",
    "Storage",
    "SessionConfig",
    "TournamentSession",
    "advance_to_next_round",
    "create_tournament",
    "eliminate_both",
    "generate_pairings",
    "get_current_pairing",
    "get_current_pairing_indices",
    "get_progress",
    "get_sorted_results",
    "get_upcoming_pairings",
    "is_round_complete",
    "is_tournament_complete",
    "next_round_size",
    "record_comparison",
]
