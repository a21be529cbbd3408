"""
Tournament engine.

Swiss-style elimination: each round pairs samples of neighbouring score,
the user picks winners, and the top share of the roster advances. Every
function here is a pure transition from one TournamentState to the next;
the only nondeterminism is the shuffle of pairing order, which draws from
the `rng` argument when one is given.
"""

import math
import random
from collections.abc import Iterable, Sequence
from dataclasses import replace

from .exceptions import InvalidWinnerError, ValidationError
from .logging_config import get_logger
from .models import ELIMINATED_SCORE, Pairing, Progress, Sample, TournamentState

# Module-level logger
logger = get_logger("tournament")

MIN_ROUND_SIZE = 2


def create_tournament(
    samples: Iterable[Sample],
    source_directory: str,
    advancement_threshold: float = 0.5,
    rng: random.Random | None = None,
) -> TournamentState:
    """
    Start a tournament from a freshly scanned roster.

    Scores and comparison counts on the incoming samples are discarded.

    Args:
        samples: Samples to rank; paths must be unique
        source_directory: Where the samples came from (stored, never read)
        advancement_threshold: Share of the roster kept after each round, in (0, 1]
        rng: Random source for the pairing shuffle

    Returns:
        Round 1 state with pairings generated

    Raises:
        ValidationError: If the roster is empty, has duplicate paths or the
            threshold is out of range
    """
    roster = tuple(replace(s, score=0, comparisons=0) for s in samples)
    if not roster:
        raise ValidationError("cannot create a tournament without samples")

    paths = [s.path for s in roster]
    if len(set(paths)) != len(paths):
        raise ValidationError("sample paths must be unique within a tournament")

    state = TournamentState(
        samples=roster,
        source_directory=source_directory,
        advancement_threshold=advancement_threshold,
        pairings=tuple(generate_pairings(roster, rng)),
    )
    logger.debug(
        f"Created tournament with {len(roster)} samples, {len(state.pairings)} pairings, threshold={advancement_threshold}"
    )
    return state


def generate_pairings(samples: Sequence[Sample], rng: random.Random | None = None) -> list[Pairing]:
    """
    Pair samples of adjacent score and shuffle the presentation order.

    Samples are ranked by score (highest first, ties keep roster order) and
    each unused sample is paired with the next unused one below it. With an
    odd roster the last sample sits the round out.
    """
    if len(samples) < 2:
        return []

    ranked = sorted(range(len(samples)), key=lambda i: samples[i].score, reverse=True)

    pairings = list[Pairing]()
    used = set[int]()
    for pos, index in enumerate(ranked[:-1]):
        if index in used:
            continue
        for other in ranked[pos + 1:]:
            if other in used:
                continue
            pairings.append((index, other))
            used.add(index)
            used.add(other)
            break

    # random.shuffle is an in-place Fisher-Yates
    (rng or random).shuffle(pairings)
    return pairings


def get_current_pairing_indices(state: TournamentState) -> Pairing | None:
    if state.current_pairing_index >= len(state.pairings):
        return None
    return state.pairings[state.current_pairing_index]


def get_current_pairing(state: TournamentState) -> tuple[Sample, Sample] | None:
    indices = get_current_pairing_indices(state)
    if indices is None:
        return None
    a, b = indices
    return state.samples[a], state.samples[b]


def record_comparison(state: TournamentState, winner_index: int) -> TournamentState:
    """
    Record the outcome of the current pairing.

    The winner gains a point, both samples gain a comparison and the cursor
    moves to the next pairing.

    Raises:
        InvalidWinnerError: If there is no current pairing or `winner_index`
            is not one of its two samples
    """
    indices = get_current_pairing_indices(state)
    if indices is None:
        raise InvalidWinnerError("round is complete, there is no pairing to record")
    if winner_index not in indices:
        raise InvalidWinnerError(
            f"sample {winner_index} is not part of the current pairing {indices}"
        )
    loser_index = indices[1] if indices[0] == winner_index else indices[0]

    samples = list(state.samples)
    winner = samples[winner_index]
    loser = samples[loser_index]
    samples[winner_index] = replace(winner, score=winner.score + 1, comparisons=winner.comparisons + 1)
    samples[loser_index] = replace(loser, comparisons=loser.comparisons + 1)

    logger.debug(f"{winner.filename} beats {loser.filename}")
    return replace(
        state,
        samples=tuple(samples),
        current_pairing_index=state.current_pairing_index + 1,
    )


def eliminate_both(state: TournamentState) -> TournamentState:
    """
    Skip the current pairing and knock both samples out.

    Both samples get the elimination score and one more comparison. Their
    remaining matches this round are dropped from the schedule; pairings
    already played stay as they are. No-op when the round is complete.
    """
    indices = get_current_pairing_indices(state)
    if indices is None:
        return state
    a, b = indices

    samples = tuple(
        replace(s, score=ELIMINATED_SCORE, comparisons=s.comparisons + 1) if i in indices else s
        for i, s in enumerate(state.samples)
    )
    pairings = tuple(
        pair
        for pos, pair in enumerate(state.pairings)
        if pos <= state.current_pairing_index or (a not in pair and b not in pair)
    )

    logger.debug(f"Eliminated {state.samples[a].filename} and {state.samples[b].filename}")
    return replace(
        state,
        samples=samples,
        pairings=pairings,
        current_pairing_index=state.current_pairing_index + 1,
    )


def is_round_complete(state: TournamentState) -> bool:
    return state.current_pairing_index >= len(state.pairings)


def next_round_size(state: TournamentState) -> int:
    """Number of samples the next call to advance_to_next_round will keep."""
    keep = max(MIN_ROUND_SIZE, math.ceil(len(state.samples) * state.advancement_threshold))
    return min(keep, len(state.samples))


def advance_to_next_round(state: TournamentState, rng: random.Random | None = None) -> TournamentState:
    """
    Keep the top of the roster and start the next round.

    Callers are expected to check is_round_complete first. Eliminated
    samples sort last, but may still be kept when fewer active samples
    remain than the round size.
    """
    ranked = sorted(state.samples, key=lambda s: s.score, reverse=True)
    survivors = tuple(ranked[:next_round_size(state)])

    logger.debug(f"Round {state.current_round} over: {len(state.samples)} -> {len(survivors)} samples")
    return replace(
        state,
        samples=survivors,
        current_round=state.current_round + 1,
        pairings=tuple(generate_pairings(survivors, rng)),
        current_pairing_index=0,
    )


def is_tournament_complete(state: TournamentState) -> bool:
    return len(state.samples) <= 1 or (is_round_complete(state) and not state.pairings)


def get_progress(state: TournamentState) -> Progress:
    total = len(state.pairings)
    percent = (state.current_pairing_index / total) * 100 if total > 0 else 100.0
    return Progress(
        current_comparison=min(state.current_pairing_index + 1, total),
        total_comparisons=total,
        current_round=state.current_round,
        samples_remaining=sum(1 for s in state.samples if not s.eliminated),
        percent_complete=percent,
    )


def get_sorted_results(state: TournamentState) -> list[Sample]:
    """Leaderboard of active samples: score first, then win rate."""
    active = [s for s in state.samples if not s.eliminated]
    return sorted(active, key=lambda s: (s.score, s.win_rate), reverse=True)


def get_upcoming_pairings(state: TournamentState, count: int = 2) -> list[tuple[Sample, Sample]]:
    """Return up to `count` pairings starting at the cursor, for prefetching."""
    start = state.current_pairing_index
    return [
        (state.samples[a], state.samples[b])
        for a, b in state.pairings[start:start + max(count, 0)]
    ]
