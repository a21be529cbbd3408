"""
Core dataclasses for the sample tournament system.

Defines Sample, TournamentState and the Progress snapshot. All models are
frozen: the engine builds new values instead of mutating old ones.
"""

from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ValidationError

# Score assigned to both samples of a skipped pairing. Persisted as-is so
# session files stay readable by older builds.
ELIMINATED_SCORE = -1000

Pairing = tuple[int, int]


@dataclass(frozen=True)
class Sample:
    """An audio file taking part in a tournament."""

    path: str
    filename: str
    score: int = 0
    comparisons: int = 0

    def __post_init__(self) -> None:
        """Validate sample data."""
        if not self.path:
            raise ValidationError("path cannot be empty")
        if not self.filename:
            raise ValidationError("filename cannot be empty")

    @property
    def eliminated(self) -> bool:
        return self.score <= ELIMINATED_SCORE

    @property
    def win_rate(self) -> float:
        if self.comparisons == 0:
            return 0.0
        return self.score / self.comparisons


@dataclass(frozen=True)
class TournamentState:
    """
    Aggregate root of a tournament run.

    `pairings` holds index pairs into `samples` for the current round;
    every pairing before `current_pairing_index` has been resolved.
    """

    samples: tuple[Sample, ...]
    source_directory: str
    advancement_threshold: float = 0.5
    current_round: int = 1
    pairings: tuple[Pairing, ...] = field(default_factory=tuple)
    current_pairing_index: int = 0

    def __post_init__(self) -> None:
        """Validate state invariants."""
        if not self.samples:
            raise ValidationError("a tournament needs at least one sample")
        if not (0 < self.advancement_threshold <= 1):
            raise ValidationError(
                f"advancement_threshold must be in (0, 1], got {self.advancement_threshold}"
            )
        if self.current_round < 1:
            raise ValidationError(f"current_round must be >= 1, got {self.current_round}")
        if not (0 <= self.current_pairing_index <= len(self.pairings)):
            raise ValidationError(
                f"current_pairing_index {self.current_pairing_index} outside [0, {len(self.pairings)}]"
            )
        for a, b in self.pairings:
            if a == b:
                raise ValidationError(f"pairing ({a}, {b}) pits a sample against itself")
            if not (0 <= a < len(self.samples) and 0 <= b < len(self.samples)):
                raise ValidationError(
                    f"pairing ({a}, {b}) out of range for {len(self.samples)} samples"
                )


@dataclass(frozen=True)
class Progress:
    """Read-only progress snapshot for the current round."""

    current_comparison: int
    total_comparisons: int
    current_round: int
    samples_remaining: int
    percent_complete: float


class Verdict(Enum):
    """Decision a judge hands back for a pairing."""

    FIRST = "first"
    SECOND = "second"
    ELIMINATE_BOTH = "eliminate_both"
    # Session-level actions; never reach the engine
    UNDO = "undo"
    SAVE = "save"
    QUIT = "quit"
