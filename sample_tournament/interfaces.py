"""
Abstract base classes defining the interfaces for the sample tournament system.

The engine in tournament.py is pure; everything that touches the file system
or the user sits behind one of these interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing_extensions import TypedDict

from .models import Sample, TournamentState, Verdict


class SampleRecord(TypedDict):
    """Serialized form of a Sample inside a session file."""
    path: str
    filename: str
    score: int
    comparisons: int


class SessionRecord(TypedDict):
    """Serialized form of a TournamentState. Field names are stable."""
    samples: list[SampleRecord]
    current_round: int
    comparisons_this_round: list[tuple[int, int]]
    current_comparison_index: int
    advancement_threshold: float
    source_directory: str


class SampleFetcher(ABC):
    """Interface for discovering the samples to rank."""

    @abstractmethod
    def list_samples(self) -> Iterable[Sample]:
        """Return all available samples."""
        pass


class Judge(ABC):
    """Interface for deciding a single pairing."""

    @abstractmethod
    def judge(self, first: Sample, second: Sample) -> Verdict:
        """
        Decide a pairing.

        May block (e.g. waiting for keyboard input).

        Args:
            first: Sample shown on the left / as "1"
            second: Sample shown on the right / as "2"

        Returns:
            Verdict for the pairing or a session action (undo, save, quit)
        """
        pass

    def prefetch(self, upcoming: Sequence[tuple[Sample, Sample]]) -> None:
        """Warm up whatever the judge needs for the next pairings."""
        return None


class Storage(ABC):
    """Interface for persisting tournament sessions."""

    @abstractmethod
    def save_progress(self, state: TournamentState) -> None:
        """Persist the whole state."""
        pass

    @abstractmethod
    def load_progress(self) -> TournamentState:
        """Load a previously saved state."""
        pass


class Exporter(ABC):
    """Interface for writing a filtered leaderboard somewhere useful."""

    @abstractmethod
    def export(self, samples: Sequence[Sample], min_score: int) -> int:
        """
        Export samples scoring at least `min_score`.

        Returns:
            Number of samples exported
        """
        pass
