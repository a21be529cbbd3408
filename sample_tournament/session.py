"""
Session driver for sample tournaments.

Owns the single authoritative TournamentState, feeds pairings to a judge,
routes verdicts into the engine and persists progress.
"""

import random
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loguru import Logger

from . import tournament
from .exceptions import ConfigurationError
from .interfaces import Judge, Storage
from .logging_config import get_logger
from .models import TournamentState, Verdict

SUMMARY_TOP_N = 5


@dataclass
class SessionConfig:
    """Configuration for a tournament session."""

    lookahead: int = 2  # upcoming pairings handed to the judge for prefetch
    autosave: bool = True  # save after every decision
    progress_every: int = 10  # log progress every N decisions
    undo_depth: int = 50  # decisions that can be undone

    def __post_init__(self):
        """Validate configuration."""
        if self.lookahead < 0:
            raise ConfigurationError(f"lookahead must be >= 0, got {self.lookahead}")
        if self.progress_every <= 0:
            raise ConfigurationError(f"progress_every must be positive, got {self.progress_every}")
        if self.undo_depth < 0:
            raise ConfigurationError(f"undo_depth must be >= 0, got {self.undo_depth}")


class TournamentSession:
    """
    Drives a tournament from the current state to a decision.

    All state changes go through this object, one at a time, so a burst of
    input can never interleave two transitions.
    """

    def __init__(
        self,
        state: TournamentState,
        judge: Judge,
        storage: Storage | None = None,
        config: SessionConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.state: TournamentState = state
        self.judge: Judge = judge
        self.storage: Storage | None = storage
        self.config: SessionConfig = config or SessionConfig()
        self.rng: random.Random | None = rng

        self.decisions: int = 0
        self._history: deque[TournamentState] = deque(maxlen=self.config.undo_depth)

        self.logger: Logger = get_logger("session")

    def _push(self, new_state: TournamentState) -> None:
        self._history.append(self.state)
        self.state = new_state

    def apply(self, verdict: Verdict) -> TournamentState:
        """
        Apply a verdict to the current pairing.

        Raises:
            InvalidWinnerError: If a winner is given while no pairing is open
        """
        if verdict is Verdict.UNDO:
            return self.undo()
        if verdict is Verdict.SAVE:
            self.save()
            return self.state
        if verdict is Verdict.QUIT:
            return self.state

        if verdict is Verdict.ELIMINATE_BOTH:
            self._push(tournament.eliminate_both(self.state))
        else:
            indices = tournament.get_current_pairing_indices(self.state)
            winner = indices[0 if verdict is Verdict.FIRST else 1] if indices else -1
            self._push(tournament.record_comparison(self.state, winner))

        self.decisions += 1
        if self.decisions % self.config.progress_every == 0:
            self._print_progress()
        if self.config.autosave:
            self.save()
        return self.state

    def undo(self) -> TournamentState:
        """Restore the state before the last transition. No-op when nothing to undo."""
        if not self._history:
            self.logger.info("Nothing to undo")
            return self.state
        self.state = self._history.pop()
        self.decisions = max(0, self.decisions - 1)
        self.logger.info(
            f"Undid last decision: round {self.state.current_round}, pairing {self.state.current_pairing_index}"
        )
        if self.config.autosave:
            self.save()
        return self.state

    def save(self) -> None:
        if self.storage is None:
            self.logger.debug("No storage configured, skipping save")
            return
        self.storage.save_progress(self.state)

    def can_narrow(self) -> bool:
        """True if advancing would leave fewer samples than now."""
        return tournament.next_round_size(self.state) < len(self.state.samples)

    def is_decided(self) -> bool:
        """
        True once nothing is left to play.

        Besides the engine's own completion rule, the session ends when at
        most one active sample is left, or when a finished round's roster
        can no longer shrink: playing it again would only repeat the same
        final.
        """
        if tournament.is_tournament_complete(self.state):
            return True
        if tournament.get_progress(self.state).samples_remaining <= 1:
            return True
        return tournament.is_round_complete(self.state) and not self.can_narrow()

    def resolve_forfeit(self) -> bool:
        """
        Decide the current pairing without the judge if it holds an eliminated sample.

        The active sample wins against an eliminated one; two eliminated
        samples are skipped again. Forfeits are not pushed onto the undo
        stack, the same as round advancement.

        Returns:
            True if the pairing was decided here
        """
        indices = tournament.get_current_pairing_indices(self.state)
        if indices is None:
            return False
        a, b = indices
        first, second = self.state.samples[a], self.state.samples[b]
        if not (first.eliminated or second.eliminated):
            return False

        if first.eliminated and second.eliminated:
            self.state = tournament.eliminate_both(self.state)
        else:
            self.state = tournament.record_comparison(self.state, b if first.eliminated else a)
        self.logger.info(f"Forfeit: {first.filename} vs {second.filename} decided without the judge")
        if self.config.autosave:
            self.save()
        return True

    def advance(self) -> TournamentState:
        before = len(self.state.samples)
        # Not pushed: undo from a fresh round returns to the last decision
        self.state = tournament.advance_to_next_round(self.state, self.rng)
        self.logger.info(
            f"Advanced to round {self.state.current_round}: {before} -> {len(self.state.samples)} samples, {len(self.state.pairings)} pairings"
        )
        if self.config.autosave:
            self.save()
        return self.state

    def run(self) -> TournamentState:
        """
        Play pairings until the tournament is decided or the judge quits.

        Returns:
            The state at the time the run stopped
        """
        self.logger.info(
            f"Starting session at round {self.state.current_round} with {len(self.state.samples)} samples"
        )

        while not self.is_decided():
            if tournament.is_round_complete(self.state):
                self._print_round_summary()
                self.advance()
                continue
            if self.resolve_forfeit():
                continue

            pairing = tournament.get_current_pairing(self.state)
            assert pairing is not None, "open round must have a current pairing"

            self.judge.prefetch(tournament.get_upcoming_pairings(self.state, self.config.lookahead))

            progress = tournament.get_progress(self.state)
            print(
                f"\nRound {progress.current_round} - comparison {progress.current_comparison}/{progress.total_comparisons}"
                f" ({progress.percent_complete:.0f}%), {progress.samples_remaining} samples in play"
            )

            verdict = self.judge.judge(*pairing)
            if verdict is Verdict.QUIT:
                self.logger.info("Judge quit the session")
                print("Progress saved, quitting.")
                self.save()
                return self.state

            self.apply(verdict)

        self.save()
        remaining = len(tournament.get_sorted_results(self.state))
        self.logger.info(f"Tournament decided after round {self.state.current_round}: {remaining} samples left")
        print(f"\nTournament complete! Narrowed down to {remaining} sample(s).")
        return self.state

    def _print_progress(self) -> None:
        progress = tournament.get_progress(self.state)
        self.logger.info(
            f"Progress: round {progress.current_round}, {self.decisions} decisions, {progress.percent_complete:.1f}% of round, {progress.samples_remaining} samples in play"
        )

    def _print_round_summary(self) -> None:
        """Print round summary (top samples so far)."""
        print(f"\n{'='*60}")
        print(f"Round {self.state.current_round} complete!")
        print(f"{len(self.state.samples)} samples will be reduced to {tournament.next_round_size(self.state)}.")

        print(f"\nTop {SUMMARY_TOP_N} samples:")
        for i, sample in enumerate(tournament.get_sorted_results(self.state)[:SUMMARY_TOP_N], 1):
            print(f"  {i}. {sample.filename}: score={sample.score}, comparisons={sample.comparisons}")
        print(f"{'='*60}\n")
