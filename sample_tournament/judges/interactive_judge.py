"""
Interactive terminal judge.

Shows the two samples of a pairing and reads the listener's decision from
stdin. Samples can be auditioned through any external command-line player
(afplay, ffplay -nodisp -autoexit, mpv, ...).
"""

import shlex
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from typing_extensions import override

from ..exceptions import JudgeError
from ..interfaces import Judge
from ..logging_config import get_logger
from ..models import Sample, Verdict

# Module-level logger
logger = get_logger("interactive_judge")

HELP_TEXT = """\
  1 / a   first sample wins
  2 / b   second sample wins
  x       neither is usable, eliminate both
  p1 / p2 play first / second sample
  l       replay last played sample
  u       undo last decision
  s       save progress
  q       save and quit
  ?       show this help"""

_DECISIONS = {
    "1": Verdict.FIRST,
    "a": Verdict.FIRST,
    "2": Verdict.SECOND,
    "b": Verdict.SECOND,
    "x": Verdict.ELIMINATE_BOTH,
    "u": Verdict.UNDO,
    "s": Verdict.SAVE,
    "q": Verdict.QUIT,
}


class InteractiveJudge(Judge):
    """Judge that asks a human at the terminal."""

    def __init__(
        self,
        player_command: str | None = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        timeout: float | None = None,
    ):
        """
        Initialize interactive judge.

        Args:
            player_command: Command used to play a sample; the file path is appended
            input_fn: Reads one line of user input (injectable for tests)
            output_fn: Writes one line of output (injectable for tests)
            timeout: Maximum seconds a single playback may run
        """
        self.player_command: list[str] | None = shlex.split(player_command) if player_command else None
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.timeout = timeout
        self._last_played: Sample | None = None

    def play(self, sample: Sample) -> None:
        """
        Play a sample through the configured player.

        Raises:
            JudgeError: If no player is configured or the player fails
        """
        if self.player_command is None:
            raise JudgeError("no player configured (use --player)")

        cmd = [*self.player_command, sample.path]
        logger.debug(f"Playing: {cmd}")
        try:
            subprocess.run(cmd, check=True, timeout=self.timeout, capture_output=True)
        except FileNotFoundError as e:
            raise JudgeError(f"player not found: {self.player_command[0]}") from e
        except subprocess.CalledProcessError as e:
            raise JudgeError(f"player exited with code {e.returncode} for {sample.filename}") from e
        except subprocess.TimeoutExpired as e:
            raise JudgeError(f"playback of {sample.filename} timed out after {self.timeout}s") from e
        self._last_played = sample

    @override
    def judge(self, first: Sample, second: Sample) -> Verdict:
        self.output_fn(f"  [1] {first.filename}   (score {first.score})")
        self.output_fn(f"  [2] {second.filename}   (score {second.score})")
        self._last_played = None

        while True:
            choice = self.input_fn("Choice [1/2/x/p1/p2/l/u/s/q/?]: ").strip().lower()

            if choice in _DECISIONS:
                return _DECISIONS[choice]

            to_play = {"p1": first, "p2": second, "l": self._last_played}.get(choice)
            if choice in ("p1", "p2", "l"):
                if to_play is None:
                    self.output_fn("Nothing played yet.")
                    continue
                try:
                    self.play(to_play)
                except JudgeError as e:
                    logger.warning(f"Playback failed: {e}")
                    self.output_fn(f"Playback failed: {e}")
                continue

            if choice != "?":
                self.output_fn(f"Unknown choice: {choice!r}")
            self.output_fn(HELP_TEXT)

    @override
    def prefetch(self, upcoming: Sequence[tuple[Sample, Sample]]) -> None:
        """Warn early about upcoming samples whose files have gone missing."""
        for pair in upcoming:
            for sample in pair:
                if not Path(sample.path).exists():
                    logger.warning(f"Upcoming sample is missing on disk: {sample.path}")
