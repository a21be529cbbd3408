"""
Dummy judge implementation for testing.

Provides deterministic and random decisions for unattended runs.
"""

import random

from typing_extensions import override

from ..exceptions import ConfigurationError
from ..interfaces import Judge
from ..models import Sample, Verdict


class DummyJudge(Judge):
    """
    Dummy judge for testing purposes.

    In deterministic mode the sample whose file name sorts first wins;
    in random mode a seeded coin flip decides.
    """

    def __init__(self, mode: str = "deterministic", seed: int = 42):
        """
        Initialize dummy judge.

        Args:
            mode: "deterministic" or "random"
            seed: Random seed for reproducible results
        """
        if mode not in ("deterministic", "random"):
            raise ConfigurationError(f"Unknown mode: {mode}")
        self.mode = mode
        self.seed = seed
        self._rng = random.Random(seed)

    @override
    def judge(self, first: Sample, second: Sample) -> Verdict:
        if self.mode == "deterministic":
            return Verdict.FIRST if first.filename <= second.filename else Verdict.SECOND
        return self._rng.choice((Verdict.FIRST, Verdict.SECOND))
