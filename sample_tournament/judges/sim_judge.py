"""
Simulated judge implementation.

Decides pairings from latent quality scores with a noise parameter, so the
tournament can be exercised end to end without a listener.
"""

import random
from typing import Dict

from typing_extensions import override

from ..interfaces import Judge
from ..models import Sample, Verdict


class SimulatedJudge(Judge):
    """
    Simulated judge for testing purposes.

    Compares ground truth quality with added noise. When both samples of a
    pairing fall under `reject_below` the judge throws both out, the way a
    listener skips two unusable takes.
    """

    def __init__(
        self,
        ground_truth: Dict[str, float],
        noise: float = 0.1,
        reject_below: float | None = None,
        seed: int | None = None,
    ):
        """
        Initialize simulated judge.

        Args:
            ground_truth: Dict mapping sample path to true quality score
            noise: Amount of noise to add (0-1, where 1 = full noise)
            reject_below: Quality under which both samples get eliminated
            seed: Seed for the noise generator
        """
        self.ground_truth = ground_truth
        self.noise = max(0.0, min(1.0, noise))  # Clamp to [0, 1]
        self.reject_below = reject_below
        self._rng = random.Random(seed)

    def _add_noise(self, score: float) -> float:
        """Add Gaussian noise to score."""
        if self.noise == 0:
            return score

        # Scale noise by score magnitude
        noise_scale = abs(score) * self.noise
        return score + self._rng.gauss(0, noise_scale)

    @override
    def judge(self, first: Sample, second: Sample) -> Verdict:
        true_first = self.ground_truth.get(first.path, 0.0)
        true_second = self.ground_truth.get(second.path, 0.0)

        if self.reject_below is not None and max(true_first, true_second) < self.reject_below:
            return Verdict.ELIMINATE_BOTH

        if self._add_noise(true_first) >= self._add_noise(true_second):
            return Verdict.FIRST
        return Verdict.SECOND
