"""
Judge implementations.
"""

from .dummy_judge import DummyJudge
from .interactive_judge import InteractiveJudge
from .sim_judge import SimulatedJudge

__all__ = [
    "DummyJudge",
    "InteractiveJudge",
    "SimulatedJudge",
]
