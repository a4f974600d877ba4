"""
Scoring package.

Score bands, overlays and priority levels for task generation, plus the fixed
benchmarks the weekly snapshot compares against.
"""

from .benchmarks import BENCHMARKS, efficiency_score, rating_for
from .rules import clamp_score, priority_level, time_multiplier

__all__ = [
    "BENCHMARKS",
    "clamp_score",
    "efficiency_score",
    "priority_level",
    "rating_for",
    "time_multiplier",
]
