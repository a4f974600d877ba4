"""
Fixed industry benchmarks used by the weekly snapshot.

These never influence task scores; they only put a provider's week in context.
"""

from typing import Literal

Rating = Literal["elite", "excellent", "good", "average", "needs_improvement"]

# Response time benchmarks (seconds)
ELITE_RESPONSE_TIME = 15 * 60
EXCELLENT_RESPONSE_TIME = 60 * 60
GOOD_RESPONSE_TIME = 4 * 60 * 60
AVERAGE_RESPONSE_TIME = 24 * 60 * 60

# Task completion rate benchmarks (percent)
ELITE_COMPLETION_RATE = 90
EXCELLENT_COMPLETION_RATE = 80
GOOD_COMPLETION_RATE = 70
AVERAGE_COMPLETION_RATE = 65

# Follow-up rate benchmarks (percent)
ELITE_FOLLOWUP_RATE = 100
EXCELLENT_FOLLOWUP_RATE = 90
GOOD_FOLLOWUP_RATE = 75
AVERAGE_FOLLOWUP_RATE = 60

BENCHMARKS: dict[str, int] = {
    "ELITE_RESPONSE_TIME": ELITE_RESPONSE_TIME,
    "EXCELLENT_RESPONSE_TIME": EXCELLENT_RESPONSE_TIME,
    "GOOD_RESPONSE_TIME": GOOD_RESPONSE_TIME,
    "AVERAGE_RESPONSE_TIME": AVERAGE_RESPONSE_TIME,
    "ELITE_COMPLETION_RATE": ELITE_COMPLETION_RATE,
    "EXCELLENT_COMPLETION_RATE": EXCELLENT_COMPLETION_RATE,
    "GOOD_COMPLETION_RATE": GOOD_COMPLETION_RATE,
    "AVERAGE_COMPLETION_RATE": AVERAGE_COMPLETION_RATE,
    "ELITE_FOLLOWUP_RATE": ELITE_FOLLOWUP_RATE,
    "EXCELLENT_FOLLOWUP_RATE": EXCELLENT_FOLLOWUP_RATE,
    "GOOD_FOLLOWUP_RATE": GOOD_FOLLOWUP_RATE,
    "AVERAGE_FOLLOWUP_RATE": AVERAGE_FOLLOWUP_RATE,
}

EFFICIENCY_BASE = 50
EFFICIENCY_VOLUME_CAP = 25
EFFICIENCY_POINTS_PER_TASK = 2.5
EFFICIENCY_EXCELLENT_RESPONSE_BONUS = 15
EFFICIENCY_GOOD_RESPONSE_BONUS = 10
EFFICIENCY_TIER1_CAP = 10
EFFICIENCY_POINTS_PER_TIER1 = 2

RATING_THRESHOLDS: tuple[tuple[int, Rating], ...] = (
    (90, "elite"),
    (80, "excellent"),
    (70, "good"),
    (60, "average"),
)

BENCHMARK_LABEL_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (150, "Elite"),
    (120, "Excellent"),
    (100, "Good"),
    (80, "Average"),
)


def response_time_vs_benchmark(avg_response_seconds: int) -> int:
    """100 = at the 24h benchmark, higher = faster. No data counts as at benchmark."""
    if avg_response_seconds <= 0:
        return 100
    return round(AVERAGE_RESPONSE_TIME / avg_response_seconds * 100)


def benchmark_label(ratio: int) -> str:
    for minimum, label in BENCHMARK_LABEL_THRESHOLDS:
        if ratio >= minimum:
            return label
    return "Needs Improvement"


def efficiency_score(total_completed: int, tier1_completed: int, avg_response_seconds: int) -> int:
    score = EFFICIENCY_BASE
    score += min(EFFICIENCY_VOLUME_CAP, total_completed * EFFICIENCY_POINTS_PER_TASK)

    if 0 < avg_response_seconds < EXCELLENT_RESPONSE_TIME:
        score += EFFICIENCY_EXCELLENT_RESPONSE_BONUS
    elif 0 < avg_response_seconds < GOOD_RESPONSE_TIME:
        score += EFFICIENCY_GOOD_RESPONSE_BONUS

    score += min(EFFICIENCY_TIER1_CAP, tier1_completed * EFFICIENCY_POINTS_PER_TIER1)
    return max(0, min(100, round(score)))


def rating_for(score: int) -> Rating:
    for minimum, rating in RATING_THRESHOLDS:
        if score >= minimum:
            return rating
    return "needs_improvement"
