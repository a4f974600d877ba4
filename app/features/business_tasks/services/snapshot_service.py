"""
Weekly performance snapshot built from recorded task completions.
"""

from collections.abc import Sequence
from datetime import datetime

from app.features.business_tasks.clock import Clock, system_clock, week_bounds
from app.features.business_tasks.domain.models import (
    TASK_TIERS,
    BenchmarkComparison,
    CompletionRow,
    WeeklyMetrics,
    WeeklySnapshot,
)
from app.features.business_tasks.repository.completion_repository import (
    TaskCompletionRepository,
)
from app.features.business_tasks.scoring import benchmarks
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

MAX_INSIGHTS = 3
STRONG_TIER1_WEEK = 5


def _average(values: Sequence[int]) -> int:
    return round(sum(values) / len(values)) if values else 0


def compute_metrics(completions: Sequence[CompletionRow]) -> WeeklyMetrics:
    by_tier: dict[str, list[int]] = {tier: [] for tier in TASK_TIERS}
    for row in completions:
        by_tier.setdefault(row.task_tier, []).append(row.time_to_complete_seconds)

    consultation_times = [
        row.time_to_complete_seconds for row in completions if row.task_type == "new_consultation"
    ]

    return WeeklyMetrics(
        total_tasks_completed=len(completions),
        tasks_completed_by_tier={tier: len(times) for tier, times in by_tier.items()},
        avg_completion_time_seconds=_average([row.time_to_complete_seconds for row in completions]),
        avg_completion_time_by_tier={tier: _average(times) for tier, times in by_tier.items()},
        avg_consultation_response_seconds=_average(consultation_times),
    )


def generate_insights(
    total_tasks: int, tier1_tasks: int, avg_response_seconds: int, efficiency: int
) -> list[str]:
    """Up to three short, deterministic coaching lines."""
    if total_tasks == 0:
        return ["Start completing tasks to see your performance metrics!"]

    insights: list[str] = []

    if avg_response_seconds > 0:
        if avg_response_seconds < benchmarks.ELITE_RESPONSE_TIME:
            insights.append(
                "🚀 Your consultation response time is elite! "
                "You're 3x faster than the average business."
            )
        elif avg_response_seconds < benchmarks.EXCELLENT_RESPONSE_TIME:
            insights.append(
                "⚡ Great response times! You're responding faster than 80% of businesses."
            )
        elif avg_response_seconds > benchmarks.AVERAGE_RESPONSE_TIME:
            insights.append(
                "💡 Tip: Responding to consultations within 1 hour "
                "can increase conversions by 7x."
            )

    if tier1_tasks >= STRONG_TIER1_WEEK:
        insights.append(
            f"💰 Strong revenue protection! You completed {tier1_tasks} critical tasks this week."
        )
    elif tier1_tasks == 0:
        insights.append(
            "📋 Focus on Tier 1 tasks (red) first - they protect your immediate revenue."
        )

    if efficiency >= 90:
        insights.append("🏆 You're performing at elite level! Keep up the excellent work.")
    elif efficiency >= 70:
        insights.append("📈 Good progress! A few more completed tasks could push you to excellent.")
    else:
        insights.append(
            "🎯 Try to complete at least 5 tasks per week to improve your efficiency score."
        )

    return insights[:MAX_INSIGHTS]


def compute_weekly_snapshot(
    completions: Sequence[CompletionRow], week_start: datetime, week_end: datetime
) -> WeeklySnapshot:
    metrics = compute_metrics(completions)
    ratio = benchmarks.response_time_vs_benchmark(metrics.avg_consultation_response_seconds)
    efficiency = benchmarks.efficiency_score(
        metrics.total_tasks_completed,
        metrics.tier1_tasks_completed,
        metrics.avg_consultation_response_seconds,
    )

    return WeeklySnapshot(
        week_start=week_start,
        week_end=week_end,
        metrics=metrics,
        comparison=BenchmarkComparison(
            response_time_vs_benchmark=ratio,
            benchmark_label=benchmarks.benchmark_label(ratio),
        ),
        efficiency_score=efficiency,
        rating=benchmarks.rating_for(efficiency),
        insights=generate_insights(
            metrics.total_tasks_completed,
            metrics.tier1_tasks_completed,
            metrics.avg_consultation_response_seconds,
            efficiency,
        ),
    )


class WeeklySnapshotService:
    def __init__(self, repository=TaskCompletionRepository, clock: Clock = system_clock):
        self.repository = repository
        self.clock = clock

    async def get_weekly_snapshot(self, provider_id: str) -> WeeklySnapshot:
        week_start, week_end = week_bounds(self.clock())
        completions = await self.repository.fetch_completions(provider_id, week_start, week_end)
        snapshot = compute_weekly_snapshot(completions, week_start, week_end)

        logger.info(
            "Weekly snapshot computed",
            provider_id=provider_id,
            week_start=week_start.isoformat(),
            total_completed=snapshot.metrics.total_tasks_completed,
            efficiency_score=snapshot.efficiency_score,
            rating=snapshot.rating,
        )
        return snapshot


snapshot_service = WeeklySnapshotService()
