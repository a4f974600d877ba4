# app/models/api/dashboard_response.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.features.business_tasks.domain.models import (
    BusinessTask,
    DashboardSettings,
    QuickStats,
    WeeklySnapshot,
)


class BusinessTaskResponse(BaseModel):
    task_key: str
    task_type: str
    task_tier: Literal["tier1", "tier2", "tier3", "tier4"]
    title: str
    context: str
    priority_score: int
    priority_level: Literal["critical", "high", "medium", "low"]
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    client_id: str | None = None
    client_name: str | None = None
    action_type: Literal["in_app", "sms", "email", "external"]
    sms_number: str | None = None
    sms_body: str | None = None
    email_recipient: str | None = None
    email_subject: str | None = None
    email_body: str | None = None
    deep_link: str | None = None
    due_at: datetime | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_domain(cls, task: BusinessTask) -> "BusinessTaskResponse":
        return cls(**task.to_dict())


class TaskListSettings(BaseModel):
    max_visible_tasks: int
    preferred_email_client: str


class TaskListResponse(BaseModel):
    """Response for GET /dashboard/tasks"""

    tasks: list[BusinessTaskResponse]
    settings: TaskListSettings


class StartTaskResponse(BaseModel):
    """Response for POST /dashboard/tasks/start"""

    success: bool = True
    started_at: datetime


class CompleteTaskResponse(BaseModel):
    """Response for POST /dashboard/tasks/complete"""

    success: bool = True
    time_to_complete_seconds: int = Field(..., ge=0)
    duration_clamped: bool = False


class DashboardSettingsResponse(BaseModel):
    max_visible_tasks: int
    goal_advanced_booking_months: int
    preferred_email_client: str
    show_weekly_snapshot: bool

    @classmethod
    def from_domain(cls, settings: DashboardSettings) -> "DashboardSettingsResponse":
        return cls(
            max_visible_tasks=settings.max_visible_tasks,
            goal_advanced_booking_months=settings.goal_advanced_booking_months,
            preferred_email_client=settings.preferred_email_client,
            show_weekly_snapshot=settings.show_weekly_snapshot,
        )


class WeeklyMetricsResponse(BaseModel):
    total_tasks_completed: int
    tier1_tasks_completed: int
    tier2_tasks_completed: int
    tier3_tasks_completed: int
    tier4_tasks_completed: int
    avg_completion_time_seconds: int
    avg_completion_time_by_tier: dict[str, int]
    avg_consultation_response_seconds: int


class BenchmarkComparisonResponse(BaseModel):
    response_time_vs_benchmark: int = Field(
        ..., description="100 = at benchmark, >100 = faster than average, <100 = slower"
    )
    benchmark_label: str


class WeeklySnapshotResponse(BaseModel):
    """Response for GET /dashboard/tasks/weekly-snapshot"""

    week_start: datetime
    week_end: datetime
    metrics: WeeklyMetricsResponse
    comparison: BenchmarkComparisonResponse
    efficiency_score: int = Field(..., ge=0, le=100)
    rating: Literal["elite", "excellent", "good", "average", "needs_improvement"]
    insights: list[str]

    @classmethod
    def from_domain(cls, snapshot: WeeklySnapshot) -> "WeeklySnapshotResponse":
        by_tier = snapshot.metrics.tasks_completed_by_tier
        return cls(
            week_start=snapshot.week_start,
            week_end=snapshot.week_end,
            metrics=WeeklyMetricsResponse(
                total_tasks_completed=snapshot.metrics.total_tasks_completed,
                tier1_tasks_completed=by_tier.get("tier1", 0),
                tier2_tasks_completed=by_tier.get("tier2", 0),
                tier3_tasks_completed=by_tier.get("tier3", 0),
                tier4_tasks_completed=by_tier.get("tier4", 0),
                avg_completion_time_seconds=snapshot.metrics.avg_completion_time_seconds,
                avg_completion_time_by_tier=snapshot.metrics.avg_completion_time_by_tier,
                avg_consultation_response_seconds=(
                    snapshot.metrics.avg_consultation_response_seconds
                ),
            ),
            comparison=BenchmarkComparisonResponse(
                response_time_vs_benchmark=snapshot.comparison.response_time_vs_benchmark,
                benchmark_label=snapshot.comparison.benchmark_label,
            ),
            efficiency_score=snapshot.efficiency_score,
            rating=snapshot.rating,
            insights=snapshot.insights,
        )


class ShouldShowSnapshotResponse(BaseModel):
    should_show: bool


class SuccessResponse(BaseModel):
    success: bool = True


class QuickStatsResponse(BaseModel):
    """Response for GET /dashboard/tasks/quick-stats"""

    bookings_this_week: int
    open_dates_this_month: int
    new_enquiries: int
    week_label: str
    month_label: str

    @classmethod
    def from_domain(cls, stats: QuickStats) -> "QuickStatsResponse":
        return cls(
            bookings_this_week=stats.bookings_this_week,
            open_dates_this_month=stats.open_dates_this_month,
            new_enquiries=stats.new_enquiries,
            week_label=stats.week_label,
            month_label=stats.month_label,
        )
