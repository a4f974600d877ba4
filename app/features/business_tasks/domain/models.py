"""
Domain models for the business task feature.

Input records mirror rows owned by the rest of the product (consultations,
appointments, conversations, clients); the engine only reads them. Output
records (tasks, completions, snapshots) are produced here and handed to the
caller or the completion repository.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Literal

from app.features.business_tasks.scoring.benchmarks import Rating
from app.features.business_tasks.scoring.rules import PriorityLevel, priority_level

TaskTier = Literal["tier1", "tier2", "tier3", "tier4"]
ActionType = Literal["in_app", "sms", "email", "external"]
ActionTaken = Literal["in_app", "sms", "email", "manual"]
EmailClient = Literal["default", "gmail", "outlook", "apple_mail"]

TASK_TIERS: tuple[TaskTier, ...] = ("tier1", "tier2", "tier3", "tier4")
TASK_DOMAIN = "business"


# ---------------------------------------------------------------------------
# Source records (read-only)
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ClientRecord:
    id: str
    name: str | None
    phone: str | None = None
    email: str | None = None
    birthday: date | None = None

    @property
    def display_name(self) -> str:
        return self.name or "Client"


@dataclass(slots=True)
class ConsultationRecord:
    id: str
    client_id: str | None
    conversation_id: str | None
    subject: str | None
    status: str
    viewed: bool
    created_at: datetime
    updated_at: datetime
    client: ClientRecord | None = None


@dataclass(slots=True)
class AppointmentRecord:
    id: str
    client_id: str | None
    conversation_id: str | None
    title: str | None
    start_time: datetime
    end_time: datetime | None
    status: str  # pending | confirmed | cancelled | completed
    deposit_amount: int | None = None  # cents
    deposit_paid: bool = False
    confirmation_sent: bool = False
    follow_up_sent: bool = False
    client: ClientRecord | None = None


@dataclass(slots=True)
class ConversationRecord:
    id: str
    artist_id: str
    client_id: str | None
    last_message_sender_id: str | None = None
    last_message_at: datetime | None = None
    client: ClientRecord | None = None


# ---------------------------------------------------------------------------
# Engine output
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class BusinessTask:
    task_type: str
    task_tier: TaskTier
    title: str
    context: str
    priority_score: int
    related_entity_type: str | None
    related_entity_id: str | None
    client_id: str | None
    client_name: str | None
    action_type: ActionType = "in_app"
    sms_number: str | None = None
    sms_body: str | None = None
    email_recipient: str | None = None
    email_subject: str | None = None
    email_body: str | None = None
    deep_link: str | None = None
    due_at: datetime | None = None
    expires_at: datetime | None = None

    @property
    def priority_level(self) -> PriorityLevel:
        return priority_level(self.priority_score)

    @property
    def task_key(self) -> str:
        """Stable composite id callers can use to track a task across listings."""
        return f"{self.related_entity_type}:{self.related_entity_id}"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["priority_level"] = self.priority_level
        data["task_key"] = self.task_key
        return data


@dataclass(slots=True, frozen=True)
class TaskReference:
    """The identifying part of a task a provider starts or completes."""

    task_type: str
    task_tier: TaskTier
    related_entity_type: str | None
    related_entity_id: str | None
    client_id: str | None
    priority_score: int

    @property
    def priority_level(self) -> PriorityLevel:
        return priority_level(self.priority_score)


@dataclass(slots=True)
class TaskCompletion:
    artist_id: str
    task: TaskReference
    started_at: datetime
    completed_at: datetime
    time_to_complete_seconds: int
    action_taken: ActionTaken = "manual"
    duration_clamped: bool = False
    task_domain: str = TASK_DOMAIN


@dataclass(slots=True)
class CompletionRow:
    """Completion as read back for weekly analytics."""

    task_type: str
    task_tier: TaskTier
    time_to_complete_seconds: int
    completed_at: datetime


@dataclass(slots=True)
class DashboardSettings:
    artist_id: str
    max_visible_tasks: int = 10
    goal_advanced_booking_months: int = 3
    preferred_email_client: EmailClient = "default"
    show_weekly_snapshot: bool = True
    last_snapshot_shown_at: datetime | None = None


# ---------------------------------------------------------------------------
# Weekly snapshot
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class WeeklyMetrics:
    total_tasks_completed: int = 0
    tasks_completed_by_tier: dict[str, int] = field(default_factory=dict)
    avg_completion_time_seconds: int = 0
    avg_completion_time_by_tier: dict[str, int] = field(default_factory=dict)
    avg_consultation_response_seconds: int = 0

    @property
    def tier1_tasks_completed(self) -> int:
        return self.tasks_completed_by_tier.get("tier1", 0)


@dataclass(slots=True)
class BenchmarkComparison:
    response_time_vs_benchmark: int
    benchmark_label: str


@dataclass(slots=True)
class WeeklySnapshot:
    week_start: datetime
    week_end: datetime
    metrics: WeeklyMetrics
    comparison: BenchmarkComparison
    efficiency_score: int
    rating: Rating
    insights: list[str]


@dataclass(slots=True)
class QuickStats:
    bookings_this_week: int
    open_dates_this_month: int
    new_enquiries: int
    week_label: str
    month_label: str
