# app/models/api/dashboard_request.py
from typing import Literal

from pydantic import BaseModel, Field

from app.features.business_tasks.domain.models import TaskReference


class TaskReferenceRequest(BaseModel):
    """Identifying fields of a task, as returned by GET /dashboard/tasks."""

    task_type: str = Field(..., min_length=1, max_length=100)
    task_tier: Literal["tier1", "tier2", "tier3", "tier4"]
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    client_id: str | None = None
    priority_score: int = Field(..., ge=0)

    def to_domain(self) -> TaskReference:
        return TaskReference(
            task_type=self.task_type,
            task_tier=self.task_tier,
            related_entity_type=self.related_entity_type,
            related_entity_id=self.related_entity_id,
            client_id=self.client_id,
            priority_score=self.priority_score,
        )


class StartTaskRequest(TaskReferenceRequest):
    """Request body for POST /dashboard/tasks/start"""


class CompleteTaskRequest(TaskReferenceRequest):
    """Request body for POST /dashboard/tasks/complete"""

    started_at: str | None = Field(
        default=None, description="ISO timestamp returned by /start; omitted means now"
    )
    action_taken: Literal["in_app", "sms", "email", "manual"] | None = None


class UpdateSettingsRequest(BaseModel):
    """Partial update for PUT /dashboard/tasks/settings; ranges are checked by the service."""

    max_visible_tasks: int | None = None
    goal_advanced_booking_months: int | None = None
    preferred_email_client: str | None = None
    show_weekly_snapshot: bool | None = None
