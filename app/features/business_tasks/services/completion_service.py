"""
Records when a provider starts and completes a task.

Completion only writes analytics rows; the source consultation/appointment is
never modified here, so a task disappears from the list once its own trigger
conditions stop holding.
"""

from datetime import datetime

from app.features.business_tasks.clock import Clock, as_aware, system_clock
from app.features.business_tasks.domain.models import (
    ActionTaken,
    TaskCompletion,
    TaskReference,
)
from app.features.business_tasks.errors import TaskCompletionError
from app.features.business_tasks.repository.completion_repository import (
    TaskCompletionRepository,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def parse_started_at(value: datetime | str | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise TaskCompletionError(f"Invalid started_at timestamp: {value!r}", "started_at") from e


class TaskCompletionService:
    def __init__(self, repository=TaskCompletionRepository, clock: Clock = system_clock):
        self.repository = repository
        self.clock = clock

    async def start_task(self, provider_id: str, task: TaskReference) -> datetime:
        started_at = self.clock()
        await self.repository.insert_active_task(provider_id, task, started_at)
        return started_at

    async def complete_task(
        self,
        provider_id: str,
        task: TaskReference,
        started_at: datetime | str | None = None,
        action_taken: ActionTaken | None = None,
    ) -> TaskCompletion:
        """
        Persist a completion and clear the matching active task.

        A missing start time counts as "started now" (zero duration). A start
        time in the future is clamped to zero and flagged on the record.
        """
        completed_at = self.clock()
        started = parse_started_at(started_at)
        started = completed_at if started is None else as_aware(started)

        seconds = int((completed_at - started).total_seconds())
        clamped = seconds < 0
        if clamped:
            logger.warning(
                "Negative task duration clamped to zero",
                provider_id=provider_id,
                task_type=task.task_type,
                related_entity_id=task.related_entity_id,
                started_at=started.isoformat(),
                completed_at=completed_at.isoformat(),
                raw_seconds=seconds,
            )
            seconds = 0

        completion = TaskCompletion(
            artist_id=provider_id,
            task=task,
            started_at=started,
            completed_at=completed_at,
            time_to_complete_seconds=seconds,
            action_taken=action_taken or "manual",
            duration_clamped=clamped,
        )

        await self.repository.record_completion(completion)

        logger.info(
            "Business task completed",
            provider_id=provider_id,
            task_type=task.task_type,
            task_tier=task.task_tier,
            seconds=seconds,
            action_taken=completion.action_taken,
        )
        return completion


completion_service = TaskCompletionService()
