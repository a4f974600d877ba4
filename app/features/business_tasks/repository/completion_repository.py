"""
Persistence for task start/completion tracking.

Completions are append-only; the active_tasks table only holds tasks a
provider has started and not yet completed.
"""

from datetime import datetime

from app.db.helpers import DatabaseError, execute_transaction, fetch_all, fetch_one
from app.features.business_tasks.domain.models import (
    TASK_DOMAIN,
    CompletionRow,
    TaskCompletion,
    TaskReference,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class TaskCompletionRepositoryError(DatabaseError):
    """More specific exception for completion persistence failures."""


class TaskCompletionRepository:
    """Writes to active_tasks / task_completions and reads completions back."""

    @classmethod
    def _row_to_completion(cls, row: dict) -> CompletionRow:
        return CompletionRow(
            task_type=row["task_type"],
            task_tier=row["task_tier"],
            time_to_complete_seconds=int(row["time_to_complete_seconds"] or 0),
            completed_at=row["completed_at"],
        )

    @classmethod
    async def insert_active_task(
        cls, artist_id: str, task: TaskReference, started_at: datetime
    ) -> str:
        """Record that a task was started and return the active-task id."""

        query = """
            INSERT INTO active_tasks (
                artist_id, task_domain, task_type, task_tier, title,
                priority_score, priority_level,
                related_entity_type, related_entity_id, client_id, started_at
            )
            VALUES (%s, %s, %s, %s, '', %s, %s, %s, %s, %s, %s)
            RETURNING id
        """

        row = await fetch_one(
            query,
            (
                artist_id,
                TASK_DOMAIN,
                task.task_type,
                task.task_tier,
                task.priority_score,
                task.priority_level,
                task.related_entity_type,
                task.related_entity_id,
                task.client_id,
                started_at,
            ),
        )
        if not row:
            raise TaskCompletionRepositoryError(
                "Failed to record task start", operation="insert_active_task"
            )

        logger.info(
            "Business task started",
            artist_id=artist_id,
            task_type=task.task_type,
            related_entity_id=task.related_entity_id,
        )
        return str(row["id"])

    @classmethod
    async def record_completion(cls, completion: TaskCompletion) -> None:
        """
        Insert the completion row and clear the matching active task in one
        transaction. A missing active task is not an error.
        """

        insert_query = """
            INSERT INTO task_completions (
                artist_id, task_type, task_tier, task_domain,
                related_entity_type, related_entity_id, client_id, priority_score,
                started_at, completed_at, time_to_complete_seconds, action_taken
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """

        delete_query = """
            DELETE FROM active_tasks
            WHERE artist_id = %s
              AND task_type = %s
              AND related_entity_id = %s
        """

        task = completion.task
        await execute_transaction(
            [
                (
                    insert_query,
                    (
                        completion.artist_id,
                        task.task_type,
                        task.task_tier,
                        completion.task_domain,
                        task.related_entity_type,
                        task.related_entity_id,
                        task.client_id,
                        task.priority_score,
                        completion.started_at,
                        completion.completed_at,
                        completion.time_to_complete_seconds,
                        completion.action_taken,
                    ),
                ),
                (
                    delete_query,
                    (completion.artist_id, task.task_type, task.related_entity_id or ""),
                ),
            ]
        )

    @classmethod
    async def fetch_completions(
        cls, artist_id: str, completed_from: datetime, completed_to: datetime
    ) -> list[CompletionRow]:
        """Completions whose completed_at falls in the inclusive range."""

        query = """
            SELECT task_type, task_tier, time_to_complete_seconds, completed_at
            FROM task_completions
            WHERE artist_id = %s
              AND completed_at >= %s
              AND completed_at <= %s
            ORDER BY completed_at ASC
        """

        rows = await fetch_all(query, (artist_id, completed_from, completed_to))
        return [cls._row_to_completion(row) for row in rows]
