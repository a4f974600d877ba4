"""
Business task prioritization service.

Runs every registered generator against one provider's data, merges the
results and returns the highest-priority tasks first. Ranking is a pure
function so it can be tested on plain lists.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from datetime import datetime

from app.config import settings
from app.features.business_tasks.clock import Clock, system_clock
from app.features.business_tasks.domain.models import BusinessTask
from app.features.business_tasks.generators import GENERATORS, TaskGenerator
from app.features.business_tasks.repository.task_source_repository import TaskSourceRepository
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def rank_tasks(task_lists: Iterable[Sequence[BusinessTask]], max_tasks: int) -> list[BusinessTask]:
    """
    Concatenate per-generator results, sort by score descending and truncate.

    `sorted` is stable, so equal scores keep generator order, then the order
    each generator emitted them.
    """
    merged = [task for tasks in task_lists for task in tasks]
    ranked = sorted(merged, key=lambda task: task.priority_score, reverse=True)
    return ranked[: max(0, max_tasks)]


class TaskPrioritizationService:
    DEFAULT_MAX_TASKS = 10

    def __init__(
        self,
        source: type[TaskSourceRepository] | object = TaskSourceRepository,
        generators: Sequence[TaskGenerator] = GENERATORS,
        clock: Clock = system_clock,
        fail_soft: bool | None = None,
    ):
        self.source = source
        self.generators = tuple(generators)
        self.clock = clock
        self._fail_soft = fail_soft

    @property
    def fail_soft(self) -> bool:
        if self._fail_soft is None:
            return settings.TASK_GENERATOR_FAIL_SOFT
        return self._fail_soft

    async def generate_business_tasks(
        self, provider_id: str, max_tasks: int = DEFAULT_MAX_TASKS
    ) -> list[BusinessTask]:
        """
        Build the ranked task list for one provider.

        Args:
            provider_id: Artist whose data is scanned
            max_tasks: Upper bound on the returned list

        Returns:
            At most `max_tasks` tasks, highest priority_score first
        """
        now = self.clock()

        if self.fail_soft:
            results = await asyncio.gather(
                *(g.generate(self.source, provider_id, now) for g in self.generators),
                return_exceptions=True,
            )
        else:
            results = await self._run_all_or_nothing(provider_id, now)

        task_lists: list[Sequence[BusinessTask]] = []
        for generator, result in zip(self.generators, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "Task generator failed, skipping",
                    provider_id=provider_id,
                    task_type=generator.task_type,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                continue
            task_lists.append(result)

        tasks = rank_tasks(task_lists, max_tasks)

        logger.info(
            "Business tasks generated",
            provider_id=provider_id,
            candidates=sum(len(t) for t in task_lists),
            returned=len(tasks),
            max_tasks=max_tasks,
        )
        return tasks

    async def _run_all_or_nothing(
        self, provider_id: str, now: datetime
    ) -> list[list[BusinessTask]]:
        """
        Run every generator; the first failure cancels the rest and is re-raised
        unwrapped from the task group.
        """
        try:
            async with asyncio.TaskGroup() as group:
                running = [
                    group.create_task(generator.generate(self.source, provider_id, now))
                    for generator in self.generators
                ]
        except ExceptionGroup as failures:
            first = failures.exceptions[0]
            logger.error(
                "Task generation aborted",
                provider_id=provider_id,
                failed_generators=len(failures.exceptions),
                error=str(first),
                error_type=type(first).__name__,
            )
            raise first from None

        return [task.result() for task in running]


task_service = TaskPrioritizationService()
