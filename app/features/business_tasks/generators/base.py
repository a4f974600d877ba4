"""
Generator registry entry.

A generator is a (fetch, build) pair: `fetch` narrows candidate rows through
the task source repository, `build` turns one row into a task or rejects it.
`build` never touches I/O, so a generator can be exercised on plain records.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.features.business_tasks.domain.models import BusinessTask, TaskTier

if TYPE_CHECKING:  # pragma: no cover - avoids circular import at runtime
    from app.features.business_tasks.repository.task_source_repository import (
        TaskSourceRepository,
    )

FetchFn = Callable[["TaskSourceRepository", str, datetime], Awaitable[Sequence[Any]]]
BuildFn = Callable[[Any, str, datetime], BusinessTask | None]
KeyFn = Callable[[Any], Hashable]


@dataclass(frozen=True, slots=True)
class TaskGenerator:
    task_type: str
    tier: TaskTier
    fetch: FetchFn
    build: BuildFn
    dedupe_key: KeyFn | None = None

    def build_all(self, rows: Iterable[Any], provider_id: str, now: datetime) -> list[BusinessTask]:
        tasks: list[BusinessTask] = []
        seen: set[Hashable] = set()
        for row in rows:
            key = self.dedupe_key(row) if self.dedupe_key else None
            if key is not None and key in seen:
                continue
            task = self.build(row, provider_id, now)
            if task is None:
                continue
            if key is not None:
                seen.add(key)
            tasks.append(task)
        return tasks

    async def generate(
        self, source: TaskSourceRepository, provider_id: str, now: datetime
    ) -> list[BusinessTask]:
        rows = await self.fetch(source, provider_id, now)
        return self.build_all(rows, provider_id, now)
