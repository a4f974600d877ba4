"""
Service layer for the business task dashboard.

Each module exposes a class plus a module-level singleton of the same name as
the module (e.g. `task_service.task_service`).
"""

from .completion_service import TaskCompletionService
from .quick_stats_service import QuickStatsService
from .settings_service import DashboardSettingsService
from .snapshot_service import WeeklySnapshotService
from .task_service import TaskPrioritizationService, rank_tasks

__all__ = [
    "DashboardSettingsService",
    "QuickStatsService",
    "TaskCompletionService",
    "TaskPrioritizationService",
    "WeeklySnapshotService",
    "rank_tasks",
]
