"""
Repository subpackage for the business task feature.
"""

from .completion_repository import TaskCompletionRepository, TaskCompletionRepositoryError
from .settings_repository import DashboardSettingsRepository, DashboardSettingsRepositoryError
from .task_source_repository import TaskSourceRepository

__all__ = [
    "DashboardSettingsRepository",
    "DashboardSettingsRepositoryError",
    "TaskCompletionRepository",
    "TaskCompletionRepositoryError",
    "TaskSourceRepository",
]
