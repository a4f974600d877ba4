"""
Feature-level exceptions for the business task dashboard.

Database failures keep surfacing as DatabaseError from app.db.helpers; these
cover invalid caller input.
"""


class TaskServiceError(Exception):
    """Base class for business task service errors."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidSettingsError(TaskServiceError):
    """Dashboard settings outside their allowed range or vocabulary."""


class TaskCompletionError(TaskServiceError):
    """Start/complete request that cannot be recorded as given."""
