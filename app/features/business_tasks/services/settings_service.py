"""
Dashboard settings and weekly snapshot display cadence.
"""

from datetime import timedelta
from typing import Any, get_args

from app.config import settings as app_settings
from app.features.business_tasks.clock import Clock, as_aware, system_clock
from app.features.business_tasks.domain.models import DashboardSettings, EmailClient
from app.features.business_tasks.errors import InvalidSettingsError
from app.features.business_tasks.repository.settings_repository import (
    DashboardSettingsRepository,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SNAPSHOT_INTERVAL = timedelta(days=7)
BOOKING_GOAL_RANGE = (1, 12)
EMAIL_CLIENTS: tuple[str, ...] = get_args(EmailClient)


def validate_settings_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Drop unset fields and reject out-of-range values."""
    cleaned = {key: value for key, value in changes.items() if value is not None}

    if "max_visible_tasks" in cleaned:
        value = cleaned["max_visible_tasks"]
        low, high = app_settings.TASK_MIN_VISIBLE, app_settings.TASK_MAX_VISIBLE
        if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
            raise InvalidSettingsError(
                f"max_visible_tasks must be between {low} and {high}", "max_visible_tasks"
            )

    if "goal_advanced_booking_months" in cleaned:
        value = cleaned["goal_advanced_booking_months"]
        low, high = BOOKING_GOAL_RANGE
        if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
            raise InvalidSettingsError(
                f"goal_advanced_booking_months must be between {low} and {high}",
                "goal_advanced_booking_months",
            )

    if "preferred_email_client" in cleaned:
        if cleaned["preferred_email_client"] not in EMAIL_CLIENTS:
            raise InvalidSettingsError(
                f"preferred_email_client must be one of {', '.join(EMAIL_CLIENTS)}",
                "preferred_email_client",
            )

    if "show_weekly_snapshot" in cleaned:
        cleaned["show_weekly_snapshot"] = bool(cleaned["show_weekly_snapshot"])

    unknown = set(cleaned) - {
        "max_visible_tasks",
        "goal_advanced_booking_months",
        "preferred_email_client",
        "show_weekly_snapshot",
    }
    if unknown:
        raise InvalidSettingsError(f"Unknown settings: {', '.join(sorted(unknown))}")

    return cleaned


class DashboardSettingsService:
    def __init__(self, repository=DashboardSettingsRepository, clock: Clock = system_clock):
        self.repository = repository
        self.clock = clock

    async def get_settings(self, provider_id: str) -> DashboardSettings:
        """Stored settings, or defaults when the provider has none yet."""
        stored = await self.repository.fetch_settings(provider_id)
        if stored:
            return stored
        return DashboardSettings(
            artist_id=provider_id, max_visible_tasks=app_settings.TASK_DEFAULT_MAX_VISIBLE
        )

    async def ensure_settings(self, provider_id: str) -> DashboardSettings:
        stored = await self.repository.fetch_settings(provider_id)
        if stored:
            return stored
        return await self.repository.insert_defaults(provider_id)

    async def update_settings(self, provider_id: str, **changes: Any) -> DashboardSettings:
        cleaned = validate_settings_changes(changes)
        return await self.repository.upsert_settings(provider_id, cleaned)

    async def should_show_weekly_snapshot(self, provider_id: str) -> bool:
        stored = await self.repository.fetch_settings(provider_id)
        if not stored or not stored.show_weekly_snapshot:
            return False
        if stored.last_snapshot_shown_at is None:
            return True
        return self.clock() - as_aware(stored.last_snapshot_shown_at) >= SNAPSHOT_INTERVAL

    async def dismiss_weekly_snapshot(self, provider_id: str) -> None:
        await self.repository.mark_snapshot_shown(provider_id, self.clock())


settings_service = DashboardSettingsService()
