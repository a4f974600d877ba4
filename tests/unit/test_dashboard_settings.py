from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from app.features.business_tasks.clock import fixed_clock
from app.features.business_tasks.domain.models import DashboardSettings
from app.features.business_tasks.errors import InvalidSettingsError
from app.features.business_tasks.services.settings_service import (
    DashboardSettingsService,
    validate_settings_changes,
)

PROVIDER_ID = "artist-1"


@pytest.fixture
def repository():
    return AsyncMock()


@pytest.fixture
def service(repository, now):
    return DashboardSettingsService(repository=repository, clock=fixed_clock(now))


@pytest.mark.asyncio
async def test_get_settings_defaults_without_row(service, repository):
    repository.fetch_settings.return_value = None

    result = await service.get_settings(PROVIDER_ID)

    assert result.max_visible_tasks == 10
    assert result.goal_advanced_booking_months == 3
    assert result.preferred_email_client == "default"
    assert result.show_weekly_snapshot is True
    repository.insert_defaults.assert_not_awaited()


@pytest.mark.asyncio
async def test_ensure_settings_inserts_defaults_once(service, repository):
    repository.fetch_settings.return_value = None
    repository.insert_defaults.return_value = DashboardSettings(artist_id=PROVIDER_ID)

    result = await service.ensure_settings(PROVIDER_ID)

    assert result.artist_id == PROVIDER_ID
    repository.insert_defaults.assert_awaited_once_with(PROVIDER_ID)


@pytest.mark.asyncio
async def test_ensure_settings_keeps_existing_row(service, repository):
    stored = DashboardSettings(artist_id=PROVIDER_ID, max_visible_tasks=6)
    repository.fetch_settings.return_value = stored

    assert await service.ensure_settings(PROVIDER_ID) is stored
    repository.insert_defaults.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_settings_passes_only_set_fields(service, repository):
    repository.upsert_settings.return_value = DashboardSettings(
        artist_id=PROVIDER_ID, max_visible_tasks=12
    )

    result = await service.update_settings(
        PROVIDER_ID, max_visible_tasks=12, preferred_email_client=None
    )

    assert result.max_visible_tasks == 12
    repository.upsert_settings.assert_awaited_once_with(PROVIDER_ID, {"max_visible_tasks": 12})


@pytest.mark.parametrize(
    "changes",
    [
        {"max_visible_tasks": 3},
        {"max_visible_tasks": 16},
        {"goal_advanced_booking_months": 0},
        {"goal_advanced_booking_months": 13},
        {"preferred_email_client": "thunderbird"},
        {"favourite_colour": "red"},
    ],
)
def test_invalid_settings_rejected(changes):
    with pytest.raises(InvalidSettingsError):
        validate_settings_changes(changes)


def test_boundary_settings_accepted():
    cleaned = validate_settings_changes(
        {
            "max_visible_tasks": 4,
            "goal_advanced_booking_months": 12,
            "preferred_email_client": "apple_mail",
            "show_weekly_snapshot": False,
        }
    )

    assert cleaned["max_visible_tasks"] == 4
    assert cleaned["show_weekly_snapshot"] is False


@pytest.mark.asyncio
async def test_snapshot_hidden_without_settings_or_when_disabled(service, repository):
    repository.fetch_settings.return_value = None
    assert await service.should_show_weekly_snapshot(PROVIDER_ID) is False

    repository.fetch_settings.return_value = DashboardSettings(
        artist_id=PROVIDER_ID, show_weekly_snapshot=False
    )
    assert await service.should_show_weekly_snapshot(PROVIDER_ID) is False


@pytest.mark.asyncio
async def test_snapshot_shown_weekly(service, repository, now):
    repository.fetch_settings.return_value = DashboardSettings(artist_id=PROVIDER_ID)
    assert await service.should_show_weekly_snapshot(PROVIDER_ID) is True

    repository.fetch_settings.return_value = DashboardSettings(
        artist_id=PROVIDER_ID, last_snapshot_shown_at=now - timedelta(days=3)
    )
    assert await service.should_show_weekly_snapshot(PROVIDER_ID) is False

    repository.fetch_settings.return_value = DashboardSettings(
        artist_id=PROVIDER_ID, last_snapshot_shown_at=now - timedelta(days=7)
    )
    assert await service.should_show_weekly_snapshot(PROVIDER_ID) is True


@pytest.mark.asyncio
async def test_dismiss_records_now(service, repository, now):
    await service.dismiss_weekly_snapshot(PROVIDER_ID)

    repository.mark_snapshot_shown.assert_awaited_once_with(PROVIDER_ID, now)
