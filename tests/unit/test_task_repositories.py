from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from app.features.business_tasks.domain.models import TaskCompletion, TaskReference
from app.features.business_tasks.repository.completion_repository import (
    TaskCompletionRepository,
)
from app.features.business_tasks.repository.settings_repository import (
    DashboardSettingsRepository,
    DashboardSettingsRepositoryError,
)
from app.features.business_tasks.repository.task_source_repository import TaskSourceRepository

SOURCE = "app.features.business_tasks.repository.task_source_repository"
COMPLETIONS = "app.features.business_tasks.repository.completion_repository"
SETTINGS = "app.features.business_tasks.repository.settings_repository"

NOW = datetime(2025, 6, 11, 12, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_fetch_consultations_maps_client(monkeypatch):
    fetch_all = AsyncMock(
        return_value=[
            {
                "id": 7,
                "client_id": "client-1",
                "conversation_id": 3,
                "subject": "Sleeve",
                "status": "pending",
                "viewed": None,
                "created_at": NOW,
                "updated_at": None,
                "client_ref": "client-1",
                "client_name": "Alex",
                "client_phone": "+15550001",
                "client_email": None,
                "client_birthday": date(1990, 6, 11),
            }
        ]
    )
    monkeypatch.setattr(f"{SOURCE}.fetch_all", fetch_all)

    [consult] = await TaskSourceRepository.fetch_consultations("artist-1", "pending")

    assert consult.id == "7"
    assert consult.conversation_id == "3"
    assert consult.viewed is False
    assert consult.updated_at == NOW
    assert consult.client.name == "Alex"
    assert consult.client.birthday == date(1990, 6, 11)
    assert fetch_all.await_args.args[1] == ("artist-1", "pending")


@pytest.mark.asyncio
async def test_fetch_appointments_adds_only_given_windows(monkeypatch):
    fetch_all = AsyncMock(return_value=[])
    monkeypatch.setattr(f"{SOURCE}.fetch_all", fetch_all)

    await TaskSourceRepository.fetch_appointments(
        "artist-1", "confirmed", start_from=NOW, start_to=NOW + timedelta(days=14)
    )

    query, params = fetch_all.await_args.args
    assert "a.start_time >= %s" in query
    assert "a.start_time <= %s" in query
    assert "a.end_time" not in query.split("WHERE")[1]
    assert params == ("artist-1", "confirmed", NOW, NOW + timedelta(days=14))


@pytest.mark.asyncio
async def test_appointment_without_client_row(monkeypatch):
    monkeypatch.setattr(
        f"{SOURCE}.fetch_all",
        AsyncMock(
            return_value=[
                {
                    "id": "appt-1",
                    "client_id": None,
                    "conversation_id": None,
                    "title": None,
                    "start_time": NOW,
                    "end_time": None,
                    "status": "completed",
                    "deposit_amount": None,
                    "deposit_paid": None,
                    "confirmation_sent": None,
                    "follow_up_sent": None,
                    "client_ref": None,
                }
            ]
        ),
    )

    [appt] = await TaskSourceRepository.fetch_appointments("artist-1", "completed")

    assert appt.client is None
    assert appt.deposit_paid is False


@pytest.mark.asyncio
async def test_count_pending_enquiries_defaults_to_zero(monkeypatch):
    monkeypatch.setattr(f"{SOURCE}.fetch_val", AsyncMock(return_value=None))

    assert await TaskSourceRepository.count_pending_enquiries("artist-1") == 0


@pytest.mark.asyncio
async def test_record_completion_inserts_and_clears_active_task(monkeypatch):
    execute_transaction = AsyncMock(return_value=True)
    monkeypatch.setattr(f"{COMPLETIONS}.execute_transaction", execute_transaction)
    task = TaskReference("deposit_collection", "tier1", "appointment", "appt-1", "client-1", 1000)

    await TaskCompletionRepository.record_completion(
        TaskCompletion(
            artist_id="artist-1",
            task=task,
            started_at=NOW - timedelta(minutes=5),
            completed_at=NOW,
            time_to_complete_seconds=300,
            action_taken="email",
        )
    )

    [(insert_query, insert_params), (delete_query, delete_params)] = (
        execute_transaction.await_args.args[0]
    )
    assert "INSERT INTO task_completions" in insert_query
    assert insert_params[:4] == ("artist-1", "deposit_collection", "tier1", "business")
    assert insert_params[-2:] == (300, "email")
    assert "DELETE FROM active_tasks" in delete_query
    assert delete_params == ("artist-1", "deposit_collection", "appt-1")


@pytest.mark.asyncio
async def test_record_completion_matches_empty_entity_id(monkeypatch):
    execute_transaction = AsyncMock(return_value=True)
    monkeypatch.setattr(f"{COMPLETIONS}.execute_transaction", execute_transaction)
    task = TaskReference("birthday_outreach", "tier3", "client", None, "client-1", 400)

    await TaskCompletionRepository.record_completion(
        TaskCompletion(
            artist_id="artist-1",
            task=task,
            started_at=NOW,
            completed_at=NOW,
            time_to_complete_seconds=0,
        )
    )

    _, (_, delete_params) = execute_transaction.await_args.args[0]
    assert delete_params == ("artist-1", "birthday_outreach", "")


def test_settings_row_fills_missing_values():
    settings = DashboardSettingsRepository._row_to_settings(
        {
            "artist_id": "artist-1",
            "max_visible_tasks": None,
            "goal_advanced_booking_months": 6,
            "preferred_email_client": None,
            "show_weekly_snapshot": False,
            "last_snapshot_shown_at": None,
        }
    )

    assert settings.max_visible_tasks == 10
    assert settings.goal_advanced_booking_months == 6
    assert settings.preferred_email_client == "default"
    assert settings.show_weekly_snapshot is False


@pytest.mark.asyncio
async def test_upsert_settings_updates_only_changed_columns(monkeypatch):
    fetch_one = AsyncMock(return_value={"artist_id": "artist-1", "max_visible_tasks": 8})
    monkeypatch.setattr(f"{SETTINGS}.fetch_one", fetch_one)

    result = await DashboardSettingsRepository.upsert_settings(
        "artist-1", {"max_visible_tasks": 8}
    )

    query, params = fetch_one.await_args.args
    assert "max_visible_tasks = EXCLUDED.max_visible_tasks" in query
    assert "preferred_email_client = EXCLUDED" not in query
    assert params == ("artist-1", 8, 3, "default", True)
    assert result.max_visible_tasks == 8


@pytest.mark.asyncio
async def test_upsert_settings_rejects_unknown_column():
    with pytest.raises(DashboardSettingsRepositoryError):
        await DashboardSettingsRepository.upsert_settings("artist-1", {"artist_id": "other"})
