from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from app.features.business_tasks.clock import fixed_clock
from app.features.business_tasks.domain.models import TaskReference
from app.features.business_tasks.errors import TaskCompletionError
from app.features.business_tasks.services.completion_service import TaskCompletionService

PROVIDER_ID = "artist-1"

TASK = TaskReference(
    task_type="new_consultation",
    task_tier="tier1",
    related_entity_type="consultation",
    related_entity_id="consult-1",
    client_id="client-1",
    priority_score=950,
)


@pytest.fixture
def repository():
    return AsyncMock()


@pytest.fixture
def service(repository, now):
    return TaskCompletionService(repository=repository, clock=fixed_clock(now))


@pytest.mark.asyncio
async def test_start_task_records_clock_time(service, repository, now):
    started_at = await service.start_task(PROVIDER_ID, TASK)

    assert started_at == now
    repository.insert_active_task.assert_awaited_once_with(PROVIDER_ID, TASK, now)


@pytest.mark.asyncio
async def test_complete_task_measures_duration(service, repository, now):
    completion = await service.complete_task(
        PROVIDER_ID, TASK, started_at=now - timedelta(minutes=12), action_taken="sms"
    )

    assert completion.time_to_complete_seconds == 720
    assert completion.duration_clamped is False
    assert completion.action_taken == "sms"
    assert completion.task_domain == "business"
    repository.record_completion.assert_awaited_once_with(completion)


@pytest.mark.asyncio
async def test_complete_task_accepts_iso_string(service, now):
    started = (now - timedelta(seconds=90)).isoformat().replace("+00:00", "Z")

    completion = await service.complete_task(PROVIDER_ID, TASK, started_at=started)

    assert completion.time_to_complete_seconds == 90
    assert completion.action_taken == "manual"


@pytest.mark.asyncio
async def test_missing_start_means_zero_duration(service, now):
    completion = await service.complete_task(PROVIDER_ID, TASK)

    assert completion.started_at == now
    assert completion.time_to_complete_seconds == 0
    assert completion.duration_clamped is False


@pytest.mark.asyncio
async def test_future_start_is_clamped_and_flagged(service, now):
    completion = await service.complete_task(
        PROVIDER_ID, TASK, started_at=now + timedelta(minutes=5)
    )

    assert completion.time_to_complete_seconds == 0
    assert completion.duration_clamped is True


@pytest.mark.asyncio
async def test_naive_start_is_treated_as_utc(service, now):
    naive = (now - timedelta(minutes=1)).replace(tzinfo=None)

    completion = await service.complete_task(PROVIDER_ID, TASK, started_at=naive)

    assert completion.time_to_complete_seconds == 60


@pytest.mark.asyncio
async def test_unparseable_start_raises(service, repository):
    with pytest.raises(TaskCompletionError):
        await service.complete_task(PROVIDER_ID, TASK, started_at="yesterday-ish")

    repository.record_completion.assert_not_awaited()
