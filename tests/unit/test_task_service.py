import asyncio
from datetime import timedelta

import pytest

from app.features.business_tasks.clock import fixed_clock
from app.features.business_tasks.domain.models import (
    AppointmentRecord,
    BusinessTask,
    ClientRecord,
    ConsultationRecord,
)
from app.features.business_tasks.generators import GENERATORS, TaskGenerator
from app.features.business_tasks.services.task_service import (
    TaskPrioritizationService,
    rank_tasks,
)

PROVIDER_ID = "artist-1"


def _task(task_type: str, score: int, entity: str = "x") -> BusinessTask:
    return BusinessTask(
        task_type=task_type,
        task_tier="tier2",
        title=task_type,
        context="",
        priority_score=score,
        related_entity_type="consultation",
        related_entity_id=entity,
        client_id=None,
        client_name=None,
    )


def _static_generator(task_type: str, tasks: list[BusinessTask]) -> TaskGenerator:
    async def fetch(source, provider_id, now):
        return tasks

    return TaskGenerator(
        task_type=task_type, tier="tier2", fetch=fetch, build=lambda row, pid, now: row
    )


def _failing_generator() -> TaskGenerator:
    async def fetch(source, provider_id, now):
        raise RuntimeError("source unavailable")

    return TaskGenerator(
        task_type="broken", tier="tier2", fetch=fetch, build=lambda row, pid, now: row
    )


def test_rank_tasks_sorts_descending_and_truncates():
    ranked = rank_tasks([[_task("a", 300), _task("b", 900)], [_task("c", 600)]], max_tasks=2)

    assert [t.task_type for t in ranked] == ["b", "c"]


def test_rank_tasks_is_stable_on_ties():
    first = [_task("first", 500, "1"), _task("first", 500, "2")]
    second = [_task("second", 500, "3")]

    ranked = rank_tasks([first, second], max_tasks=10)

    assert [t.related_entity_id for t in ranked] == ["1", "2", "3"]


def test_rank_tasks_handles_zero_limit():
    assert rank_tasks([[_task("a", 100)]], max_tasks=0) == []


@pytest.mark.asyncio
async def test_generate_business_tasks_full_registry(now, fake_source):
    client = ClientRecord(id="client-1", name="Alex", phone="+15550001")
    fake_source.consultations = [
        ConsultationRecord(
            id="consult-1",
            client_id=client.id,
            conversation_id="conv-1",
            subject="Sleeve",
            status="pending",
            viewed=False,
            created_at=now - timedelta(minutes=30),
            updated_at=now - timedelta(minutes=30),
            client=client,
        )
    ]
    fake_source.appointments = [
        AppointmentRecord(
            id="appt-1",
            client_id=client.id,
            conversation_id="conv-1",
            title="Rose",
            start_time=now + timedelta(hours=20),
            end_time=now + timedelta(hours=23),
            status="confirmed",
            deposit_amount=20000,
            client=client,
        )
    ]

    service = TaskPrioritizationService(source=fake_source, clock=fixed_clock(now))
    tasks = await service.generate_business_tasks(PROVIDER_ID, max_tasks=10)

    assert [(t.task_type, t.priority_score) for t in tasks] == [
        ("deposit_collection", 1000),
        ("new_consultation", 950),
        ("appointment_confirmation", 880),
    ]
    assert all(t.priority_level == "critical" for t in tasks)


@pytest.mark.asyncio
async def test_generate_business_tasks_respects_max_and_is_idempotent(now):
    generators = [
        _static_generator("a", [_task("a", 100 * i, str(i)) for i in range(1, 8)]),
        _static_generator("b", [_task("b", 450, "b1")]),
    ]
    service = TaskPrioritizationService(
        source=None, generators=generators, clock=fixed_clock(now), fail_soft=False
    )

    first = await service.generate_business_tasks(PROVIDER_ID, max_tasks=4)
    second = await service.generate_business_tasks(PROVIDER_ID, max_tasks=4)

    assert len(first) == 4
    assert [t.priority_score for t in first] == [700, 600, 500, 450]
    assert first == second


@pytest.mark.asyncio
async def test_generator_failure_aborts_by_default(now):
    service = TaskPrioritizationService(
        source=None,
        generators=[_static_generator("a", [_task("a", 500)]), _failing_generator()],
        clock=fixed_clock(now),
        fail_soft=False,
    )

    with pytest.raises(RuntimeError):
        await service.generate_business_tasks(PROVIDER_ID)


@pytest.mark.asyncio
async def test_generator_failure_cancels_running_generators(now):
    finished: list[str] = []
    cancelled: list[str] = []

    def _slow_generator(task_type: str) -> TaskGenerator:
        async def fetch(source, provider_id, now):
            try:
                await asyncio.sleep(0.05)
            except asyncio.CancelledError:
                cancelled.append(task_type)
                raise
            finished.append(task_type)
            return []

        return TaskGenerator(
            task_type=task_type, tier="tier2", fetch=fetch, build=lambda row, pid, now: row
        )

    service = TaskPrioritizationService(
        source=None,
        generators=[_slow_generator("s1"), _failing_generator(), _slow_generator("s2")],
        clock=fixed_clock(now),
        fail_soft=False,
    )

    with pytest.raises(RuntimeError, match="source unavailable"):
        await service.generate_business_tasks(PROVIDER_ID)
    await asyncio.sleep(0.1)

    assert finished == []
    assert sorted(cancelled) == ["s1", "s2"]


@pytest.mark.asyncio
async def test_generator_failure_skipped_when_fail_soft(now):
    service = TaskPrioritizationService(
        source=None,
        generators=[_failing_generator(), _static_generator("a", [_task("a", 500)])],
        clock=fixed_clock(now),
        fail_soft=True,
    )

    tasks = await service.generate_business_tasks(PROVIDER_ID)

    assert [t.task_type for t in tasks] == ["a"]


def test_fail_soft_defaults_to_settings(monkeypatch):
    monkeypatch.setattr(
        "app.features.business_tasks.services.task_service.settings.TASK_GENERATOR_FAIL_SOFT",
        True,
    )

    assert TaskPrioritizationService().fail_soft is True


def test_registry_has_every_task_type_once():
    types = [g.task_type for g in GENERATORS]

    assert len(types) == len(set(types)) == 9
    assert types[0] == "new_consultation"
