"""
Consultation-driven tasks: answering new requests (tier 1) and chasing
responded-but-unscheduled ones (tier 2).
"""

from datetime import datetime, timedelta

from app.config import settings
from app.features.business_tasks.clock import as_aware, days_between, hours_between
from app.features.business_tasks.domain.models import BusinessTask, ConsultationRecord
from app.features.business_tasks.generators import templates
from app.features.business_tasks.generators.base import TaskGenerator
from app.features.business_tasks.scoring import rules

NEW_CONSULTATION_RESPONSE_WINDOW = timedelta(hours=1)
FOLLOW_UP_MIN_DAYS = 1


async def fetch_pending_consultations(source, provider_id: str, now: datetime):
    return await source.fetch_consultations(provider_id, "pending")


async def fetch_responded_consultations(source, provider_id: str, now: datetime):
    return await source.fetch_consultations(provider_id, "responded")


def build_new_consultation_task(
    consult: ConsultationRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if consult.status != "pending":
        return None

    hours = hours_between(consult.created_at, now)
    score = rules.new_consultation_score(hours)
    if settings.TASK_VIEWED_CAP_ENABLED:
        score = rules.apply_viewed_cap(score, consult.viewed, hours)

    client_name = consult.client.name if consult.client else None
    display_name = client_name or "Client"
    subject = consult.subject or "Consultation"

    return BusinessTask(
        task_type="new_consultation",
        task_tier="tier1",
        title=f"Respond to {display_name}" if consult.viewed else "New consultation request",
        context=f"{display_name}: {subject} • {templates.age_label(hours)}",
        priority_score=rules.clamp_score(score),
        related_entity_type="consultation",
        related_entity_id=str(consult.id),
        client_id=consult.client_id,
        client_name=client_name,
        action_type="in_app",
        deep_link=templates.consultation_link(consult.id),
        due_at=as_aware(consult.created_at) + NEW_CONSULTATION_RESPONSE_WINDOW,
    )


def build_follow_up_task(
    consult: ConsultationRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if consult.status != "responded":
        return None

    days = days_between(consult.updated_at, now)
    if days < FOLLOW_UP_MIN_DAYS:
        return None

    client_name = consult.client.name if consult.client else None
    days_label = int(days)

    return BusinessTask(
        task_type="follow_up_responded",
        task_tier="tier2",
        title=f"Follow up: {client_name or 'Client'}",
        context=f"Responded {templates.plural(days_label, 'day')} ago - not yet scheduled",
        priority_score=rules.clamp_score(rules.follow_up_score(days)),
        related_entity_type="consultation",
        related_entity_id=str(consult.id),
        client_id=consult.client_id,
        client_name=client_name,
        action_type="in_app",
        deep_link=templates.conversation_link(consult.conversation_id),
    )


NEW_CONSULTATION = TaskGenerator(
    task_type="new_consultation",
    tier="tier1",
    fetch=fetch_pending_consultations,
    build=build_new_consultation_task,
)

FOLLOW_UP_RESPONDED = TaskGenerator(
    task_type="follow_up_responded",
    tier="tier2",
    fetch=fetch_responded_consultations,
    build=build_follow_up_task,
)
