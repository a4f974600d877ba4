"""
Appointment-driven tasks.

Tier 1 protects booked revenue (deposits, confirmations); tier 3 keeps past
clients warm (anniversaries, healed photos, thank-yous).
"""

from datetime import datetime, timedelta

from app.config import settings
from app.features.business_tasks.clock import (
    as_aware,
    days_between,
    end_of_day,
    hours_between,
    local_date,
    start_of_day,
    this_year_occurrence,
)
from app.features.business_tasks.domain.models import AppointmentRecord, BusinessTask
from app.features.business_tasks.generators import templates
from app.features.business_tasks.generators.base import TaskGenerator
from app.features.business_tasks.scoring import rules

DEPOSIT_DUE_BEFORE_START = timedelta(hours=72)
CONFIRMATION_DUE_BEFORE_START = timedelta(hours=24)
ANNIVERSARY_LOOKAHEAD_DAYS = 7
HEALED_PHOTO_MIN_DAYS = 14
HEALED_PHOTO_MAX_DAYS = 30


def _client_name(appt: AppointmentRecord) -> str | None:
    return appt.client.name if appt.client else None


def _piece(appt: AppointmentRecord) -> str:
    return appt.title or "tattoo"


# ---------------------------------------------------------------------------
# Fetchers
# ---------------------------------------------------------------------------


async def fetch_deposit_candidates(source, provider_id: str, now: datetime):
    return await source.fetch_appointments(
        provider_id,
        "confirmed",
        start_from=now,
        start_to=now + timedelta(days=settings.DEPOSIT_LOOKAHEAD_DAYS),
    )


async def fetch_confirmation_candidates(source, provider_id: str, now: datetime):
    return await source.fetch_appointments(
        provider_id,
        "confirmed",
        start_from=now,
        start_to=now + timedelta(hours=settings.CONFIRMATION_LOOKAHEAD_HOURS),
    )


async def fetch_completed_appointments(source, provider_id: str, now: datetime):
    return await source.fetch_appointments(provider_id, "completed")


async def fetch_healing_appointments(source, provider_id: str, now: datetime):
    return await source.fetch_appointments(
        provider_id,
        "completed",
        end_from=now - timedelta(days=HEALED_PHOTO_MAX_DAYS),
        end_to=now - timedelta(days=HEALED_PHOTO_MIN_DAYS),
    )


async def fetch_completed_today(source, provider_id: str, now: datetime):
    return await source.fetch_appointments(
        provider_id,
        "completed",
        end_from=start_of_day(now),
        end_to=end_of_day(now),
    )


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_deposit_task(
    appt: AppointmentRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if appt.status != "confirmed" or appt.deposit_paid:
        return None
    if not appt.deposit_amount or appt.deposit_amount <= 0:
        return None

    hours = hours_between(now, appt.start_time)
    if hours < 0 or hours > settings.DEPOSIT_LOOKAHEAD_DAYS * 24:
        return None

    score = rules.deposit_score(hours)
    if settings.TASK_SEASONAL_BOOST_ENABLED:
        score = rules.apply_seasonal_boost(score, now)

    start = as_aware(appt.start_time)
    start_local = start.astimezone(now.tzinfo)
    client_name = _client_name(appt)
    when = templates.format_day(start_local)

    return BusinessTask(
        task_type="deposit_collection",
        task_tier="tier1",
        title=f"Collect {templates.format_money(appt.deposit_amount)} deposit",
        context=f"{client_name or 'Client'} - {_piece(appt)} on {when}",
        priority_score=rules.clamp_score(score),
        related_entity_type="appointment",
        related_entity_id=str(appt.id),
        client_id=appt.client_id,
        client_name=client_name,
        action_type="in_app",
        deep_link=templates.conversation_link(appt.conversation_id),
        due_at=start - DEPOSIT_DUE_BEFORE_START,
        expires_at=start,
    )


def build_confirmation_task(
    appt: AppointmentRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if appt.status != "confirmed" or appt.confirmation_sent:
        return None

    hours = hours_between(now, appt.start_time)
    if hours < 0 or hours > settings.CONFIRMATION_LOOKAHEAD_HOURS:
        return None

    start = as_aware(appt.start_time)
    start_local = start.astimezone(now.tzinfo)
    client_name = _client_name(appt)
    message = templates.confirmation_message(client_name, start_local)

    return BusinessTask(
        task_type="appointment_confirmation",
        task_tier="tier1",
        title="Confirm tomorrow's appointment" if hours < 24 else "Send appointment confirmation",
        context=f"{client_name or 'Client'} - {templates.format_time(start_local)}",
        priority_score=rules.clamp_score(rules.confirmation_score(hours)),
        related_entity_type="appointment",
        related_entity_id=str(appt.id),
        client_id=appt.client_id,
        client_name=client_name,
        action_type="sms",
        sms_number=appt.client.phone if appt.client else None,
        sms_body=message,
        deep_link=templates.conversation_link(appt.conversation_id),
        due_at=start - CONFIRMATION_DUE_BEFORE_START,
        expires_at=start,
    )


def build_anniversary_task(
    appt: AppointmentRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if appt.status != "completed":
        return None

    today = now.date()
    session_date = local_date(appt.start_time, now)
    years = today.year - session_date.year
    if years < 1:
        return None

    anniversary = this_year_occurrence(session_date, today)
    days_until = (anniversary - today).days
    if days_until < 0 or days_until > ANNIVERSARY_LOOKAHEAD_DAYS:
        return None

    client_name = _client_name(appt)
    display_name = client_name or "Client"
    message = templates.anniversary_message(display_name, years, _piece(appt))
    due_at = start_of_day(now) + timedelta(days=days_until)

    return BusinessTask(
        task_type="tattoo_anniversary",
        task_tier="tier3",
        title=f"Tattoo anniversary: {display_name}",
        context=f"{templates.plural(years, 'year')} since {_piece(appt)}",
        priority_score=rules.clamp_score(rules.anniversary_score(years)),
        related_entity_type="appointment",
        related_entity_id=str(appt.id),
        client_id=appt.client_id,
        client_name=client_name,
        action_type="sms",
        sms_number=appt.client.phone if appt.client else None,
        sms_body=message,
        email_recipient=appt.client.email if appt.client else None,
        email_subject=templates.anniversary_subject(years),
        email_body=message,
        deep_link=templates.client_link(appt.client_id),
        due_at=due_at,
        expires_at=due_at + timedelta(days=1),
    )


def build_healed_photo_task(
    appt: AppointmentRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if appt.status != "completed" or appt.follow_up_sent or appt.end_time is None:
        return None

    days = days_between(appt.end_time, now)
    if days < HEALED_PHOTO_MIN_DAYS or days > HEALED_PHOTO_MAX_DAYS:
        return None

    client_name = _client_name(appt)
    display_name = client_name or "Client"

    return BusinessTask(
        task_type="healed_photo_request",
        task_tier="tier3",
        title="Request healed photo",
        context=f"{display_name}'s {_piece(appt)} should be healed",
        priority_score=rules.clamp_score(rules.healed_photo_score(days)),
        related_entity_type="appointment",
        related_entity_id=str(appt.id),
        client_id=appt.client_id,
        client_name=client_name,
        action_type="sms",
        sms_number=appt.client.phone if appt.client else None,
        sms_body=templates.healed_photo_message(display_name, _piece(appt)),
        deep_link=templates.conversation_link(appt.conversation_id),
    )


def build_thank_you_task(
    appt: AppointmentRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if appt.status != "completed" or appt.end_time is None:
        return None
    if local_date(appt.end_time, now) != now.date():
        return None

    client_name = _client_name(appt)
    display_name = client_name or "Client"

    return BusinessTask(
        task_type="post_appointment_thankyou",
        task_tier="tier3",
        title=f"Thank {display_name}",
        context="Session completed today - send thank you",
        priority_score=rules.clamp_score(rules.THANK_YOU_SCORE),
        related_entity_type="appointment",
        related_entity_id=str(appt.id),
        client_id=appt.client_id,
        client_name=client_name,
        action_type="sms",
        sms_number=appt.client.phone if appt.client else None,
        sms_body=templates.thank_you_message(display_name, _piece(appt)),
        deep_link=templates.conversation_link(appt.conversation_id),
        expires_at=end_of_day(now),
    )


DEPOSIT_COLLECTION = TaskGenerator(
    task_type="deposit_collection",
    tier="tier1",
    fetch=fetch_deposit_candidates,
    build=build_deposit_task,
)

APPOINTMENT_CONFIRMATION = TaskGenerator(
    task_type="appointment_confirmation",
    tier="tier1",
    fetch=fetch_confirmation_candidates,
    build=build_confirmation_task,
)

TATTOO_ANNIVERSARY = TaskGenerator(
    task_type="tattoo_anniversary",
    tier="tier3",
    fetch=fetch_completed_appointments,
    build=build_anniversary_task,
)

HEALED_PHOTO_REQUEST = TaskGenerator(
    task_type="healed_photo_request",
    tier="tier3",
    fetch=fetch_healing_appointments,
    build=build_healed_photo_task,
)

POST_APPOINTMENT_THANKYOU = TaskGenerator(
    task_type="post_appointment_thankyou",
    tier="tier3",
    fetch=fetch_completed_today,
    build=build_thank_you_task,
)
