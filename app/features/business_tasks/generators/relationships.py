"""
Relationship tasks: conversations left hanging on the provider's last message
(tier 2) and client birthdays (tier 3).
"""

from datetime import datetime, timedelta

from app.features.business_tasks.clock import days_between, start_of_day, this_year_occurrence
from app.features.business_tasks.domain.models import (
    BusinessTask,
    ClientRecord,
    ConversationRecord,
)
from app.features.business_tasks.generators import templates
from app.features.business_tasks.generators.base import TaskGenerator
from app.features.business_tasks.scoring import rules

STALE_CONVERSATION_MIN_DAYS = 2
BIRTHDAY_LOOKAHEAD_DAYS = 7


async def fetch_conversations(source, provider_id: str, now: datetime):
    return await source.fetch_conversations_with_last_message(provider_id)


async def fetch_clients_with_birthdays(source, provider_id: str, now: datetime):
    return await source.fetch_clients_with_birthdays(provider_id)


def build_stale_conversation_task(
    conv: ConversationRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if conv.last_message_at is None or conv.last_message_sender_id != provider_id:
        return None

    days = days_between(conv.last_message_at, now)
    if days < STALE_CONVERSATION_MIN_DAYS:
        return None

    client_name = conv.client.name if conv.client else None

    return BusinessTask(
        task_type="stale_conversation",
        task_tier="tier2",
        title=f"Follow up with {client_name or 'Client'}",
        context=f"No response in {int(days)} days",
        priority_score=rules.clamp_score(rules.stale_conversation_score(days)),
        related_entity_type="conversation",
        related_entity_id=str(conv.id),
        client_id=conv.client_id,
        client_name=client_name,
        action_type="in_app",
        deep_link=templates.conversation_link(conv.id),
    )


def build_birthday_task(
    client: ClientRecord, provider_id: str, now: datetime
) -> BusinessTask | None:
    if client.birthday is None:
        return None

    today = now.date()
    birthday = this_year_occurrence(client.birthday, today)
    days_until = (birthday - today).days
    if days_until < 0 or days_until > BIRTHDAY_LOOKAHEAD_DAYS:
        return None

    name = client.display_name
    message = templates.birthday_message(name)
    due_at = start_of_day(now) + timedelta(days=days_until)

    return BusinessTask(
        task_type="birthday_outreach",
        task_tier="tier3",
        title=f"Birthday: {name}",
        context=f"{templates.format_short_date(birthday)} - Send wishes or voucher?",
        priority_score=rules.clamp_score(rules.birthday_score(days_until)),
        related_entity_type="user",
        related_entity_id=str(client.id),
        client_id=str(client.id),
        client_name=client.name,
        action_type="sms",
        sms_number=client.phone,
        sms_body=message,
        email_recipient=client.email,
        email_subject=templates.birthday_subject(name),
        email_body=message,
        deep_link=templates.client_link(client.id),
        due_at=due_at,
        expires_at=due_at + timedelta(days=1),
    )


STALE_CONVERSATION = TaskGenerator(
    task_type="stale_conversation",
    tier="tier2",
    fetch=fetch_conversations,
    build=build_stale_conversation_task,
)

BIRTHDAY_OUTREACH = TaskGenerator(
    task_type="birthday_outreach",
    tier="tier3",
    fetch=fetch_clients_with_birthdays,
    build=build_birthday_task,
    dedupe_key=lambda client: client.id,
)
