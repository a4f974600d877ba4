"""
Read-only access to the entities the task generators scan.

Every query is scoped to one provider (artist). Queries narrow candidates by
status and time window; the generators re-check their own trigger rules, so a
slightly wider result set is harmless.
"""

from datetime import datetime
from typing import Any

from app.db.helpers import fetch_all, fetch_val
from app.features.business_tasks.domain.models import (
    AppointmentRecord,
    ClientRecord,
    ConsultationRecord,
    ConversationRecord,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_CLIENT_COLUMNS = """
    u.id AS client_ref,
    u.name AS client_name,
    u.phone AS client_phone,
    u.email AS client_email,
    u.birthday AS client_birthday
"""


def _client_from_row(row: dict[str, Any]) -> ClientRecord | None:
    if not row.get("client_ref"):
        return None
    return ClientRecord(
        id=str(row["client_ref"]),
        name=row.get("client_name"),
        phone=row.get("client_phone"),
        email=row.get("client_email"),
        birthday=row.get("client_birthday"),
    )


def _optional_str(value: Any) -> str | None:
    return str(value) if value is not None else None


class TaskSourceRepository:
    """Thin wrappers over the consultation, appointment and conversation tables."""

    @staticmethod
    async def fetch_consultations(provider_id: str, status: str) -> list[ConsultationRecord]:
        rows = await fetch_all(
            f"""
            SELECT
                c.id, c.client_id, c.conversation_id, c.subject, c.status,
                c.viewed, c.created_at, c.updated_at,
                {_CLIENT_COLUMNS}
            FROM consultations c
            LEFT JOIN users u ON u.id = c.client_id
            WHERE c.artist_id = %s
              AND c.status = %s
            ORDER BY c.created_at ASC
            """,
            (provider_id, status),
        )
        return [
            ConsultationRecord(
                id=str(row["id"]),
                client_id=_optional_str(row.get("client_id")),
                conversation_id=_optional_str(row.get("conversation_id")),
                subject=row.get("subject"),
                status=row["status"],
                viewed=bool(row.get("viewed")),
                created_at=row["created_at"],
                updated_at=row.get("updated_at") or row["created_at"],
                client=_client_from_row(row),
            )
            for row in rows
        ]

    @staticmethod
    async def fetch_appointments(
        provider_id: str,
        status: str,
        *,
        start_from: datetime | None = None,
        start_to: datetime | None = None,
        end_from: datetime | None = None,
        end_to: datetime | None = None,
    ) -> list[AppointmentRecord]:
        conditions = ["a.artist_id = %s", "a.status = %s"]
        params: list[Any] = [provider_id, status]

        for column, operator, value in (
            ("a.start_time", ">=", start_from),
            ("a.start_time", "<=", start_to),
            ("a.end_time", ">=", end_from),
            ("a.end_time", "<=", end_to),
        ):
            if value is not None:
                conditions.append(f"{column} {operator} %s")
                params.append(value)

        rows = await fetch_all(
            f"""
            SELECT
                a.id, a.client_id, a.conversation_id, a.title,
                a.start_time, a.end_time, a.status,
                a.deposit_amount, a.deposit_paid,
                a.confirmation_sent, a.follow_up_sent,
                {_CLIENT_COLUMNS}
            FROM appointments a
            LEFT JOIN users u ON u.id = a.client_id
            WHERE {" AND ".join(conditions)}
            ORDER BY a.start_time ASC
            """,
            tuple(params),
        )
        return [
            AppointmentRecord(
                id=str(row["id"]),
                client_id=_optional_str(row.get("client_id")),
                conversation_id=_optional_str(row.get("conversation_id")),
                title=row.get("title"),
                start_time=row["start_time"],
                end_time=row.get("end_time"),
                status=row["status"],
                deposit_amount=row.get("deposit_amount"),
                deposit_paid=bool(row.get("deposit_paid")),
                confirmation_sent=bool(row.get("confirmation_sent")),
                follow_up_sent=bool(row.get("follow_up_sent")),
                client=_client_from_row(row),
            )
            for row in rows
        ]

    @staticmethod
    async def fetch_conversations_with_last_message(provider_id: str) -> list[ConversationRecord]:
        """Each conversation of the provider with its most recent message, if any."""
        rows = await fetch_all(
            f"""
            SELECT
                conv.id, conv.artist_id, conv.client_id,
                last_msg.sender_id AS last_message_sender_id,
                last_msg.created_at AS last_message_at,
                {_CLIENT_COLUMNS}
            FROM conversations conv
            LEFT JOIN users u ON u.id = conv.client_id
            LEFT JOIN LATERAL (
                SELECT m.sender_id, m.created_at
                FROM messages m
                WHERE m.conversation_id = conv.id
                ORDER BY m.created_at DESC
                LIMIT 1
            ) last_msg ON TRUE
            WHERE conv.artist_id = %s
            """,
            (provider_id,),
        )
        return [
            ConversationRecord(
                id=str(row["id"]),
                artist_id=str(row["artist_id"]),
                client_id=_optional_str(row.get("client_id")),
                last_message_sender_id=_optional_str(row.get("last_message_sender_id")),
                last_message_at=row.get("last_message_at"),
                client=_client_from_row(row),
            )
            for row in rows
        ]

    @staticmethod
    async def fetch_clients_with_birthdays(provider_id: str) -> list[ClientRecord]:
        """Distinct clients with a known birthday who have booked with the provider."""
        rows = await fetch_all(
            f"""
            SELECT DISTINCT {_CLIENT_COLUMNS}
            FROM appointments a
            JOIN users u ON u.id = a.client_id
            WHERE a.artist_id = %s
              AND u.birthday IS NOT NULL
            """,
            (provider_id,),
        )
        clients = [_client_from_row(row) for row in rows]
        return [client for client in clients if client is not None]

    # -----------------------------------------------------------------
    # Dashboard header counts
    # -----------------------------------------------------------------

    @staticmethod
    async def count_appointments(
        provider_id: str, status: str, start_from: datetime, start_to: datetime
    ) -> int:
        count = await fetch_val(
            """
            SELECT COUNT(*)
            FROM appointments
            WHERE artist_id = %s
              AND status = %s
              AND start_time >= %s
              AND start_time <= %s
            """,
            (provider_id, status, start_from, start_to),
        )
        return int(count or 0)

    @staticmethod
    async def fetch_appointment_start_times(
        provider_id: str, start_from: datetime, start_to: datetime
    ) -> list[datetime]:
        rows = await fetch_all(
            """
            SELECT start_time
            FROM appointments
            WHERE artist_id = %s
              AND start_time >= %s
              AND start_time <= %s
            """,
            (provider_id, start_from, start_to),
        )
        return [row["start_time"] for row in rows]

    @staticmethod
    async def count_pending_enquiries(provider_id: str) -> int:
        """Pending funnel leads plus pending conversations."""
        count = await fetch_val(
            """
            SELECT
                (SELECT COUNT(*) FROM leads WHERE artist_id = %s AND status = 'pending')
              + (SELECT COUNT(*) FROM conversations WHERE artist_id = %s AND status = 'pending')
            """,
            (provider_id, provider_id),
        )
        return int(count or 0)
