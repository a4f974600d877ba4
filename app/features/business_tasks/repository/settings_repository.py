"""
Per-provider dashboard settings (one row per artist).
"""

from datetime import datetime
from typing import Any

from app.db.helpers import DatabaseError, execute_query, fetch_one
from app.features.business_tasks.domain.models import DashboardSettings
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Columns callers may change through upsert_settings
UPDATABLE_COLUMNS = (
    "max_visible_tasks",
    "goal_advanced_booking_months",
    "preferred_email_client",
    "show_weekly_snapshot",
)


class DashboardSettingsRepositoryError(DatabaseError):
    """More specific exception for settings persistence failures."""


class DashboardSettingsRepository:
    SELECT_COLUMNS = """
        artist_id, max_visible_tasks, goal_advanced_booking_months,
        preferred_email_client, show_weekly_snapshot, last_snapshot_shown_at
    """

    @classmethod
    def _row_to_settings(cls, row: dict | None) -> DashboardSettings | None:
        if not row:
            return None

        defaults = DashboardSettings(artist_id=str(row["artist_id"]))
        return DashboardSettings(
            artist_id=defaults.artist_id,
            max_visible_tasks=row.get("max_visible_tasks") or defaults.max_visible_tasks,
            goal_advanced_booking_months=(
                row.get("goal_advanced_booking_months") or defaults.goal_advanced_booking_months
            ),
            preferred_email_client=(
                row.get("preferred_email_client") or defaults.preferred_email_client
            ),
            show_weekly_snapshot=bool(row.get("show_weekly_snapshot", True)),
            last_snapshot_shown_at=row.get("last_snapshot_shown_at"),
        )

    @classmethod
    async def fetch_settings(cls, artist_id: str) -> DashboardSettings | None:
        query = f"SELECT {cls.SELECT_COLUMNS} FROM dashboard_settings WHERE artist_id = %s"
        row = await fetch_one(query, (artist_id,))
        return cls._row_to_settings(row)

    @classmethod
    async def insert_defaults(cls, artist_id: str) -> DashboardSettings:
        """Create the default row; a concurrent insert for the same artist wins."""

        defaults = DashboardSettings(artist_id=artist_id)
        query = f"""
            INSERT INTO dashboard_settings (
                artist_id, max_visible_tasks, goal_advanced_booking_months,
                preferred_email_client, show_weekly_snapshot
            )
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (artist_id) DO NOTHING
            RETURNING {cls.SELECT_COLUMNS}
        """

        row = await fetch_one(
            query,
            (
                artist_id,
                defaults.max_visible_tasks,
                defaults.goal_advanced_booking_months,
                defaults.preferred_email_client,
                defaults.show_weekly_snapshot,
            ),
        )
        if row:
            logger.info("Dashboard settings created", artist_id=artist_id)
            return cls._row_to_settings(row)

        existing = await cls.fetch_settings(artist_id)
        return existing or defaults

    @classmethod
    async def upsert_settings(cls, artist_id: str, changes: dict[str, Any]) -> DashboardSettings:
        """Apply a partial update, creating the row from defaults if missing."""

        unknown = set(changes) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise DashboardSettingsRepositoryError(
                f"Unknown settings columns: {sorted(unknown)}",
                operation="upsert_settings",
                recoverable=False,
            )

        defaults = DashboardSettings(artist_id=artist_id)
        values = {column: getattr(defaults, column) for column in UPDATABLE_COLUMNS}
        values.update(changes)

        columns = ", ".join(UPDATABLE_COLUMNS)
        placeholders = ", ".join(["%s"] * len(UPDATABLE_COLUMNS))
        assignments = [f"{column} = EXCLUDED.{column}" for column in changes]
        assignments.append("updated_at = NOW()")

        query = f"""
            INSERT INTO dashboard_settings (artist_id, {columns})
            VALUES (%s, {placeholders})
            ON CONFLICT (artist_id) DO UPDATE
            SET {", ".join(assignments)}
            RETURNING {cls.SELECT_COLUMNS}
        """

        row = await fetch_one(
            query, (artist_id, *(values[column] for column in UPDATABLE_COLUMNS))
        )
        if not row:
            raise DashboardSettingsRepositoryError(
                "Failed to save dashboard settings", operation="upsert_settings"
            )

        logger.info("Dashboard settings updated", artist_id=artist_id, fields=sorted(changes))
        return cls._row_to_settings(row)

    @classmethod
    async def mark_snapshot_shown(cls, artist_id: str, shown_at: datetime) -> None:
        defaults = DashboardSettings(artist_id=artist_id)
        query = """
            INSERT INTO dashboard_settings (
                artist_id, max_visible_tasks, goal_advanced_booking_months,
                preferred_email_client, show_weekly_snapshot, last_snapshot_shown_at
            )
            VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT (artist_id) DO UPDATE
            SET last_snapshot_shown_at = EXCLUDED.last_snapshot_shown_at,
                updated_at = NOW()
        """

        await execute_query(
            query,
            (
                artist_id,
                defaults.max_visible_tasks,
                defaults.goal_advanced_booking_months,
                defaults.preferred_email_client,
                defaults.show_weekly_snapshot,
                shown_at,
            ),
        )
        logger.info("Weekly snapshot dismissed", artist_id=artist_id)
