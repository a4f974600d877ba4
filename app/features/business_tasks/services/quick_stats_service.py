"""
At-a-glance counts for the dashboard header.
"""

from datetime import date, timedelta

from app.features.business_tasks.clock import (
    Clock,
    local_date,
    month_bounds,
    system_clock,
    week_bounds,
)
from app.features.business_tasks.domain.models import QuickStats
from app.features.business_tasks.repository.task_source_repository import TaskSourceRepository
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

WORK_DAYS = frozenset({0, 1, 2, 3, 4})  # Mon-Fri


def count_open_days(today: date, last_day: date, booked: set[date]) -> int:
    """Working days from today through last_day with nothing booked."""
    open_days = 0
    day = today
    while day <= last_day:
        if day.weekday() in WORK_DAYS and day not in booked:
            open_days += 1
        day += timedelta(days=1)
    return open_days


def _short_label(value: date) -> str:
    return f"{value.strftime('%b')} {value.day}"


class QuickStatsService:
    def __init__(self, source=TaskSourceRepository, clock: Clock = system_clock):
        self.source = source
        self.clock = clock

    async def get_quick_stats(self, provider_id: str) -> QuickStats:
        now = self.clock()
        week_start, week_end = week_bounds(now)
        month_start, month_end = month_bounds(now)

        bookings = await self.source.count_appointments(
            provider_id, "confirmed", week_start, week_end
        )
        start_times = await self.source.fetch_appointment_start_times(
            provider_id, month_start, month_end
        )
        enquiries = await self.source.count_pending_enquiries(provider_id)

        booked = {local_date(start, now) for start in start_times}
        stats = QuickStats(
            bookings_this_week=bookings,
            open_dates_this_month=count_open_days(now.date(), month_end.date(), booked),
            new_enquiries=enquiries,
            week_label=f"{_short_label(week_start.date())} - {_short_label(week_end.date())}",
            month_label=now.strftime("%B"),
        )

        logger.debug(
            "Quick stats computed",
            provider_id=provider_id,
            bookings_this_week=stats.bookings_this_week,
            open_dates_this_month=stats.open_dates_this_month,
            new_enquiries=stats.new_enquiries,
        )
        return stats


quick_stats_service = QuickStatsService()
