from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest

from app.features.business_tasks.clock import fixed_clock
from app.features.business_tasks.services.quick_stats_service import (
    QuickStatsService,
    count_open_days,
)

PROVIDER_ID = "artist-1"


def test_count_open_days_skips_weekends_and_bookings():
    # Wed 11 Jun 2025 through Mon 30 Jun 2025: 14 working days
    today = date(2025, 6, 11)
    last_day = date(2025, 6, 30)

    assert count_open_days(today, last_day, set()) == 14
    assert count_open_days(today, last_day, {date(2025, 6, 12), date(2025, 6, 14)}) == 13


@pytest.mark.asyncio
async def test_quick_stats(now):
    source = AsyncMock()
    source.count_appointments.return_value = 3
    source.fetch_appointment_start_times.return_value = [
        datetime(2025, 6, 11, 15, 0, tzinfo=UTC),
        datetime(2025, 6, 11, 18, 0, tzinfo=UTC),
        datetime(2025, 6, 2, 10, 0, tzinfo=UTC),
    ]
    source.count_pending_enquiries.return_value = 5
    service = QuickStatsService(source=source, clock=fixed_clock(now))

    stats = await service.get_quick_stats(PROVIDER_ID)

    assert stats.bookings_this_week == 3
    assert stats.open_dates_this_month == 13
    assert stats.new_enquiries == 5
    assert stats.week_label == "Jun 9 - Jun 15"
    assert stats.month_label == "June"

    args = source.count_appointments.await_args.args
    assert args[0] == PROVIDER_ID
    assert args[1] == "confirmed"
