"""
Time source and calendar helpers for the task engine.

Every generator, the driver and the snapshot take a Clock instead of reading
the wall clock, so a whole run sees one consistent "now" and tests can pin it.
Clocks return aware datetimes in the business timezone; "today", ISO weeks and
birthdays are all evaluated in that calendar.
"""

from collections.abc import Callable
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from app.config import settings

Clock = Callable[[], datetime]

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def business_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def system_clock() -> datetime:
    return datetime.now(business_timezone())


def fixed_clock(moment: datetime) -> Clock:
    """Clock frozen at `moment` (naive values are taken as business-local)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=business_timezone())
    return lambda: moment


def as_aware(value: datetime, tz: tzinfo = UTC) -> datetime:
    """Database timestamps are UTC; tolerate naive values from older rows."""
    return value if value.tzinfo is not None else value.replace(tzinfo=tz)


def hours_between(earlier: datetime, later: datetime) -> float:
    return (as_aware(later) - as_aware(earlier)).total_seconds() / SECONDS_PER_HOUR


def days_between(earlier: datetime, later: datetime) -> float:
    return (as_aware(later) - as_aware(earlier)).total_seconds() / SECONDS_PER_DAY


def local_date(value: datetime, now: datetime) -> date:
    """Calendar date of `value` in the timezone `now` is expressed in."""
    return as_aware(value).astimezone(now.tzinfo).date()


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)


def end_of_day(now: datetime) -> datetime:
    """Exclusive upper bound: midnight at the start of tomorrow."""
    return start_of_day(now) + timedelta(days=1)


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00:00 through Sunday 23:59:59.999999 of the week containing `now`."""
    monday = now.date() - timedelta(days=now.weekday())
    week_start = datetime.combine(monday, time.min, tzinfo=now.tzinfo)
    week_end = datetime.combine(monday + timedelta(days=6), time.max, tzinfo=now.tzinfo)
    return week_start, week_end


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First instant and last instant of the calendar month containing `now`."""
    first = now.date().replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    last = next_month - timedelta(days=1)
    return (
        datetime.combine(first, time.min, tzinfo=now.tzinfo),
        datetime.combine(last, time.max, tzinfo=now.tzinfo),
    )


def this_year_occurrence(original: date, today: date) -> date:
    """Same month/day in today's year; Feb 29 falls back to Feb 28."""
    try:
        return original.replace(year=today.year)
    except ValueError:
        return date(today.year, 2, 28)
