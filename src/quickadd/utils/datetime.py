"""Calendar arithmetic helpers for the quick-add parser.

Every helper takes the reference instant explicitly instead of reading the
clock, so a whole parse observes a single "now". Helpers preserve whatever
``tzinfo`` the reference carries: naive in, naive out; aware in, aware out.

Weekdays are numbered 0=Sunday .. 6=Saturday throughout this package,
matching the task records the parser feeds.
"""

from calendar import monthrange
from datetime import datetime, timedelta, tzinfo
from typing import Optional


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Return the current wall-clock time.

    Args:
        tz: Optional timezone; when omitted a naive local datetime is returned

    Returns:
        Current datetime, naive unless ``tz`` is given
    """
    return datetime.now(tz)


def start_of_day(dt: datetime) -> datetime:
    """Return midnight of the day containing ``dt``."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def day_of_week(dt: datetime) -> int:
    """Return the weekday of ``dt`` with 0=Sunday, 6=Saturday."""
    return (dt.weekday() + 1) % 7


def add_months(dt: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    month = dt.month - 1 + months
    year = dt.year + month // 12
    month = month % 12 + 1
    day = min(dt.day, monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def last_day_of_month(dt: datetime) -> datetime:
    """Return midnight of the last day in ``dt``'s month."""
    return start_of_day(dt.replace(day=monthrange(dt.year, dt.month)[1]))


def next_weekday(dt: datetime, weekday: int) -> datetime:
    """Return the first ``weekday`` strictly after ``dt``, keeping its clock time."""
    days_ahead = (weekday - day_of_week(dt)) % 7 or 7
    return dt + timedelta(days=days_ahead)


def nth_weekday_of_month(now: datetime, week: int, weekday: int) -> datetime:
    """Return the next ``week``-th ``weekday`` of a month on or after ``now``.

    ``week`` is 1-4, or -1 for the last such weekday of the month. The
    occurrence in ``now``'s month is tried first; when it already lies before
    ``now`` the search moves one calendar month ahead and recomputes, since
    the month's shape decides which day is the n-th or last weekday.

    Args:
        now: Reference instant
        week: Ordinal week (1, 2, 3, 4) or -1 for "last"
        weekday: Target weekday, 0=Sunday

    Returns:
        Midnight of the matching day
    """
    anchor = now
    while True:
        year, month = anchor.year, anchor.month
        if week == -1:
            last = monthrange(year, month)[1]
            last_dow = day_of_week(anchor.replace(day=last))
            day = last - (last_dow - weekday) % 7
        else:
            first_dow = day_of_week(anchor.replace(day=1))
            day = 1 + (weekday - first_dow) % 7 + (week - 1) * 7
        candidate = start_of_day(anchor.replace(day=day))
        if candidate >= now:
            return candidate
        anchor = add_months(anchor.replace(day=1), 1)


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to an ISO-8601 string.

    Args:
        dt: Datetime to convert, or None

    Returns:
        ISO format string, or None if input was None
    """
    if dt is None:
        return None
    return dt.isoformat()
