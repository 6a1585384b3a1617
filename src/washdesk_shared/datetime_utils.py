"""
Datetime utilities shared by the dashboards.

Day-of-week numbers follow the storefront convention where Sunday is 0 and
Saturday is 6, which is how ``branch_hours`` and ``washer_schedules`` rows are
stored.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def today() -> date:
    return utcnow().date()


def day_of_week(value: date) -> int:
    """Return the Sunday-based day of week (0=Sunday .. 6=Saturday)."""
    return (value.weekday() + 1) % 7


def format_date(value: date | datetime) -> str:
    """Format a date as YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date(value: str | date | datetime | None) -> date | None:
    """
    Parse an ISO date or timestamp string into a date.

    Accepts ``YYYY-MM-DD`` as well as full ISO timestamps with a trailing ``Z``.
    Returns None for empty or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None


def next_two_weeks_range(start: date | None = None) -> tuple[date, date]:
    """Return (start, end) covering 14 days, both inclusive."""
    start = start or today()
    return start, start + timedelta(days=13)


def is_date_in_next_two_weeks(value: date, start: date | None = None) -> bool:
    first, last = next_two_weeks_range(start)
    return first <= value <= last


def date_for_day_of_week(dow: int, week_offset: int = 0, start: date | None = None) -> date:
    """
    Get the date of the next ``dow`` (0=Sunday) counting from ``start``.

    ``week_offset`` shifts the result by whole weeks. A day earlier in the
    current week rolls over to the following week.
    """
    start = start or today()
    days_to_add = dow - day_of_week(start)
    if days_to_add < 0:
        days_to_add += 7
    days_to_add += week_offset * 7
    return start + timedelta(days=days_to_add)
