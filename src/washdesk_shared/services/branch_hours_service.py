"""
Opening hours per branch.

A branch has at most one weekly row per day of week (``specific_date`` null)
and any number of date-specific rows. Days without a row fall back to
09:00-17:00, closed on Saturday and Sunday. Those synthesized entries carry an
id starting with ``default-`` and exist only until they are saved.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from postgrest.exceptions import APIError

from washdesk_shared.constants import UNIQUE_VIOLATION_CODE, Tables
from washdesk_shared.datetime_utils import day_of_week, format_date, next_two_weeks_range
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import get_db
from washdesk_shared.validation import NotFoundError, ValidationError, validate_time_of_day

logger = get_logger(__name__)

DEFAULT_OPEN_TIME = "09:00"
DEFAULT_CLOSE_TIME = "17:00"
DEFAULT_ID_PREFIX = "default-"
WEEKEND_DAYS = (0, 6)


def default_hours(branch_id: str, dow: int, specific_date: str | None = None) -> dict[str, Any]:
    suffix = f"-{specific_date}" if specific_date else ""
    return {
        "id": f"{DEFAULT_ID_PREFIX}{branch_id}-{dow}{suffix}",
        "branch_id": branch_id,
        "day_of_week": dow,
        "open_time": DEFAULT_OPEN_TIME,
        "close_time": DEFAULT_CLOSE_TIME,
        "is_closed": dow in WEEKEND_DAYS,
        "specific_date": specific_date,
    }


def is_default_id(hours_id: str | None) -> bool:
    return bool(hours_id) and hours_id.startswith(DEFAULT_ID_PREFIX)


def _weekly_row(rows: list[dict[str, Any]], dow: int) -> dict[str, Any] | None:
    return next(
        (row for row in rows if row["day_of_week"] == dow and not row.get("specific_date")),
        None,
    )


def resolve_week(rows: list[dict[str, Any]], branch_id: str) -> list[dict[str, Any]]:
    """Seven entries, Sunday first. A date-specific row beats the weekly one."""
    week = []
    for dow in range(7):
        specific = next(
            (row for row in rows if row["day_of_week"] == dow and row.get("specific_date")),
            None,
        )
        week.append(specific or _weekly_row(rows, dow) or default_hours(branch_id, dow))
    return week


def resolve_two_weeks(
    rows: list[dict[str, Any]],
    branch_id: str,
    start: date | None = None,
) -> list[dict[str, Any]]:
    """Fourteen dated entries starting at ``start`` (today by default)."""
    first, _ = next_two_weeks_range(start)
    days = []
    for offset in range(14):
        current = first + timedelta(days=offset)
        dow = day_of_week(current)
        formatted = format_date(current)
        match = next(
            (row for row in rows if str(row.get("specific_date") or "")[:10] == formatted),
            None,
        )
        if match is None:
            match = _weekly_row(rows, dow)
        if match is None:
            days.append(default_hours(branch_id, dow, formatted))
        else:
            days.append({**match, "specific_date": formatted})
    return days


def _fetch_rows(branch_id: str) -> list[dict[str, Any]]:
    response = get_db().table(Tables.BRANCH_HOURS).select("*").eq("branch_id", branch_id).execute()
    return response.data or []


def get_hours(hours_id: str) -> dict[str, Any] | None:
    response = get_db().table(Tables.BRANCH_HOURS).select("*").eq("id", hours_id).limit(1).execute()
    return response.data[0] if response.data else None


def hours_for_week(branch_id: str) -> list[dict[str, Any]]:
    return resolve_week(_fetch_rows(branch_id), branch_id)


def hours_for_next_two_weeks(branch_id: str, start: date | None = None) -> list[dict[str, Any]]:
    first, last = next_two_weeks_range(start)
    rows = [
        row
        for row in _fetch_rows(branch_id)
        if not row.get("specific_date")
        or format_date(first) <= str(row["specific_date"])[:10] <= format_date(last)
    ]
    return resolve_two_weeks(rows, branch_id, first)


def hours_for_date(branch_id: str, target: date) -> dict[str, Any]:
    """Hours in effect on one date."""
    db = get_db()
    specific = (
        db.table(Tables.BRANCH_HOURS)
        .select("*")
        .eq("branch_id", branch_id)
        .eq("specific_date", format_date(target))
        .execute()
    )
    if specific.data:
        return specific.data[0]

    dow = day_of_week(target)
    weekly = (
        db.table(Tables.BRANCH_HOURS)
        .select("*")
        .eq("branch_id", branch_id)
        .eq("day_of_week", dow)
        .is_("specific_date", "null")
        .execute()
    )
    if weekly.data:
        return weekly.data[0]
    return default_hours(branch_id, dow)


def _times(hours: dict[str, Any]) -> dict[str, Any]:
    values = {
        "open_time": hours.get("open_time"),
        "close_time": hours.get("close_time"),
        "is_closed": bool(hours.get("is_closed")),
    }
    for field in ("open_time", "close_time"):
        if values[field] is not None:
            validate_time_of_day(values[field], field)
    return values


def save_hours(hours: dict[str, Any]) -> dict[str, Any]:
    """
    Persist one entry.

    A ``default-`` entry is inserted; if that day already has a row the
    existing row is updated instead.
    """
    values = _times(hours)
    db = get_db()

    if hours.get("id") and not is_default_id(hours["id"]):
        response = db.table(Tables.BRANCH_HOURS).update(values).eq("id", hours["id"]).execute()
        if not response.data:
            raise NotFoundError("Branch hours not found")
        return response.data[0]

    specific_date = hours.get("specific_date")
    if isinstance(specific_date, date):
        specific_date = format_date(specific_date)
    row = {
        "branch_id": hours["branch_id"],
        "day_of_week": hours["day_of_week"],
        "specific_date": specific_date or None,
        **values,
    }
    try:
        response = db.table(Tables.BRANCH_HOURS).insert(row).execute()
        logger.info(f"Inserted hours for branch {row['branch_id']} day {row['day_of_week']}")
        return response.data[0]
    except APIError as exc:
        if exc.code != UNIQUE_VIOLATION_CODE:
            raise
        logger.info(f"Hours for branch {row['branch_id']} day {row['day_of_week']} exist; updating")

    query = (
        db.table(Tables.BRANCH_HOURS)
        .update(values)
        .eq("branch_id", row["branch_id"])
        .eq("day_of_week", row["day_of_week"])
    )
    if row["specific_date"]:
        query = query.eq("specific_date", row["specific_date"])
    else:
        query = query.is_("specific_date", "null")
    return query.execute().data[0]


def delete_hours(hours_id: str, branch_id: str | None = None) -> dict[str, Any] | None:
    """
    Delete a stored entry.

    Synthesized ``default-`` entries have nothing to delete; the closed
    version of the entry is returned instead.
    """
    if is_default_id(hours_id):
        prefix = f"{DEFAULT_ID_PREFIX}{branch_id}-"
        dow = None
        if branch_id and hours_id.startswith(prefix):
            day = hours_id[len(prefix) :].split("-")[0]
            if day not in {str(value) for value in range(7)}:
                raise ValidationError("Invalid hours id")
            dow = int(day)
        return {
            "id": hours_id,
            "branch_id": branch_id,
            "day_of_week": dow,
            "open_time": None,
            "close_time": None,
            "is_closed": True,
        }

    get_db().table(Tables.BRANCH_HOURS).delete().eq("id", hours_id).execute()
    logger.info(f"Deleted branch hours {hours_id}")
    return None
