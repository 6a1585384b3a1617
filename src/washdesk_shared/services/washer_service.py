"""Washers and their weekly schedules."""

from __future__ import annotations

from typing import Any

from washdesk_shared.constants import Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import get_db
from washdesk_shared.validation import NotFoundError, validate_time_of_day

logger = get_logger(__name__)

WASHER_SELECT = "*, branch:branches(name, franchise_id)"


def _flatten(row: dict[str, Any]) -> dict[str, Any]:
    washer = dict(row)
    branch = washer.pop("branch", None) or {}
    washer["branch_name"] = branch.get("name", "N/A")
    washer["franchise_id"] = branch.get("franchise_id")
    return washer


def list_washers(
    branch_id: str | None = None,
    branch_ids: list[str] | None = None,
) -> list[dict[str, Any]]:
    """Washers of one branch, of a set of branches, or all of them."""
    if branch_ids is not None and not branch_ids:
        return []

    query = get_db().table(Tables.WASHERS).select(WASHER_SELECT)
    if branch_id:
        query = query.eq("branch_id", branch_id)
    elif branch_ids:
        query = query.in_("branch_id", branch_ids)
    response = query.order("name").execute()
    return [_flatten(row) for row in response.data or []]


def list_washers_for_franchise(franchise_id: str) -> list[dict[str, Any]]:
    branches = (
        get_db().table(Tables.BRANCHES).select("id").eq("franchise_id", franchise_id).execute()
    )
    return list_washers(branch_ids=[row["id"] for row in branches.data or []])


def get_washer(washer_id: str) -> dict[str, Any] | None:
    response = (
        get_db().table(Tables.WASHERS).select(WASHER_SELECT).eq("id", washer_id).limit(1).execute()
    )
    return _flatten(response.data[0]) if response.data else None


def create_washer(data: dict[str, Any]) -> dict[str, Any]:
    response = get_db().table(Tables.WASHERS).insert(data).execute()
    washer = response.data[0]
    logger.info(f"Created washer {washer['id']} at branch {washer.get('branch_id')}")
    return washer


def update_washer(washer_id: str, data: dict[str, Any]) -> dict[str, Any]:
    response = get_db().table(Tables.WASHERS).update(data).eq("id", washer_id).execute()
    if not response.data:
        raise NotFoundError("Washer not found")
    return response.data[0]


def delete_washer(washer_id: str) -> None:
    response = get_db().table(Tables.WASHERS).delete().eq("id", washer_id).execute()
    if not response.data:
        raise NotFoundError("Washer not found")
    logger.info(f"Deleted washer {washer_id}")


# Schedules


def list_schedules(washer_id: str) -> list[dict[str, Any]]:
    response = (
        get_db()
        .table(Tables.WASHER_SCHEDULES)
        .select("*")
        .eq("washer_id", washer_id)
        .order("day_of_week")
        .execute()
    )
    return response.data or []


def get_schedule(schedule_id: str) -> dict[str, Any] | None:
    response = (
        get_db().table(Tables.WASHER_SCHEDULES).select("*").eq("id", schedule_id).limit(1).execute()
    )
    return response.data[0] if response.data else None


def create_schedule(data: dict[str, Any]) -> dict[str, Any]:
    validate_time_of_day(data["start_time"], "start_time")
    validate_time_of_day(data["end_time"], "end_time")
    response = get_db().table(Tables.WASHER_SCHEDULES).insert(data).execute()
    schedule = response.data[0]
    logger.info(f"Created schedule {schedule['id']} for washer {data['washer_id']}")
    return schedule


def update_schedule(schedule_id: str, data: dict[str, Any]) -> dict[str, Any]:
    for field in ("start_time", "end_time"):
        if data.get(field) is not None:
            validate_time_of_day(data[field], field)
    response = (
        get_db().table(Tables.WASHER_SCHEDULES).update(data).eq("id", schedule_id).execute()
    )
    if not response.data:
        raise NotFoundError("Schedule not found")
    return response.data[0]


def delete_schedule(schedule_id: str) -> None:
    response = get_db().table(Tables.WASHER_SCHEDULES).delete().eq("id", schedule_id).execute()
    if not response.data:
        raise NotFoundError("Schedule not found")
