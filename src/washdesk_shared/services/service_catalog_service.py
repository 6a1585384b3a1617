"""
Wash services offered by branches.

A global service (``is_global`` true, no branch) is offered by every branch.
Globals were historically created once per branch, so lists collapse them by
name and deleting one removes every copy.
"""

from __future__ import annotations

from typing import Any

from washdesk_shared.constants import Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import serialize_service
from washdesk_shared.supabase.client import get_db
from washdesk_shared.validation import NotFoundError

logger = get_logger(__name__)


def dedupe_global_services(services: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep branch services and the first global service of each name."""
    seen: set[str] = set()
    result = []
    for service in services:
        if service.get("is_global"):
            name = service.get("name")
            if name in seen:
                continue
            seen.add(name)
        result.append(service)
    return result


def merge_branch_services(
    branch_services: list[dict[str, Any]],
    global_services: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """A branch's own services plus globals whose name the branch does not already use."""
    names = {service.get("name") for service in branch_services}
    merged = list(branch_services)
    for service in dedupe_global_services(global_services):
        if service.get("name") not in names:
            merged.append(service)
            names.add(service.get("name"))
    return merged


def _branch_name(service: dict[str, Any], branch_names: dict[str, str]) -> str:
    if service.get("is_global"):
        return "Global"
    return branch_names.get(service.get("branch_id"), "N/A")


def list_services() -> list[dict[str, Any]]:
    db = get_db()
    services = db.table(Tables.SERVICES).select("*").order("name").execute().data or []
    branches = db.table(Tables.BRANCHES).select("id, name").execute().data or []
    branch_names = {row["id"]: row["name"] for row in branches}
    return [
        serialize_service(service, _branch_name(service, branch_names))
        for service in dedupe_global_services(services)
    ]


def list_global_services() -> list[dict[str, Any]]:
    response = get_db().table(Tables.SERVICES).select("*").eq("is_global", True).execute()
    return dedupe_global_services(response.data or [])


def list_services_for_branch(branch_id: str) -> list[dict[str, Any]]:
    """Services visible to a branch: its own plus the global catalog."""
    response = (
        get_db()
        .table(Tables.SERVICES)
        .select("*")
        .or_(f"branch_id.eq.{branch_id},is_global.eq.true")
        .execute()
    )
    rows = response.data or []
    own = [row for row in rows if row.get("branch_id") == branch_id and not row.get("is_global")]
    globals_ = [row for row in rows if row.get("is_global")]
    return [serialize_service(row) for row in merge_branch_services(own, globals_)]


def get_service(service_id: str) -> dict[str, Any] | None:
    response = get_db().table(Tables.SERVICES).select("*").eq("id", service_id).limit(1).execute()
    return serialize_service(response.data[0]) if response.data else None


def create_service(data: dict[str, Any]) -> dict[str, Any]:
    payload = dict(data)
    if payload.get("is_global"):
        payload["branch_id"] = None
    response = get_db().table(Tables.SERVICES).insert(payload).execute()
    service = response.data[0]
    logger.info(f"Created service {service.get('id')} ({service.get('name')})")
    return serialize_service(service)


def update_service(service_id: str, data: dict[str, Any]) -> dict[str, Any]:
    response = get_db().table(Tables.SERVICES).update(data).eq("id", service_id).execute()
    if not response.data:
        raise NotFoundError("Service not found")
    return serialize_service(response.data[0])


def delete_service(service_id: str) -> int:
    """Delete a service, or every global copy of a global one. Returns rows removed."""
    service = get_service(service_id)
    if service is None:
        raise NotFoundError("Service not found")

    db = get_db()
    if service["is_global"]:
        response = (
            db.table(Tables.SERVICES)
            .delete()
            .eq("is_global", True)
            .eq("name", service["name"])
            .execute()
        )
    else:
        response = db.table(Tables.SERVICES).delete().eq("id", service_id).execute()

    removed = len(response.data or [])
    logger.info(f"Deleted {removed} service row(s) for {service_id}")
    return removed
