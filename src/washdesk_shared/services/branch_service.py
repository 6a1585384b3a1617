"""Service for managing branch records."""

from __future__ import annotations

from typing import Any

from postgrest.exceptions import APIError

from washdesk_shared.auth.service import AuthError, create_branch_admin_user
from washdesk_shared.constants import Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import serialize_branch
from washdesk_shared.services.rating_service import calculate_branch_rating
from washdesk_shared.services.service_catalog_service import merge_branch_services
from washdesk_shared.supabase.client import get_db
from washdesk_shared.validation import NotFoundError

logger = get_logger(__name__)

BRANCH_COLUMNS = (
    "name",
    "franchise_id",
    "location",
    "address",
    "city",
    "phone_number",
    "ratings",
    "pictures",
    "latitude",
    "longitude",
)


def _build_branches(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    if not rows:
        return []

    db = get_db()
    franchise_ids = sorted({row["franchise_id"] for row in rows if row.get("franchise_id")})
    franchise_names = {}
    if franchise_ids:
        franchises = (
            db.table(Tables.FRANCHISES).select("id, name").in_("id", franchise_ids).execute()
        )
        franchise_names = {row["id"]: row["name"] for row in franchises.data or []}

    services = db.table(Tables.SERVICES).select("*").execute().data or []
    globals_ = [service for service in services if service.get("is_global")]

    branches = []
    for row in rows:
        if row.get("ratings") is None:
            row = {**row, "ratings": calculate_branch_rating(row["id"])}
        own = [
            service
            for service in services
            if service.get("branch_id") == row["id"] and not service.get("is_global")
        ]
        branches.append(
            serialize_branch(
                row,
                franchise_names.get(row.get("franchise_id")),
                merge_branch_services(own, globals_),
            )
        )
    return branches


def list_branches(franchise_id: str | None = None) -> list[dict[str, Any]]:
    """Branches with franchise name, merged services and a computed rating when unset."""
    query = get_db().table(Tables.BRANCHES).select("*")
    if franchise_id:
        query = query.eq("franchise_id", franchise_id)
    response = query.order("name").execute()
    branches = _build_branches(response.data or [])
    logger.info(f"Listed {len(branches)} branches")
    return branches


def list_branch_ids(franchise_id: str) -> list[str]:
    response = (
        get_db().table(Tables.BRANCHES).select("id").eq("franchise_id", franchise_id).execute()
    )
    return [row["id"] for row in response.data or []]


def get_branch(branch_id: str) -> dict[str, Any] | None:
    response = get_db().table(Tables.BRANCHES).select("*").eq("id", branch_id).limit(1).execute()
    if not response.data:
        logger.warning(f"Branch {branch_id} not found")
        return None
    return _build_branches(response.data)[0]


def create_branch(
    data: dict[str, Any],
    admin_email: str | None = None,
    admin_password: str | None = None,
) -> dict[str, Any]:
    """
    Insert a branch, optionally provisioning its branch admin.

    A failure to create the admin account is logged and reported in
    ``admin_error``; the branch itself is kept.
    """
    payload = {key: data[key] for key in BRANCH_COLUMNS if key in data}
    response = get_db().table(Tables.BRANCHES).insert(payload).execute()
    branch = response.data[0]
    logger.info(f"Created branch {branch['id']} ({branch.get('name')})")

    admin_error = None
    if admin_email and admin_password:
        try:
            result = create_branch_admin_user(admin_email, admin_password, branch["id"])
            branch["admin_id"] = result["user_id"]
        except (AuthError, APIError) as exc:
            admin_error = getattr(exc, "message", None) or str(exc)
            logger.warning(f"Branch {branch['id']} created without admin: {admin_error}")

    result = _build_branches([branch])[0]
    result["admin_error"] = admin_error
    return result


def update_branch(branch_id: str, data: dict[str, Any]) -> dict[str, Any]:
    payload = {key: value for key, value in data.items() if key in BRANCH_COLUMNS}
    response = get_db().table(Tables.BRANCHES).update(payload).eq("id", branch_id).execute()
    if not response.data:
        raise NotFoundError("Branch not found")
    logger.info(f"Updated branch {branch_id}")
    return _build_branches(response.data)[0]


def delete_branch(branch_id: str) -> None:
    response = get_db().table(Tables.BRANCHES).delete().eq("id", branch_id).execute()
    if not response.data:
        raise NotFoundError("Branch not found")
    logger.info(f"Deleted branch {branch_id}")
