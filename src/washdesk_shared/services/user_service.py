"""Admin accounts, as stored in the ``admins`` table."""

from __future__ import annotations

from typing import Any

from washdesk_shared.constants import AdminRole, Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import get_db
from washdesk_shared.validation import NotFoundError, validate_choice

logger = get_logger(__name__)

ADMIN_COLUMNS = "id, email, name, role, created_at"


def list_admins(role: str | None = None) -> list[dict[str, Any]]:
    query = get_db().table(Tables.ADMINS).select(ADMIN_COLUMNS)
    if role:
        query = query.eq("role", validate_choice(role, AdminRole.all_values(), "role"))
    return query.order("created_at", desc=True).execute().data or []


def get_admin(admin_id: str) -> dict[str, Any] | None:
    response = get_db().table(Tables.ADMINS).select(ADMIN_COLUMNS).eq("id", admin_id).execute()
    return response.data[0] if response.data else None


def update_admin(admin_id: str, data: dict[str, Any]) -> dict[str, Any]:
    if data.get("role") is not None:
        validate_choice(data["role"], AdminRole.all_values(), "role")
    response = get_db().table(Tables.ADMINS).update(data).eq("id", admin_id).execute()
    if not response.data:
        raise NotFoundError("Admin not found")
    logger.info(f"Updated admin {admin_id}: {sorted(data)}")
    return response.data[0]
