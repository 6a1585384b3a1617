"""Service for managing franchise records."""

from __future__ import annotations

from typing import Any

from washdesk_shared.auth.service import provision_admin
from washdesk_shared.constants import AdminRole, PaymentStatus, Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import serialize_franchise
from washdesk_shared.services import booking_service
from washdesk_shared.supabase.client import get_db
from washdesk_shared.validation import NotFoundError

logger = get_logger(__name__)

FRANCHISE_COLUMNS = ("name", "status", "branches", "washers", "admin_id")


def _admin_names(admin_ids: set[str]) -> dict[str, str]:
    if not admin_ids:
        return {}
    response = (
        get_db().table(Tables.ADMINS).select("id, name").in_("id", sorted(admin_ids)).execute()
    )
    return {row["id"]: row.get("name") for row in response.data or []}


def list_franchises() -> list[dict[str, Any]]:
    response = get_db().table(Tables.FRANCHISES).select("*").order("name").execute()
    rows = response.data or []
    names = _admin_names({row["admin_id"] for row in rows if row.get("admin_id")})
    return [serialize_franchise(row, names.get(row.get("admin_id"))) for row in rows]


def get_franchise(franchise_id: str) -> dict[str, Any] | None:
    response = (
        get_db().table(Tables.FRANCHISES).select("*").eq("id", franchise_id).limit(1).execute()
    )
    if not response.data:
        logger.warning(f"Franchise {franchise_id} not found")
        return None
    row = response.data[0]
    names = _admin_names({row["admin_id"]} if row.get("admin_id") else set())
    return serialize_franchise(row, names.get(row.get("admin_id")))


def create_franchise(
    data: dict[str, Any],
    admin_email: str | None = None,
    admin_password: str | None = None,
    admin_name: str | None = None,
) -> dict[str, Any]:
    """
    Create a franchise, provisioning its admin account first when credentials are given.

    An address that already has an admin account is reused.
    """
    payload = {key: data[key] for key in FRANCHISE_COLUMNS if key in data}
    payload.setdefault("branches", 0)
    payload.setdefault("washers", 0)

    if admin_email and admin_password:
        payload["admin_id"] = provision_admin(
            admin_email,
            admin_password,
            AdminRole.FRANCHISE.value,
            admin_name or data.get("name"),
        )

    response = get_db().table(Tables.FRANCHISES).insert(payload).execute()
    franchise = response.data[0]
    logger.info(f"Created franchise {franchise['id']} ({franchise.get('name')})")
    return get_franchise(franchise["id"]) or serialize_franchise(franchise)


def update_franchise(franchise_id: str, data: dict[str, Any]) -> dict[str, Any]:
    payload = {key: value for key, value in data.items() if key in FRANCHISE_COLUMNS}
    response = get_db().table(Tables.FRANCHISES).update(payload).eq("id", franchise_id).execute()
    if not response.data:
        raise NotFoundError("Franchise not found")
    logger.info(f"Updated franchise {franchise_id}")
    return get_franchise(franchise_id)


def delete_franchise(franchise_id: str) -> None:
    response = get_db().table(Tables.FRANCHISES).delete().eq("id", franchise_id).execute()
    if not response.data:
        raise NotFoundError("Franchise not found")
    logger.info(f"Deleted franchise {franchise_id}")


def franchise_dashboard(franchise_id: str) -> dict[str, Any]:
    """Headline numbers for a franchise: branches, washers, bookings and revenue."""
    db = get_db()
    branches = (
        db.table(Tables.BRANCHES).select("id").eq("franchise_id", franchise_id).execute().data
        or []
    )
    branch_ids = [row["id"] for row in branches]

    washer_count = 0
    revenue = 0.0
    bookings: list[dict[str, Any]] = []
    if branch_ids:
        washers = db.table(Tables.WASHERS).select("id").in_("branch_id", branch_ids).execute()
        washer_count = len(washers.data or [])
        bookings = booking_service.list_bookings(branch_ids)
        booking_ids = [row["id"] for row in bookings]
        if booking_ids:
            payments = (
                db.table(Tables.PAYMENTS)
                .select("amount, status")
                .in_("booking_id", booking_ids)
                .execute()
            )
            revenue = sum(
                float(row.get("amount") or 0)
                for row in payments.data or []
                if row.get("status") == PaymentStatus.SUCCEEDED.value
            )

    return {
        "franchise_id": franchise_id,
        "branches": len(branch_ids),
        "washers": washer_count,
        "bookings": booking_service.booking_summary(bookings),
        "revenue": round(revenue, 2),
    }
