"""Bookings across the admin, franchise and branch dashboards."""

from __future__ import annotations

from typing import Any

from washdesk_shared.constants import BookingStatus, Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import get_db, get_service_db
from washdesk_shared.validation import NotFoundError, validate_choice

logger = get_logger(__name__)

BOOKING_SELECT = "*, branch:branches(name), service:services(name), washer:washers(name)"


def list_bookings(
    branch_ids: list[str] | None = None,
    status: str | None = None,
) -> list[dict[str, Any]]:
    """All bookings, newest first, optionally limited to some branches."""
    if branch_ids is not None and not branch_ids:
        return []

    query = get_db().table(Tables.BOOKINGS).select(BOOKING_SELECT)
    if branch_ids is not None:
        query = query.in_("branch_id", branch_ids)
    if status:
        query = query.eq("status", validate_choice(status, BookingStatus.all_values(), "status"))
    response = query.order("created_at", desc=True).execute()
    return response.data or []


def list_bookings_for_branch(branch_id: str, status: str | None = None) -> list[dict[str, Any]]:
    return list_bookings([branch_id], status)


def list_bookings_for_franchise(franchise_id: str, status: str | None = None):
    branches = (
        get_db().table(Tables.BRANCHES).select("id").eq("franchise_id", franchise_id).execute()
    )
    return list_bookings([row["id"] for row in branches.data or []], status)


def get_booking(booking_id: str) -> dict[str, Any] | None:
    response = (
        get_db()
        .table(Tables.BOOKINGS)
        .select(BOOKING_SELECT)
        .eq("id", booking_id)
        .limit(1)
        .execute()
    )
    return response.data[0] if response.data else None


def update_booking_status(booking_id: str, status: str) -> dict[str, Any]:
    """
    Change a booking's status with the service role.

    Customers own booking rows, so admins cannot update them through RLS.
    """
    validate_choice(status, BookingStatus.all_values(), "status")
    response = (
        get_service_db()
        .table(Tables.BOOKINGS)
        .update({"status": status})
        .eq("id", booking_id)
        .execute()
    )
    if not response.data:
        raise NotFoundError("Booking not found")
    logger.info(f"Booking {booking_id} status set to {status}")
    return response.data[0]


def cancel_booking(booking_id: str) -> dict[str, Any]:
    return update_booking_status(booking_id, BookingStatus.CANCELLED.value)


def booking_summary(bookings: list[dict[str, Any]]) -> dict[str, int]:
    """Counts per status plus the total."""
    summary = {status.value: 0 for status in BookingStatus}
    for booking in bookings:
        status = booking.get("status")
        if status in summary:
            summary[status] += 1
    summary["total"] = len(bookings)
    return summary
