"""Customer reviews of completed bookings."""

from __future__ import annotations

from typing import Any

from washdesk_shared.constants import Tables
from washdesk_shared.supabase.client import get_db

REVIEW_SELECT = "*, booking:bookings(id, date, branch_id, branch:branches(name))"


def _flatten(row: dict[str, Any]) -> dict[str, Any]:
    booking = row.get("booking") or {}
    branch = booking.get("branch") or {}
    return {
        "id": row.get("id"),
        "booking_id": row.get("booking_id"),
        "user_id": row.get("user_id"),
        "rating": row.get("rating"),
        "comment": row.get("comment"),
        "booking_date": booking.get("date"),
        "branch_id": booking.get("branch_id"),
        "branch_name": branch.get("name", "N/A"),
        "created_at": row.get("created_at"),
    }


def list_reviews(branch_ids: list[str] | None = None) -> list[dict[str, Any]]:
    """Reviews with booking and branch info, newest first."""
    response = (
        get_db()
        .table(Tables.REVIEWS)
        .select(REVIEW_SELECT)
        .order("created_at", desc=True)
        .execute()
    )
    reviews = [_flatten(row) for row in response.data or []]
    if branch_ids is not None:
        reviews = [review for review in reviews if review["branch_id"] in branch_ids]
    return reviews
