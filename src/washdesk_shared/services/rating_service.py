"""Branch rating aggregation from customer reviews."""

from __future__ import annotations

from washdesk_shared.constants import Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import QUERY_ERRORS, get_db

logger = get_logger(__name__)


def average_rating(ratings: list[float | int | None]) -> float | None:
    """Mean rounded to 2 decimals, or None if empty. A null rating counts as 0."""
    values = [float(r or 0) for r in ratings]
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def calculate_branch_rating(branch_id: str) -> float | None:
    """
    Average review rating across all bookings of a branch.

    Returns None when the branch has no bookings, the bookings have no
    reviews, or either query fails.
    """
    db = get_db()
    try:
        bookings = db.table(Tables.BOOKINGS).select("id").eq("branch_id", branch_id).execute()
    except QUERY_ERRORS as exc:
        logger.error(f"Error fetching bookings for branch {branch_id}: {exc}")
        return None

    booking_ids = [row["id"] for row in bookings.data or []]
    if not booking_ids:
        return None

    try:
        reviews = db.table(Tables.REVIEWS).select("rating").in_("booking_id", booking_ids).execute()
    except QUERY_ERRORS as exc:
        logger.error(f"Error fetching reviews for branch {branch_id}: {exc}")
        return None

    return average_rating([row.get("rating") for row in reviews.data or []])


def update_branch_rating(branch_id: str) -> bool:
    """Store the recalculated rating (or null) on the branch."""
    rating = calculate_branch_rating(branch_id)
    try:
        get_db().table(Tables.BRANCHES).update({"ratings": rating}).eq("id", branch_id).execute()
    except QUERY_ERRORS as exc:
        logger.error(f"Error updating rating of branch {branch_id}: {exc}")
        return False
    logger.info(f"Branch {branch_id} rating set to {rating}")
    return True


def update_all_branch_ratings() -> bool:
    """Recalculate every branch; True only if every update succeeded."""
    try:
        branches = get_db().table(Tables.BRANCHES).select("id").execute()
    except QUERY_ERRORS as exc:
        logger.error(f"Error fetching branches: {exc}")
        return False

    results = [update_branch_rating(row["id"]) for row in branches.data or []]
    return all(results)
