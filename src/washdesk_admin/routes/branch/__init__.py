"""
Branch dashboard API, mounted at ``/branch/api``.

Views operate on the branch linked to the signed-in branch admin
(``g.branch_id``).
"""

from http import HTTPStatus

from flask import Blueprint, g, jsonify, request

from washdesk_admin.decorators import branch_admin_required
from washdesk_shared.datetime_utils import parse_date
from washdesk_shared.i18n import get_translator
from washdesk_shared.schemas import (
    BookingStatusRequest,
    BranchHoursRequest,
    UpdateWasherRequest,
    UpdateWasherScheduleRequest,
    WasherRequest,
    WasherScheduleRequest,
)
from washdesk_shared.serializers import success_response
from washdesk_shared.services import (
    booking_service,
    branch_hours_service,
    branch_service,
    service_catalog_service,
    washer_service,
)
from washdesk_shared.validation import NotFoundError, ValidationError

branch_api_bp = Blueprint("branch_api", __name__)


def _require_washer(washer_id: str) -> dict:
    washer = washer_service.get_washer(washer_id)
    if washer is None or washer.get("branch_id") != g.branch_id:
        raise NotFoundError("Washer not found")
    return washer


def _require_hours(hours_id: str | None) -> None:
    if not hours_id or branch_hours_service.is_default_id(hours_id):
        return
    row = branch_hours_service.get_hours(hours_id)
    if row is None or row.get("branch_id") != g.branch_id:
        raise NotFoundError("Branch hours not found")


def _require_schedule(schedule_id: str) -> dict:
    schedule = washer_service.get_schedule(schedule_id)
    if schedule is None:
        raise NotFoundError("Schedule not found")
    _require_washer(schedule["washer_id"])
    return schedule


@branch_api_bp.get("/branch")
@branch_admin_required
def get_own_branch():
    return jsonify(success_response(branch_service.get_branch(g.branch_id)))


@branch_api_bp.get("/services")
@branch_admin_required
def get_services():
    return jsonify(success_response(service_catalog_service.list_services_for_branch(g.branch_id)))


# ==================== BOOKINGS ====================


@branch_api_bp.get("/bookings")
@branch_admin_required
def get_bookings():
    bookings = booking_service.list_bookings_for_branch(g.branch_id, request.args.get("status"))
    return jsonify(
        success_response(
            {"bookings": bookings, "summary": booking_service.booking_summary(bookings)}
        )
    )


@branch_api_bp.put("/bookings/<booking_id>/status")
@branch_admin_required
def put_booking_status(booking_id: str):
    booking = booking_service.get_booking(booking_id)
    if booking is None or booking.get("branch_id") != g.branch_id:
        raise NotFoundError("Booking not found")

    payload = request.get_json(silent=True) or {}
    status = BookingStatusRequest(**payload).status
    updated = booking_service.update_booking_status(booking_id, status)
    t = get_translator("admin.bookings")
    return jsonify(success_response(updated, t("statusUpdated")))


# ==================== WASHERS ====================


@branch_api_bp.get("/washers")
@branch_admin_required
def get_washers():
    return jsonify(success_response(washer_service.list_washers(branch_id=g.branch_id)))


@branch_api_bp.post("/washers")
@branch_admin_required
def post_washer():
    payload = request.get_json(silent=True) or {}
    payload["branch_id"] = g.branch_id
    washer = washer_service.create_washer(WasherRequest(**payload).dict())
    t = get_translator("admin.washers")
    return jsonify(success_response(washer, t("created"))), HTTPStatus.CREATED


@branch_api_bp.put("/washers/<washer_id>")
@branch_admin_required
def put_washer(washer_id: str):
    _require_washer(washer_id)
    payload = request.get_json(silent=True) or {}
    data = UpdateWasherRequest(**payload).dict(exclude_unset=True)
    data.pop("branch_id", None)
    washer = washer_service.update_washer(washer_id, data)
    t = get_translator("admin.washers")
    return jsonify(success_response(washer, t("updated")))


@branch_api_bp.delete("/washers/<washer_id>")
@branch_admin_required
def delete_washer(washer_id: str):
    _require_washer(washer_id)
    washer_service.delete_washer(washer_id)
    t = get_translator("admin.washers")
    return jsonify(success_response({"id": washer_id}, t("deleted")))


@branch_api_bp.get("/washers/<washer_id>/schedules")
@branch_admin_required
def get_washer_schedules(washer_id: str):
    _require_washer(washer_id)
    return jsonify(success_response(washer_service.list_schedules(washer_id)))


@branch_api_bp.post("/schedules")
@branch_admin_required
def post_schedule():
    payload = request.get_json(silent=True) or {}
    data = WasherScheduleRequest(**payload).dict()
    _require_washer(data["washer_id"])
    schedule = washer_service.create_schedule(data)
    t = get_translator("admin.schedules")
    return jsonify(success_response(schedule, t("created"))), HTTPStatus.CREATED


@branch_api_bp.put("/schedules/<schedule_id>")
@branch_admin_required
def put_schedule(schedule_id: str):
    _require_schedule(schedule_id)
    payload = request.get_json(silent=True) or {}
    data = UpdateWasherScheduleRequest(**payload).dict(exclude_unset=True)
    schedule = washer_service.update_schedule(schedule_id, data)
    t = get_translator("admin.schedules")
    return jsonify(success_response(schedule, t("updated")))


@branch_api_bp.delete("/schedules/<schedule_id>")
@branch_admin_required
def delete_schedule(schedule_id: str):
    _require_schedule(schedule_id)
    washer_service.delete_schedule(schedule_id)
    t = get_translator("admin.schedules")
    return jsonify(success_response({"id": schedule_id}, t("deleted")))


# ==================== HOURS ====================


@branch_api_bp.get("/hours")
@branch_admin_required
def get_hours():
    """
    Opening hours of the branch.

    Query params:
        - range: "week" (default) or "two-weeks"
        - start: first day of the two-week range (YYYY-MM-DD)
    """
    if request.args.get("range") == "two-weeks":
        start = None
        if request.args.get("start"):
            start = parse_date(request.args["start"])
            if start is None:
                raise ValidationError("Invalid start date (YYYY-MM-DD)")
        hours = branch_hours_service.hours_for_next_two_weeks(g.branch_id, start)
    else:
        hours = branch_hours_service.hours_for_week(g.branch_id)
    return jsonify(success_response(hours))


@branch_api_bp.put("/hours")
@branch_admin_required
def put_hours():
    payload = request.get_json(silent=True) or {}
    _require_hours(payload.get("id"))
    payload["branch_id"] = g.branch_id
    hours = branch_hours_service.save_hours(BranchHoursRequest(**payload).dict())
    t = get_translator("admin.hours")
    return jsonify(success_response(hours, t("saved")))


@branch_api_bp.delete("/hours/<hours_id>")
@branch_admin_required
def delete_hours(hours_id: str):
    _require_hours(hours_id)
    closed = branch_hours_service.delete_hours(hours_id, g.branch_id)
    t = get_translator("admin.hours")
    return jsonify(success_response(closed or {"id": hours_id}, t("deleted")))
