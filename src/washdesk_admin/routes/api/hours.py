"""Branch opening hours API."""

from datetime import date

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.datetime_utils import parse_date
from washdesk_shared.i18n import get_translator
from washdesk_shared.schemas import BranchHoursRequest
from washdesk_shared.serializers import success_response
from washdesk_shared.services import branch_hours_service
from washdesk_shared.validation import ValidationError

hours_bp = Blueprint("hours", __name__)


def _start_date() -> date | None:
    raw = request.args.get("start")
    if not raw:
        return None
    start = parse_date(raw)
    if start is None:
        raise ValidationError("Invalid start date (YYYY-MM-DD)")
    return start


@hours_bp.get("/branches/<branch_id>/hours")
@admin_required
def get_branch_hours(branch_id: str):
    """
    Opening hours of a branch.

    Query params:
        - range: "week" (default, seven weekly entries) or "two-weeks"
        - start: first day of the two-week range (YYYY-MM-DD)
    """
    if request.args.get("range") == "two-weeks":
        hours = branch_hours_service.hours_for_next_two_weeks(branch_id, _start_date())
    else:
        hours = branch_hours_service.hours_for_week(branch_id)
    return jsonify(success_response(hours))


@hours_bp.get("/branches/<branch_id>/hours/<day>")
@admin_required
def get_branch_hours_for_date(branch_id: str, day: str):
    target = parse_date(day)
    if target is None:
        raise ValidationError("Invalid date (YYYY-MM-DD)")
    return jsonify(success_response(branch_hours_service.hours_for_date(branch_id, target)))


@hours_bp.put("/branch-hours")
@admin_required
def put_branch_hours():
    payload = request.get_json(silent=True) or {}
    hours = branch_hours_service.save_hours(BranchHoursRequest(**payload).dict())
    t = get_translator("admin.hours")
    return jsonify(success_response(hours, t("saved")))


@hours_bp.delete("/branch-hours/<hours_id>")
@admin_required
def delete_branch_hours(hours_id: str):
    closed = branch_hours_service.delete_hours(hours_id, request.args.get("branch_id"))
    t = get_translator("admin.hours")
    return jsonify(success_response(closed or {"id": hours_id}, t("deleted")))
