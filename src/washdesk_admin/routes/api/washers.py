"""Washers and weekly schedules API."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.schemas import (
    UpdateWasherRequest,
    UpdateWasherScheduleRequest,
    WasherRequest,
    WasherScheduleRequest,
)
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import washer_service

washers_bp = Blueprint("washers", __name__)


@washers_bp.get("/washers")
@admin_required
def get_washers():
    """
    List washers.

    Query params:
        - branch_id: washers of one branch
        - franchise_id: washers of every branch of a franchise
    """
    franchise_id = request.args.get("franchise_id")
    if franchise_id:
        washers = washer_service.list_washers_for_franchise(franchise_id)
    else:
        washers = washer_service.list_washers(branch_id=request.args.get("branch_id"))
    return jsonify(success_response(washers))


@washers_bp.get("/washers/<washer_id>")
@admin_required
def get_washer(washer_id: str):
    washer = washer_service.get_washer(washer_id)
    if washer is None:
        t = get_translator("admin.washers")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(washer))


@washers_bp.post("/washers")
@admin_required
def post_washer():
    payload = request.get_json(silent=True) or {}
    washer = washer_service.create_washer(WasherRequest(**payload).dict())
    t = get_translator("admin.washers")
    return jsonify(success_response(washer, t("created"))), HTTPStatus.CREATED


@washers_bp.put("/washers/<washer_id>")
@admin_required
def put_washer(washer_id: str):
    payload = request.get_json(silent=True) or {}
    data = UpdateWasherRequest(**payload).dict(exclude_unset=True)
    washer = washer_service.update_washer(washer_id, data)
    t = get_translator("admin.washers")
    return jsonify(success_response(washer, t("updated")))


@washers_bp.delete("/washers/<washer_id>")
@admin_required
def delete_washer(washer_id: str):
    washer_service.delete_washer(washer_id)
    t = get_translator("admin.washers")
    return jsonify(success_response({"id": washer_id}, t("deleted")))


# ==================== SCHEDULES ====================


@washers_bp.get("/washers/<washer_id>/schedules")
@admin_required
def get_washer_schedules(washer_id: str):
    return jsonify(success_response(washer_service.list_schedules(washer_id)))


@washers_bp.post("/schedules")
@admin_required
def post_schedule():
    payload = request.get_json(silent=True) or {}
    schedule = washer_service.create_schedule(WasherScheduleRequest(**payload).dict())
    t = get_translator("admin.schedules")
    return jsonify(success_response(schedule, t("created"))), HTTPStatus.CREATED


@washers_bp.put("/schedules/<schedule_id>")
@admin_required
def put_schedule(schedule_id: str):
    payload = request.get_json(silent=True) or {}
    data = UpdateWasherScheduleRequest(**payload).dict(exclude_unset=True)
    schedule = washer_service.update_schedule(schedule_id, data)
    t = get_translator("admin.schedules")
    return jsonify(success_response(schedule, t("updated")))


@washers_bp.delete("/schedules/<schedule_id>")
@admin_required
def delete_schedule(schedule_id: str):
    washer_service.delete_schedule(schedule_id)
    t = get_translator("admin.schedules")
    return jsonify(success_response({"id": schedule_id}, t("deleted")))
