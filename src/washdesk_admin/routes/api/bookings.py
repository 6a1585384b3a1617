"""Bookings API."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.logging_config import get_logger
from washdesk_shared.schemas import BookingStatusRequest
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import booking_service

bookings_bp = Blueprint("bookings", __name__)
logger = get_logger(__name__)


@bookings_bp.get("/bookings")
@admin_required
def get_bookings():
    """
    List bookings, newest first.

    Query params:
        - branch_id / franchise_id: scope to a branch or a franchise
        - status: pending, in-progress, completed or cancelled
    """
    status = request.args.get("status")
    branch_id = request.args.get("branch_id")
    franchise_id = request.args.get("franchise_id")

    if branch_id:
        bookings = booking_service.list_bookings_for_branch(branch_id, status)
    elif franchise_id:
        bookings = booking_service.list_bookings_for_franchise(franchise_id, status)
    else:
        bookings = booking_service.list_bookings(status=status)

    return jsonify(
        success_response(
            {"bookings": bookings, "summary": booking_service.booking_summary(bookings)}
        )
    )


@bookings_bp.get("/bookings/<booking_id>")
@admin_required
def get_booking(booking_id: str):
    booking = booking_service.get_booking(booking_id)
    if booking is None:
        t = get_translator("admin.bookings")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(booking))


@bookings_bp.put("/bookings/<booking_id>/status")
@admin_required
def put_booking_status(booking_id: str):
    payload = request.get_json(silent=True) or {}
    status = BookingStatusRequest(**payload).status
    booking = booking_service.update_booking_status(booking_id, status)
    t = get_translator("admin.bookings")
    return jsonify(success_response(booking, t("statusUpdated")))


@bookings_bp.post("/bookings/<booking_id>/cancel")
@admin_required
def post_cancel_booking(booking_id: str):
    booking = booking_service.cancel_booking(booking_id)
    t = get_translator("admin.bookings")
    return jsonify(success_response(booking, t("cancelled")))
