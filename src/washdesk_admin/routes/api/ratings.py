"""Branch rating recalculation API."""

from http import HTTPStatus

from flask import Blueprint, jsonify

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import rating_service

ratings_bp = Blueprint("ratings", __name__)


@ratings_bp.post("/ratings/recalculate")
@admin_required
def post_recalculate_all():
    t = get_translator("admin.ratings")
    if not rating_service.update_all_branch_ratings():
        return jsonify(error_response(t("failed"))), HTTPStatus.INTERNAL_SERVER_ERROR
    return jsonify(success_response({"success": True}, t("updated")))


@ratings_bp.post("/ratings/recalculate/<branch_id>")
@admin_required
def post_recalculate_branch(branch_id: str):
    t = get_translator("admin.ratings")
    if not rating_service.update_branch_rating(branch_id):
        return jsonify(error_response(t("failed"))), HTTPStatus.INTERNAL_SERVER_ERROR
    return jsonify(success_response({"branch_id": branch_id}, t("updated")))
