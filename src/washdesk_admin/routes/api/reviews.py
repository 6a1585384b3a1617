"""Reviews API."""

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.serializers import success_response
from washdesk_shared.services import branch_service, review_service

reviews_bp = Blueprint("reviews", __name__)


@reviews_bp.get("/reviews")
@admin_required
def get_reviews():
    franchise_id = request.args.get("franchise_id")
    branch_ids = branch_service.list_branch_ids(franchise_id) if franchise_id else None
    return jsonify(success_response(review_service.list_reviews(branch_ids)))
