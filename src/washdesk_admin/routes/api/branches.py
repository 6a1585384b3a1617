"""Branches API."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.logging_config import get_logger
from washdesk_shared.schemas import CreateBranchRequest, UpdateBranchRequest
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import branch_service, service_catalog_service

branches_bp = Blueprint("branches", __name__)
logger = get_logger(__name__)


@branches_bp.get("/branches")
@admin_required
def get_branches():
    """
    List branches with franchise name and services.

    Query params:
        - franchise_id: only the branches of one franchise
    """
    franchise_id = request.args.get("franchise_id")
    return jsonify(success_response(branch_service.list_branches(franchise_id)))


@branches_bp.get("/branches/<branch_id>")
@admin_required
def get_branch(branch_id: str):
    branch = branch_service.get_branch(branch_id)
    if branch is None:
        t = get_translator("admin.branches")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(branch))


@branches_bp.get("/branches/<branch_id>/services")
@admin_required
def get_branch_services(branch_id: str):
    return jsonify(success_response(service_catalog_service.list_services_for_branch(branch_id)))


@branches_bp.post("/branches")
@admin_required
def post_branch():
    payload = request.get_json(silent=True) or {}
    data = CreateBranchRequest(**payload).dict()
    admin_email = data.pop("admin_email")
    admin_password = data.pop("admin_password")

    branch = branch_service.create_branch(data, admin_email, admin_password)
    t = get_translator("admin.branches")
    if branch.get("admin_error"):
        message = t("adminNotCreated", error=branch["admin_error"])
    else:
        message = t("created")
    return jsonify(success_response(branch, message)), HTTPStatus.CREATED


@branches_bp.put("/branches/<branch_id>")
@admin_required
def put_branch(branch_id: str):
    payload = request.get_json(silent=True) or {}
    data = UpdateBranchRequest(**payload).dict(exclude_unset=True)
    branch = branch_service.update_branch(branch_id, data)
    t = get_translator("admin.branches")
    return jsonify(success_response(branch, t("updated")))


@branches_bp.delete("/branches/<branch_id>")
@admin_required
def delete_branch(branch_id: str):
    branch_service.delete_branch(branch_id)
    t = get_translator("admin.branches")
    return jsonify(success_response({"id": branch_id}, t("deleted")))
