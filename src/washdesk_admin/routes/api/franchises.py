"""
Franchises API.

Franchise admins reach ``/franchises/<id>`` only for their own franchise; the
scope guard enforces that before these views run.
"""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required, general_admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.logging_config import get_logger
from washdesk_shared.schemas import CreateFranchiseRequest, UpdateFranchiseRequest
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import branch_service, franchise_service

franchises_bp = Blueprint("franchises", __name__)
logger = get_logger(__name__)


@franchises_bp.get("/franchises")
@admin_required
def get_franchises():
    return jsonify(success_response(franchise_service.list_franchises()))


@franchises_bp.get("/franchises/<franchise_id>")
@admin_required
def get_franchise(franchise_id: str):
    franchise = franchise_service.get_franchise(franchise_id)
    if franchise is None:
        t = get_translator("admin.franchises")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(franchise))


@franchises_bp.get("/franchises/<franchise_id>/branches")
@admin_required
def get_franchise_branches(franchise_id: str):
    return jsonify(success_response(branch_service.list_branches(franchise_id)))


@franchises_bp.get("/franchises/<franchise_id>/dashboard")
@admin_required
def get_franchise_dashboard(franchise_id: str):
    return jsonify(success_response(franchise_service.franchise_dashboard(franchise_id)))


@franchises_bp.post("/franchises")
@general_admin_required
def post_franchise():
    """
    Create a franchise.

    Body: CreateFranchiseRequest. When ``admin_email`` and ``admin_password``
    are given the franchise admin account is provisioned first.
    """
    payload = request.get_json(silent=True) or {}
    data = CreateFranchiseRequest(**payload).dict()
    admin_email = data.pop("admin_email")
    admin_password = data.pop("admin_password")
    admin_name = data.pop("admin_name")

    franchise = franchise_service.create_franchise(
        data, admin_email=admin_email, admin_password=admin_password, admin_name=admin_name
    )
    t = get_translator("admin.franchises")
    return jsonify(success_response(franchise, t("created"))), HTTPStatus.CREATED


@franchises_bp.put("/franchises/<franchise_id>")
@admin_required
def put_franchise(franchise_id: str):
    payload = request.get_json(silent=True) or {}
    data = UpdateFranchiseRequest(**payload).dict(exclude_unset=True)
    franchise = franchise_service.update_franchise(franchise_id, data)
    t = get_translator("admin.franchises")
    return jsonify(success_response(franchise, t("updated")))


@franchises_bp.delete("/franchises/<franchise_id>")
@general_admin_required
def delete_franchise(franchise_id: str):
    franchise_service.delete_franchise(franchise_id)
    t = get_translator("admin.franchises")
    return jsonify(success_response({"id": franchise_id}, t("deleted")))
