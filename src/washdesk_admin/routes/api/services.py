"""Wash services API (branch-specific and global catalog)."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.schemas import ServiceRequest, UpdateServiceRequest
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import service_catalog_service

services_bp = Blueprint("services", __name__)


@services_bp.get("/services")
@admin_required
def get_services():
    if request.args.get("scope") == "global":
        return jsonify(success_response(service_catalog_service.list_global_services()))
    return jsonify(success_response(service_catalog_service.list_services()))


@services_bp.get("/services/<service_id>")
@admin_required
def get_service(service_id: str):
    service = service_catalog_service.get_service(service_id)
    if service is None:
        t = get_translator("admin.services")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(service))


@services_bp.post("/services")
@admin_required
def post_service():
    payload = request.get_json(silent=True) or {}
    service = service_catalog_service.create_service(ServiceRequest(**payload).dict())
    t = get_translator("admin.services")
    return jsonify(success_response(service, t("created"))), HTTPStatus.CREATED


@services_bp.put("/services/<service_id>")
@admin_required
def put_service(service_id: str):
    payload = request.get_json(silent=True) or {}
    data = UpdateServiceRequest(**payload).dict(exclude_unset=True)
    service = service_catalog_service.update_service(service_id, data)
    t = get_translator("admin.services")
    return jsonify(success_response(service, t("updated")))


@services_bp.delete("/services/<service_id>")
@admin_required
def delete_service(service_id: str):
    """Delete a service. Deleting a global service removes every copy of it."""
    removed = service_catalog_service.delete_service(service_id)
    t = get_translator("admin.services")
    return jsonify(success_response({"id": service_id, "removed": removed}, t("deleted")))
