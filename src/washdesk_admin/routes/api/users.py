"""Admin users API."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import general_admin_required
from washdesk_shared.auth.service import create_admin_user_with_role, create_branch_admin_user
from washdesk_shared.constants import AdminRole
from washdesk_shared.i18n import get_translator
from washdesk_shared.logging_config import get_logger
from washdesk_shared.schemas import CreateAdminUserRequest, UpdateAdminUserRequest
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import user_service

users_bp = Blueprint("users", __name__)
logger = get_logger(__name__)


@users_bp.get("/users")
@general_admin_required
def get_users():
    return jsonify(success_response(user_service.list_admins(request.args.get("role"))))


@users_bp.get("/users/<user_id>")
@general_admin_required
def get_user(user_id: str):
    admin = user_service.get_admin(user_id)
    if admin is None:
        t = get_translator("admin.users")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(admin))


@users_bp.post("/users")
@general_admin_required
def post_user():
    """
    Create a confirmed admin account.

    Body: CreateAdminUserRequest. ``associated_id`` is the franchise or the
    branch the new admin runs.
    """
    payload = request.get_json(silent=True) or {}
    user_data = CreateAdminUserRequest(**payload)
    if user_data.role == AdminRole.BRANCH.value and user_data.associated_id:
        result = create_branch_admin_user(
            user_data.email, user_data.password, user_data.associated_id
        )
    else:
        result = create_admin_user_with_role(
            user_data.email, user_data.password, user_data.role, user_data.associated_id
        )
    t = get_translator("admin.users")
    return jsonify(success_response(result, t("created"))), HTTPStatus.CREATED


@users_bp.put("/users/<user_id>")
@general_admin_required
def put_user(user_id: str):
    payload = request.get_json(silent=True) or {}
    data = UpdateAdminUserRequest(**payload).dict(exclude_unset=True)
    admin = user_service.update_admin(user_id, data)
    t = get_translator("admin.users")
    return jsonify(success_response(admin, t("updated")))
