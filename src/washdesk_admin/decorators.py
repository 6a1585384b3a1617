"""Decorators for route protection based on the caller's admin profile."""

from __future__ import annotations

from functools import wraps
from http import HTTPStatus

from flask import g, jsonify

from washdesk_admin.scope_guard import guard_message
from washdesk_shared.auth.service import get_current_branch_admin_branch_id
from washdesk_shared.constants import AdminRole
from washdesk_shared.i18n import get_translator
from washdesk_shared.jwt_middleware import get_admin_profile, get_current_user
from washdesk_shared.jwt_middleware import get_owned_franchise_id
from washdesk_shared.serializers import error_response


def _unauthenticated():
    return jsonify(error_response(guard_message("loginRequired"))), HTTPStatus.UNAUTHORIZED


def _forbidden(key: str = "adminOnly"):
    return jsonify(error_response(guard_message(key))), HTTPStatus.FORBIDDEN


def role_required(required_roles):
    """
    Decorator factory to require one of the given admin roles.

    Args:
        required_roles: A single role or a collection of roles
    """
    if isinstance(required_roles, (str, AdminRole)):
        required_roles = [required_roles]
    allowed = {getattr(role, "value", role) for role in required_roles}

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not get_current_user():
                return _unauthenticated()
            profile = get_admin_profile()
            if not profile:
                return _forbidden("noProfile")
            if profile.get("role") not in allowed:
                return _forbidden()
            return f(*args, **kwargs)

        return decorated_function

    return decorator


admin_required = role_required([AdminRole.GENERAL, AdminRole.FRANCHISE])
general_admin_required = role_required(AdminRole.GENERAL)


def franchise_admin_required(f):
    """Require a franchise admin who owns a franchise; exposes it as ``g.franchise_id``."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_current_user():
            return _unauthenticated()
        profile = get_admin_profile()
        if not profile:
            return _forbidden("noProfile")
        franchise_id = get_owned_franchise_id()
        if profile.get("role") != AdminRole.FRANCHISE.value or not franchise_id:
            return _forbidden()
        g.franchise_id = franchise_id
        return f(*args, **kwargs)

    return decorated_function


def branch_admin_required(f):
    """Require a branch admin linked to a branch; exposes it as ``g.branch_id``."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_current_user():
            return _unauthenticated()
        profile = get_admin_profile()
        if not profile:
            return _forbidden("noProfile")
        if profile.get("role") != AdminRole.BRANCH.value:
            return _forbidden()
        branch_id = get_current_branch_admin_branch_id()
        if not branch_id:
            t = get_translator("branch")
            return jsonify(error_response(t("noBranch"))), HTTPStatus.FORBIDDEN
        g.branch_id = branch_id
        return f(*args, **kwargs)

    return decorated_function
