"""
Auth routes: sign-in for the three dashboards, sign-out and UI preferences.

Sessions are Supabase sessions. The access and refresh tokens are returned in
the body and also set as HTTP-only cookies for browser clients.
"""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, make_response, request

from washdesk_shared.auth.service import (
    branch_admin_login,
    resolve_dashboard_path,
    sign_out_session,
    unified_role_login,
)
from washdesk_shared.constants import (
    ACCESS_TOKEN_COOKIE,
    LOCALE_COOKIE,
    REFRESH_TOKEN_COOKIE,
    SUPPORTED_LOCALES,
)
from washdesk_shared.i18n import get_translator, resolve_locale
from washdesk_shared.jwt_middleware import (
    get_admin_profile,
    get_owned_franchise_id,
    jwt_required,
)
from washdesk_shared.jwt_service import extract_token_from_request
from washdesk_shared.logging_config import get_logger
from washdesk_shared.preferences import get_preference, set_preference
from washdesk_shared.schemas import BranchLoginRequest, LoginRequest, PreferenceRequest
from washdesk_shared.serializers import error_response, success_response

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")
logger = get_logger(__name__)

PREFERENCES = {
    LOCALE_COOKIE: SUPPORTED_LOCALES,
    "theme": ("light", "dark", "system"),
    "sidebar_state": ("expanded", "collapsed"),
}
PREFERENCE_DEFAULTS = {"theme": "system", "sidebar_state": "expanded"}


def _session_response(result):
    response = make_response(jsonify(success_response(result.to_dict())))
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        result.access_token,
        httponly=True,
        secure=request.is_secure,
        samesite="Lax",
        max_age=result.expires_in or 3600,
        path="/",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        result.refresh_token,
        httponly=True,
        secure=request.is_secure,
        samesite="Lax",
        max_age=604800,  # 7 days
        path="/",
    )
    return response


@auth_bp.post("/login")
def post_login():
    """
    Sign in a general or franchise admin.

    Body:
        {"email": str, "password": str, "role": "admin" | "franchise"}

    The role must match the account: a franchise owner is refused on the
    admin login and vice versa.
    """
    payload = request.get_json(silent=True) or {}
    login_data = LoginRequest(**payload)
    result = unified_role_login(login_data.email, login_data.password, login_data.role)
    return _session_response(result)


@auth_bp.post("/branch-login")
def post_branch_login():
    payload = request.get_json(silent=True) or {}
    login_data = BranchLoginRequest(**payload)
    result = branch_admin_login(login_data.email, login_data.password)
    return _session_response(result)


@auth_bp.post("/logout")
def post_logout():
    token = extract_token_from_request(request)
    if token:
        sign_out_session(token)

    t = get_translator("auth")
    response = make_response(jsonify(success_response({"success": True}, t("loggedOut"))))
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(REFRESH_TOKEN_COOKIE, path="/")
    return response


@auth_bp.get("/me")
@jwt_required
def get_me():
    """Current admin profile with the dashboard the user belongs to."""
    profile = get_admin_profile()
    if not profile:
        t = get_translator("guard")
        body = error_response(t("noProfile"))
        body["redirect_to"] = "/unauthorized"
        return jsonify(body), HTTPStatus.FORBIDDEN

    franchise_id = get_owned_franchise_id()
    return jsonify(
        success_response(
            {
                **profile,
                "franchise_id": franchise_id,
                "redirect_to": resolve_dashboard_path(profile.get("role"), bool(franchise_id)),
            }
        )
    )


@auth_bp.get("/preferences")
def get_preferences():
    values = {
        key: get_preference(key, allowed, PREFERENCE_DEFAULTS.get(key, allowed[0]))
        for key, allowed in PREFERENCES.items()
    }
    values[LOCALE_COOKIE] = resolve_locale()
    return jsonify(success_response(values))


@auth_bp.post("/preferences")
def post_preference():
    payload = request.get_json(silent=True) or {}
    preference = PreferenceRequest(**payload)

    allowed = PREFERENCES.get(preference.key)
    if allowed is None or preference.value not in allowed:
        t = get_translator("errors")
        return jsonify(
            error_response(t("invalidPreference", key=preference.key))
        ), HTTPStatus.BAD_REQUEST

    t = get_translator("auth")
    response = make_response(
        jsonify(success_response({preference.key: preference.value}, t("preferenceSaved")))
    )
    return set_preference(response, preference.key, preference.value)
