"""
Role routing guard for the three dashboards.

Every request under ``/admin``, ``/franchise`` or ``/branch`` is checked
against the caller's admin profile before the view runs. Refusals carry a
``redirect_to`` path telling the client where the user belongs.
"""

from __future__ import annotations

import re
from http import HTTPStatus
from typing import TYPE_CHECKING

from flask import jsonify, request

from washdesk_shared.constants import AdminRole
from washdesk_shared.i18n import get_translator
from washdesk_shared.jwt_middleware import (
    get_admin_profile,
    get_current_user,
    get_owned_franchise_id,
)
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import error_response

if TYPE_CHECKING:
    from flask import Flask

logger = get_logger(__name__)

AREAS = ("admin", "franchise", "branch")
LOGIN_PAGES = {area: f"/{area}/login" for area in AREAS}
UNAUTHORIZED_PAGE = "/unauthorized"

_FRANCHISE_PATH_RE = re.compile(r"^/admin/(?:api/)?franchises/([^/]+)")


def extract_area(path: str) -> str | None:
    """
    Dashboard area a path belongs to.

    Examples:
        /admin/api/branches -> "admin"
        /branch -> "branch"
        /auth/login -> None
    """
    first = path.lstrip("/").split("/", 1)[0]
    return first if first in AREAS else None


def is_public(path: str) -> bool:
    return path.rstrip("/") in LOGIN_PAGES.values()


def guard_message(key: str) -> str:
    """Localized text for a refusal key returned by ``evaluate_access``."""
    t = get_translator("guard")
    messages = {
        "loginRequired": t("loginRequired"),
        "noProfile": t("noProfile"),
        "branchOnly": t("branchOnly"),
        "adminOnly": t("adminOnly"),
        "otherFranchise": t("otherFranchise"),
    }
    return messages.get(key, key)


def evaluate_access(
    path: str,
    authenticated: bool,
    role: str | None,
    owned_franchise_id: str | None,
) -> tuple[HTTPStatus, str, str] | None:
    """
    Decide whether a request may proceed.

    Returns None when allowed, else ``(status, message_key, redirect_to)``.
    """
    area = extract_area(path)
    if area is None or is_public(path):
        return None

    if not authenticated:
        return HTTPStatus.UNAUTHORIZED, "loginRequired", LOGIN_PAGES[area]
    if role is None:
        return HTTPStatus.FORBIDDEN, "noProfile", UNAUTHORIZED_PAGE

    if role == AdminRole.BRANCH.value:
        if area != "branch":
            return HTTPStatus.FORBIDDEN, "branchOnly", "/branch"
        return None

    if role == AdminRole.FRANCHISE.value and owned_franchise_id:
        match = _FRANCHISE_PATH_RE.match(path)
        if match and match.group(1) != owned_franchise_id:
            return HTTPStatus.FORBIDDEN, "otherFranchise", "/admin"
        if area == "branch":
            return HTTPStatus.FORBIDDEN, "adminOnly", "/franchise"
        return None

    # general admins, and franchise admins without a franchise
    if area in ("franchise", "branch"):
        return HTTPStatus.FORBIDDEN, "adminOnly", "/admin"
    return None


def apply_scope_guard(app: Flask) -> None:
    """Install the guard as a before_request hook."""

    @app.before_request
    def guard_dashboard_areas():
        if request.method == "OPTIONS" or extract_area(request.path) is None:
            return None

        authenticated = get_current_user() is not None
        profile = get_admin_profile() if authenticated else None
        role = profile.get("role") if profile else None
        owned = None
        if role == AdminRole.FRANCHISE.value:
            owned = get_owned_franchise_id()

        decision = evaluate_access(request.path, authenticated, role, owned)
        if decision is None:
            return None

        status, message_key, redirect_to = decision
        logger.warning(
            f"Scope guard refused {request.method} {request.path} "
            f"(role={role}, status={int(status)}, redirect_to={redirect_to})"
        )
        body = error_response(guard_message(message_key))
        body["redirect_to"] = redirect_to
        return jsonify(body), status
