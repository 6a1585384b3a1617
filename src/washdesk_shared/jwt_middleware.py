"""
JWT middleware for Flask.

Loads the Supabase session from the request and exposes the caller's admin
profile to route decorators and the role guard.
"""

from __future__ import annotations

from functools import wraps
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from flask import g, jsonify, request

from washdesk_shared.constants import Tables
from washdesk_shared.jwt_service import (
    InvalidTokenError,
    TokenExpiredError,
    decode_token,
    extract_token_from_request,
)
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import error_response

if TYPE_CHECKING:
    from flask import Flask


logger = get_logger(__name__)

_UNSET = object()


def init_jwt_middleware(app: Flask) -> None:
    """
    Initialize JWT middleware for a Flask app.

    Sets up a before_request handler that validates the access token and
    stores the claims in ``g.current_user``.
    """

    @app.before_request
    def load_jwt_user():
        g.current_user = None
        g.jwt_token = None
        g.admin_profile = _UNSET
        g.owned_franchise_id = _UNSET

        token = extract_token_from_request(request)
        if not token:
            return

        try:
            g.current_user = decode_token(token)
            g.jwt_token = token
        except TokenExpiredError:
            logger.debug(f"Expired token on {request.path}")
        except InvalidTokenError as e:
            logger.warning(f"Invalid token on {request.path}: {e}")


def get_current_user() -> dict[str, Any] | None:
    """Claims of the authenticated user, or None."""
    return getattr(g, "current_user", None)


def get_user_id() -> str | None:
    user = get_current_user()
    return user.get("sub") if user else None


def get_admin_profile() -> dict[str, Any] | None:
    """
    Return the caller's row from ``admins`` (id, email, name, role).

    Looked up once per request. None when the user is anonymous or has no
    admin profile.
    """
    cached = getattr(g, "admin_profile", _UNSET)
    if cached is not _UNSET:
        return cached

    profile = None
    user_id = get_user_id()
    if user_id:
        from washdesk_shared.supabase.client import get_db

        response = (
            get_db()
            .table(Tables.ADMINS)
            .select("id, email, name, role")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        profile = response.data[0] if response.data else None
    g.admin_profile = profile
    return profile


def get_owned_franchise_id() -> str | None:
    """Id of the franchise whose ``admin_id`` is the caller, cached per request."""
    cached = getattr(g, "owned_franchise_id", _UNSET)
    if cached is not _UNSET:
        return cached

    from washdesk_shared.auth.service import find_owned_franchise_id

    user_id = get_user_id()
    franchise_id = find_owned_franchise_id(user_id) if user_id else None
    g.owned_franchise_id = franchise_id
    return franchise_id


def jwt_required(f):
    """
    Decorator to require a valid access token for a route.

    Returns 401 if no valid token present.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_current_user():
            return jsonify(error_response("Authentication required")), HTTPStatus.UNAUTHORIZED
        return f(*args, **kwargs)

    return decorated_function
