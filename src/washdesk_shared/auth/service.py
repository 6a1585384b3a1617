"""Authentication against Supabase Auth and admin account provisioning."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client

from washdesk_shared.constants import AdminRole, LoginRole, Tables
from washdesk_shared.jwt_middleware import get_user_id
from washdesk_shared.logging_config import get_logger
from washdesk_shared.supabase.client import SupabaseClients, get_db, get_service_db

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password. Please try again."
AUTH_FAILED = "Authentication failed. Please try again."
AUTH_ERROR = "Authentication error. Please try again."
NOT_AUTHORIZED = "You are not authorized to access this application."
SYSTEM_ERROR = "System error. Please try again later."
GENERAL_ADMIN_ON_FRANCHISE = (
    "You are registered as a general admin. Please use the admin login page."
)
FRANCHISE_ADMIN_ON_ADMIN = (
    "You are registered as a franchise admin. Please use the franchise login page."
)

# Supabase answers repeated sign-ups for the same address with this prefix.
RATE_LIMIT_MESSAGE = "For security purposes, you can only request this after"
ALREADY_REGISTERED = "already been registered"


class AuthError(Exception):
    """Raised when an authentication or authorization error occurs."""

    def __init__(self, message: str, status: HTTPStatus = HTTPStatus.UNAUTHORIZED) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass
class AuthResult:
    user_id: str
    email: str
    role: str
    access_token: str
    refresh_token: str
    expires_in: int | None
    redirect_to: str
    franchise_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role,
            "franchise_id": self.franchise_id,
            "redirect_to": self.redirect_to,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
        }


def resolve_dashboard_path(role: str | None, owns_franchise: bool) -> str:
    """Home page for a user given their admin role."""
    if role == AdminRole.FRANCHISE.value:
        return "/franchise" if owns_franchise else "/admin"
    if role == AdminRole.BRANCH.value:
        return "/branch"
    if role == AdminRole.GENERAL.value:
        return "/admin"
    return "/unauthorized"


def find_owned_franchise_id(user_id: str, client: Client | None = None) -> str | None:
    """Id of the franchise administered by ``user_id``; no rows is not an error."""
    response = (
        (client or get_db())
        .table(Tables.FRANCHISES)
        .select("id")
        .eq("admin_id", user_id)
        .limit(1)
        .execute()
    )
    return response.data[0]["id"] if response.data else None


def find_branch_id_for_admin(user_id: str, client: Client | None = None) -> str | None:
    """
    Branch administered by ``user_id``.

    ``branch_admins`` is authoritative; ``branches.admin_id`` covers accounts
    created before that table existed.
    """
    client = client or get_db()
    response = (
        client.table(Tables.BRANCH_ADMINS)
        .select("branch_id")
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    if response.data:
        return response.data[0]["branch_id"]

    response = (
        client.table(Tables.BRANCHES).select("id").eq("admin_id", user_id).limit(1).execute()
    )
    return response.data[0]["id"] if response.data else None


def _load_admin_profile(client: Client, user_id: str) -> dict[str, Any] | None:
    response = (
        client.table(Tables.ADMINS).select("id, role").eq("id", user_id).limit(1).execute()
    )
    return response.data[0] if response.data else None


def _sign_in(email: str, password: str) -> tuple[Client, Any]:
    if not email or not password:
        raise AuthError("Email and password are required.", HTTPStatus.BAD_REQUEST)

    # one client per login: sign-in stores the session on the client
    client = SupabaseClients.session_client()
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as exc:
        logger.warning(f"Sign in failed for {email}: {exc}")
        raise AuthError(INVALID_CREDENTIALS) from exc

    if not response.user or not response.session:
        raise AuthError(AUTH_FAILED)
    return client, response


def _sign_out(client: Client) -> None:
    try:
        client.auth.sign_out()
    except Exception as exc:
        logger.warning(f"Sign out after rejected login failed: {exc}")


def unified_role_login(email: str, password: str, requested_role: str) -> AuthResult:
    """
    Sign in a general or franchise admin.

    The requested role must agree with whether the account administers a
    franchise; otherwise the session is discarded.
    """
    if requested_role not in {role.value for role in LoginRole}:
        raise AuthError("Invalid role specified.", HTTPStatus.BAD_REQUEST)

    client, response = _sign_in(email, password)
    user = response.user

    try:
        profile = _load_admin_profile(client, user.id)
    except APIError as exc:
        logger.error(f"Admin check error for {user.id}: {exc}")
        _sign_out(client)
        raise AuthError(AUTH_ERROR) from exc

    if not profile:
        logger.info(f"User {user.id} is not registered as an admin")
        _sign_out(client)
        raise AuthError(NOT_AUTHORIZED, HTTPStatus.FORBIDDEN)

    try:
        franchise_id = find_owned_franchise_id(profile["id"], client)
    except APIError as exc:
        logger.error(f"Franchise check error for {user.id}: {exc}")
        _sign_out(client)
        raise AuthError(SYSTEM_ERROR, HTTPStatus.INTERNAL_SERVER_ERROR) from exc

    if requested_role == LoginRole.FRANCHISE.value and not franchise_id:
        _sign_out(client)
        raise AuthError(GENERAL_ADMIN_ON_FRANCHISE, HTTPStatus.FORBIDDEN)
    if requested_role == LoginRole.ADMIN.value and franchise_id:
        _sign_out(client)
        raise AuthError(FRANCHISE_ADMIN_ON_ADMIN, HTTPStatus.FORBIDDEN)

    logger.info(f"Admin {user.id} signed in as {requested_role}")
    session = response.session
    return AuthResult(
        user_id=user.id,
        email=user.email,
        role=profile.get("role") or AdminRole.GENERAL.value,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=getattr(session, "expires_in", None),
        redirect_to="/franchise" if franchise_id else "/admin",
        franchise_id=franchise_id,
    )


def branch_admin_login(email: str, password: str) -> AuthResult:
    """Sign in an admin whose role is ``branch``."""
    client, response = _sign_in(email, password)
    user = response.user

    try:
        profile = _load_admin_profile(client, user.id)
    except APIError as exc:
        logger.error(f"Admin check error for {user.id}: {exc}")
        _sign_out(client)
        raise AuthError(AUTH_ERROR) from exc

    if not profile or profile.get("role") != AdminRole.BRANCH.value:
        _sign_out(client)
        raise AuthError(NOT_AUTHORIZED, HTTPStatus.FORBIDDEN)

    logger.info(f"Branch admin {user.id} signed in")
    session = response.session
    return AuthResult(
        user_id=user.id,
        email=user.email,
        role=AdminRole.BRANCH.value,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=getattr(session, "expires_in", None),
        redirect_to="/branch",
    )


def sign_out_session(access_token: str) -> None:
    """Revoke the refresh tokens behind an access token."""
    try:
        get_service_db().auth.admin.sign_out(access_token)
    except Exception as exc:
        logger.warning(f"Remote sign out failed: {exc}")


def create_admin_user_with_role(
    email: str,
    password: str,
    role: str,
    associated_id: str | None = None,
) -> dict[str, Any]:
    """
    Create a confirmed auth user, its ``admins`` row and the ownership link.

    ``associated_id`` is the franchise id for franchise admins and the branch
    id for branch admins.
    """
    if role not in AdminRole.all_values():
        raise AuthError(f"Invalid role '{role}'", HTTPStatus.BAD_REQUEST)

    client = get_service_db()
    try:
        response = client.auth.admin.create_user(
            {"email": email, "password": password, "email_confirm": True}
        )
    except Exception as exc:
        logger.error(f"Error creating admin user {email}: {exc}")
        raise AuthError(str(exc), HTTPStatus.BAD_REQUEST) from exc

    user_id = response.user.id
    client.table(Tables.ADMINS).insert(
        {"id": user_id, "email": email, "role": role, "name": email.split("@")[0]}
    ).execute()

    if role == AdminRole.FRANCHISE.value and associated_id:
        client.table(Tables.FRANCHISES).update({"admin_id": user_id}).eq(
            "id", associated_id
        ).execute()
    if role == AdminRole.BRANCH.value and associated_id:
        client.table(Tables.BRANCHES).update({"admin_id": user_id}).eq(
            "id", associated_id
        ).execute()

    logger.info(f"Created {role} admin {user_id} ({email})")
    return {"success": True, "user_id": user_id}


def create_branch_admin_user(email: str, password: str, branch_id: str) -> dict[str, Any]:
    """Create a branch admin and register it in ``branch_admins``."""
    result = create_admin_user_with_role(email, password, AdminRole.BRANCH.value, branch_id)
    get_service_db().table(Tables.BRANCH_ADMINS).insert(
        {"user_id": result["user_id"], "branch_id": branch_id}
    ).execute()
    return result


def provision_admin(email: str, password: str, role: str, name: str | None = None) -> str:
    """
    Return the id of an admin account for ``email``, creating it when needed.

    When Supabase refuses the sign-up because the address is already taken or
    the request is rate limited, the existing ``admins`` row is reused.
    """
    client = get_service_db()
    user_id = None
    try:
        response = client.auth.admin.create_user(
            {
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"name": name or email.split("@")[0]},
            }
        )
        user_id = response.user.id
    except Exception as exc:
        message = str(exc)
        if RATE_LIMIT_MESSAGE not in message and ALREADY_REGISTERED not in message:
            logger.error(f"Error creating admin user {email}: {message}")
            raise AuthError(
                f"Error creating admin user: {message}", HTTPStatus.BAD_REQUEST
            ) from exc
        logger.warning(f"Admin user {email} already exists or is rate limited; reusing it")

    existing = client.table(Tables.ADMINS).select("id").eq("email", email).limit(1).execute()
    if existing.data:
        return existing.data[0]["id"]
    if user_id is None:
        raise AuthError("Could not find existing admin record", HTTPStatus.CONFLICT)

    client.table(Tables.ADMINS).insert(
        {"id": user_id, "email": email, "role": role, "name": name or email.split("@")[0]}
    ).execute()
    return user_id


def get_current_branch_admin_branch_id() -> str | None:
    user_id = get_user_id()
    if not user_id:
        return None
    return find_branch_id_for_admin(user_id)
