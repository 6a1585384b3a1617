"""
Supabase access token validation.

Supabase signs session access tokens with the project's JWT secret (HS256)
and the ``authenticated`` audience. Tokens are verified locally so that a
request does not need a round trip to the auth server.
"""

from __future__ import annotations

from typing import Any

import jwt
from flask import Request, current_app

from washdesk_shared.config import get_active_config
from washdesk_shared.constants import ACCESS_TOKEN_COOKIE

JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"


class JWTError(Exception):
    """Base exception for JWT errors."""

    def __init__(self, message: str, status: int = 401):
        self.message = message
        self.status = status
        super().__init__(message)


class TokenExpiredError(JWTError):
    """Token has expired."""

    def __init__(self):
        super().__init__("Token expired", 401)


class InvalidTokenError(JWTError):
    """Token is invalid or malformed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, 401)


def get_jwt_secret() -> str:
    """Get the Supabase JWT secret from app config or the active config."""
    try:
        secret = current_app.config.get("SUPABASE_JWT_SECRET")
        if secret:
            return secret
    except RuntimeError:
        pass

    secret = get_active_config().supabase_jwt_secret
    if not secret:
        raise RuntimeError("SUPABASE_JWT_SECRET must be configured")
    return secret


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a Supabase access token.

    Raises:
        TokenExpiredError: If the token has expired
        InvalidTokenError: If the signature, audience or subject is invalid
    """
    try:
        payload = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError() from None
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from None

    if not payload.get("sub"):
        raise InvalidTokenError("Token has no subject")
    return payload


def extract_token_from_request(request: Request) -> str | None:
    """
    Extract the access token from the request.

    Checks in order:
    1. Authorization header (Bearer token)
    2. The Supabase access token cookie
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return request.cookies.get(ACCESS_TOKEN_COOKIE)
