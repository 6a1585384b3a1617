"""Cookie-backed UI preferences (theme, locale, sidebar state)."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Response, request

from washdesk_shared.constants import PREFERENCE_MAX_AGE


def get_preference(key: str, allowed: Iterable[str], fallback: str) -> str:
    value = request.cookies.get(key)
    if value is not None and value in set(allowed):
        return value
    return fallback


def set_preference(response: Response, key: str, value: str) -> Response:
    response.set_cookie(key, value, max_age=PREFERENCE_MAX_AGE, path="/", samesite="Lax")
    return response
