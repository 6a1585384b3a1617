"""
Message catalogs for the dashboards (English and Arabic).

Catalogs are nested JSON objects under ``messages/<locale>.json``. A
translator is bound to a namespace: the key ``title`` resolves to
``<namespace>.title`` while a dotted key such as ``errors.notFound`` is
looked up as written.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any

from flask import has_request_context, request

from washdesk_shared.config import get_active_config
from washdesk_shared.constants import LOCALE_COOKIE, SUPPORTED_LOCALES

MESSAGES_DIR = Path(__file__).resolve().parent / "messages"
FALLBACK_LOCALE = "en"

_PARAM_RE = re.compile(r"\{(\w+)\}")


@lru_cache(maxsize=None)
def load_messages(locale: str) -> dict[str, Any]:
    path = MESSAGES_DIR / f"{locale}.json"
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def lookup(messages: dict[str, Any], key: str) -> str | None:
    node: Any = messages
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def qualify(namespace: str | None, key: str) -> str:
    if "." in key or not namespace:
        return key
    return f"{namespace}.{key}"


def interpolate(message: str, params: dict[str, Any]) -> str:
    return _PARAM_RE.sub(lambda m: str(params.get(m.group(1), m.group(0))), message)


def resolve_locale() -> str:
    """Locale cookie, then Accept-Language, then the configured default."""
    default = get_active_config().default_locale
    if default not in SUPPORTED_LOCALES:
        default = FALLBACK_LOCALE
    if not has_request_context():
        return default

    cookie = request.cookies.get(LOCALE_COOKIE)
    if cookie in SUPPORTED_LOCALES:
        return cookie
    return request.accept_languages.best_match(SUPPORTED_LOCALES) or default


def translate(key: str, locale: str | None = None, **params: Any) -> str:
    locale = locale or resolve_locale()
    message = lookup(load_messages(locale), key)
    if message is None and locale != FALLBACK_LOCALE:
        message = lookup(load_messages(FALLBACK_LOCALE), key)
    if message is None:
        return key
    return interpolate(message, params)


def get_translator(namespace: str | None = None, locale: str | None = None) -> Callable[..., str]:
    """Return ``t(key, **params)`` bound to ``namespace``."""

    def t(key: str, **params: Any) -> str:
        return translate(qualify(namespace, key), locale, **params)

    return t
