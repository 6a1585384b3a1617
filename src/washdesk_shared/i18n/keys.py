"""
Consistency checks between the message catalogs and the code that uses them.

Used keys are the string literals passed to translators in Python sources.
Within a file, a key without a dot belongs to the namespace of the nearest
``get_translator`` call above it.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from washdesk_shared.i18n import MESSAGES_DIR
from washdesk_shared.logging_config import get_logger

logger = get_logger(__name__)

LOCALES = ("en", "ar")
PLACEHOLDER_PREFIX = {"en": "[MISSING]", "ar": "[MISSING_AR]"}

_NAMESPACE_RE = re.compile(r"get_translator\(\s*[\"']([^\"']*)[\"']")
_KEY_RE = re.compile(r"(?<![A-Za-z0-9_])t\(\s*[\"']([^\"']+)[\"']")
_SKIPPED_KEYS = {"*", ","}
_DUPLICATE_BRACE_RE = re.compile(r"\}\s*\}\s*$")


def is_extractable(key: str) -> bool:
    if key in _SKIPPED_KEYS or key.startswith("./") or key.startswith("/"):
        return False
    return "{" not in key and "}" not in key


def extract_keys_from_source(source: str) -> set[str]:
    """Fully qualified translation keys used in one source text."""
    namespaces = [(m.start(), m.group(1)) for m in _NAMESPACE_RE.finditer(source)]
    keys = set()
    for match in _KEY_RE.finditer(source):
        key = match.group(1)
        if not is_extractable(key):
            continue
        namespace = None
        for position, name in namespaces:
            if position > match.start():
                break
            namespace = name
        if namespace and "." not in key:
            keys.add(f"{namespace}.{key}")
        else:
            keys.add(key)
    return keys


def extract_used_keys(roots: Iterable[Path]) -> list[str]:
    used: set[str] = set()
    files = 0
    for root in roots:
        if not Path(root).is_dir():
            continue
        for path in sorted(Path(root).rglob("*.py")):
            files += 1
            used |= extract_keys_from_source(path.read_text(encoding="utf-8"))
    logger.info(f"Scanned {files} source files, found {len(used)} keys")
    return sorted(used)


def flatten(messages: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in messages.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten(value, path))
        else:
            flat[path] = value
    return flat


def catalog_path(locale: str, messages_dir: Path = MESSAGES_DIR) -> Path:
    return Path(messages_dir) / f"{locale}.json"


def read_catalog(locale: str, messages_dir: Path = MESSAGES_DIR) -> dict[str, Any]:
    with catalog_path(locale, messages_dir).open(encoding="utf-8") as handle:
        return json.load(handle)


def write_catalog(locale: str, messages: dict[str, Any], messages_dir: Path = MESSAGES_DIR):
    text = json.dumps(messages, ensure_ascii=False, indent=2) + "\n"
    catalog_path(locale, messages_dir).write_text(text, encoding="utf-8")


def defined_keys(messages_dir: Path = MESSAGES_DIR) -> dict[str, list[str]]:
    return {locale: sorted(flatten(read_catalog(locale, messages_dir))) for locale in LOCALES}


def compare_keys(used: list[str], defined: dict[str, list[str]]) -> dict[str, Any]:
    """Missing keys per locale, and defined keys nothing uses."""
    used_set = set(used)
    return {
        "summary": {
            "used": len(used),
            **{f"defined_{locale}": len(keys) for locale, keys in defined.items()},
        },
        "missing": {
            locale: sorted(used_set - set(keys)) for locale, keys in defined.items()
        },
        "unused": {
            locale: sorted(set(keys) - used_set) for locale, keys in defined.items()
        },
    }


def has_key(messages: dict[str, Any], key: str) -> bool:
    node: Any = messages
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False
        node = node[part]
    return True


def set_key(messages: dict[str, Any], key: str, value: Any) -> None:
    parts = key.split(".")
    node = messages
    for part in parts[:-1]:
        if not isinstance(node.get(part), dict):
            node[part] = {}
        node = node[part]
    node[parts[-1]] = value


def remove_key(messages: dict[str, Any], key: str) -> bool:
    """Delete ``key`` and any parents it leaves empty."""
    parts = key.split(".")
    trail = [messages]
    for part in parts[:-1]:
        child = trail[-1].get(part)
        if not isinstance(child, dict):
            return False
        trail.append(child)
    if parts[-1] not in trail[-1]:
        return False
    del trail[-1][parts[-1]]
    for depth in range(len(parts) - 1, 0, -1):
        if trail[depth]:
            break
        del trail[depth - 1][parts[depth - 1]]
    return True


def add_missing_keys(
    messages: dict[str, Any], missing: Iterable[str], locale: str
) -> list[str]:
    """Insert placeholders for ``missing`` keys; returns the keys actually added."""
    prefix = PLACEHOLDER_PREFIX.get(locale, PLACEHOLDER_PREFIX["en"])
    added = []
    for key in missing:
        if has_key(messages, key):
            continue
        set_key(messages, key, f"{prefix} {key}")
        added.append(key)
    return added


def remove_unused_keys(messages: dict[str, Any], unused: Iterable[str]) -> list[str]:
    return [key for key in unused if remove_key(messages, key)]


def repair_catalog_text(text: str) -> dict[str, Any]:
    """
    Parse catalog text, dropping a duplicated closing brace at the end.

    Valid JSON is returned untouched.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        repaired = _DUPLICATE_BRACE_RE.sub("}", text.rstrip())
        return json.loads(repaired)


def fix_catalog(locale: str, messages_dir: Path = MESSAGES_DIR) -> dict[str, Any]:
    text = catalog_path(locale, messages_dir).read_text(encoding="utf-8")
    messages = repair_catalog_text(text)
    write_catalog(locale, messages, messages_dir)
    return messages
