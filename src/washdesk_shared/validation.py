"""
Input validation utilities.
"""

import re
from collections.abc import Iterable

from washdesk_shared.constants import TIME_OF_DAY_PATTERN


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


class NotFoundError(Exception):
    """Raised when a requested record does not exist."""

    pass


_TIME_RE = re.compile(TIME_OF_DAY_PATTERN)


def is_time_of_day(value: str) -> bool:
    return bool(value) and bool(_TIME_RE.match(value))


def validate_time_of_day(value: str, field: str = "time") -> str:
    """Validate an ``HH:MM`` string (24h clock)."""
    if not is_time_of_day(value):
        raise ValidationError(f"Invalid {field} format (HH:MM)")
    return value


def validate_choice(value: str, allowed: Iterable[str], field: str) -> str:
    allowed = set(allowed)
    if value not in allowed:
        options = ", ".join(sorted(allowed))
        raise ValidationError(f"Invalid {field} '{value}'. Allowed: {options}")
    return value
