# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - UUID normalization for queries
# - Coercion of loosely-typed form values before storage
# - Timestamps stamped onto mutated rows
# =============================================================================

import math
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        exercise_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        exercise_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Value Coercion
# =============================================================================

def blank_to_none(value: Any) -> Any:
    """
    Strip strings and turn blank ones into None.

    Non-string values pass through untouched.
    """
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def to_number(value: Any) -> int | float | None:
    """
    Coerce a loosely-typed numeric value.

    Empty strings and None become None. Integral values come back as int,
    everything else as float.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except TypeError:
        raise ValueError(f"Expected a number, got {type(value).__name__}")
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"Expected a finite number, got {value!r}")
    return int(number) if number.is_integer() else number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def macro_split_is_valid(protein: Any, carbs: Any, fat: Any) -> bool:
    """
    Check that a macro split sums to 100 percent.

    The rule only applies when all three percentages are supplied.
    """
    values = [to_number(protein), to_number(carbs), to_number(fat)]
    if any(v is None for v in values):
        return True
    return abs(sum(values) - 100) <= 0.01


# =============================================================================
# Time
# =============================================================================

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (used for updated_at)."""
    return utc_now().isoformat()


def today() -> date:
    """Current UTC calendar date."""
    return utc_now().date()


def parse_datetime(value: str | datetime | date) -> datetime:
    """
    Parse an ISO-8601 timestamp or date.

    A trailing "Z" is accepted. Dates are treated as midnight.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
