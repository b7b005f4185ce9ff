"""Input coercion shared by the console services."""
from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional

ACTIVE_STATUSES: tuple[str, ...] = ("active", "inactive")


def require_text(data: Mapping[str, object], key: str, label: str | None = None) -> str:
    """Return a stripped, non-empty string or raise ``ValueError``."""

    value = optional_text(data, key)
    if not value:
        raise ValueError(f"{label or key.replace('_', ' ').capitalize()} is required")
    return value


def optional_text(data: Mapping[str, object], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_date(value: object, *, field: str) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise ValueError(f"{field} must be an ISO date (YYYY-MM-DD)") from exc
    raise ValueError(f"{field} must be an ISO date (YYYY-MM-DD)")


def coerce_number(value: object, *, field: str, minimum: float | None = None) -> float:
    if value in (None, ""):
        raise ValueError(f"{field} is required")
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field} must be a number") from exc
    if minimum is not None and number < minimum:
        raise ValueError(f"{field} must be at least {minimum:g}")
    return number


def coerce_positive(value: object, *, field: str) -> float:
    number = coerce_number(value, field=field)
    if number <= 0:
        raise ValueError(f"{field} must be greater than zero")
    return number


def coerce_count(value: object, *, field: str, positive: bool = False) -> int:
    number = coerce_number(value, field=field)
    if not float(number).is_integer():
        raise ValueError(f"{field} must be a whole number")
    count = int(number)
    if positive and count <= 0:
        raise ValueError(f"{field} must be greater than zero")
    if count < 0:
        raise ValueError(f"{field} cannot be negative")
    return count


def normalize_status(value: object, *, allowed: tuple[str, ...] = ACTIVE_STATUSES, default: str = "active") -> str:
    if value in (None, ""):
        return default
    text = str(value).strip()
    for candidate in allowed:
        if candidate.lower() == text.lower():
            return candidate
    raise ValueError(f"Status must be one of: {', '.join(allowed)}")


__all__ = [
    "ACTIVE_STATUSES",
    "coerce_count",
    "coerce_date",
    "coerce_number",
    "coerce_positive",
    "normalize_status",
    "optional_text",
    "require_text",
]
