from __future__ import annotations

from typing import Iterable, Sequence

from ..core.constants import THEMES, TIMEZONES, WEEKDAYS, YEAR_LEVELS
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_year_level(value: str) -> str:
    if value not in YEAR_LEVELS:
        raise ValidationError(f"Unknown year level: {value!r}")
    return value


def require_selection(values: Sequence, field_name: str) -> Sequence:
    if not values:
        raise ValidationError(f"Select at least one {field_name}")
    return values


def require_weekdays(values: Iterable[str]) -> tuple[str, ...]:
    days = tuple(values or ())
    unknown = [d for d in days if d not in WEEKDAYS]
    if unknown:
        raise ValidationError(f"Unknown schedule day(s): {', '.join(unknown)}")
    return days


def require_theme(value: str) -> str:
    if value not in THEMES:
        raise ValidationError(f"Unknown theme: {value!r}")
    return value


def require_timezone(value: str) -> str:
    if value not in TIMEZONES:
        raise ValidationError(f"Unsupported timezone: {value!r}")
    return value


def require_id_list(values, field_name: str) -> list:
    """JSON arrays only; a bare string would otherwise be read character by character."""
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list of ids")
    return list(values)


def unique_ids(values: Iterable[str]) -> tuple[str, ...]:
    """Stripped, non-blank ids in first-occurrence order."""
    seen: dict[str, None] = {}
    for value in values or ():
        value = str(value).strip()
        if value:
            seen.setdefault(value, None)
    return tuple(seen)
