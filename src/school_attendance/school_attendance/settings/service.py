from __future__ import annotations

from dataclasses import replace
from datetime import time
from typing import Any

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_non_empty, require_theme, require_timezone, require_year_level
from ..core.constants import (
    DEFAULT_REMINDER_TIME,
    DEFAULT_SCHOOL_YEAR,
    DEFAULT_THEME,
    DEFAULT_TIMEZONE,
    DEFAULT_YEAR_LEVEL,
)
from ..core.exceptions import ValidationError
from .model import UserSettings
from .repository import SettingsRepository


def default_settings(user_id: str) -> UserSettings:
    return UserSettings(
        user_id=user_id,
        school_year=DEFAULT_SCHOOL_YEAR,
        default_year_level=DEFAULT_YEAR_LEVEL,
        attendance_reminder_time=parse_hhmm(DEFAULT_REMINDER_TIME),
        email_notifications=True,
        theme=DEFAULT_THEME,
        timezone=DEFAULT_TIMEZONE,
    )


def _reminder_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    try:
        return parse_hhmm(value)
    except ValueError:
        raise ValidationError("Invalid reminder time (HH:MM)") from None


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
        return False
    raise ValidationError("email_notifications must be true or false")


_CLEANERS = {
    "school_year": lambda v: require_non_empty(v, "School year"),
    "default_year_level": require_year_level,
    "attendance_reminder_time": _reminder_time,
    "email_notifications": _flag,
    "theme": require_theme,
    "timezone": require_timezone,
}


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get(self, user_id: str) -> UserSettings:
        """Stored settings of the user, or the defaults when none were saved yet."""
        return self._settings.get_for_user(user_id) or default_settings(user_id)

    def update(self, user_id: str, /, **changes: Any) -> UserSettings:
        unknown = set(changes) - set(_CLEANERS)
        if unknown:
            raise ValidationError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        cleaned = {k: _CLEANERS[k](v) for k, v in changes.items()}
        return self._settings.upsert(replace(self.get(user_id), **cleaned))
