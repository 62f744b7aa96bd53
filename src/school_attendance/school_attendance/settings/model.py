from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional


@dataclass(frozen=True)
class UserSettings:
    """Per-account preferences (one row per user)."""

    user_id: str
    school_year: str
    default_year_level: str
    attendance_reminder_time: time
    email_notifications: bool
    theme: str
    timezone: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
