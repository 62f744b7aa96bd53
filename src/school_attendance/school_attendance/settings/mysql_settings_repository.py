from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..database.row_mapping import to_external, to_internal
from .model import UserSettings
from .repository import SettingsRepository

_SELECT = """
    SELECT user_id, school_year, default_year_level, attendance_reminder_time,
           email_notifications, theme, timezone, created_at, updated_at
    FROM user_settings
"""


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user(self, user_id: str) -> Optional[UserSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return to_internal(r, UserSettings) if r else None

    def upsert(self, settings: UserSettings) -> UserSettings:
        row = to_external(settings)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_settings(
                    user_id, school_year, default_year_level, attendance_reminder_time,
                    email_notifications, theme, timezone
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    school_year=VALUES(school_year),
                    default_year_level=VALUES(default_year_level),
                    attendance_reminder_time=VALUES(attendance_reminder_time),
                    email_notifications=VALUES(email_notifications),
                    theme=VALUES(theme),
                    timezone=VALUES(timezone)
                """,
                (
                    row["user_id"],
                    row["school_year"],
                    row["default_year_level"],
                    row["attendance_reminder_time"],
                    row["email_notifications"],
                    row["theme"],
                    row["timezone"],
                ),
            )
            cur.execute(f"{_SELECT} WHERE user_id=%s", (settings.user_id,))
            return to_internal(fetchone(cur), UserSettings)
