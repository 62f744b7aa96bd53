from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..database.row_mapping import to_external, to_internal
from .model import Subject
from .repository import SubjectRepository

_SELECT = """
    SELECT id, name, code, year, description, academic_year, term, room_number,
           schedule_days, schedule_time, user_id, created_at, updated_at
    FROM subjects
"""

_WRITABLE = (
    "name",
    "code",
    "year",
    "description",
    "academic_year",
    "term",
    "room_number",
    "schedule_days",
    "schedule_time",
)


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE user_id=%s ORDER BY name ASC", (user_id,))
            return [to_internal(r, Subject) for r in fetchall(cur)]

    def get_by_id(self, *, user_id: str, subject_id: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s AND user_id=%s", (subject_id, user_id))
            r = fetchone(cur)
            return to_internal(r, Subject) if r else None

    def create(self, *, user_id: str, subject: Subject) -> Subject:
        subject_id = str(uuid.uuid4())
        row = to_external(subject)
        columns = ("id", "user_id") + _WRITABLE
        values = (subject_id, user_id) + tuple(row[c] for c in _WRITABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO subjects({', '.join(columns)}) VALUES({','.join(['%s'] * len(columns))})",
                values,
            )
            cur.execute(f"{_SELECT} WHERE id=%s", (subject_id,))
            return to_internal(fetchone(cur), Subject)

    def update(self, *, user_id: str, subject: Subject) -> Optional[Subject]:
        row = to_external(subject)
        assignments = ", ".join(f"{c}=%s" for c in _WRITABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE subjects SET {assignments} WHERE id=%s AND user_id=%s",
                tuple(row[c] for c in _WRITABLE) + (subject.id, user_id),
            )
            cur.execute(f"{_SELECT} WHERE id=%s AND user_id=%s", (subject.id, user_id))
            r = fetchone(cur)
            return to_internal(r, Subject) if r else None

    def delete(self, *, user_id: str, subject_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE id=%s AND user_id=%s", (subject_id, user_id))
            return cur.rowcount > 0
