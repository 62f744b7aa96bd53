from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders
from ..database.row_mapping import to_internal
from .model import AttendanceDraft, AttendanceRecord, record_id_for
from .repository import AttendanceRepository

_SELECT = """
    SELECT id, student_id, subject_id, date, status, marked_by, user_id, created_at, updated_at
    FROM attendance_records
"""

_UPSERT = """
    INSERT INTO attendance_records(id, student_id, subject_id, date, status, marked_by, user_id, created_at)
    VALUES(%s,%s,%s,%s,%s,%s,%s,COALESCE(%s, CURRENT_TIMESTAMP))
    ON DUPLICATE KEY UPDATE
        status=VALUES(status),
        marked_by=VALUES(marked_by),
        created_at=VALUES(created_at)
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE user_id=%s ORDER BY date DESC", (user_id,))
            return [to_internal(r, AttendanceRecord) for r in fetchall(cur)]

    def upsert_marks(self, *, user_id: str, marked_by: str, drafts: Sequence[AttendanceDraft]) -> Sequence[AttendanceRecord]:
        if not drafts:
            return []

        ids = [record_id_for(d.student_id, d.subject_id, d.date) for d in drafts]
        params = [
            (rid, d.student_id, d.subject_id, d.date, d.status.value, marked_by, user_id, d.marked_at)
            for rid, d in zip(ids, drafts)
        ]

        with db_cursor(self._conn_factory) as (_, cur):
            # Unique key (user_id, student_id, subject_id, date): a second mark for
            # the same key replaces status, marker and timestamp of the first.
            for p in params:
                cur.execute(_UPSERT, p)
            cur.execute(
                f"{_SELECT} WHERE user_id=%s AND id IN ({placeholders(ids)})",
                (user_id, *ids),
            )
            by_id = {r["id"]: to_internal(r, AttendanceRecord) for r in fetchall(cur)}

        return [by_id[rid] for rid in ids if rid in by_id]
