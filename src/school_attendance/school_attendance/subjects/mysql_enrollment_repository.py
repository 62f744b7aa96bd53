from __future__ import annotations

import uuid
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..database.row_mapping import to_internal
from .model import Enrollment
from .repository import EnrollmentRepository

_SELECT = "SELECT id, student_id, subject_id, user_id, created_at FROM student_subjects"


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE user_id=%s ORDER BY created_at ASC", (user_id,))
            return [to_internal(r, Enrollment) for r in fetchall(cur)]

    def replace_for_subject(self, *, user_id: str, subject_id: str, student_ids: Sequence[str]) -> Sequence[Enrollment]:
        # One transaction: the subject never shows a half-replaced member list.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM student_subjects WHERE subject_id=%s AND user_id=%s",
                (subject_id, user_id),
            )
            if student_ids:
                cur.executemany(
                    """
                    INSERT INTO student_subjects(id, student_id, subject_id, user_id)
                    VALUES(%s,%s,%s,%s)
                    """,
                    [(str(uuid.uuid4()), sid, subject_id, user_id) for sid in student_ids],
                )
            cur.execute(f"{_SELECT} WHERE subject_id=%s AND user_id=%s", (subject_id, user_id))
            return [to_internal(r, Enrollment) for r in fetchall(cur)]
