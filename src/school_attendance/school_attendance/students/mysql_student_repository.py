from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, encode_json_list, fetchall, fetchone
from ..database.row_mapping import to_external, to_internal
from .model import Student
from .repository import StudentRepository

_SELECT = "SELECT id, name, year, subjects, user_id, created_at, updated_at FROM students"


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE user_id=%s ORDER BY name ASC", (user_id,))
            return [to_internal(r, Student) for r in fetchall(cur)]

    def get_by_id(self, *, user_id: str, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s AND user_id=%s", (student_id, user_id))
            r = fetchone(cur)
            return to_internal(r, Student) if r else None

    def create(self, *, user_id: str, name: str, year: str, subject_ids: Sequence[str]) -> Student:
        student_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(id, name, year, subjects, user_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (student_id, name, year, encode_json_list(subject_ids), user_id),
            )
            cur.execute(f"{_SELECT} WHERE id=%s", (student_id,))
            return to_internal(fetchone(cur), Student)

    def update(self, *, user_id: str, student: Student) -> Optional[Student]:
        row = to_external(student)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, year=%s, subjects=%s
                WHERE id=%s AND user_id=%s
                """,
                (row["name"], row["year"], row["subjects"], student.id, user_id),
            )
            cur.execute(f"{_SELECT} WHERE id=%s AND user_id=%s", (student.id, user_id))
            r = fetchone(cur)
            return to_internal(r, Student) if r else None

    def delete(self, *, user_id: str, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s AND user_id=%s", (student_id, user_id))
            return cur.rowcount > 0
