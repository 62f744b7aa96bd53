from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..common.validators import require_non_empty, require_year_level, unique_ids
from ..core.constants import ALL
from ..core.exceptions import ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def filter_students(students: Iterable[Student], *, search: str = "", year: str = ALL) -> list[Student]:
    needle = (search or "").strip().lower()
    return [s for s in students if needle in s.name.lower() and (year == ALL or s.year == year)]


class StudentService:
    """Use case: manage the students of one teacher account."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_for_user(self, user_id: str) -> Sequence[Student]:
        return self._students.list_for_user(user_id)

    def add(
        self,
        *,
        user_id: str,
        name: str,
        year: str,
        subject_ids: Iterable[str] = (),
        known_subject_ids: Optional[Iterable[str]] = None,
    ) -> Student:
        name = require_non_empty(name, "Name")
        year = require_year_level(year)
        subject_ids = unique_ids(subject_ids)
        self._warn_unknown_subjects(subject_ids, known_subject_ids)

        return self._students.create(user_id=user_id, name=name, year=year, subject_ids=subject_ids)

    def update(
        self,
        *,
        user_id: str,
        student_id: str,
        name: Optional[str] = None,
        year: Optional[str] = None,
        subject_ids: Optional[Iterable[str]] = None,
        known_subject_ids: Optional[Iterable[str]] = None,
    ) -> Student:
        """Change only the given fields of a student."""
        current = self._students.get_by_id(user_id=user_id, student_id=student_id)
        if not current:
            raise ValidationError("Student not found")

        changed = current
        if name is not None:
            changed = replace(changed, name=require_non_empty(name, "Name"))
        if year is not None:
            changed = replace(changed, year=require_year_level(year))
        if subject_ids is not None:
            cleaned = unique_ids(subject_ids)
            self._warn_unknown_subjects(cleaned, known_subject_ids)
            changed = replace(changed, subject_ids=cleaned)

        stored = self._students.update(user_id=user_id, student=changed)
        if not stored:
            raise ValidationError("Student not found")
        return stored

    def delete(self, *, user_id: str, student_id: str) -> None:
        if not self._students.delete(user_id=user_id, student_id=student_id):
            raise ValidationError("Student not found")

    @staticmethod
    def _warn_unknown_subjects(subject_ids: Sequence[str], known: Optional[Iterable[str]]) -> None:
        # Subject references are not enforced by the store; only flag them.
        if known is None:
            return
        unknown = sorted(set(subject_ids) - set(known))
        if unknown:
            logger.warning("Student references unknown subject id(s): %s", ", ".join(unknown))
