from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import time
from typing import Iterable, Optional, Sequence, Union

from ..common.datetime_utils import now_local, parse_hhmm
from ..common.validators import require_non_empty, require_weekdays, require_year_level, unique_ids
from ..core.constants import ALL, DEFAULT_SCHOOL_YEAR, DEFAULT_TERM, TERMS
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from .model import Enrollment, Subject
from .repository import EnrollmentRepository, SubjectRepository

TimeLike = Union[time, str, None]


@dataclass(frozen=True)
class NewSubject:
    name: str
    code: str
    year: str
    description: Optional[str] = None
    academic_year: str = DEFAULT_SCHOOL_YEAR
    term: str = DEFAULT_TERM
    room: Optional[str] = None
    schedule_days: tuple[str, ...] = ()
    schedule_time: TimeLike = None


def filter_subjects(subjects: Iterable[Subject], *, search: str = "", year: str = ALL) -> list[Subject]:
    """Case-insensitive match on name or code; "All" disables the year filter."""
    needle = (search or "").strip().lower()
    return [
        s
        for s in subjects
        if (needle in s.name.lower() or needle in s.code.lower()) and (year == ALL or s.year == year)
    ]


def _optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def _schedule_time(value: TimeLike) -> Optional[time]:
    if value is None or isinstance(value, time):
        return value
    if not str(value).strip():
        return None
    try:
        return parse_hhmm(value)
    except ValueError:
        raise ValidationError("Invalid schedule time (HH:MM)") from None


def _require_term(value: str) -> str:
    if value not in TERMS:
        raise ValidationError(f"Unknown term: {value!r}")
    return value


class SubjectService:
    """Use case: manage subjects and who takes them."""

    def __init__(self, subjects: SubjectRepository, enrollments: EnrollmentRepository, students: StudentRepository):
        self._subjects = subjects
        self._enrollments = enrollments
        self._students = students

    def list_for_user(self, user_id: str) -> Sequence[Subject]:
        return self._subjects.list_for_user(user_id)

    def list_enrollments(self, user_id: str) -> Sequence[Enrollment]:
        return self._enrollments.list_for_user(user_id)

    def add(self, *, user_id: str, data: NewSubject) -> Subject:
        now = now_local()
        subject = Subject(
            id="",
            name=require_non_empty(data.name, "Name"),
            code=require_non_empty(data.code, "Code"),
            year=require_year_level(data.year),
            academic_year=require_non_empty(data.academic_year, "Academic year"),
            term=_require_term(data.term),
            owner_id=user_id,
            created_at=now,
            updated_at=now,
            description=_optional_text(data.description),
            room=_optional_text(data.room),
            schedule_days=require_weekdays(data.schedule_days),
            schedule_time=_schedule_time(data.schedule_time),
        )
        return self._subjects.create(user_id=user_id, subject=subject)

    def update(self, *, user_id: str, subject_id: str, **changes) -> Subject:
        """Apply a partial change set (keys are NewSubject field names)."""
        current = self._subjects.get_by_id(user_id=user_id, subject_id=subject_id)
        if not current:
            raise ValidationError("Subject not found")

        unknown = set(changes) - set(NewSubject.__dataclass_fields__)
        if unknown:
            raise ValidationError(f"Unknown subject field(s): {', '.join(sorted(unknown))}")

        cleaners = {
            "name": lambda v: require_non_empty(v, "Name"),
            "code": lambda v: require_non_empty(v, "Code"),
            "year": require_year_level,
            "academic_year": lambda v: require_non_empty(v, "Academic year"),
            "term": _require_term,
            "description": _optional_text,
            "room": _optional_text,
            "schedule_days": require_weekdays,
            "schedule_time": _schedule_time,
        }
        cleaned = {k: cleaners[k](v) for k, v in changes.items()}

        stored = self._subjects.update(user_id=user_id, subject=replace(current, **cleaned, updated_at=now_local()))
        if not stored:
            raise ValidationError("Subject not found")
        return stored

    def delete(self, *, user_id: str, subject_id: str) -> None:
        if not self._subjects.delete(user_id=user_id, subject_id=subject_id):
            raise ValidationError("Subject not found")

    def assign_students(self, *, user_id: str, subject_id: str, student_ids: Iterable[str]) -> Sequence[Enrollment]:
        """Make ``student_ids`` the complete membership of the subject.

        Links not in the list are removed; an empty list clears the subject.
        Repeated ids collapse, first occurrence order is kept.
        """
        subject_id = require_non_empty(subject_id, "Subject")
        if not self._subjects.get_by_id(user_id=user_id, subject_id=subject_id):
            raise ValidationError("Subject not found")

        ids = unique_ids(student_ids)
        if ids:
            owned = {s.id for s in self._students.list_for_user(user_id)}
            foreign = [i for i in ids if i not in owned]
            if foreign:
                raise ValidationError(f"Unknown student id(s): {', '.join(foreign)}")

        return self._enrollments.replace_for_subject(user_id=user_id, subject_id=subject_id, student_ids=list(ids))
