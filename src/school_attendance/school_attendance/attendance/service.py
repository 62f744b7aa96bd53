from __future__ import annotations

import logging
from typing import Sequence

from ..common.datetime_utils import as_date
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from ..subjects.repository import SubjectRepository
from .model import AttendanceDraft, AttendanceRecord, NaturalKey, record_id_for
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: record attendance marks (the write path)."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository, subjects: SubjectRepository):
        self._attendance = attendance
        self._students = students
        self._subjects = subjects

    def list_for_user(self, user_id: str) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(user_id)

    def normalize_drafts(self, drafts: Sequence[AttendanceDraft]) -> list[AttendanceDraft]:
        """Validate a batch and collapse repeated natural keys (the later mark wins)."""
        if not drafts:
            raise ValidationError("No attendance marks to save")

        by_key: dict[NaturalKey, AttendanceDraft] = {}
        for d in drafts:
            try:
                status = AttendanceStatus(d.status)
            except ValueError:
                raise ValidationError(f"Unknown attendance status: {d.status!r}") from None

            student_id = require_non_empty(d.student_id, "Student")
            subject_id = require_non_empty(d.subject_id, "Subject")
            try:
                day = as_date(d.date)
            except ValueError:
                raise ValidationError(f"Invalid date: {d.date!r}") from None

            by_key[NaturalKey(student_id, subject_id, day)] = AttendanceDraft(
                id=record_id_for(student_id, subject_id, day),
                student_id=student_id,
                subject_id=subject_id,
                date=day,
                status=status,
                marked_at=d.marked_at,
            )

        return list(by_key.values())

    def mark_attendance(self, *, user_id: str, drafts: Sequence[AttendanceDraft]) -> Sequence[AttendanceRecord]:
        """Replace the stored mark of every (student, subject, date) in the batch.

        This is a replace, not a merge: an earlier "late" becomes "absent" when the
        new mark says so, and nothing of the old mark is kept. The marker is always
        the acting user.
        """
        batch = self.normalize_drafts(drafts)
        self._require_owned(user_id, batch)
        logger.info("Saving %d attendance mark(s) for user %s", len(batch), user_id)
        return self._attendance.upsert_marks(user_id=user_id, marked_by=user_id, drafts=batch)

    def _require_owned(self, user_id: str, batch: Sequence[AttendanceDraft]) -> None:
        """Every student and subject of the batch must belong to ``user_id``."""
        students = {s.id for s in self._students.list_for_user(user_id)}
        subjects = {s.id for s in self._subjects.list_for_user(user_id)}

        unknown_students = sorted({d.student_id for d in batch} - students)
        if unknown_students:
            raise ValidationError(f"Unknown student id(s): {', '.join(unknown_students)}")
        unknown_subjects = sorted({d.subject_id for d in batch} - subjects)
        if unknown_subjects:
            raise ValidationError(f"Unknown subject id(s): {', '.join(unknown_subjects)}")
