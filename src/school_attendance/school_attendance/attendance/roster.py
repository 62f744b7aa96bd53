from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Sequence

from ..core.enums import AttendanceStatus
from ..students.model import Student
from .model import AttendanceDraft, record_id_for


@dataclass(frozen=True)
class StatusCounts:
    present: int
    absent: int
    late: int
    unmarked: int


def class_roster(students: Iterable[Student], *, year: str, subject_id: str, search: str = "") -> list[Student]:
    """Students of one year level enrolled in ``subject_id`` whose name contains ``search``."""
    needle = (search or "").strip().lower()
    return [
        s
        for s in students
        if s.year == year and subject_id in s.subject_ids and needle in s.name.lower()
    ]


def bulk_marks(roster: Iterable[Student], status: AttendanceStatus) -> dict[str, AttendanceStatus]:
    """Same status for everyone on the roster (replaces any previous selection)."""
    return {s.id: status for s in roster}


def status_counts(roster: Sequence[Student], marks: Mapping[str, AttendanceStatus]) -> StatusCounts:
    counts = {AttendanceStatus.PRESENT: 0, AttendanceStatus.ABSENT: 0, AttendanceStatus.LATE: 0}
    unmarked = 0
    for s in roster:
        status = marks.get(s.id)
        if status is None:
            unmarked += 1
        else:
            counts[status] += 1

    return StatusCounts(
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        unmarked=unmarked,
    )


def build_drafts(marks: Mapping[str, AttendanceStatus], *, subject_id: str, day: date) -> list[AttendanceDraft]:
    return [
        AttendanceDraft(
            id=record_id_for(student_id, subject_id, day),
            student_id=student_id,
            subject_id=subject_id,
            date=day,
            status=status,
        )
        for student_id, status in marks.items()
    ]
