from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import NamedTuple, Optional

from ..core.enums import AttendanceStatus
from ..students.model import Student


class NaturalKey(NamedTuple):
    """(student, subject, day): identifies at most one attendance mark."""

    student_id: str
    subject_id: str
    date: date


def record_id_for(student_id: str, subject_id: str, day: date) -> str:
    """Deterministic record identity derived from the natural key."""
    return f"{student_id}_{day.isoformat()}_{subject_id}"


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one stored attendance mark."""

    id: str
    student_id: str
    subject_id: str
    date: date
    status: AttendanceStatus
    marked_by: str
    marked_at: datetime

    @property
    def natural_key(self) -> NaturalKey:
        return NaturalKey(self.student_id, self.subject_id, self.date)


@dataclass(frozen=True)
class AttendanceDraft:
    """A mark submitted for saving; id and timestamp are synthesized if missing."""

    student_id: str
    subject_id: str
    date: date
    status: AttendanceStatus
    id: Optional[str] = None
    marked_at: Optional[datetime] = None

    @property
    def natural_key(self) -> NaturalKey:
        return NaturalKey(self.student_id, self.subject_id, self.date)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar window."""

    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class AttendanceStats:
    """Dashboard figures.

    Note: the *_today counts cover a single day, while attendance_rate covers
    every record ever loaded. The rate does not depend on the chosen day.
    """

    total_students: int
    present_today: int
    absent_today: int
    late_today: int
    attendance_rate: float


@dataclass(frozen=True)
class ReportStats:
    total_records: int
    present_count: int
    absent_count: int
    late_count: int
    attendance_rate: float


@dataclass(frozen=True)
class TrendPoint:
    date: date
    rate: float


@dataclass(frozen=True)
class StudentAttendanceSummary:
    """Per-student counts; rate is a percentage (0 with no records)."""

    student: Student
    present: int
    absent: int
    late: int
    total: int
    rate: float


@dataclass(frozen=True)
class YearRate:
    """Mean of the per-student rates of one year level (0 without students)."""

    year: str
    rate: float
    students: int
