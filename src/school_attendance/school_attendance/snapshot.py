"""In-memory mirror of one user's rows.

A DataSnapshot is never mutated: every update method returns a new snapshot,
so a failed write simply keeps using the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from .attendance.model import AttendanceRecord, NaturalKey
from .students.model import Student
from .subjects.model import Enrollment, Subject


@dataclass(frozen=True)
class DataSnapshot:
    students: tuple[Student, ...] = ()
    subjects: tuple[Subject, ...] = ()
    enrollments: tuple[Enrollment, ...] = ()
    records: tuple[AttendanceRecord, ...] = ()

    @classmethod
    def of(
        cls,
        *,
        students: Iterable[Student] = (),
        subjects: Iterable[Subject] = (),
        enrollments: Iterable[Enrollment] = (),
        records: Iterable[AttendanceRecord] = (),
    ) -> "DataSnapshot":
        return cls(tuple(students), tuple(subjects), tuple(enrollments), tuple(records))

    # lookups

    def students_by_id(self) -> dict[str, Student]:
        return {s.id: s for s in self.students}

    def subjects_by_id(self) -> dict[str, Subject]:
        return {s.id: s for s in self.subjects}

    def student_count(self, subject_id: str) -> int:
        """Number of students linked to the subject in the membership table."""
        return sum(1 for e in self.enrollments if e.subject_id == subject_id)

    # students

    def add_student(self, student: Student) -> "DataSnapshot":
        return replace(self, students=self.students + (student,))

    def update_student(self, student: Student) -> "DataSnapshot":
        return replace(self, students=tuple(student if s.id == student.id else s for s in self.students))

    def remove_student(self, student_id: str) -> "DataSnapshot":
        return replace(
            self,
            students=tuple(s for s in self.students if s.id != student_id),
            enrollments=tuple(e for e in self.enrollments if e.student_id != student_id),
            records=tuple(r for r in self.records if r.student_id != student_id),
        )

    # subjects

    def add_subject(self, subject: Subject) -> "DataSnapshot":
        return replace(self, subjects=self.subjects + (subject,))

    def update_subject(self, subject: Subject) -> "DataSnapshot":
        return replace(self, subjects=tuple(subject if s.id == subject.id else s for s in self.subjects))

    def remove_subject(self, subject_id: str) -> "DataSnapshot":
        return replace(
            self,
            subjects=tuple(s for s in self.subjects if s.id != subject_id),
            enrollments=tuple(e for e in self.enrollments if e.subject_id != subject_id),
            records=tuple(r for r in self.records if r.subject_id != subject_id),
        )

    def replace_enrollment(self, subject_id: str, links: Sequence[Enrollment]) -> "DataSnapshot":
        kept = tuple(e for e in self.enrollments if e.subject_id != subject_id)
        return replace(self, enrollments=kept + tuple(links))

    # attendance

    def reconcile_marks(self, keys: Iterable[NaturalKey], new_records: Sequence[AttendanceRecord]) -> "DataSnapshot":
        """Drop cached records whose natural key was just written, then add the stored rows."""
        written = set(keys) | {r.natural_key for r in new_records}
        kept = tuple(r for r in self.records if r.natural_key not in written)
        return replace(self, records=kept + tuple(new_records))
