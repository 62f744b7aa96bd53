from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest

from school_attendance.attendance.model import AttendanceRecord, record_id_for
from school_attendance.container import Container, WorkspaceFactory, build_services
from school_attendance.core.enums import AttendanceStatus
from school_attendance.core.exceptions import StoreError
from school_attendance.core.session import StaticUser
from school_attendance.settings.model import UserSettings
from school_attendance.students.model import Student
from school_attendance.subjects.model import Enrollment, Subject
from school_attendance.workspace import Workspace

FIXED_NOW = datetime(2024, 3, 15, 9, 30, 0)


class CallLog:
    """Counts repository calls so tests can assert that nothing was touched."""

    def __init__(self):
        self.calls: list[str] = []

    def hit(self, name: str) -> None:
        self.calls.append(name)


@dataclass
class InMemoryStudents:
    log: CallLog
    rows: dict[tuple[str, str], Student] = field(default_factory=dict)

    def list_for_user(self, user_id):
        self.log.hit("students.list")
        return sorted((s for (u, _), s in self.rows.items() if u == user_id), key=lambda s: s.name)

    def get_by_id(self, *, user_id, student_id):
        self.log.hit("students.get")
        return self.rows.get((user_id, student_id))

    def create(self, *, user_id, name, year, subject_ids):
        self.log.hit("students.create")
        s = Student(id=str(uuid.uuid4()), name=name, year=year, subject_ids=tuple(subject_ids), created_at=FIXED_NOW)
        self.rows[(user_id, s.id)] = s
        return s

    def update(self, *, user_id, student):
        self.log.hit("students.update")
        if (user_id, student.id) not in self.rows:
            return None
        self.rows[(user_id, student.id)] = student
        return student

    def delete(self, *, user_id, student_id):
        self.log.hit("students.delete")
        return self.rows.pop((user_id, student_id), None) is not None


@dataclass
class InMemorySubjects:
    log: CallLog
    rows: dict[tuple[str, str], Subject] = field(default_factory=dict)

    def list_for_user(self, user_id):
        self.log.hit("subjects.list")
        return sorted((s for (u, _), s in self.rows.items() if u == user_id), key=lambda s: s.name)

    def get_by_id(self, *, user_id, subject_id):
        self.log.hit("subjects.get")
        return self.rows.get((user_id, subject_id))

    def create(self, *, user_id, subject):
        self.log.hit("subjects.create")
        stored = replace(subject, id=str(uuid.uuid4()), owner_id=user_id, created_at=FIXED_NOW, updated_at=FIXED_NOW)
        self.rows[(user_id, stored.id)] = stored
        return stored

    def update(self, *, user_id, subject):
        self.log.hit("subjects.update")
        if (user_id, subject.id) not in self.rows:
            return None
        self.rows[(user_id, subject.id)] = subject
        return subject

    def delete(self, *, user_id, subject_id):
        self.log.hit("subjects.delete")
        return self.rows.pop((user_id, subject_id), None) is not None


@dataclass
class InMemoryEnrollments:
    log: CallLog
    rows: list[tuple[str, Enrollment]] = field(default_factory=list)

    def list_for_user(self, user_id):
        self.log.hit("enrollments.list")
        return [e for u, e in self.rows if u == user_id]

    def replace_for_subject(self, *, user_id, subject_id, student_ids):
        self.log.hit("enrollments.replace")
        self.rows = [(u, e) for u, e in self.rows if not (u == user_id and e.subject_id == subject_id)]
        for sid in student_ids:
            self.rows.append((user_id, Enrollment(id=str(uuid.uuid4()), student_id=sid, subject_id=subject_id, created_at=FIXED_NOW)))
        return [e for u, e in self.rows if u == user_id and e.subject_id == subject_id]


@dataclass
class InMemoryAttendance:
    """Upsert by natural key; ``fail_next`` simulates a rejected batch (nothing is kept)."""

    log: CallLog
    rows: dict[tuple[str, str], AttendanceRecord] = field(default_factory=dict)
    fail_next: bool = False

    def list_for_user(self, user_id):
        self.log.hit("attendance.list")
        return sorted((r for (u, _), r in self.rows.items() if u == user_id), key=lambda r: r.date, reverse=True)

    def upsert_marks(self, *, user_id, marked_by, drafts):
        self.log.hit("attendance.upsert")
        if self.fail_next:
            self.fail_next = False
            raise StoreError("Database request failed: connection lost")

        stored = []
        for d in drafts:
            rid = record_id_for(d.student_id, d.subject_id, d.date)
            rec = AttendanceRecord(
                id=rid,
                student_id=d.student_id,
                subject_id=d.subject_id,
                date=d.date,
                status=AttendanceStatus(d.status),
                marked_by=marked_by,
                marked_at=d.marked_at or FIXED_NOW,
            )
            self.rows[(user_id, rid)] = rec
            stored.append(rec)
        return stored


@dataclass
class InMemorySettings:
    log: CallLog
    rows: dict[str, UserSettings] = field(default_factory=dict)

    def get_for_user(self, user_id):
        self.log.hit("settings.get")
        return self.rows.get(user_id)

    def upsert(self, settings):
        self.log.hit("settings.upsert")
        self.rows[settings.user_id] = settings
        return settings


@dataclass
class FakeStore:
    log: CallLog
    students: InMemoryStudents
    subjects: InMemorySubjects
    enrollments: InMemoryEnrollments
    attendance: InMemoryAttendance
    settings: InMemorySettings

    def container(self) -> Container:
        services = build_services(
            students=self.students,
            subjects=self.subjects,
            enrollments=self.enrollments,
            attendance=self.attendance,
            settings=self.settings,
        )
        return Container(services=services, workspace_factory=WorkspaceFactory(services))

    def workspace(self, user_id: Optional[str] = "teacher-1") -> Workspace:
        return self.container().workspace(StaticUser(user_id))


def make_student(sid: str, name: str, year: str = "Year 7", subject_ids=("math",)) -> Student:
    return Student(id=sid, name=name, year=year, subject_ids=tuple(subject_ids), created_at=FIXED_NOW)


def make_subject(sid: str, name: str, code: str, year: str = "Year 7", owner_id: str = "teacher-1") -> Subject:
    return Subject(
        id=sid,
        name=name,
        code=code,
        year=year,
        academic_year="2024-2025",
        term="1st Term",
        owner_id=owner_id,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )


def make_record(student_id: str, subject_id: str, day: date, status: str, marked_by: str = "teacher-1") -> AttendanceRecord:
    return AttendanceRecord(
        id=record_id_for(student_id, subject_id, day),
        student_id=student_id,
        subject_id=subject_id,
        date=day,
        status=AttendanceStatus(status),
        marked_by=marked_by,
        marked_at=FIXED_NOW,
    )


@pytest.fixture
def fixed_now(monkeypatch):
    """Freeze the clock behind today_local()."""
    import school_attendance.common.datetime_utils as dt

    monkeypatch.setattr(dt, "now_local", lambda: FIXED_NOW)
    return FIXED_NOW


@pytest.fixture
def store() -> FakeStore:
    log = CallLog()
    return FakeStore(
        log=log,
        students=InMemoryStudents(log),
        subjects=InMemorySubjects(log),
        enrollments=InMemoryEnrollments(log),
        attendance=InMemoryAttendance(log),
        settings=InMemorySettings(log),
    )


@pytest.fixture
def seeded_store(store) -> FakeStore:
    """Two Year 7 students in Math, one Year 8 student in Science, a few marks."""
    user = "teacher-1"
    for s in (
        make_student("s1", "Alice", "Year 7", ("math",)),
        make_student("s2", "Bob", "Year 7", ("math",)),
        make_student("s3", "Chloe", "Year 8", ("sci",)),
    ):
        store.students.rows[(user, s.id)] = s
    for sub in (make_subject("math", "Mathematics", "MATH7"), make_subject("sci", "Science", "SCI8", "Year 8")):
        store.subjects.rows[(user, sub.id)] = sub
    for sid, sub in (("s1", "math"), ("s2", "math"), ("s3", "sci")):
        store.enrollments.rows.append((user, Enrollment(id=f"e-{sid}", student_id=sid, subject_id=sub, created_at=FIXED_NOW)))
    for r in (
        make_record("s1", "math", date(2024, 3, 14), "present"),
        make_record("s2", "math", date(2024, 3, 14), "absent"),
        make_record("s1", "math", date(2024, 3, 15), "present"),
        make_record("s3", "sci", date(2024, 3, 15), "late"),
    ):
        store.attendance.rows[(user, r.id)] = r
    return store
