from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from conftest import FIXED_NOW, make_record, make_student, make_subject
from school_attendance.attendance.model import AttendanceRecord
from school_attendance.core.enums import AttendanceStatus
from school_attendance.database.row_mapping import to_external, to_internal
from school_attendance.settings.model import UserSettings
from school_attendance.students.model import Student
from school_attendance.subjects.model import Enrollment, Subject

SUBJECT = Subject(
    id="sub-1",
    name="Chemistry",
    code="CHEM10",
    year="Year 10",
    academic_year="2024-2025",
    term="2nd Term",
    owner_id="t1",
    created_at=FIXED_NOW,
    updated_at=FIXED_NOW,
    description="Lab work",
    room="L2",
    schedule_days=("Tuesday", "Thursday"),
    schedule_time=time(13, 15),
)

SETTINGS = UserSettings(
    user_id="t1",
    school_year="2025-2026",
    default_year_level="Year 11",
    attendance_reminder_time=time(8, 0),
    email_notifications=False,
    theme="dark",
    timezone="Europe/London",
    created_at=FIXED_NOW,
    updated_at=FIXED_NOW,
)


@pytest.mark.parametrize(
    "entity",
    [
        make_student("s1", "Alice", "Year 7", ("math", "sci")),
        make_student("s2", "Bob", "Year 8", ()),
        SUBJECT,
        make_subject("sub-2", "Art", "ART7"),
        Enrollment(id="e1", student_id="s1", subject_id="sub-1", created_at=FIXED_NOW),
        make_record("s1", "sub-1", date(2024, 2, 29), "late"),
        SETTINGS,
    ],
)
def test_round_trip(entity):
    assert to_internal(to_external(entity), type(entity)) == entity


def test_external_rows_use_store_column_names():
    row = to_external(SUBJECT)

    assert row["room_number"] == "L2"
    assert row["user_id"] == "t1"
    assert row["schedule_days"] == '["Tuesday", "Thursday"]'
    assert "room" not in row and "owner_id" not in row

    record_row = to_external(make_record("s1", "m", date(2024, 1, 1), "present"))
    assert record_row["created_at"] == FIXED_NOW
    assert record_row["status"] == "present"
    assert to_external(SETTINGS)["email_notifications"] == 0


def test_loads_values_as_the_connector_returns_them():
    student = to_internal(
        {"id": "s1", "name": "Al", "year": "Year 7", "subjects": b'["m"]', "created_at": FIXED_NOW, "user_id": "t1"},
        Student,
    )
    assert student.subject_ids == ("m",)

    record = to_internal(
        {
            "id": "s1_2024-01-01_m",
            "student_id": "s1",
            "subject_id": "m",
            "date": "2024-01-01",
            "status": "absent",
            "marked_by": "t1",
            "created_at": "2024-01-01 10:00:00",
        },
        AttendanceRecord,
    )
    assert record.date == date(2024, 1, 1)
    assert record.status is AttendanceStatus.ABSENT
    assert record.marked_at == datetime(2024, 1, 1, 10, 0)

    subject = to_internal({**to_external(SUBJECT), "schedule_time": timedelta(hours=13, minutes=15), "schedule_days": None}, Subject)
    assert subject.schedule_time == time(13, 15)
    assert subject.schedule_days == ()


def test_unmapped_type_is_an_error():
    with pytest.raises(TypeError):
        to_external({"id": "x"})
