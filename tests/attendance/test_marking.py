from __future__ import annotations

from datetime import date

import pytest

from conftest import CallLog, InMemoryAttendance, InMemoryStudents, InMemorySubjects, make_student, make_subject
from school_attendance.attendance.model import AttendanceDraft
from school_attendance.attendance.roster import bulk_marks, build_drafts, class_roster, status_counts
from school_attendance.attendance.service import AttendanceService
from school_attendance.core.enums import AttendanceStatus
from school_attendance.core.exceptions import ValidationError

DAY = date(2024, 1, 1)


def _draft(status: str, student: str = "1", subject: str = "M", day="2024-01-01") -> AttendanceDraft:
    return AttendanceDraft(student_id=student, subject_id=subject, date=day, status=status)


@pytest.fixture
def repo():
    return InMemoryAttendance(CallLog())


@pytest.fixture
def svc(repo):
    """Service over t1 (students 1 and 2, subject M) and t2 (student 9, subject X)."""
    students = InMemoryStudents(CallLog())
    subjects = InMemorySubjects(CallLog())
    for user, sid in (("t1", "1"), ("t1", "2"), ("t2", "9")):
        students.rows[(user, sid)] = make_student(sid, f"Student {sid}", subject_ids=())
    for user, sub in (("t1", "M"), ("t2", "X")):
        subjects.rows[(user, sub)] = make_subject(sub, f"Subject {sub}", sub, owner_id=user)
    return AttendanceService(repo, students, subjects)


def test_same_mark_twice_leaves_one_record(repo, svc):
    svc.mark_attendance(user_id="t1", drafts=[_draft("present")])
    svc.mark_attendance(user_id="t1", drafts=[_draft("present")])

    stored = repo.list_for_user("t1")
    assert len(stored) == 1
    assert stored[0].id == "1_2024-01-01_M"
    assert stored[0].status == AttendanceStatus.PRESENT


def test_remarking_replaces_the_previous_status(repo, svc):
    svc.mark_attendance(user_id="t1", drafts=[_draft("late")])
    svc.mark_attendance(user_id="t1", drafts=[_draft("present")])

    stored = repo.list_for_user("t1")
    assert [r.status for r in stored] == [AttendanceStatus.PRESENT]


def test_batch_duplicates_collapse_to_the_last_mark(repo, svc):
    out = svc.mark_attendance(user_id="t1", drafts=[_draft("absent"), _draft("late"), _draft("present", student="2")])

    assert len(out) == 2
    by_student = {r.student_id: r.status for r in out}
    assert by_student == {"1": AttendanceStatus.LATE, "2": AttendanceStatus.PRESENT}


def test_marker_is_always_the_acting_user(svc):
    out = svc.mark_attendance(user_id="t1", drafts=[_draft("present")])
    assert out[0].marked_by == "t1"


def test_empty_batch_is_rejected_without_touching_the_store(repo, svc):
    with pytest.raises(ValidationError):
        svc.mark_attendance(user_id="t1", drafts=[])
    assert repo.log.calls == []


@pytest.mark.parametrize(
    "draft",
    [
        _draft("excused"),
        _draft("present", student=""),
        _draft("present", subject="  "),
        _draft("present", day="01/01/2024"),
    ],
)
def test_invalid_drafts_are_rejected(repo, svc, draft):
    with pytest.raises(ValidationError):
        svc.mark_attendance(user_id="t1", drafts=[draft])
    assert repo.rows == {}


def test_marks_for_another_accounts_student_are_rejected(repo, svc):
    with pytest.raises(ValidationError, match="Unknown student id"):
        svc.mark_attendance(user_id="t2", drafts=[_draft("absent", subject="X")])
    assert repo.rows == {}


def test_marks_for_another_accounts_subject_are_rejected(repo, svc):
    with pytest.raises(ValidationError, match="Unknown subject id"):
        svc.mark_attendance(user_id="t2", drafts=[_draft("absent", student="9")])
    assert repo.rows == {}


def test_class_roster_filters_year_subject_and_name():
    students = [
        make_student("a", "Alice", "Year 7", ("math",)),
        make_student("b", "Bob", "Year 7", ("sci",)),
        make_student("c", "Alina", "Year 8", ("math",)),
        make_student("d", "Dora", "Year 7", ("math", "sci")),
    ]

    assert [s.id for s in class_roster(students, year="Year 7", subject_id="math")] == ["a", "d"]
    assert [s.id for s in class_roster(students, year="Year 7", subject_id="math", search="ALI")] == ["a"]


def test_bulk_marks_and_counts_include_unmarked():
    roster = [make_student("a", "Alice"), make_student("b", "Bob"), make_student("c", "Cara")]

    marks = bulk_marks(roster[:2], AttendanceStatus.PRESENT)
    marks["b"] = AttendanceStatus.LATE
    counts = status_counts(roster, marks)

    assert (counts.present, counts.absent, counts.late, counts.unmarked) == (1, 0, 1, 1)


def test_build_drafts_use_the_natural_key_id():
    drafts = build_drafts({"a": AttendanceStatus.ABSENT}, subject_id="math", day=DAY)

    assert drafts == [
        AttendanceDraft(
            id="a_2024-01-01_math",
            student_id="a",
            subject_id="math",
            date=DAY,
            status=AttendanceStatus.ABSENT,
        )
    ]
