from __future__ import annotations

import logging

import pytest

from conftest import CallLog, InMemoryStudents, make_student
from school_attendance.core.exceptions import ValidationError
from school_attendance.students.service import StudentService, filter_students


@pytest.fixture
def svc():
    return StudentService(InMemoryStudents(CallLog()))


def test_add_trims_name_and_dedupes_subjects(svc):
    s = svc.add(user_id="t1", name="  Alice  ", year="Year 9", subject_ids=["math", "math", " ", "sci"])

    assert s.name == "Alice"
    assert s.year == "Year 9"
    assert s.subject_ids == ("math", "sci")


@pytest.mark.parametrize("name,year", [("", "Year 7"), ("Bob", "Year 6"), ("Bob", "Grade 7")])
def test_add_rejects_bad_input(svc, name, year):
    with pytest.raises(ValidationError):
        svc.add(user_id="t1", name=name, year=year)


def test_unknown_subject_ids_only_log_a_warning(svc, caplog):
    with caplog.at_level(logging.WARNING, logger="school_attendance.students.service"):
        s = svc.add(user_id="t1", name="Cara", year="Year 7", subject_ids=["math", "art"], known_subject_ids=["math"])

    assert s.subject_ids == ("math", "art")
    assert "art" in caplog.text


def test_update_changes_only_given_fields(svc):
    s = svc.add(user_id="t1", name="Dan", year="Year 7", subject_ids=["math"])

    updated = svc.update(user_id="t1", student_id=s.id, year="Year 8")

    assert (updated.name, updated.year, updated.subject_ids) == ("Dan", "Year 8", ("math",))


def test_update_and_delete_of_missing_student_fail(svc):
    with pytest.raises(ValidationError):
        svc.update(user_id="t1", student_id="nope", name="X")
    with pytest.raises(ValidationError):
        svc.delete(user_id="t1", student_id="nope")


def test_students_are_scoped_to_their_owner(svc):
    s = svc.add(user_id="t1", name="Eve", year="Year 7")

    assert svc.list_for_user("t2") == []
    with pytest.raises(ValidationError):
        svc.delete(user_id="t2", student_id=s.id)


def test_filter_students_by_name_and_year():
    students = [make_student("a", "Alice", "Year 7"), make_student("b", "Malik", "Year 8"), make_student("c", "Bob", "Year 7")]

    assert [s.id for s in filter_students(students, search="ali")] == ["a", "b"]
    assert [s.id for s in filter_students(students, search="ali", year="Year 8")] == ["b"]
    assert [s.id for s in filter_students(students)] == ["a", "b", "c"]
