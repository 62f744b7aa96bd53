"""The boundary between the HTTP shell and the services.

A Workspace holds the DataSnapshot of the signed-in user. Every operation
checks the session first, delegates to a service, folds the stored result
back into the snapshot and reports the outcome as an OperationResult.
Domain errors never escape; anything else is a bug and propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from .attendance.aggregator import compute_daily_stats
from .attendance.model import AttendanceDraft, AttendanceStats
from .attendance.service import AttendanceService
from .common.datetime_utils import today_local
from .core.exceptions import DomainError, NotAuthenticatedError
from .core.result import OperationResult
from .core.session import UserProvider
from .reports.service import ReportService
from .settings.service import SettingsService
from .snapshot import DataSnapshot
from .students.service import StudentService
from .subjects.service import NewSubject, SubjectService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    students: StudentService
    subjects: SubjectService
    attendance: AttendanceService
    settings: SettingsService
    reports: ReportService


class Workspace:
    def __init__(self, services: Services, users: UserProvider):
        self._services = services
        self._users = users
        self._owner: Optional[str] = None
        self._snapshot = DataSnapshot()

    @property
    def snapshot(self) -> DataSnapshot:
        return self._snapshot

    def _require_user(self) -> str:
        user_id = self._users.current_user_id()
        if not user_id:
            raise NotAuthenticatedError()
        if user_id != self._owner:
            # Never show one account's rows to another.
            self._owner = user_id
            self._snapshot = DataSnapshot()
        return user_id

    def _run(self, operation: str, action: Callable[[str], Any]) -> OperationResult:
        try:
            return OperationResult.success(action(self._require_user()))
        except DomainError as e:
            logger.warning("%s failed (%s): %s", operation, e.kind.value, e)
            return OperationResult.failure(e)

    def _known_subject_ids(self) -> Optional[list[str]]:
        return [s.id for s in self._snapshot.subjects] if self._snapshot.subjects else None

    # loading

    def refresh(self) -> OperationResult:
        """Reload every row of the user; the snapshot is only replaced on success."""

        def load(user_id: str) -> DataSnapshot:
            self._snapshot = DataSnapshot.of(
                students=self._services.students.list_for_user(user_id),
                subjects=self._services.subjects.list_for_user(user_id),
                enrollments=self._services.subjects.list_enrollments(user_id),
                records=self._services.attendance.list_for_user(user_id),
            )
            return self._snapshot

        return self._run("refresh", load)

    # students

    def add_student(self, *, name: str, year: str, subject_ids: Iterable[str] = ()) -> OperationResult:
        def add(user_id: str):
            student = self._services.students.add(
                user_id=user_id,
                name=name,
                year=year,
                subject_ids=subject_ids,
                known_subject_ids=self._known_subject_ids(),
            )
            self._snapshot = self._snapshot.add_student(student)
            return student

        return self._run("add_student", add)

    def update_student(self, student_id: str, **changes: Any) -> OperationResult:
        def update(user_id: str):
            student = self._services.students.update(
                user_id=user_id,
                student_id=student_id,
                known_subject_ids=self._known_subject_ids(),
                **changes,
            )
            self._snapshot = self._snapshot.update_student(student)
            return student

        return self._run("update_student", update)

    def delete_student(self, student_id: str) -> OperationResult:
        def delete(user_id: str):
            self._services.students.delete(user_id=user_id, student_id=student_id)
            self._snapshot = self._snapshot.remove_student(student_id)

        return self._run("delete_student", delete)

    # subjects

    def add_subject(self, data: NewSubject) -> OperationResult:
        def add(user_id: str):
            subject = self._services.subjects.add(user_id=user_id, data=data)
            self._snapshot = self._snapshot.add_subject(subject)
            return subject

        return self._run("add_subject", add)

    def update_subject(self, subject_id: str, **changes: Any) -> OperationResult:
        def update(user_id: str):
            subject = self._services.subjects.update(user_id=user_id, subject_id=subject_id, **changes)
            self._snapshot = self._snapshot.update_subject(subject)
            return subject

        return self._run("update_subject", update)

    def delete_subject(self, subject_id: str) -> OperationResult:
        def delete(user_id: str):
            self._services.subjects.delete(user_id=user_id, subject_id=subject_id)
            self._snapshot = self._snapshot.remove_subject(subject_id)

        return self._run("delete_subject", delete)

    def assign_students_to_subject(self, subject_id: str, student_ids: Iterable[str]) -> OperationResult:
        def assign(user_id: str):
            links = self._services.subjects.assign_students(
                user_id=user_id, subject_id=subject_id, student_ids=student_ids
            )
            self._snapshot = self._snapshot.replace_enrollment(subject_id, links)
            return links

        return self._run("assign_students_to_subject", assign)

    def get_student_count(self, subject_id: str) -> int:
        return self._snapshot.student_count(subject_id)

    # attendance

    def mark_attendance(self, drafts: Sequence[AttendanceDraft]) -> OperationResult:
        def mark(user_id: str):
            batch = self._services.attendance.normalize_drafts(drafts)
            stored = self._services.attendance.mark_attendance(user_id=user_id, drafts=batch)
            self._snapshot = self._snapshot.reconcile_marks((d.natural_key for d in batch), stored)
            return stored

        return self._run("mark_attendance", mark)

    def stats(self, as_of: Union[date, str, None] = None) -> AttendanceStats:
        """Dashboard figures computed from the current snapshot."""
        return compute_daily_stats(
            self._snapshot.records,
            as_of or today_local(),
            total_students=len(self._snapshot.students),
        )

    # reports

    def report(self, **filters: Any) -> OperationResult:
        return self._run("report", lambda _: self._services.reports.build_report(self._snapshot, **filters))

    def student_report(self, student_id: str) -> OperationResult:
        return self._run(
            "student_report",
            lambda _: self._services.reports.build_student_report(self._snapshot, student_id),
        )

    # settings

    def get_settings(self) -> OperationResult:
        return self._run("get_settings", self._services.settings.get)

    def update_settings(self, /, **changes: Any) -> OperationResult:
        return self._run("update_settings", lambda user_id: self._services.settings.update(user_id, **changes))
