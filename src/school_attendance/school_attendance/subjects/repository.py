from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Enrollment, Subject


class SubjectRepository(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[Subject]:
        raise NotImplementedError

    def get_by_id(self, *, user_id: str, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def create(self, *, user_id: str, subject: Subject) -> Subject:
        """Insert a subject; id and timestamps of the argument are ignored."""

        raise NotImplementedError

    def update(self, *, user_id: str, subject: Subject) -> Optional[Subject]:
        raise NotImplementedError

    def delete(self, *, user_id: str, subject_id: str) -> bool:
        raise NotImplementedError


class EnrollmentRepository(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[Enrollment]:
        raise NotImplementedError

    def replace_for_subject(self, *, user_id: str, subject_id: str, student_ids: Sequence[str]) -> Sequence[Enrollment]:
        """Drop every link of the subject, then link exactly ``student_ids``.

        Returns the links now stored for the subject.
        """

        raise NotImplementedError
