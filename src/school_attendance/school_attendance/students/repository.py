from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete database.
    Every call is scoped to the owning user.
    """

    def list_for_user(self, user_id: str) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, *, user_id: str, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, *, user_id: str, name: str, year: str, subject_ids: Sequence[str]) -> Student:
        raise NotImplementedError

    def update(self, *, user_id: str, student: Student) -> Optional[Student]:
        """Overwrite name/year/subjects; returns the stored row or None if missing."""

        raise NotImplementedError

    def delete(self, *, user_id: str, student_id: str) -> bool:
        raise NotImplementedError
