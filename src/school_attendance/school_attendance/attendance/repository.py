from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceDraft, AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[AttendanceRecord]:
        """All records of the user, newest date first."""

        raise NotImplementedError

    def upsert_marks(self, *, user_id: str, marked_by: str, drafts: Sequence[AttendanceDraft]) -> Sequence[AttendanceRecord]:
        """Write one mark per natural key, replacing any stored mark for that key.

        The whole batch is applied atomically. Returns the stored rows in batch order.
        """

        raise NotImplementedError
