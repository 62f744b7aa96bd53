from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status of one attendance mark as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class ErrorKind(str, Enum):
    """Category of a failed operation, surfaced to callers with the message."""

    NOT_AUTHENTICATED = "not_authenticated"
    STORE = "store"
    VALIDATION = "validation"
