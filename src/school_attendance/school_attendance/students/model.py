from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Student:
    """Domain entity: a student registered by one teacher account.

    Note: plain data object (no database access code).
    """

    id: str
    name: str
    year: str
    subject_ids: tuple[str, ...]
    created_at: datetime
