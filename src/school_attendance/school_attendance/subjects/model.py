from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional


@dataclass(frozen=True)
class Subject:
    """Domain entity: a subject taught to one year level, with its weekly schedule."""

    id: str
    name: str
    code: str
    year: str
    academic_year: str
    term: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    room: Optional[str] = None
    schedule_days: tuple[str, ...] = ()
    schedule_time: Optional[time] = None


@dataclass(frozen=True)
class Enrollment:
    """Membership link between a student and a subject."""

    id: str
    student_id: str
    subject_id: str
    created_at: datetime
