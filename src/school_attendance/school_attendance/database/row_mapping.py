"""Translation between database rows and domain entities.

Each entity has an explicit field table: attribute name, column name, and the
pair of conversions applied when loading a row or dumping an entity. Both
directions are pure, and for every entity ``x``::

    to_internal(to_external(x), type(x)) == x

Columns the entity does not carry (``user_id`` on most tables, ``updated_at``
on attendance rows) are ignored when loading and added by the repositories
when writing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Type, TypeVar

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import as_date
from ..core.enums import AttendanceStatus
from ..settings.model import UserSettings
from ..students.model import Student
from ..subjects.model import Enrollment, Subject
from .mysql_base import decode_json_list, encode_json_list, normalize_mysql_time

T = TypeVar("T")


def _identity(value: Any) -> Any:
    return value


def _load_datetime(value: Any) -> Any:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _load_status(value: Any) -> AttendanceStatus:
    return value if isinstance(value, AttendanceStatus) else AttendanceStatus(str(value))


def _dump_status(value: AttendanceStatus) -> str:
    return value.value


def _load_bool(value: Any) -> bool:
    return bool(int(value)) if isinstance(value, (str, bytes)) else bool(value)


@dataclass(frozen=True)
class Field:
    attr: str
    column: str
    load: Callable[[Any], Any] = _identity
    dump: Callable[[Any], Any] = _identity


STUDENT_FIELDS = (
    Field("id", "id"),
    Field("name", "name"),
    Field("year", "year"),
    Field("subject_ids", "subjects", decode_json_list, encode_json_list),
    Field("created_at", "created_at", _load_datetime),
)

SUBJECT_FIELDS = (
    Field("id", "id"),
    Field("name", "name"),
    Field("code", "code"),
    Field("year", "year"),
    Field("description", "description"),
    Field("academic_year", "academic_year"),
    Field("term", "term"),
    Field("room", "room_number"),
    Field("schedule_days", "schedule_days", decode_json_list, encode_json_list),
    Field("schedule_time", "schedule_time", normalize_mysql_time),
    Field("owner_id", "user_id"),
    Field("created_at", "created_at", _load_datetime),
    Field("updated_at", "updated_at", _load_datetime),
)

ENROLLMENT_FIELDS = (
    Field("id", "id"),
    Field("student_id", "student_id"),
    Field("subject_id", "subject_id"),
    Field("created_at", "created_at", _load_datetime),
)

ATTENDANCE_FIELDS = (
    Field("id", "id"),
    Field("student_id", "student_id"),
    Field("subject_id", "subject_id"),
    Field("date", "date", as_date),
    Field("status", "status", _load_status, _dump_status),
    Field("marked_by", "marked_by"),
    Field("marked_at", "created_at", _load_datetime),
)

SETTINGS_FIELDS = (
    Field("user_id", "user_id"),
    Field("school_year", "school_year"),
    Field("default_year_level", "default_year_level"),
    Field("attendance_reminder_time", "attendance_reminder_time", normalize_mysql_time),
    Field("email_notifications", "email_notifications", _load_bool, int),
    Field("theme", "theme"),
    Field("timezone", "timezone"),
    Field("created_at", "created_at", _load_datetime),
    Field("updated_at", "updated_at", _load_datetime),
)

FIELD_TABLES: Dict[type, tuple] = {
    Student: STUDENT_FIELDS,
    Subject: SUBJECT_FIELDS,
    Enrollment: ENROLLMENT_FIELDS,
    AttendanceRecord: ATTENDANCE_FIELDS,
    UserSettings: SETTINGS_FIELDS,
}


def _fields_for(entity_type: type) -> tuple:
    try:
        return FIELD_TABLES[entity_type]
    except KeyError:
        raise TypeError(f"No row mapping for {entity_type.__name__}") from None


def to_internal(row: Mapping[str, Any], entity_type: Type[T]) -> T:
    """Build a domain entity from a database row (column-keyed mapping)."""
    values = {f.attr: f.load(row.get(f.column)) for f in _fields_for(entity_type)}
    return entity_type(**values)


def to_external(entity: Any) -> Dict[str, Any]:
    """Column-keyed row for a domain entity, values ready to bind as query params."""
    return {f.column: f.dump(getattr(entity, f.attr)) for f in _fields_for(type(entity))}
