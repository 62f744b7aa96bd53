"""Attendance statistics over in-memory record collections.

Every function here is pure: same input, same output, nothing is mutated.
Rates are percentages (0-100) and are 0 when their scope holds no records.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import as_date
from ..core.constants import ALL, YEAR_LEVELS
from ..core.enums import AttendanceStatus
from ..students.model import Student
from .model import (
    AttendanceRecord,
    AttendanceStats,
    DateRange,
    ReportStats,
    StudentAttendanceSummary,
    TrendPoint,
    YearRate,
)

DateLike = Union[date, str]


def _rate(present: int, total: int) -> float:
    return (present / total) * 100 if total > 0 else 0.0


def _count_statuses(records: Iterable[AttendanceRecord]) -> Counter:
    return Counter(r.status for r in records)


def compute_daily_stats(
    records: Sequence[AttendanceRecord],
    as_of: DateLike,
    total_students: int = 0,
) -> AttendanceStats:
    """Dashboard figures for ``as_of``.

    The present/absent/late counts only cover records dated ``as_of``, but
    ``attendance_rate`` is present/total over the whole ``records`` collection.
    That all-time rate is what the dashboard has always shown; it is kept as-is
    even though it sits next to per-day counts.
    """
    day = as_date(as_of)
    today = _count_statuses(r for r in records if r.date == day)
    overall = _count_statuses(records)

    return AttendanceStats(
        total_students=int(total_students),
        present_today=today[AttendanceStatus.PRESENT],
        absent_today=today[AttendanceStatus.ABSENT],
        late_today=today[AttendanceStatus.LATE],
        attendance_rate=_rate(overall[AttendanceStatus.PRESENT], len(records)),
    )


def summarize_student(student: Student, records: Iterable[AttendanceRecord]) -> StudentAttendanceSummary:
    own = [r for r in records if r.student_id == student.id]
    counts = _count_statuses(own)
    present = counts[AttendanceStatus.PRESENT]
    return StudentAttendanceSummary(
        student=student,
        present=present,
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        total=len(own),
        rate=_rate(present, len(own)),
    )


def compute_student_summaries(
    students: Sequence[Student],
    records: Sequence[AttendanceRecord],
) -> list[StudentAttendanceSummary]:
    """One summary per student, highest rate first.

    sorted() is stable, so students with equal rates keep their input order.
    """
    summaries = [summarize_student(s, records) for s in students]
    return sorted(summaries, key=lambda s: s.rate, reverse=True)


def make_date_range(start: DateLike, end: DateLike) -> DateRange:
    return DateRange(start=as_date(start), end=as_date(end))


def filter_records(
    records: Iterable[AttendanceRecord],
    date_range: DateRange,
    year_filter: str = ALL,
    subject_filter: str = ALL,
    students_by_id: Optional[Mapping[str, Student]] = None,
) -> list[AttendanceRecord]:
    """Records inside the inclusive window that match the year and subject filters.

    A record whose student is unknown never matches a specific year.
    """
    students_by_id = students_by_id or {}
    out: list[AttendanceRecord] = []

    for r in records:
        if r.date not in date_range:
            continue
        if year_filter != ALL:
            student = students_by_id.get(r.student_id)
            if student is None or student.year != year_filter:
                continue
        if subject_filter != ALL and r.subject_id != subject_filter:
            continue
        out.append(r)

    return out


def compute_filtered_stats(
    records: Sequence[AttendanceRecord],
    date_range: DateRange,
    year_filter: str = ALL,
    subject_filter: str = ALL,
    students_by_id: Optional[Mapping[str, Student]] = None,
) -> ReportStats:
    filtered = filter_records(records, date_range, year_filter, subject_filter, students_by_id)
    counts = _count_statuses(filtered)
    present = counts[AttendanceStatus.PRESENT]

    return ReportStats(
        total_records=len(filtered),
        present_count=present,
        absent_count=counts[AttendanceStatus.ABSENT],
        late_count=counts[AttendanceStatus.LATE],
        attendance_rate=_rate(present, len(filtered)),
    )


def compute_trend(filtered_records: Iterable[AttendanceRecord]) -> list[TrendPoint]:
    """Daily present rate, oldest day first. Days without records are skipped."""
    totals: Counter = Counter()
    present: Counter = Counter()

    for r in filtered_records:
        totals[r.date] += 1
        if r.status == AttendanceStatus.PRESENT:
            present[r.date] += 1

    return [TrendPoint(date=day, rate=_rate(present[day], totals[day])) for day in sorted(totals)]


def compute_year_rates(
    summaries: Iterable[StudentAttendanceSummary],
    year_levels: Sequence[str] = YEAR_LEVELS,
) -> list[YearRate]:
    """Average student rate per year level, in ``year_levels`` order.

    Every student counts once, including those without records (rate 0).
    """
    by_year: dict[str, list[float]] = {year: [] for year in year_levels}
    for s in summaries:
        if s.student.year in by_year:
            by_year[s.student.year].append(s.rate)

    return [
        YearRate(year=year, rate=(sum(rates) / len(rates)) if rates else 0.0, students=len(rates))
        for year, rates in by_year.items()
    ]
