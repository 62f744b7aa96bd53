from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..attendance.model import AttendanceRecord, DateRange, ReportStats, StudentAttendanceSummary, TrendPoint, YearRate


@dataclass(frozen=True)
class ExportRow:
    """Flat report line, one per attendance record."""

    date: date
    student: str
    year: str
    subject: str
    status: str


@dataclass(frozen=True)
class ReportData:
    window: DateRange
    stats: ReportStats
    trend: list[TrendPoint]
    summary: list[StudentAttendanceSummary]
    year_rates: list[YearRate]
    rows: list[ExportRow]


@dataclass(frozen=True)
class StudentReport:
    summary: StudentAttendanceSummary
    records: list[AttendanceRecord]
