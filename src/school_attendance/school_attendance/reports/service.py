from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence, Union

from ..attendance import aggregator
from ..attendance.model import AttendanceRecord, DateRange
from ..common.datetime_utils import as_date, today_local
from ..core.constants import ALL, DEFAULT_REPORT_DAYS, UNKNOWN_LABEL
from ..core.exceptions import ValidationError
from ..snapshot import DataSnapshot
from .model import ExportRow, ReportData, StudentReport

logger = logging.getLogger(__name__)

DateLike = Union[date, str, None]


class ReportService:
    """Read-only reports over a DataSnapshot; never touches the database."""

    def default_window(self, today: Optional[date] = None) -> DateRange:
        end = today or today_local()
        return DateRange(start=end - timedelta(days=DEFAULT_REPORT_DAYS), end=end)

    def resolve_window(self, start: DateLike, end: DateLike, today: Optional[date] = None) -> DateRange:
        fallback = self.default_window(today)
        try:
            window = DateRange(
                start=as_date(start) if start else fallback.start,
                end=as_date(end) if end else fallback.end,
            )
        except ValueError:
            raise ValidationError("Dates must be YYYY-MM-DD") from None
        if window.start > window.end:
            raise ValidationError("Start date must not be after end date")
        return window

    def build_report(
        self,
        snapshot: DataSnapshot,
        *,
        start: DateLike = None,
        end: DateLike = None,
        year: str = ALL,
        subject: str = ALL,
        today: Optional[date] = None,
    ) -> ReportData:
        """Filtered stats, daily trend and export rows, plus the per-student table.

        The per-student table and the per-year rates derived from it are built
        from every loaded record; the window and filters only apply to stats,
        trend and rows.
        """
        window = self.resolve_window(start, end, today)
        students_by_id = snapshot.students_by_id()
        filtered = aggregator.filter_records(snapshot.records, window, year, subject, students_by_id)

        summary = aggregator.compute_student_summaries(snapshot.students, snapshot.records)
        logger.debug("Report %s..%s year=%s subject=%s: %d record(s)", window.start, window.end, year, subject, len(filtered))

        return ReportData(
            window=window,
            stats=aggregator.compute_filtered_stats(snapshot.records, window, year, subject, students_by_id),
            trend=aggregator.compute_trend(filtered),
            summary=summary,
            year_rates=aggregator.compute_year_rates(summary),
            rows=self.export_rows(snapshot, filtered),
        )

    def export_rows(self, snapshot: DataSnapshot, records: Sequence[AttendanceRecord]) -> list[ExportRow]:
        students = snapshot.students_by_id()
        subjects = snapshot.subjects_by_id()
        rows = []
        for r in records:
            student = students.get(r.student_id)
            subject = subjects.get(r.subject_id)
            rows.append(
                ExportRow(
                    date=r.date,
                    student=student.name if student else UNKNOWN_LABEL,
                    year=student.year if student else UNKNOWN_LABEL,
                    subject=subject.name if subject else UNKNOWN_LABEL,
                    status=r.status.value,
                )
            )
        return rows

    def build_student_report(self, snapshot: DataSnapshot, student_id: str) -> Optional[StudentReport]:
        student = snapshot.students_by_id().get(student_id)
        if not student:
            return None

        own = sorted(
            (r for r in snapshot.records if r.student_id == student_id),
            key=lambda r: (r.date, r.marked_at),
            reverse=True,
        )
        return StudentReport(summary=aggregator.summarize_student(student, own), records=own)
