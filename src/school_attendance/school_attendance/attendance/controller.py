from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import as_date, today_local
from ..common.http import error_response, json_body, login_required, result_response, to_json
from ..common.validators import require_selection
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..core.result import OperationResult
from ..core.session import FlaskSessionUser
from .roster import bulk_marks, build_drafts, class_roster, status_counts


def _day_arg(value):
    try:
        return as_date(value) if value else today_local()
    except ValueError:
        raise ValidationError("Dates must be YYYY-MM-DD") from None


def register(app: Flask, container: Container) -> None:
    @app.get("/api/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            day = _day_arg(request.args.get("date"))
        except ValidationError as e:
            return error_response(str(e), 400)

        ws = container.workspace(FlaskSessionUser())
        loaded = ws.refresh()
        if not loaded.ok:
            return result_response(loaded)

        data = {"date": day, **to_json(ws.stats(day)), "total_subjects": len(ws.snapshot.subjects)}
        return result_response(OperationResult.success(data))

    @app.get("/api/attendance/roster", endpoint="attendance_roster")
    @login_required
    def roster():
        year = request.args.get("year", "")
        subject_id = request.args.get("subject", "")
        try:
            day = _day_arg(request.args.get("date"))
        except ValidationError as e:
            return error_response(str(e), 400)

        ws = container.workspace(FlaskSessionUser())
        loaded = ws.refresh()
        if not loaded.ok:
            return result_response(loaded)

        students = class_roster(ws.snapshot.students, year=year, subject_id=subject_id, search=request.args.get("search", ""))
        on_roster = {s.id for s in students}
        # Marks already saved for this class and day.
        marks = {
            r.student_id: r.status
            for r in ws.snapshot.records
            if r.subject_id == subject_id and r.date == day and r.student_id in on_roster
        }

        data = {
            "date": day,
            "subject_id": subject_id,
            "students": students,
            "marks": marks,
            "counts": status_counts(students, marks),
        }
        return result_response(OperationResult.success(data))

    @app.post("/api/attendance", endpoint="attendance_mark")
    @login_required
    def mark():
        data = json_body()
        marks = data.get("marks") or {}
        try:
            require_selection(marks, "attendance mark")
            if not isinstance(marks, dict):
                raise ValidationError("marks must map student ids to statuses")
            day = _day_arg(data.get("date"))
        except ValidationError as e:
            return error_response(str(e), 400)

        drafts = build_drafts(marks, subject_id=str(data.get("subject_id") or ""), day=day)

        ws = container.workspace(FlaskSessionUser())
        return result_response(ws.mark_attendance(drafts), status=201)

    @app.post("/api/attendance/bulk", endpoint="attendance_mark_all")
    @login_required
    def mark_all():
        """Give the whole class roster (year + subject) the same status."""
        data = json_body()
        subject_id = str(data.get("subject_id") or "")
        try:
            status = AttendanceStatus(data.get("status"))
        except ValueError:
            return error_response(f"Unknown attendance status: {data.get('status')!r}", 400)
        try:
            day = _day_arg(data.get("date"))
        except ValidationError as e:
            return error_response(str(e), 400)

        ws = container.workspace(FlaskSessionUser())
        loaded = ws.refresh()
        if not loaded.ok:
            return result_response(loaded)

        roster = class_roster(
            ws.snapshot.students,
            year=str(data.get("year") or ""),
            subject_id=subject_id,
            search=str(data.get("search") or ""),
        )
        if not roster:
            return error_response("No students in this class", 400)

        drafts = build_drafts(bulk_marks(roster, status), subject_id=subject_id, day=day)
        return result_response(ws.mark_attendance(drafts), status=201)
