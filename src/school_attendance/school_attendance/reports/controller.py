from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, login_required, result_response
from ..container import Container
from ..core.constants import ALL
from ..core.session import FlaskSessionUser


def register(app: Flask, container: Container) -> None:
    @app.get("/api/reports", endpoint="reports")
    @login_required
    def report():
        ws = container.workspace(FlaskSessionUser())
        loaded = ws.refresh()
        if not loaded.ok:
            return result_response(loaded)

        return result_response(
            ws.report(
                start=request.args.get("start") or None,
                end=request.args.get("end") or None,
                year=request.args.get("year", ALL),
                subject=request.args.get("subject", ALL),
            )
        )

    @app.get("/api/reports/students/<student_id>", endpoint="reports_student")
    @login_required
    def student_report(student_id: str):
        ws = container.workspace(FlaskSessionUser())
        loaded = ws.refresh()
        if not loaded.ok:
            return result_response(loaded)

        result = ws.student_report(student_id)
        if result.ok and result.value is None:
            return error_response("Student not found", 404)
        return result_response(result)
