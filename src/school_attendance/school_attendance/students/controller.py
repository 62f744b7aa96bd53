from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, login_required, result_response
from ..common.validators import require_id_list, require_selection
from ..container import Container
from ..core.constants import ALL
from ..core.exceptions import ValidationError
from ..core.result import OperationResult
from ..core.session import FlaskSessionUser
from .service import filter_students


def register(app: Flask, container: Container) -> None:
    @app.get("/api/students", endpoint="students_list")
    @login_required
    def list_students():
        ws = container.workspace(FlaskSessionUser())
        loaded = ws.refresh()
        if not loaded.ok:
            return result_response(loaded)

        students = filter_students(
            ws.snapshot.students,
            search=request.args.get("search", ""),
            year=request.args.get("year", ALL),
        )
        return result_response(OperationResult.success(students))

    @app.post("/api/students", endpoint="students_create")
    @login_required
    def create_student():
        data = json_body()
        try:
            subject_ids = require_id_list(data.get("subject_ids"), "subject_ids")
            require_selection(subject_ids, "subject")
        except ValidationError as e:
            return result_response(OperationResult.failure(e))

        ws = container.workspace(FlaskSessionUser())
        ws.refresh()
        result = ws.add_student(name=data.get("name", ""), year=data.get("year", ""), subject_ids=subject_ids)
        return result_response(result, status=201)

    @app.put("/api/students/<student_id>", endpoint="students_update")
    @login_required
    def update_student(student_id: str):
        data = json_body()
        changes = {k: data[k] for k in ("name", "year", "subject_ids") if k in data}
        if "subject_ids" in changes:
            try:
                changes["subject_ids"] = require_id_list(changes["subject_ids"], "subject_ids")
            except ValidationError as e:
                return result_response(OperationResult.failure(e))

        ws = container.workspace(FlaskSessionUser())
        ws.refresh()
        return result_response(ws.update_student(student_id, **changes))

    @app.delete("/api/students/<student_id>", endpoint="students_delete")
    @login_required
    def delete_student(student_id: str):
        ws = container.workspace(FlaskSessionUser())
        return result_response(ws.delete_student(student_id))
