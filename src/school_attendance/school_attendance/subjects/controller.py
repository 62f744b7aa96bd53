from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, login_required, result_response, to_json
from ..common.validators import require_id_list
from ..container import Container
from ..core.constants import ALL
from ..core.exceptions import ValidationError
from ..core.result import OperationResult
from ..core.session import FlaskSessionUser
from .service import NewSubject, filter_subjects

_FIELDS = tuple(NewSubject.__dataclass_fields__)


def register(app: Flask, container: Container) -> None:
    @app.get("/api/subjects", endpoint="subjects_list")
    @login_required
    def list_subjects():
        ws = container.workspace(FlaskSessionUser())
        loaded = ws.refresh()
        if not loaded.ok:
            return result_response(loaded)

        subjects = filter_subjects(
            ws.snapshot.subjects,
            search=request.args.get("search", ""),
            year=request.args.get("year", ALL),
        )
        data = [{**to_json(s), "student_count": ws.get_student_count(s.id)} for s in subjects]
        return result_response(OperationResult.success(data))

    @app.post("/api/subjects", endpoint="subjects_create")
    @login_required
    def create_subject():
        data = json_body()
        fields = {k: data[k] for k in _FIELDS if k in data}
        fields.setdefault("name", "")
        fields.setdefault("code", "")
        fields.setdefault("year", "")
        if "schedule_days" in fields:
            fields["schedule_days"] = tuple(fields["schedule_days"] or ())

        ws = container.workspace(FlaskSessionUser())
        return result_response(ws.add_subject(NewSubject(**fields)), status=201)

    @app.put("/api/subjects/<subject_id>", endpoint="subjects_update")
    @login_required
    def update_subject(subject_id: str):
        data = json_body()
        changes = {k: data[k] for k in _FIELDS if k in data}

        ws = container.workspace(FlaskSessionUser())
        return result_response(ws.update_subject(subject_id, **changes))

    @app.delete("/api/subjects/<subject_id>", endpoint="subjects_delete")
    @login_required
    def delete_subject(subject_id: str):
        ws = container.workspace(FlaskSessionUser())
        return result_response(ws.delete_subject(subject_id))

    @app.put("/api/subjects/<subject_id>/students", endpoint="subjects_assign")
    @login_required
    def assign_students(subject_id: str):
        try:
            student_ids = require_id_list(json_body().get("student_ids"), "student_ids")
        except ValidationError as e:
            return result_response(OperationResult.failure(e))

        ws = container.workspace(FlaskSessionUser())
        result = ws.assign_students_to_subject(subject_id, student_ids)
        if not result.ok:
            return result_response(result)
        return result_response(
            OperationResult.success({"subject_id": subject_id, "student_count": ws.get_student_count(subject_id)})
        )
