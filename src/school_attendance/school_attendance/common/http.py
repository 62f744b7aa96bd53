"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.enums import ErrorKind
from ..core.result import OperationResult

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_AUTHENTICATED: 401,
    ErrorKind.STORE: 502,
}


def to_json(value: Any) -> Any:
    """Plain JSON data for dataclasses, enums, dates and times (ISO format)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def result_response(result: OperationResult, *, status: int = 200):
    if not result.ok:
        return error_response(result.error, STATUS_BY_KIND.get(result.kind, 400))
    return jsonify({"success": True, "data": to_json(result.value)}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper
