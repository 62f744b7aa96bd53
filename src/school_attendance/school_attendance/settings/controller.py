from __future__ import annotations

from flask import Flask

from ..common.http import json_body, login_required, result_response
from ..container import Container
from ..core.constants import TIMEZONES, YEAR_LEVELS
from ..core.result import OperationResult
from ..core.session import FlaskSessionUser


def register(app: Flask, container: Container) -> None:
    @app.get("/api/settings", endpoint="settings_get")
    @login_required
    def get_settings():
        ws = container.workspace(FlaskSessionUser())
        return result_response(ws.get_settings())

    @app.put("/api/settings", endpoint="settings_update")
    @login_required
    def update_settings():
        ws = container.workspace(FlaskSessionUser())
        return result_response(ws.update_settings(**json_body()))

    @app.get("/api/settings/options", endpoint="settings_options")
    @login_required
    def options():
        return result_response(
            OperationResult.success({"year_levels": list(YEAR_LEVELS), "timezones": list(TIMEZONES)})
        )
