from __future__ import annotations

from flask import Flask, session

from ..common.web import api_view, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    dashboard = container.dashboard_service

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard_overview")
    @login_required
    @api_view("Erro ao carregar dashboard")
    def dashboard_overview():
        return json_ok(dashboard.overview(session.get("company_id")))
