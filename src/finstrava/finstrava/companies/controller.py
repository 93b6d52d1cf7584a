from __future__ import annotations

from flask import Flask, session

from ..common.web import api_view, current_company_id, current_user_id, json_body, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/companies", methods=["GET"], endpoint="companies_list")
    @login_required
    @api_view("Erro ao carregar empresas")
    def companies_list():
        user_id = current_user_id()
        companies = container.company_service.list_companies(user_id)
        selected = container.company_service.resolve_selected(user_id, session.get("company_id"))
        if selected:
            session["company_id"] = selected.id
        else:
            session.pop("company_id", None)
        return json_ok(companies, selected=selected)

    @app.route("/api/companies", methods=["POST"], endpoint="companies_create")
    @login_required
    @api_view("Erro ao criar empresa. Por favor, tente novamente.")
    def companies_create():
        data = json_body()
        company_id = container.company_service.create_company_with_admin(
            user_id=current_user_id(),
            name=data.get("name", ""),
            cnpj=data.get("cnpj"),
            legal_name=data.get("legal_name"),
        )
        if company_id and not session.get("company_id"):
            session["company_id"] = company_id
        return json_ok({"id": company_id}, status=201)

    @app.route("/api/companies/select", methods=["POST"], endpoint="companies_select")
    @login_required
    @api_view("Erro ao selecionar empresa")
    def companies_select():
        data = json_body()
        company = container.company_service.select(current_user_id(), str(data.get("company_id", "")))
        session["company_id"] = company.id
        return json_ok(company)

    @app.route("/api/companies/<company_id>", methods=["GET"], endpoint="companies_get")
    @login_required
    @api_view("Erro ao carregar empresa")
    def companies_get(company_id: str):
        container.company_service.select(current_user_id(), company_id)
        return json_ok(container.company_service.get(company_id))

    @app.route("/api/companies/<company_id>", methods=["PUT"], endpoint="companies_update")
    @login_required
    @api_view("Erro ao atualizar empresa")
    def companies_update(company_id: str):
        container.company_service.select(current_user_id(), company_id)
        return json_ok(container.company_service.update(company_id, json_body()))

    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    @login_required
    @api_view("Erro ao carregar configurações")
    def settings_get():
        company_id = current_company_id()
        return json_ok(
            container.settings_service.get_settings(company_id),
            cancellation_reasons=container.settings_service.list_cancellation_reasons(company_id),
        )

    @app.route("/api/settings", methods=["PUT"], endpoint="settings_update")
    @login_required
    @api_view("Erro ao salvar configurações")
    def settings_update():
        return json_ok(container.settings_service.update_settings(current_company_id(), json_body()))

    @app.route("/api/settings/cancellation-reasons", methods=["POST"], endpoint="cancellation_reasons_create")
    @login_required
    @api_view("Erro ao criar motivo de cancelamento")
    def cancellation_reasons_create():
        reason_id = container.settings_service.create_cancellation_reason(current_company_id(), json_body())
        return json_ok({"id": reason_id}, status=201)

    @app.route("/api/settings/cancellation-reasons/reorder", methods=["POST"], endpoint="cancellation_reasons_reorder")
    @login_required
    @api_view("Erro ao reordenar motivos")
    def cancellation_reasons_reorder():
        data = json_body()
        container.settings_service.reorder_cancellation_reasons(current_company_id(), data.get("reasons") or [])
        return json_ok()

    @app.route("/api/settings/cancellation-reasons/<reason_id>", methods=["PUT"], endpoint="cancellation_reasons_update")
    @login_required
    @api_view("Erro ao atualizar motivo de cancelamento")
    def cancellation_reasons_update(reason_id: str):
        container.settings_service.update_cancellation_reason(current_company_id(), reason_id, json_body())
        return json_ok()

    @app.route("/api/settings/cancellation-reasons/<reason_id>", methods=["DELETE"], endpoint="cancellation_reasons_delete")
    @login_required
    @api_view("Erro ao excluir motivo de cancelamento")
    def cancellation_reasons_delete(reason_id: str):
        container.settings_service.delete_cancellation_reason(current_company_id(), reason_id)
        return json_ok()
