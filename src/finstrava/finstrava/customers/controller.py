from __future__ import annotations

from flask import Flask, request

from ..common.web import api_view, current_company_id, json_body, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.customer_service

    @app.route("/api/customers", methods=["GET"], endpoint="customers_list")
    @login_required
    @api_view("Erro ao carregar clientes")
    def customers_list():
        return json_ok(service.list(current_company_id()))

    @app.route("/api/customers", methods=["POST"], endpoint="customers_create")
    @login_required
    @api_view("Erro ao criar cliente")
    def customers_create():
        customer_id = service.create(current_company_id(), json_body())
        return json_ok({"id": customer_id}, status=201)

    @app.route("/api/customers/kpis", methods=["GET"], endpoint="customers_kpis")
    @login_required
    @api_view("Erro ao carregar indicadores de clientes")
    def customers_kpis():
        return json_ok(service.company_kpis(current_company_id()))

    @app.route("/api/customers/with-kpis", methods=["GET"], endpoint="customers_with_kpis")
    @login_required
    @api_view("Erro ao carregar indicadores de clientes")
    def customers_with_kpis():
        return json_ok(service.customers_with_kpis(current_company_id(), request.args.get("status")))

    @app.route("/api/customers/<customer_id>", methods=["GET"], endpoint="customers_get")
    @login_required
    @api_view("Erro ao carregar cliente")
    def customers_get(customer_id: str):
        return json_ok(service.get(current_company_id(), customer_id))

    @app.route("/api/customers/<customer_id>", methods=["PUT"], endpoint="customers_update")
    @login_required
    @api_view("Erro ao atualizar cliente")
    def customers_update(customer_id: str):
        service.update(current_company_id(), customer_id, json_body())
        return json_ok()

    @app.route("/api/customers/<customer_id>", methods=["DELETE"], endpoint="customers_delete")
    @login_required
    @api_view("Erro ao excluir cliente")
    def customers_delete(customer_id: str):
        service.delete(current_company_id(), customer_id)
        return json_ok()
