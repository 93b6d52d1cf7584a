from __future__ import annotations

from flask import Flask, request

from ..common.web import api_view, current_company_id, json_body, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    payrolls = container.payroll_service

    @app.route("/api/payrolls", methods=["GET"], endpoint="payrolls_list")
    @login_required
    @api_view("Erro ao carregar folhas de pagamento")
    def payrolls_list():
        company_id = current_company_id()
        month = request.args.get("month")
        if month:
            return json_ok(payrolls.find_for_month(company_id, month))
        return json_ok(payrolls.list(company_id))

    @app.route("/api/payrolls", methods=["POST"], endpoint="payrolls_create")
    @login_required
    @api_view("Erro ao criar folha de pagamento")
    def payrolls_create():
        return json_ok({"id": payrolls.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/payrolls/<payroll_id>", methods=["GET"], endpoint="payrolls_get")
    @login_required
    @api_view("Erro ao carregar folha de pagamento")
    def payrolls_get(payroll_id: str):
        payroll, items = payrolls.with_items(current_company_id(), payroll_id)
        return json_ok(payroll, items=items)

    @app.route("/api/payrolls/<payroll_id>", methods=["PUT"], endpoint="payrolls_update")
    @login_required
    @api_view("Erro ao atualizar folha de pagamento")
    def payrolls_update(payroll_id: str):
        payrolls.update(current_company_id(), payroll_id, json_body())
        return json_ok()

    @app.route("/api/payrolls/<payroll_id>", methods=["DELETE"], endpoint="payrolls_delete")
    @login_required
    @api_view("Erro ao excluir folha de pagamento")
    def payrolls_delete(payroll_id: str):
        payrolls.delete(current_company_id(), payroll_id)
        return json_ok()

    @app.route("/api/payrolls/<payroll_id>/items", methods=["GET"], endpoint="payrolls_items")
    @login_required
    @api_view("Erro ao carregar itens da folha")
    def payrolls_items(payroll_id: str):
        return json_ok(payrolls.items(current_company_id(), payroll_id))

    @app.route("/api/payrolls/<payroll_id>/items/<item_id>", methods=["PUT"], endpoint="payrolls_item_update")
    @login_required
    @api_view("Erro ao atualizar item da folha")
    def payrolls_item_update(payroll_id: str, item_id: str):
        payrolls.update_item(current_company_id(), payroll_id, item_id, json_body())
        return json_ok()

    @app.route("/api/payrolls/<payroll_id>/calculate", methods=["POST"], endpoint="payrolls_calculate")
    @login_required
    @api_view("Erro ao calcular folha de pagamento")
    def payrolls_calculate(payroll_id: str):
        return json_ok(payrolls.calculate(current_company_id(), payroll_id))

    @app.route("/api/payrolls/<payroll_id>/recalculate", methods=["POST"], endpoint="payrolls_recalculate")
    @login_required
    @api_view("Erro ao recalcular totais da folha")
    def payrolls_recalculate(payroll_id: str):
        return json_ok(payrolls.recalculate_totals(current_company_id(), payroll_id))

    @app.route("/api/payrolls/<payroll_id>/approve", methods=["POST"], endpoint="payrolls_approve")
    @login_required
    @api_view("Erro ao aprovar folha de pagamento")
    def payrolls_approve(payroll_id: str):
        payrolls.approve(current_company_id(), payroll_id)
        return json_ok()

    @app.route("/api/payrolls/<payroll_id>/cancel", methods=["POST"], endpoint="payrolls_cancel")
    @login_required
    @api_view("Erro ao cancelar folha de pagamento")
    def payrolls_cancel(payroll_id: str):
        payrolls.cancel(current_company_id(), payroll_id)
        return json_ok()

    @app.route("/api/payrolls/<payroll_id>/generate-entries", methods=["POST"], endpoint="payrolls_generate_entries")
    @login_required
    @api_view("Erro ao gerar lançamentos da folha")
    def payrolls_generate_entries(payroll_id: str):
        return json_ok(payrolls.generate_financial_entries(current_company_id(), payroll_id))
