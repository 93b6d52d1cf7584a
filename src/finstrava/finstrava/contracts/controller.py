from __future__ import annotations

from flask import Flask, request

from ..common.web import api_view, current_company_id, json_body, json_ok, login_required
from ..container import Container


def _requested_date():
    data = request.get_json(silent=True) or {}
    return data.get("date") or request.args.get("date")


def register(app: Flask, container: Container) -> None:
    service = container.contract_service
    automation = container.contract_automation_service

    @app.route("/api/contracts", methods=["GET"], endpoint="contracts_list")
    @login_required
    @api_view("Erro ao carregar contratos")
    def contracts_list():
        return json_ok(service.list(current_company_id()))

    @app.route("/api/contracts", methods=["POST"], endpoint="contracts_create")
    @login_required
    @api_view("Erro ao criar contrato")
    def contracts_create():
        return json_ok({"id": service.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/contracts/due", methods=["GET"], endpoint="contracts_due")
    @login_required
    @api_view("Erro ao carregar contratos")
    def contracts_due():
        return json_ok(service.list_due_on(current_company_id(), request.args.get("date", "")))

    @app.route("/api/contracts/expiring", methods=["GET"], endpoint="contracts_expiring")
    @login_required
    @api_view("Erro ao carregar contratos")
    def contracts_expiring():
        days = request.args.get("days", type=int)
        company_id = current_company_id()
        if days is None:
            return json_ok(service.list_expiring(company_id))
        return json_ok(service.list_expiring(company_id, days))

    @app.route("/api/contracts/<contract_id>", methods=["GET"], endpoint="contracts_get")
    @login_required
    @api_view("Erro ao carregar contrato")
    def contracts_get(contract_id: str):
        return json_ok(service.get(current_company_id(), contract_id))

    @app.route("/api/contracts/<contract_id>", methods=["PUT"], endpoint="contracts_update")
    @login_required
    @api_view("Erro ao atualizar contrato")
    def contracts_update(contract_id: str):
        service.update(current_company_id(), contract_id, json_body())
        return json_ok()

    @app.route("/api/contracts/<contract_id>", methods=["DELETE"], endpoint="contracts_delete")
    @login_required
    @api_view("Erro ao excluir contrato")
    def contracts_delete(contract_id: str):
        service.delete(current_company_id(), contract_id)
        return json_ok()

    @app.route("/api/contracts/<contract_id>/activate", methods=["POST"], endpoint="contracts_activate")
    @login_required
    @api_view("Erro ao ativar contrato")
    def contracts_activate(contract_id: str):
        service.activate(current_company_id(), contract_id)
        return json_ok()

    @app.route("/api/contracts/<contract_id>/pause", methods=["POST"], endpoint="contracts_pause")
    @login_required
    @api_view("Erro ao pausar contrato")
    def contracts_pause(contract_id: str):
        service.pause(current_company_id(), contract_id)
        return json_ok()

    @app.route("/api/contracts/<contract_id>/cancel", methods=["POST"], endpoint="contracts_cancel")
    @login_required
    @api_view("Erro ao cancelar contrato")
    def contracts_cancel(contract_id: str):
        data = request.get_json(silent=True) or {}
        company_id = current_company_id()
        if data.get("cancellation_reason"):
            result = service.cancel_with_fee(
                company_id,
                contract_id,
                reason=data["cancellation_reason"],
                fee=data.get("cancellation_fee"),
                cancellation_date=data.get("cancellation_date"),
            )
            return json_ok(result)
        service.cancel(company_id, contract_id)
        return json_ok()

    # Manual automation (same procedures the cron endpoint runs)

    @app.route("/api/contracts/automation/renewals", methods=["POST"], endpoint="contracts_automation_renewals")
    @login_required
    @api_view("Erro ao processar renovações")
    def contracts_automation_renewals():
        current_company_id()
        return json_ok(automation.process_renewals(_requested_date()))

    @app.route("/api/contracts/automation/expirations", methods=["POST"], endpoint="contracts_automation_expirations")
    @login_required
    @api_view("Erro ao expirar contratos")
    def contracts_automation_expirations():
        current_company_id()
        return json_ok(automation.expire_contracts(_requested_date()))

    @app.route("/api/contracts/automation/transactions", methods=["POST"], endpoint="contracts_automation_transactions")
    @login_required
    @api_view("Erro ao gerar lançamentos")
    def contracts_automation_transactions():
        current_company_id()
        return json_ok(automation.generate_transactions(_requested_date()))

    @app.route("/api/contracts/automation/run", methods=["POST"], endpoint="contracts_automation_run")
    @login_required
    @api_view("Erro ao executar automação de contratos")
    def contracts_automation_run():
        current_company_id()
        run = automation.process_all(_requested_date())
        return json_ok(
            {
                "generatedTransactions": run.generated_transactions,
                "processedRenewals": run.processed_renewals,
                "expiredContracts": run.expired_contracts,
            }
        )
