from __future__ import annotations

from flask import Flask, request, send_file, session

from ..common.web import api_view, current_company_id, current_user_id, json_body, json_ok, login_required
from ..container import Container
from .export import XLSX_MIMETYPE, export_entries_xlsx
from .filter_store import TransactionFilterStore
from .model import TransactionFilters
from .service import compute_stats

_FILTER_ARGS = (
    "type",
    "status",
    "category_id",
    "payment_method_id",
    "customer_id",
    "supplier_id",
    "date_from",
    "date_to",
    "search",
    "contract_id",
)


def _active_filters(company_id: str) -> TransactionFilters:
    """Filters from the query string (remembered for next time) or the saved ones."""
    store = TransactionFilterStore(session)
    user_id = current_user_id()
    store.sync_company(user_id, company_id)
    if any(name in request.args for name in _FILTER_ARGS):
        filters = TransactionFilters.from_mapping(request.args)
        store.save(user_id, company_id, filters)
        return filters
    return store.load(user_id, company_id)


def register(app: Flask, container: Container) -> None:
    service = container.transaction_service

    @app.route("/api/transactions", methods=["GET"], endpoint="transactions_list")
    @login_required
    @api_view("Erro ao carregar lançamentos")
    def transactions_list():
        company_id = current_company_id()
        filters = _active_filters(company_id)
        entries = service.list(company_id, filters)
        return json_ok(entries, filters=filters.to_dict(), stats=compute_stats(entries))

    @app.route("/api/transactions", methods=["POST"], endpoint="transactions_create")
    @login_required
    @api_view("Erro ao criar lançamento")
    def transactions_create():
        ids = service.create(current_company_id(), json_body())
        return json_ok({"ids": ids}, status=201)

    @app.route("/api/transactions/filters", methods=["GET"], endpoint="transactions_filters_get")
    @login_required
    @api_view("Erro ao carregar filtros")
    def transactions_filters_get():
        company_id = current_company_id()
        store = TransactionFilterStore(session)
        store.sync_company(current_user_id(), company_id)
        return json_ok(store.load(current_user_id(), company_id).to_dict())

    @app.route("/api/transactions/filters", methods=["PUT"], endpoint="transactions_filters_save")
    @login_required
    @api_view("Erro ao salvar filtros")
    def transactions_filters_save():
        company_id = current_company_id()
        filters = TransactionFilters.from_mapping(json_body())
        TransactionFilterStore(session).save(current_user_id(), company_id, filters)
        return json_ok(filters.to_dict())

    @app.route("/api/transactions/filters", methods=["DELETE"], endpoint="transactions_filters_clear")
    @login_required
    @api_view("Erro ao limpar filtros")
    def transactions_filters_clear():
        TransactionFilterStore(session).clear(current_user_id(), current_company_id())
        return json_ok({})

    @app.route("/api/transactions/export", methods=["GET"], endpoint="transactions_export")
    @login_required
    @api_view("Erro ao exportar lançamentos")
    def transactions_export():
        company_id = current_company_id()
        output = export_entries_xlsx(service.list(company_id, _active_filters(company_id)))
        return send_file(
            output,
            download_name="lancamentos.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/api/transactions/<entry_id>", methods=["GET"], endpoint="transactions_get")
    @login_required
    @api_view("Erro ao carregar lançamento")
    def transactions_get(entry_id: str):
        return json_ok(service.get(current_company_id(), entry_id))

    @app.route("/api/transactions/<entry_id>", methods=["PUT"], endpoint="transactions_update")
    @login_required
    @api_view("Erro ao atualizar lançamento")
    def transactions_update(entry_id: str):
        service.update(current_company_id(), entry_id, json_body())
        return json_ok()

    @app.route("/api/transactions/<entry_id>", methods=["DELETE"], endpoint="transactions_delete")
    @login_required
    @api_view("Erro ao excluir lançamento")
    def transactions_delete(entry_id: str):
        service.delete(current_company_id(), entry_id)
        return json_ok()

    @app.route("/api/transactions/<entry_id>/status", methods=["POST"], endpoint="transactions_status")
    @login_required
    @api_view("Erro ao atualizar status")
    def transactions_status(entry_id: str):
        data = json_body()
        service.update_status(current_company_id(), entry_id, data.get("status"), data.get("payment_date"))
        return json_ok()

    @app.route("/api/transactions/<entry_id>/pay", methods=["POST"], endpoint="transactions_pay")
    @login_required
    @api_view("Erro ao registrar pagamento")
    def transactions_pay(entry_id: str):
        data = request.get_json(silent=True) or {}
        service.mark_as_paid(
            current_company_id(),
            entry_id,
            payment_date=data.get("payment_date"),
            payment_amount=data.get("payment_amount"),
        )
        return json_ok()

    @app.route("/api/transactions/<entry_id>/pending", methods=["POST"], endpoint="transactions_pending")
    @login_required
    @api_view("Erro ao reabrir lançamento")
    def transactions_pending(entry_id: str):
        service.mark_as_pending(current_company_id(), entry_id)
        return json_ok()

    @app.route("/api/transactions/<entry_id>/cancel", methods=["POST"], endpoint="transactions_cancel")
    @login_required
    @api_view("Erro ao cancelar lançamento")
    def transactions_cancel(entry_id: str):
        service.cancel(current_company_id(), entry_id, json_body().get("reason", ""))
        return json_ok()
