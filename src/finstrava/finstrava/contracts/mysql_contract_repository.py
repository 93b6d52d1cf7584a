from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.constants import AUTOMATION_LOG_TYPE
from ..core.enums import BillingType, ContractStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    call_function,
    call_procedure,
    db_cursor,
    fetchall,
    insert_row,
    soft_delete,
    update_row,
)
from .model import AutomationRun, Contract, ContractItem, ExpiredContract, GeneratedTransaction, ProcessedRenewal
from .repository import ContractAutomationRepository, ContractRepository


def _as_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value else None


def _row_to_item(r: dict) -> ContractItem:
    return ContractItem(
        id=str(r["id"]),
        contract_id=str(r["contract_id"]),
        product_id=str(r["product_id"]),
        quantity=_dec(r.get("quantity")),
        unit_price=_dec(r.get("unit_price")),
        total_price=_dec(r["total_price"]) if r.get("total_price") is not None else None,
        description=r.get("description"),
        is_active=bool(r.get("is_active", True)),
        product_name=r.get("product_name"),
    )


def _row_to_contract(r: dict, items: list[ContractItem]) -> Contract:
    return Contract(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        customer_id=str(r["customer_id"]),
        title=r["title"],
        start_date=_as_date(r["start_date"]),
        billing_type=BillingType(r["billing_type"]),
        billing_day=int(r["billing_day"]),
        monthly_value=_dec(r.get("monthly_value")),
        status=ContractStatus(r["status"]),
        contract_number=r.get("contract_number"),
        description=r.get("description"),
        end_date=_as_date(r.get("end_date")),
        next_billing_date=_as_date(r.get("next_billing_date")),
        default_category_id=_opt_str(r.get("default_category_id")),
        default_payment_method_id=_opt_str(r.get("default_payment_method_id")),
        grace_period_days=int(r.get("grace_period_days") or 0),
        automatic_renewal=bool(r.get("automatic_renewal")),
        renewal_period_months=int(r.get("renewal_period_months") or 12),
        notes=r.get("notes"),
        first_billing_processed=bool(r.get("first_billing_processed")),
        first_billing_date=_as_date(r.get("first_billing_date")),
        contract_duration_months=r.get("contract_duration_months"),
        package_id=_opt_str(r.get("package_id")),
        customer_name=r.get("customer_name"),
        items=items,
    )


class MySQLContractRepository(ContractRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, cur, where: str, params: tuple, order: str = "c.created_at DESC") -> list[Contract]:
        cur.execute(
            f"""
            SELECT c.*, cu.name AS customer_name
            FROM contracts c
            LEFT JOIN customers cu ON cu.id = c.customer_id
            WHERE {where}
            ORDER BY {order}
            """,
            params,
        )
        rows = fetchall(cur)
        if not rows:
            return []
        ids = [str(r["id"]) for r in rows]
        placeholders = ",".join(["%s"] * len(ids))
        cur.execute(
            f"""
            SELECT ci.*, p.name AS product_name
            FROM contract_items ci
            LEFT JOIN products p ON p.id = ci.product_id
            WHERE ci.contract_id IN ({placeholders})
            """,
            tuple(ids),
        )
        items: dict[str, list[ContractItem]] = {}
        for r in fetchall(cur):
            items.setdefault(str(r["contract_id"]), []).append(_row_to_item(r))
        return [_row_to_contract(r, items.get(str(r["id"]), [])) for r in rows]

    def list_for_company(self, company_id: str) -> Sequence[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur, "c.company_id=%s AND c.deleted_at IS NULL", (company_id,))

    def get_by_id(self, company_id: str, contract_id: str) -> Optional[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            found = self._select(cur, "c.id=%s AND c.company_id=%s AND c.deleted_at IS NULL", (contract_id, company_id))
            return found[0] if found else None

    def create(self, company_id: str, data: Mapping[str, Any], items: Sequence[ContractItem]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            contract_id = insert_row(cur, "contracts", {**data, "company_id": company_id})
            for item in items:
                insert_row(
                    cur,
                    "contract_items",
                    {
                        "contract_id": contract_id,
                        "product_id": item.product_id,
                        "quantity": item.quantity,
                        "unit_price": item.unit_price,
                        "description": item.description,
                        "is_active": item.is_active,
                    },
                )
            return contract_id

    def update(self, company_id: str, contract_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "contracts", contract_id, data, company_id=company_id, exclude_deleted=True)

    def set_status(self, company_id: str, contract_id: str, status: ContractStatus) -> bool:
        return self.update(company_id, contract_id, {"status": status})

    def soft_delete(self, company_id: str, contract_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "contracts", contract_id, company_id=company_id)

    def list_due_on(self, company_id: str, day: date) -> Sequence[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(
                cur,
                "c.company_id=%s AND c.next_billing_date=%s AND c.status=%s AND c.deleted_at IS NULL",
                (company_id, day, ContractStatus.ACTIVE.value),
            )

    def list_expiring(self, company_id: str, until: date) -> Sequence[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(
                cur,
                "c.company_id=%s AND c.status=%s AND c.end_date IS NOT NULL AND c.end_date<=%s "
                "AND c.deleted_at IS NULL",
                (company_id, ContractStatus.ACTIVE.value, until),
                order="c.end_date",
            )

    def first_next_billing_date(self, start_date: date, billing_type: BillingType, billing_day: int) -> Optional[date]:
        value = call_function(
            self._conn_factory,
            "calculate_first_next_billing_date",
            (start_date, billing_type.value, billing_day),
        )
        return _as_date(value)

    def next_billing_date(self, current: date, billing_type: BillingType, billing_day: int) -> Optional[date]:
        value = call_function(
            self._conn_factory,
            "calculate_next_billing_date_v2",
            (current, billing_type.value, billing_day),
        )
        return _as_date(value)

    def cancel_with_fee(
        self, contract_id: str, reason: str, fee: Decimal, cancellation_date: date
    ) -> Sequence[Mapping[str, Any]]:
        return call_procedure(
            self._conn_factory,
            "cancel_contract_with_fee",
            (contract_id, reason, fee, cancellation_date),
        )


class MySQLContractAutomationRepository(ContractAutomationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def process_renewals(self, day: date) -> Sequence[ProcessedRenewal]:
        rows = call_procedure(self._conn_factory, "process_contract_renewals", (day,))
        return [
            ProcessedRenewal(
                contract_id=str(r["contract_id"]),
                old_end_date=_as_date(r.get("old_end_date")),
                new_end_date=_as_date(r.get("new_end_date")),
                customer_name=r.get("customer_name") or "",
                contract_title=r.get("contract_title") or "",
            )
            for r in rows
        ]

    def expire_contracts(self, day: date) -> Sequence[ExpiredContract]:
        rows = call_procedure(self._conn_factory, "expire_contracts", (day,))
        return [
            ExpiredContract(
                contract_id=str(r["contract_id"]),
                customer_name=r.get("customer_name") or "",
                contract_title=r.get("contract_title") or "",
                end_date=_as_date(r.get("end_date")),
            )
            for r in rows
        ]

    def generate_transactions(self, day: date) -> Sequence[GeneratedTransaction]:
        rows = call_procedure(self._conn_factory, "generate_contract_transactions", (day,))
        return [
            GeneratedTransaction(
                contract_id=str(r["contract_id"]),
                transaction_id=str(r["transaction_id"]),
                customer_name=r.get("customer_name") or "",
                contract_title=r.get("contract_title") or "",
                amount=_dec(r.get("amount")),
            )
            for r in rows
        ]

    def record_run(self, run: AutomationRun) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            insert_row(
                cur,
                "automation_logs",
                {
                    "type": AUTOMATION_LOG_TYPE,
                    "executed_at": run.timestamp.replace(tzinfo=None),
                    "execution_time_ms": run.execution_time_ms,
                    "transactions_generated": len(run.generated_transactions),
                    "contracts_renewed": len(run.processed_renewals),
                    "contracts_expired": len(run.expired_contracts),
                    "errors": json.dumps(run.errors) if run.errors else None,
                    "success": run.success,
                },
            )
