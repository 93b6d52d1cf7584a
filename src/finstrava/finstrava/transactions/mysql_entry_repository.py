from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.enums import EntryStatus, EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, insert_row, soft_delete, update_row
from .model import FinancialEntry, TransactionFilters
from .repository import FinancialEntryRepository

_SELECT = """
    SELECT fe.*, cu.name AS customer_name, cat.name AS category_name,
           pm.name AS payment_method_name, ct.title AS contract_title
    FROM financial_entries fe
    LEFT JOIN customers cu ON cu.id = fe.customer_id
    LEFT JOIN categories cat ON cat.id = fe.category_id
    LEFT JOIN payment_methods pm ON pm.id = fe.payment_method_id
    LEFT JOIN contracts ct ON ct.id = fe.contract_id
"""

# filter field -> column compared with "="
_EQUALITY_FILTERS = (
    "type",
    "status",
    "category_id",
    "payment_method_id",
    "customer_id",
    "supplier_id",
    "contract_id",
)


def _as_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def _opt_dec(value: Any) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value else None


def row_to_entry(r: dict) -> FinancialEntry:
    return FinancialEntry(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        type=EntryType(r["type"]),
        status=EntryStatus(r["status"]),
        amount=Decimal(str(r.get("amount") or 0)),
        due_date=_as_date(r["due_date"]),
        description=r.get("description") or "",
        payment_amount=_opt_dec(r.get("payment_amount")),
        payment_date=_as_date(r.get("payment_date")),
        category_id=_opt_str(r.get("category_id")),
        payment_method_id=_opt_str(r.get("payment_method_id")),
        customer_id=_opt_str(r.get("customer_id")),
        supplier_id=_opt_str(r.get("supplier_id")),
        bank_account_id=_opt_str(r.get("bank_account_id")),
        product_id=_opt_str(r.get("product_id")),
        contract_id=_opt_str(r.get("contract_id")),
        notes=r.get("notes"),
        installment=r.get("installment"),
        total_installments=r.get("total_installments"),
        is_recurring=bool(r.get("is_recurring")),
        recurring_type=r.get("recurring_type"),
        parent_transaction_id=_opt_str(r.get("parent_transaction_id")),
        is_contract_generated=bool(r.get("is_contract_generated")),
        cancellation_reason=r.get("cancellation_reason"),
        cancelled_at=r.get("cancelled_at"),
        created_at=r.get("created_at"),
        customer_name=r.get("customer_name"),
        category_name=r.get("category_name"),
        payment_method_name=r.get("payment_method_name"),
        contract_title=r.get("contract_title"),
    )


def build_filter_clause(company_id: str, filters: TransactionFilters) -> tuple[str, list]:
    """WHERE clause (without the keyword) and its parameters for a filter set."""
    clauses = ["fe.company_id=%s", "fe.deleted_at IS NULL"]
    params: list = [company_id]
    for name in _EQUALITY_FILTERS:
        value = getattr(filters, name)
        if value is not None:
            clauses.append(f"fe.{name}=%s")
            params.append(value.value if hasattr(value, "value") else value)
    if filters.date_from:
        clauses.append("fe.due_date>=%s")
        params.append(filters.date_from)
    if filters.date_to:
        clauses.append("fe.due_date<=%s")
        params.append(filters.date_to)
    if filters.search:
        pattern = f"%{filters.search.lower()}%"
        clauses.append("(LOWER(fe.description) LIKE %s OR LOWER(fe.notes) LIKE %s)")
        params.extend([pattern, pattern])
    return " AND ".join(clauses), params


class MySQLFinancialEntryRepository(FinancialEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str, filters: TransactionFilters) -> Sequence[FinancialEntry]:
        where, params = build_filter_clause(company_id, filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} ORDER BY fe.due_date DESC", tuple(params))
            return [row_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, entry_id: str) -> Optional[FinancialEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE fe.id=%s AND fe.company_id=%s AND fe.deleted_at IS NULL",
                (entry_id, company_id),
            )
            row = fetchone(cur)
            return row_to_entry(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "financial_entries", {**data, "company_id": company_id})

    def update(self, company_id: str, entry_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "financial_entries", entry_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, entry_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "financial_entries", entry_id, company_id=company_id)
