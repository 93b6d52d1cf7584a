from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import CustomerStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import call_procedure, db_cursor, fetchall, fetchone, insert_row, soft_delete, update_row
from .model import CompanyCustomerKPIs, Customer, CustomerWithKPIs
from .repository import CustomerRepository

_COLUMNS = """
    id, company_id, name, email, phone, document, document_type, address, city, state,
    zip_code, notes, is_active, status, first_payment_at, churned_at, churn_reason
"""


def _row_to_customer(r: dict) -> Customer:
    return Customer(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        name=r["name"],
        email=r.get("email"),
        phone=r.get("phone"),
        document=r.get("document"),
        document_type=r.get("document_type"),
        address=r.get("address"),
        city=r.get("city"),
        state=r.get("state"),
        zip_code=r.get("zip_code"),
        notes=r.get("notes"),
        is_active=bool(r.get("is_active", True)),
        status=CustomerStatus(r["status"]) if r.get("status") else None,
        first_payment_at=r.get("first_payment_at"),
        churned_at=r.get("churned_at"),
        churn_reason=r.get("churn_reason"),
    )


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class MySQLCustomerRepository(CustomerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[Customer]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM customers
                WHERE company_id=%s AND deleted_at IS NULL
                ORDER BY name
                """,
                (company_id,),
            )
            return [_row_to_customer(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, customer_id: str) -> Optional[Customer]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM customers WHERE id=%s AND company_id=%s AND deleted_at IS NULL",
                (customer_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_customer(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "customers", {**data, "company_id": company_id})

    def update(self, company_id: str, customer_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "customers", customer_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, customer_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "customers", customer_id, company_id=company_id)

    def company_kpis(self, company_id: str) -> Optional[CompanyCustomerKPIs]:
        rows = call_procedure(self._conn_factory, "get_company_customer_kpis", (company_id,))
        if not rows:
            return None
        r = rows[0]
        return CompanyCustomerKPIs(
            total_customers=int(r.get("total_customers") or 0),
            leads=int(r.get("leads") or 0),
            active_customers=int(r.get("active_customers") or 0),
            churned_customers=int(r.get("churned_customers") or 0),
            activation_rate=_dec(r.get("activation_rate")),
            churn_rate=_dec(r.get("churn_rate")),
            total_ltv=_dec(r.get("total_ltv")),
            average_ltv=_dec(r.get("average_ltv")),
            total_mrr=_dec(r.get("total_mrr")),
            average_mrr_per_customer=_dec(r.get("average_mrr_per_customer")),
            total_active_contracts=int(r.get("total_active_contracts") or 0),
            avg_customer_lifetime_months=_dec(r.get("avg_customer_lifetime_months")),
        )

    def customers_with_kpis(
        self, company_id: str, status: Optional[CustomerStatus] = None
    ) -> Sequence[CustomerWithKPIs]:
        rows = call_procedure(
            self._conn_factory,
            "get_customers_with_kpis",
            (company_id, status.value if status else None),
        )
        return [
            CustomerWithKPIs(
                id=str(r["id"]),
                name=r["name"],
                status=CustomerStatus(r.get("status") or CustomerStatus.LEAD.value),
                customer_since=r.get("customer_since"),
                first_payment_at=r.get("first_payment_at"),
                churned_at=r.get("churned_at"),
                total_contracts=int(r.get("total_contracts") or 0),
                active_contracts=int(r.get("active_contracts") or 0),
                ltv=_dec(r.get("ltv")),
                mrr=_dec(r.get("mrr")),
                total_payments=int(r.get("total_payments") or 0),
                last_activity=r.get("last_activity"),
                months_as_customer=int(r.get("months_as_customer") or 0),
            )
            for r in rows
        ]
