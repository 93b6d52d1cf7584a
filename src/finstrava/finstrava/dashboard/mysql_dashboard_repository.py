from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..core.enums import EntryStatus, EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ActiveContract, OverdueEntry, PaidEntry, RecentEntry
from .repository import DashboardRepository


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value or None


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value else None


class MySQLDashboardRepository(DashboardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _scalar(self, sql: str, params: tuple) -> Any:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            row = fetchone(cur)
            return row["value"] if row else None

    def active_contracts(self, company_id: str) -> Sequence[ActiveContract]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.id, c.monthly_value, c.package_id, p.name AS package_name
                FROM contracts c
                LEFT JOIN packages p ON p.id = c.package_id
                WHERE c.company_id=%s AND c.status='active' AND c.deleted_at IS NULL
                """,
                (company_id,),
            )
            return [
                ActiveContract(
                    id=str(r["id"]),
                    monthly_value=_dec(r.get("monthly_value")),
                    package_id=_opt_str(r.get("package_id")),
                    package_name=r.get("package_name"),
                )
                for r in fetchall(cur)
            ]

    def count_new_contracts(self, company_id: str, start: date, end: date) -> int:
        value = self._scalar(
            """
            SELECT COUNT(*) AS value FROM contracts
            WHERE company_id=%s AND DATE(created_at) BETWEEN %s AND %s AND deleted_at IS NULL
            """,
            (company_id, start, end),
        )
        return int(value or 0)

    def count_cancelled_contracts(self, company_id: str, start: date, end: date) -> int:
        value = self._scalar(
            """
            SELECT COUNT(*) AS value FROM contract_history h
            JOIN contracts c ON c.id = h.contract_id
            WHERE c.company_id=%s AND h.change_type='cancelled' AND DATE(h.created_at) BETWEEN %s AND %s
            """,
            (company_id, start, end),
        )
        return int(value or 0)

    def paid_total(self, company_id: str, entry_type: EntryType, start: date, end: date) -> Decimal:
        value = self._scalar(
            """
            SELECT COALESCE(SUM(amount), 0) AS value FROM financial_entries
            WHERE company_id=%s AND type=%s AND status='paid'
              AND payment_date BETWEEN %s AND %s AND deleted_at IS NULL
            """,
            (company_id, entry_type.value, start, end),
        )
        return _dec(value)

    def pending_total(self, company_id: str, entry_type: EntryType) -> Decimal:
        value = self._scalar(
            """
            SELECT COALESCE(SUM(amount), 0) AS value FROM financial_entries
            WHERE company_id=%s AND type=%s AND status='pending' AND deleted_at IS NULL
            """,
            (company_id, entry_type.value),
        )
        return _dec(value)

    def overdue_income(self, company_id: str) -> Sequence[OverdueEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT fe.id, fe.amount, fe.due_date, fe.customer_id, cu.name AS customer_name
                FROM financial_entries fe
                LEFT JOIN customers cu ON cu.id = fe.customer_id
                WHERE fe.company_id=%s AND fe.type='income' AND fe.status='overdue' AND fe.deleted_at IS NULL
                """,
                (company_id,),
            )
            return [
                OverdueEntry(
                    id=str(r["id"]),
                    amount=_dec(r.get("amount")),
                    due_date=_as_date(r["due_date"]),
                    customer_id=_opt_str(r.get("customer_id")),
                    customer_name=r.get("customer_name"),
                )
                for r in fetchall(cur)
            ]

    def count_active_customers(self, company_id: str) -> int:
        value = self._scalar(
            "SELECT COUNT(*) AS value FROM customers WHERE company_id=%s AND status='active' AND deleted_at IS NULL",
            (company_id,),
        )
        return int(value or 0)

    def count_new_customers(self, company_id: str, start: date, end: date) -> int:
        value = self._scalar(
            """
            SELECT COUNT(*) AS value FROM customers
            WHERE company_id=%s AND DATE(first_payment_at) BETWEEN %s AND %s AND deleted_at IS NULL
            """,
            (company_id, start, end),
        )
        return int(value or 0)

    def count_churned_customers(self, company_id: str, start: date, end: date) -> int:
        value = self._scalar(
            """
            SELECT COUNT(*) AS value FROM customers
            WHERE company_id=%s AND status='churned'
              AND DATE(churned_at) BETWEEN %s AND %s AND deleted_at IS NULL
            """,
            (company_id, start, end),
        )
        return int(value or 0)

    def paid_entries(self, company_id: str, start: date, end: date) -> Sequence[PaidEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT type, amount, payment_date FROM financial_entries
                WHERE company_id=%s AND status='paid'
                  AND payment_date BETWEEN %s AND %s AND deleted_at IS NULL
                ORDER BY payment_date ASC
                """,
                (company_id, start, end),
            )
            return [
                PaidEntry(type=EntryType(r["type"]), amount=_dec(r.get("amount")), payment_date=_as_date(r["payment_date"]))
                for r in fetchall(cur)
            ]

    def recent_entries(self, company_id: str, limit: int) -> Sequence[RecentEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT fe.id, fe.type, fe.amount, fe.description, fe.due_date, fe.payment_date, fe.status,
                       fe.customer_id, cu.name AS customer_name
                FROM financial_entries fe
                LEFT JOIN customers cu ON cu.id = fe.customer_id
                WHERE fe.company_id=%s AND fe.deleted_at IS NULL
                ORDER BY fe.created_at DESC
                LIMIT %s
                """,
                (company_id, int(limit)),
            )
            return [
                RecentEntry(
                    id=str(r["id"]),
                    type=EntryType(r["type"]),
                    amount=_dec(r.get("amount")),
                    description=r.get("description") or "",
                    due_date=_as_date(r.get("due_date")),
                    payment_date=_as_date(r.get("payment_date")),
                    status=EntryStatus(r["status"]),
                    customer_id=_opt_str(r.get("customer_id")),
                    customer_name=r.get("customer_name"),
                )
                for r in fetchall(cur)
            ]
