from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import PayrollItemStatus, PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    _db_value,
    _identifier,
    call_procedure,
    db_cursor,
    fetchall,
    fetchone,
    insert_row,
    soft_delete,
    update_row,
)
from .model import Payroll, PayrollItem
from .repository import PayrollRepository

_ITEM_MONEY = (
    "base_salary",
    "overtime_hours",
    "overtime_value",
    "bonuses",
    "commissions",
    "other_earnings",
    "total_earnings",
    "inss_deduction",
    "irrf_deduction",
    "other_deductions",
    "total_deductions",
    "gross_salary",
    "net_salary",
)


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _opt_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value or None


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value else None


def _row_to_payroll(r: dict) -> Payroll:
    return Payroll(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        reference_month=_opt_date(r["reference_month"]),
        payment_date=_opt_date(r.get("payment_date")),
        status=PayrollStatus(r["status"]),
        total_gross=_dec(r.get("total_gross")),
        total_deductions=_dec(r.get("total_deductions")),
        total_net=_dec(r.get("total_net")),
        employee_count=int(r.get("employee_count") or 0),
        notes=r.get("notes"),
        approved_at=r.get("approved_at"),
        paid_at=r.get("paid_at"),
    )


def _row_to_item(r: dict) -> PayrollItem:
    return PayrollItem(
        id=str(r["id"]),
        payroll_id=str(r["payroll_id"]),
        employee_id=str(r["employee_id"]),
        status=PayrollItemStatus(r.get("status") or PayrollItemStatus.PENDING.value),
        department_id=_opt_str(r.get("department_id")),
        position_id=_opt_str(r.get("position_id")),
        financial_entry_id=_opt_str(r.get("financial_entry_id")),
        payment_date=_opt_date(r.get("payment_date")),
        notes=r.get("notes"),
        employee_name=r.get("employee_name"),
        department_name=r.get("department_name"),
        position_name=r.get("position_name"),
        **{key: _dec(r.get(key)) for key in _ITEM_MONEY},
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM payrolls
                WHERE company_id=%s AND deleted_at IS NULL
                ORDER BY reference_month DESC
                """,
                (company_id,),
            )
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, payroll_id: str) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM payrolls WHERE id=%s AND company_id=%s AND deleted_at IS NULL",
                (payroll_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_payroll(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "payrolls", {**data, "company_id": company_id})

    def update(self, company_id: str, payroll_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "payrolls", payroll_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, payroll_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "payrolls", payroll_id, company_id=company_id)

    def list_items(self, payroll_id: str) -> Sequence[PayrollItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT pi.*, e.name AS employee_name, d.name AS department_name, p.name AS position_name
                FROM payroll_items pi
                LEFT JOIN employees e ON e.id = pi.employee_id
                LEFT JOIN departments d ON d.id = pi.department_id
                LEFT JOIN positions p ON p.id = pi.position_id
                WHERE pi.payroll_id=%s
                """,
                (payroll_id,),
            )
            return [_row_to_item(r) for r in fetchall(cur)]

    def update_item(self, payroll_id: str, item_id: str, data: Mapping[str, Any]) -> bool:
        if not data:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            assignments = ", ".join(f"{_identifier(k)}=%s" for k in data.keys())
            cur.execute(
                f"UPDATE payroll_items SET {assignments} WHERE id=%s AND payroll_id=%s",
                tuple(_db_value(v) for v in data.values()) + (item_id, payroll_id),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT id FROM payroll_items WHERE id=%s AND payroll_id=%s", (item_id, payroll_id))
            return fetchone(cur) is not None

    def calculate(self, payroll_id: str) -> Sequence[Mapping[str, Any]]:
        return call_procedure(self._conn_factory, "calculate_payroll", (payroll_id,))

    def generate_financial_entries(self, payroll_id: str) -> Sequence[Mapping[str, Any]]:
        return call_procedure(self._conn_factory, "generate_payroll_financial_entries", (payroll_id,))
