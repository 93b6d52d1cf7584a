from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import EmployeeStatus, EmploymentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, insert_row, soft_delete, update_row
from .model import Department, Employee, Position
from .repository import DepartmentRepository, EmployeeRepository, PositionRepository


def _opt_dec(value: Any) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value else None


def _opt_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value or None


def _row_to_department(r: dict) -> Department:
    return Department(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        name=r["name"],
        parent_id=_opt_str(r.get("parent_id")),
        code=r.get("code"),
        description=r.get("description"),
        cost_center_code=r.get("cost_center_code"),
        budget_monthly=_opt_dec(r.get("budget_monthly")),
        manager_id=_opt_str(r.get("manager_id")),
        is_active=bool(r.get("is_active", True)),
        sort_order=int(r.get("sort_order") or 0),
    )


def _row_to_position(r: dict) -> Position:
    return Position(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        name=r["name"],
        department_id=_opt_str(r.get("department_id")),
        description=r.get("description"),
        salary_range_min=_opt_dec(r.get("salary_range_min")),
        salary_range_max=_opt_dec(r.get("salary_range_max")),
        is_active=bool(r.get("is_active", True)),
        department_name=r.get("department_name"),
    )


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        name=r["name"],
        hire_date=_opt_date(r.get("hire_date")),
        base_salary=Decimal(str(r.get("base_salary") or 0)),
        contract_type=EmploymentType(r.get("contract_type") or EmploymentType.CLT.value),
        status=EmployeeStatus(r.get("status") or EmployeeStatus.ACTIVE.value),
        work_hours=int(r.get("work_hours") or 44),
        payment_day=int(r.get("payment_day") or 5),
        department_id=_opt_str(r.get("department_id")),
        position_id=_opt_str(r.get("position_id")),
        employee_code=r.get("employee_code"),
        cpf=r.get("cpf"),
        email=r.get("email"),
        phone=r.get("phone"),
        termination_date=_opt_date(r.get("termination_date")),
        default_category_id=_opt_str(r.get("default_category_id")),
        default_payment_method_id=_opt_str(r.get("default_payment_method_id")),
        default_bank_account_id=_opt_str(r.get("default_bank_account_id")),
        notes=r.get("notes"),
        is_active=bool(r.get("is_active", True)),
        department_name=r.get("department_name"),
        position_name=r.get("position_name"),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM departments
                WHERE company_id=%s AND deleted_at IS NULL
                ORDER BY sort_order, name
                """,
                (company_id,),
            )
            return [_row_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, department_id: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM departments WHERE id=%s AND company_id=%s AND deleted_at IS NULL",
                (department_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "departments", {**data, "company_id": company_id})

    def update(self, company_id: str, department_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "departments", department_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, department_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "departments", department_id, company_id=company_id)


class MySQLPositionRepository(PositionRepository):
    _SELECT = """
        SELECT p.*, d.name AS department_name
        FROM positions p
        LEFT JOIN departments d ON d.id = p.department_id
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._SELECT} WHERE p.company_id=%s AND p.deleted_at IS NULL ORDER BY p.name",
                (company_id,),
            )
            return [_row_to_position(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, position_id: str) -> Optional[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._SELECT} WHERE p.id=%s AND p.company_id=%s AND p.deleted_at IS NULL",
                (position_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_position(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "positions", {**data, "company_id": company_id})

    def update(self, company_id: str, position_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "positions", position_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, position_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "positions", position_id, company_id=company_id)


class MySQLEmployeeRepository(EmployeeRepository):
    _SELECT = """
        SELECT e.*, d.name AS department_name, p.name AS position_name
        FROM employees e
        LEFT JOIN departments d ON d.id = e.department_id
        LEFT JOIN positions p ON p.id = e.position_id
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._SELECT} WHERE e.company_id=%s AND e.deleted_at IS NULL ORDER BY e.name",
                (company_id,),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._SELECT} WHERE e.id=%s AND e.company_id=%s AND e.deleted_at IS NULL",
                (employee_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "employees", {**data, "company_id": company_id})

    def update(self, company_id: str, employee_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "employees", employee_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "employees", employee_id, company_id=company_id)
