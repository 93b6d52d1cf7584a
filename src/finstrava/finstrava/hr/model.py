from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, EmploymentType


@dataclass(frozen=True)
class Department:
    id: str
    company_id: str
    name: str
    parent_id: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    cost_center_code: Optional[str] = None
    budget_monthly: Optional[Decimal] = None
    manager_id: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0


@dataclass(frozen=True)
class Position:
    id: str
    company_id: str
    name: str
    department_id: Optional[str] = None
    description: Optional[str] = None
    salary_range_min: Optional[Decimal] = None
    salary_range_max: Optional[Decimal] = None
    is_active: bool = True
    department_name: Optional[str] = None


@dataclass(frozen=True)
class Employee:
    id: str
    company_id: str
    name: str
    hire_date: Optional[date]
    base_salary: Decimal
    contract_type: EmploymentType = EmploymentType.CLT
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    work_hours: int = 44
    payment_day: int = 5
    department_id: Optional[str] = None
    position_id: Optional[str] = None
    employee_code: Optional[str] = None
    cpf: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    termination_date: Optional[date] = None
    default_category_id: Optional[str] = None
    default_payment_method_id: Optional[str] = None
    default_bank_account_id: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True
    department_name: Optional[str] = None
    position_name: Optional[str] = None
