from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollItemStatus, PayrollStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class Payroll:
    id: str
    company_id: str
    reference_month: date
    payment_date: Optional[date]
    status: PayrollStatus
    total_gross: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net: Decimal = ZERO
    employee_count: int = 0
    notes: Optional[str] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollItem:
    id: str
    payroll_id: str
    employee_id: str
    status: PayrollItemStatus
    base_salary: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    overtime_value: Decimal = ZERO
    bonuses: Decimal = ZERO
    commissions: Decimal = ZERO
    other_earnings: Decimal = ZERO
    total_earnings: Decimal = ZERO
    inss_deduction: Decimal = ZERO
    irrf_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO
    total_deductions: Decimal = ZERO
    gross_salary: Decimal = ZERO
    net_salary: Decimal = ZERO
    department_id: Optional[str] = None
    position_id: Optional[str] = None
    financial_entry_id: Optional[str] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    employee_name: Optional[str] = None
    department_name: Optional[str] = None
    position_name: Optional[str] = None


@dataclass(frozen=True)
class PayrollTotals:
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal
