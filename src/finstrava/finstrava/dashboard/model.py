from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from ..core.enums import EntryStatus, EntryType

ZERO = Decimal("0")


@dataclass(frozen=True)
class ActiveContract:
    id: str
    monthly_value: Decimal
    package_id: Optional[str] = None
    package_name: Optional[str] = None


@dataclass(frozen=True)
class PaidEntry:
    type: EntryType
    amount: Decimal
    payment_date: date


@dataclass(frozen=True)
class OverdueEntry:
    id: str
    amount: Decimal
    due_date: date
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class RecentEntry:
    id: str
    type: EntryType
    amount: Decimal
    description: str
    due_date: Optional[date]
    payment_date: Optional[date]
    status: EntryStatus
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class DashboardSnapshot:
    """Raw figures read from the database for one company and reference day."""

    active_contracts: List[ActiveContract] = field(default_factory=list)
    new_contracts: int = 0
    cancelled_contracts: int = 0
    revenue: Decimal = ZERO
    revenue_previous: Decimal = ZERO
    expenses: Decimal = ZERO
    expenses_previous: Decimal = ZERO
    receivables: Decimal = ZERO
    payables: Decimal = ZERO
    overdue_entries: List[OverdueEntry] = field(default_factory=list)
    active_customers: int = 0
    new_customers: int = 0
    churned_customers: int = 0
    paid_entries: List[PaidEntry] = field(default_factory=list)
    recent_entries: List[RecentEntry] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardKPIs:
    mrr: Decimal = ZERO
    mrr_previous: Decimal = ZERO
    mrr_growth: float = 0.0
    revenue: Decimal = ZERO
    revenue_previous: Decimal = ZERO
    revenue_growth: float = 0.0
    receivables: Decimal = ZERO
    expenses: Decimal = ZERO
    expenses_previous: Decimal = ZERO
    expenses_growth: float = 0.0
    payables: Decimal = ZERO
    profit: Decimal = ZERO
    profit_previous: Decimal = ZERO
    profit_growth: float = 0.0
    profit_margin: float = 0.0
    active_customers: int = 0
    new_customers: int = 0
    churned_customers: int = 0
    churn_rate: float = 0.0
    active_contracts: int = 0
    new_contracts: int = 0
    cancelled_contracts: int = 0
    overdue_amount: Decimal = ZERO
    overdue_count: int = 0
    overdue_rate: float = 0.0


@dataclass(frozen=True)
class RevenueByMonth:
    month: str
    month_label: str
    income: Decimal
    expense: Decimal
    profit: Decimal


@dataclass(frozen=True)
class RevenueByPackage:
    package_id: str
    package_name: str
    revenue: Decimal
    contracts_count: int
    percentage: float


@dataclass(frozen=True)
class OverdueAging:
    range: str
    amount: Decimal
    count: int


@dataclass(frozen=True)
class DashboardAlert:
    id: str
    type: str
    title: str
    description: str
    severity: str
    link: Optional[str] = None


@dataclass(frozen=True)
class DashboardData:
    kpis: DashboardKPIs = field(default_factory=DashboardKPIs)
    revenue_by_month: List[RevenueByMonth] = field(default_factory=list)
    revenue_by_package: List[RevenueByPackage] = field(default_factory=list)
    overdue_aging: List[OverdueAging] = field(default_factory=list)
    alerts: List[DashboardAlert] = field(default_factory=list)
    recent_entries: List[RecentEntry] = field(default_factory=list)
