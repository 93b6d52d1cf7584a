from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import CustomerStatus


@dataclass(frozen=True)
class Customer:
    id: str
    company_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    document: Optional[str] = None
    document_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True
    status: Optional[CustomerStatus] = None
    first_payment_at: Optional[datetime] = None
    churned_at: Optional[datetime] = None
    churn_reason: Optional[str] = None


@dataclass(frozen=True)
class CompanyCustomerKPIs:
    """Aggregates returned by ``get_company_customer_kpis``."""

    total_customers: int = 0
    leads: int = 0
    active_customers: int = 0
    churned_customers: int = 0
    activation_rate: Decimal = Decimal("0")
    churn_rate: Decimal = Decimal("0")
    total_ltv: Decimal = Decimal("0")
    average_ltv: Decimal = Decimal("0")
    total_mrr: Decimal = Decimal("0")
    average_mrr_per_customer: Decimal = Decimal("0")
    total_active_contracts: int = 0
    avg_customer_lifetime_months: Decimal = Decimal("0")


@dataclass(frozen=True)
class CustomerWithKPIs:
    id: str
    name: str
    status: CustomerStatus
    customer_since: Optional[datetime] = None
    first_payment_at: Optional[datetime] = None
    churned_at: Optional[datetime] = None
    total_contracts: int = 0
    active_contracts: int = 0
    ltv: Decimal = Decimal("0")
    mrr: Decimal = Decimal("0")
    total_payments: int = 0
    last_activity: Optional[datetime] = None
    months_as_customer: int = 0
