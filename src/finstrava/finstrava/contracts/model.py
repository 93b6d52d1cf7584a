from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import BillingType, ContractStatus


@dataclass(frozen=True)
class ContractItem:
    product_id: str
    quantity: Decimal
    unit_price: Decimal
    description: Optional[str] = None
    is_active: bool = True
    id: Optional[str] = None
    contract_id: Optional[str] = None
    total_price: Optional[Decimal] = None
    product_name: Optional[str] = None


@dataclass(frozen=True)
class Contract:
    id: str
    company_id: str
    customer_id: str
    title: str
    start_date: date
    billing_type: BillingType
    billing_day: int
    monthly_value: Decimal
    status: ContractStatus
    contract_number: Optional[str] = None
    description: Optional[str] = None
    end_date: Optional[date] = None
    next_billing_date: Optional[date] = None
    default_category_id: Optional[str] = None
    default_payment_method_id: Optional[str] = None
    grace_period_days: int = 0
    automatic_renewal: bool = False
    renewal_period_months: int = 12
    notes: Optional[str] = None
    first_billing_processed: bool = False
    first_billing_date: Optional[date] = None
    contract_duration_months: Optional[int] = None
    package_id: Optional[str] = None
    customer_name: Optional[str] = None
    items: list[ContractItem] = field(default_factory=list)


# Rows returned by the automation procedures


@dataclass(frozen=True)
class GeneratedTransaction:
    contract_id: str
    transaction_id: str
    customer_name: str
    contract_title: str
    amount: Decimal


@dataclass(frozen=True)
class ProcessedRenewal:
    contract_id: str
    old_end_date: Optional[date]
    new_end_date: Optional[date]
    customer_name: str
    contract_title: str


@dataclass(frozen=True)
class ExpiredContract:
    contract_id: str
    customer_name: str
    contract_title: str
    end_date: Optional[date]


@dataclass
class AutomationRun:
    """Outcome of one renewals -> expirations -> transactions pass."""

    timestamp: datetime
    generated_transactions: list[GeneratedTransaction] = field(default_factory=list)
    processed_renewals: list[ProcessedRenewal] = field(default_factory=list)
    expired_contracts: list[ExpiredContract] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    execution_time_ms: int = 0

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def total_processed(self) -> int:
        return len(self.generated_transactions) + len(self.processed_renewals) + len(self.expired_contracts)
