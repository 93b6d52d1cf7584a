from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.datetime_utils import optional_date
from ..common.validators import optional_enum
from ..core.enums import EntryStatus, EntryType


@dataclass(frozen=True)
class FinancialEntry:
    id: str
    company_id: str
    type: EntryType
    status: EntryStatus
    amount: Decimal
    due_date: date
    description: str
    payment_amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    category_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    customer_id: Optional[str] = None
    supplier_id: Optional[str] = None
    bank_account_id: Optional[str] = None
    product_id: Optional[str] = None
    contract_id: Optional[str] = None
    notes: Optional[str] = None
    installment: Optional[int] = None
    total_installments: Optional[int] = None
    is_recurring: bool = False
    recurring_type: Optional[str] = None
    parent_transaction_id: Optional[str] = None
    is_contract_generated: bool = False
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    category_name: Optional[str] = None
    payment_method_name: Optional[str] = None
    contract_title: Optional[str] = None

    @property
    def settled_amount(self) -> Decimal:
        return self.payment_amount if self.payment_amount is not None else self.amount


@dataclass(frozen=True)
class TransactionFilters:
    type: Optional[EntryType] = None
    status: Optional[EntryStatus] = None
    category_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    customer_id: Optional[str] = None
    supplier_id: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None
    contract_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "TransactionFilters":
        """Build filters from query args or a stored dict; blank values mean "no filter"."""
        data = data or {}

        def text(key: str) -> Optional[str]:
            value = data.get(key)
            if value is None:
                return None
            return str(value).strip() or None

        return cls(
            type=optional_enum(data.get("type"), EntryType, "Tipo"),
            status=optional_enum(data.get("status"), EntryStatus, "Status"),
            category_id=text("category_id"),
            payment_method_id=text("payment_method_id"),
            customer_id=text("customer_id"),
            supplier_id=text("supplier_id"),
            date_from=optional_date(data.get("date_from")),
            date_to=optional_date(data.get("date_to")),
            search=text("search"),
            contract_id=text("contract_id"),
        )

    def to_dict(self) -> dict:
        out = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            if isinstance(value, (EntryType, EntryStatus)):
                value = value.value
            elif isinstance(value, date):
                value = value.isoformat()
            out[key] = value
        return out

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True)
class EntryStats:
    total: int = 0
    total_amount: Decimal = Decimal("0")
    pending: int = 0
    pending_amount: Decimal = Decimal("0")
    paid: int = 0
    paid_amount: Decimal = Decimal("0")
    overdue: int = 0
    overdue_amount: Decimal = Decimal("0")
    cancelled: int = 0
    cancelled_amount: Decimal = Decimal("0")
