from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol, Sequence

from ..core.enums import EntryType
from .model import ActiveContract, OverdueEntry, PaidEntry, RecentEntry


class DashboardRepository(Protocol):
    """Read-only queries behind the dashboard. Date ranges are inclusive."""

    def active_contracts(self, company_id: str) -> Sequence[ActiveContract]:
        raise NotImplementedError

    def count_new_contracts(self, company_id: str, start: date, end: date) -> int:
        raise NotImplementedError

    def count_cancelled_contracts(self, company_id: str, start: date, end: date) -> int:
        """Rows of ``contract_history`` with change_type ``cancelled``."""
        raise NotImplementedError

    def paid_total(self, company_id: str, entry_type: EntryType, start: date, end: date) -> Decimal:
        raise NotImplementedError

    def pending_total(self, company_id: str, entry_type: EntryType) -> Decimal:
        raise NotImplementedError

    def overdue_income(self, company_id: str) -> Sequence[OverdueEntry]:
        raise NotImplementedError

    def count_active_customers(self, company_id: str) -> int:
        raise NotImplementedError

    def count_new_customers(self, company_id: str, start: date, end: date) -> int:
        """Customers whose first payment falls in the range."""
        raise NotImplementedError

    def count_churned_customers(self, company_id: str, start: date, end: date) -> int:
        raise NotImplementedError

    def paid_entries(self, company_id: str, start: date, end: date) -> Sequence[PaidEntry]:
        raise NotImplementedError

    def recent_entries(self, company_id: str, limit: int) -> Sequence[RecentEntry]:
        raise NotImplementedError
