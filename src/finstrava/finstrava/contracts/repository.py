from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import BillingType, ContractStatus
from .model import AutomationRun, Contract, ContractItem, ExpiredContract, GeneratedTransaction, ProcessedRenewal


class ContractRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Contract]:
        raise NotImplementedError

    def get_by_id(self, company_id: str, contract_id: str) -> Optional[Contract]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any], items: Sequence[ContractItem]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, contract_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_status(self, company_id: str, contract_id: str, status: ContractStatus) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, contract_id: str) -> bool:
        raise NotImplementedError

    def list_due_on(self, company_id: str, day: date) -> Sequence[Contract]:
        raise NotImplementedError

    def list_expiring(self, company_id: str, until: date) -> Sequence[Contract]:
        raise NotImplementedError

    # Stored functions / procedures

    def first_next_billing_date(self, start_date: date, billing_type: BillingType, billing_day: int) -> Optional[date]:
        raise NotImplementedError

    def next_billing_date(self, current: date, billing_type: BillingType, billing_day: int) -> Optional[date]:
        raise NotImplementedError

    def cancel_with_fee(
        self, contract_id: str, reason: str, fee: Decimal, cancellation_date: date
    ) -> Sequence[Mapping[str, Any]]:
        raise NotImplementedError


class ContractAutomationRepository(Protocol):
    """Procedures run by the daily automation and the log table they report to."""

    def process_renewals(self, day: date) -> Sequence[ProcessedRenewal]:
        raise NotImplementedError

    def expire_contracts(self, day: date) -> Sequence[ExpiredContract]:
        raise NotImplementedError

    def generate_transactions(self, day: date) -> Sequence[GeneratedTransaction]:
        raise NotImplementedError

    def record_run(self, run: AutomationRun) -> None:
        raise NotImplementedError
