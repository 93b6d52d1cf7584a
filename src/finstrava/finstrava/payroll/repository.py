from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Payroll, PayrollItem


class PayrollRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Payroll]:
        """Not deleted, most recent reference month first."""
        raise NotImplementedError

    def get_by_id(self, company_id: str, payroll_id: str) -> Optional[Payroll]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, payroll_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, payroll_id: str) -> bool:
        raise NotImplementedError

    def list_items(self, payroll_id: str) -> Sequence[PayrollItem]:
        raise NotImplementedError

    def update_item(self, payroll_id: str, item_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    # Stored procedures

    def calculate(self, payroll_id: str) -> Sequence[Mapping[str, Any]]:
        raise NotImplementedError

    def generate_financial_entries(self, payroll_id: str) -> Sequence[Mapping[str, Any]]:
        raise NotImplementedError
