from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import CustomerStatus
from .model import CompanyCustomerKPIs, Customer, CustomerWithKPIs


class CustomerRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Customer]:
        raise NotImplementedError

    def get_by_id(self, company_id: str, customer_id: str) -> Optional[Customer]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, customer_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, customer_id: str) -> bool:
        raise NotImplementedError

    def company_kpis(self, company_id: str) -> Optional[CompanyCustomerKPIs]:
        raise NotImplementedError

    def customers_with_kpis(
        self, company_id: str, status: Optional[CustomerStatus] = None
    ) -> Sequence[CustomerWithKPIs]:
        raise NotImplementedError
