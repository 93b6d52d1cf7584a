from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import FinancialEntry, TransactionFilters


class FinancialEntryRepository(Protocol):
    def list_for_company(self, company_id: str, filters: TransactionFilters) -> Sequence[FinancialEntry]:
        """Entries not soft-deleted, newest due date first."""
        raise NotImplementedError

    def get_by_id(self, company_id: str, entry_id: str) -> Optional[FinancialEntry]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, entry_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, entry_id: str) -> bool:
        raise NotImplementedError
