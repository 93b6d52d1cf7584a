from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import CancellationReason, Company, CompanySettings


class CompanyRepository(Protocol):
    """Repository interface for tenants.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def list_for_user(self, user_id: str) -> Sequence[Company]:
        raise NotImplementedError

    def get_by_id(self, company_id: str) -> Optional[Company]:
        raise NotImplementedError

    def update(self, company_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def create_with_admin(
        self,
        *,
        user_id: str,
        name: str,
        cnpj: Optional[str],
        legal_name: Optional[str],
    ) -> Optional[str]:
        raise NotImplementedError


class SettingsRepository(Protocol):
    def get_settings(self, company_id: str) -> Optional[CompanySettings]:
        raise NotImplementedError

    def upsert_settings(self, company_id: str, data: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def list_cancellation_reasons(self, company_id: str) -> Sequence[CancellationReason]:
        raise NotImplementedError

    def create_cancellation_reason(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update_cancellation_reason(self, company_id: str, reason_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_cancellation_reason(self, company_id: str, reason_id: str) -> bool:
        raise NotImplementedError
