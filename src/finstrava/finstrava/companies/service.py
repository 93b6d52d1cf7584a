from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.payload import clean_payload
from ..common.validators import require_money, require_non_empty
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import CancellationReason, Company, CompanySettings
from .repository import CompanyRepository, SettingsRepository

_COMPANY_FIELDS = ("name", "cnpj", "legal_name", "logo_url")
_REASON_FIELDS = ("name", "description", "requires_details", "is_active", "display_order")


class CompanyService:
    """Use case: tenants the current user belongs to, and switching between them."""

    def __init__(self, companies: CompanyRepository):
        self._companies = companies

    def list_companies(self, user_id: str) -> Sequence[Company]:
        return self._companies.list_for_user(user_id)

    def resolve_selected(self, user_id: str, saved_company_id: Optional[str]) -> Optional[Company]:
        """Saved company if the user still belongs to it, else the first one."""
        companies = self.list_companies(user_id)
        if not companies:
            return None
        if saved_company_id:
            for company in companies:
                if company.id == str(saved_company_id):
                    return company
        return companies[0]

    def select(self, user_id: str, company_id: str) -> Company:
        for company in self.list_companies(user_id):
            if company.id == str(company_id):
                return company
        raise AuthorizationError("Empresa não disponível para este usuário")

    def create_company_with_admin(
        self,
        *,
        user_id: str,
        name: str,
        cnpj: Optional[str] = None,
        legal_name: Optional[str] = None,
    ) -> Optional[str]:
        name = require_non_empty(name, "Nome da empresa")
        return self._companies.create_with_admin(
            user_id=user_id,
            name=name,
            cnpj=(cnpj or "").strip() or None,
            legal_name=(legal_name or "").strip() or None,
        )

    def get(self, company_id: str) -> Company:
        company = self._companies.get_by_id(company_id)
        if not company:
            raise NotFoundError("Empresa não encontrada")
        return company

    def update(self, company_id: str, data: Mapping[str, Any]) -> Company:
        fields = clean_payload(data, allowed=_COMPANY_FIELDS)
        if "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome da empresa")
        if not self._companies.update(company_id, fields):
            raise NotFoundError("Empresa não encontrada")
        return self.get(company_id)


class SettingsService:
    """Use case: per-company settings and contract cancellation reasons."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self, company_id: str) -> Optional[CompanySettings]:
        return self._settings.get_settings(company_id)

    def update_settings(self, company_id: str, data: Mapping[str, Any]) -> Optional[CompanySettings]:
        fields: dict = {}
        if data.get("default_cancellation_fee") is not None:
            fields["default_cancellation_fee"] = require_money(
                data["default_cancellation_fee"], "Multa de cancelamento"
            )
        if data.get("include_pj_in_payroll") is not None:
            fields["include_pj_in_payroll"] = bool(data["include_pj_in_payroll"])
        self._settings.upsert_settings(company_id, fields)
        return self._settings.get_settings(company_id)

    def list_cancellation_reasons(self, company_id: str) -> Sequence[CancellationReason]:
        return self._settings.list_cancellation_reasons(company_id)

    def active_cancellation_reasons(self, company_id: str) -> list[CancellationReason]:
        return [r for r in self.list_cancellation_reasons(company_id) if r.is_active]

    def create_cancellation_reason(self, company_id: str, data: Mapping[str, Any]) -> str:
        name = require_non_empty(data.get("name"), "Nome do motivo")
        reasons = self.list_cancellation_reasons(company_id)
        max_order = max([r.display_order for r in reasons] + [0])

        display_order = data.get("display_order")
        fields = clean_payload(data, allowed=_REASON_FIELDS)
        fields.update(
            name=name,
            display_order=int(display_order) if display_order is not None else max_order + 1,
            is_active=bool(data.get("is_active", True)),
            requires_details=bool(data.get("requires_details", False)),
        )
        return self._settings.create_cancellation_reason(company_id, fields)

    def update_cancellation_reason(self, company_id: str, reason_id: str, data: Mapping[str, Any]) -> None:
        fields = clean_payload(data, allowed=_REASON_FIELDS)
        if "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome do motivo")
        if not self._settings.update_cancellation_reason(company_id, reason_id, fields):
            raise NotFoundError("Motivo de cancelamento não encontrado")

    def delete_cancellation_reason(self, company_id: str, reason_id: str) -> None:
        if not self._settings.delete_cancellation_reason(company_id, reason_id):
            raise NotFoundError("Motivo de cancelamento não encontrado")

    def reorder_cancellation_reasons(self, company_id: str, order: Iterable[Mapping[str, Any]]) -> None:
        for item in order:
            if "id" not in item or "display_order" not in item:
                raise ValidationError("Ordem inválida")
            self._settings.update_cancellation_reason(
                company_id, str(item["id"]), {"display_order": int(item["display_order"])}
            )
