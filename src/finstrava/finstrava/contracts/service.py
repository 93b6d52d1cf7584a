from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import optional_date
from ..common.payload import clean_payload
from ..common.validators import require_enum, require_money, require_non_empty, require_range
from ..core.constants import DEFAULT_EXPIRING_DAYS
from ..core.enums import BillingType, ContractStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Contract, ContractItem
from .repository import ContractRepository

logger = logging.getLogger(__name__)

_FIELDS = (
    "customer_id",
    "contract_number",
    "title",
    "description",
    "start_date",
    "end_date",
    "billing_type",
    "billing_day",
    "monthly_value",
    "default_category_id",
    "default_payment_method_id",
    "grace_period_days",
    "automatic_renewal",
    "renewal_period_months",
    "notes",
    "first_billing_date",
    "contract_duration_months",
    "package_id",
)


def _contract_items(raw: Optional[Iterable[Mapping[str, Any]]]) -> list[ContractItem]:
    items: list[ContractItem] = []
    for entry in raw or []:
        items.append(
            ContractItem(
                product_id=require_non_empty(entry.get("product_id"), "Produto do contrato"),
                quantity=require_money(entry.get("quantity", 1), "Quantidade", allow_zero=False),
                unit_price=require_money(entry.get("unit_price", 0), "Preço unitário"),
                description=entry.get("description") or None,
                is_active=bool(entry.get("is_active", True)),
            )
        )
    return items


class ContractService:
    """Use case: recurring billing agreements of a company.

    Billing dates are never computed here; the database functions
    ``calculate_first_next_billing_date`` and ``calculate_next_billing_date_v2``
    own that calendar.
    """

    def __init__(self, contracts: ContractRepository):
        self._contracts = contracts

    def _validated(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        fields = clean_payload(data, allowed=_FIELDS)
        if not partial or "customer_id" in fields:
            fields["customer_id"] = require_non_empty(data.get("customer_id"), "Cliente")
        if not partial or "title" in data:
            fields["title"] = require_non_empty(data.get("title"), "Título do contrato")
        if not partial or "start_date" in fields:
            start = optional_date(data.get("start_date"))
            if start is None:
                raise ValidationError("Data de início inválida")
            fields["start_date"] = start
        for key in ("end_date", "first_billing_date"):
            if key in fields:
                fields[key] = optional_date(fields[key])
        if not partial or "billing_type" in fields:
            fields["billing_type"] = require_enum(
                data.get("billing_type", BillingType.MONTHLY.value), BillingType, "Tipo de cobrança"
            )
        if not partial or "billing_day" in fields:
            fields["billing_day"] = require_range(data.get("billing_day"), "Dia de cobrança", 1, 31)
        if not partial or "monthly_value" in fields:
            fields["monthly_value"] = require_money(data.get("monthly_value"), "Valor mensal")
        if "contract_duration_months" in fields:
            fields["contract_duration_months"] = require_range(
                fields["contract_duration_months"], "Duração do contrato", 1, 600
            )

        end_date = fields.get("end_date")
        start_date = fields.get("start_date")
        if end_date and start_date and end_date < start_date:
            raise ValidationError("Data de término deve ser posterior à data de início")
        return fields

    def list(self, company_id: str) -> Sequence[Contract]:
        return self._contracts.list_for_company(company_id)

    def get(self, company_id: str, contract_id: str) -> Contract:
        contract = self._contracts.get_by_id(company_id, contract_id)
        if not contract:
            raise NotFoundError("Contrato não encontrado")
        return contract

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = self._validated(data, partial=False)
        items = _contract_items(data.get("contract_items") or data.get("items"))

        next_billing = self._contracts.first_next_billing_date(
            fields["start_date"], fields["billing_type"], fields["billing_day"]
        )
        fields.update(
            next_billing_date=next_billing,
            status=ContractStatus.ACTIVE,
            first_billing_processed=False,
            created_with_first_billing=True,
            contract_duration_months=fields.get("contract_duration_months") or None,
        )
        contract_id = self._contracts.create(company_id, fields, items)
        logger.info("Contract %s created (next billing %s)", contract_id, next_billing)
        return contract_id

    def update(self, company_id: str, contract_id: str, data: Mapping[str, Any]) -> None:
        fields = self._validated(data, partial=True)

        if "billing_type" in fields or "billing_day" in fields:
            contract = self.get(company_id, contract_id)
            billing_type = fields.get("billing_type", contract.billing_type)
            billing_day = fields.get("billing_day", contract.billing_day)
            next_billing: Optional[date] = None
            if not contract.first_billing_processed:
                next_billing = self._contracts.first_next_billing_date(
                    fields.get("start_date", contract.start_date), billing_type, billing_day
                )
            elif contract.next_billing_date:
                next_billing = self._contracts.next_billing_date(
                    contract.next_billing_date, billing_type, billing_day
                )
            if next_billing:
                fields["next_billing_date"] = next_billing

        if not self._contracts.update(company_id, contract_id, fields):
            raise NotFoundError("Contrato não encontrado")

    def delete(self, company_id: str, contract_id: str) -> None:
        if not self._contracts.soft_delete(company_id, contract_id):
            raise NotFoundError("Contrato não encontrado")

    def _set_status(self, company_id: str, contract_id: str, status: ContractStatus) -> None:
        if not self._contracts.set_status(company_id, contract_id, status):
            raise NotFoundError("Contrato não encontrado")

    def activate(self, company_id: str, contract_id: str) -> None:
        self._set_status(company_id, contract_id, ContractStatus.ACTIVE)

    def pause(self, company_id: str, contract_id: str) -> None:
        self._set_status(company_id, contract_id, ContractStatus.PAUSED)

    def cancel(self, company_id: str, contract_id: str) -> None:
        self._set_status(company_id, contract_id, ContractStatus.CANCELLED)

    def cancel_with_fee(
        self,
        company_id: str,
        contract_id: str,
        *,
        reason: str,
        fee: Any = None,
        cancellation_date: Any = None,
        today: Optional[date] = None,
    ) -> Sequence[Mapping[str, Any]]:
        self.get(company_id, contract_id)
        reason = require_non_empty(reason, "Motivo do cancelamento")
        amount = require_money(fee, "Multa de cancelamento") if fee not in (None, "") else Decimal("0")
        when = optional_date(cancellation_date) or today or date.today()
        result = self._contracts.cancel_with_fee(contract_id, reason, amount, when)
        logger.info("Contract %s cancelled on %s (fee %s)", contract_id, when, amount)
        return result

    def list_due_on(self, company_id: str, day: Any) -> Sequence[Contract]:
        due = optional_date(day)
        if due is None:
            raise ValidationError("Data inválida")
        return self._contracts.list_due_on(company_id, due)

    def list_expiring(
        self,
        company_id: str,
        days_ahead: int = DEFAULT_EXPIRING_DAYS,
        *,
        today: Optional[date] = None,
    ) -> Sequence[Contract]:
        until = (today or date.today()) + timedelta(days=int(days_ahead))
        return self._contracts.list_expiring(company_id, until)
