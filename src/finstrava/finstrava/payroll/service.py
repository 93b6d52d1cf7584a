from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import db_timestamp, optional_date
from ..common.payload import blank_to_none
from ..common.validators import require_enum, require_money
from ..core.enums import PayrollItemStatus, PayrollStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Payroll, PayrollItem, PayrollTotals
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_PAYROLL_FIELDS = ("reference_month", "payment_date", "notes")
_ITEM_MONEY_FIELDS = (
    "base_salary",
    "overtime_hours",
    "overtime_value",
    "bonuses",
    "commissions",
    "other_earnings",
    "total_earnings",
    "inss_deduction",
    "irrf_deduction",
    "other_deductions",
    "total_deductions",
    "gross_salary",
    "net_salary",
)
_ITEM_FIELDS = _ITEM_MONEY_FIELDS + ("status", "payment_date", "notes")


def parse_reference_month(value: Any) -> date:
    """Accept "YYYY-MM" or a full date; payrolls are keyed by the first day of the month."""
    if isinstance(value, date):
        return value.replace(day=1)
    text = str(value or "").strip()
    if len(text) == 7:
        text = f"{text}-01"
    parsed = optional_date(text)
    if parsed is None:
        raise ValidationError("Mês de referência inválido")
    return parsed.replace(day=1)


def compute_totals(items: Iterable[PayrollItem]) -> PayrollTotals:
    gross = deductions = net = Decimal("0")
    for item in items:
        gross += item.gross_salary or 0
        deductions += item.total_deductions or 0
        net += item.net_salary or 0
    return PayrollTotals(total_gross=gross, total_deductions=deductions, total_net=net)


class PayrollService:
    """Use case: monthly payrolls; the figures come from ``calculate_payroll``."""

    def __init__(self, payrolls: PayrollRepository):
        self._payrolls = payrolls

    def _fields(self, data: Mapping[str, Any]) -> dict:
        fields = blank_to_none(data, allowed=_PAYROLL_FIELDS)
        if "reference_month" in fields:
            fields["reference_month"] = parse_reference_month(fields["reference_month"])
        if "payment_date" in fields:
            fields["payment_date"] = optional_date(fields["payment_date"])
        return fields

    def list(self, company_id: str) -> Sequence[Payroll]:
        return self._payrolls.list_for_company(company_id)

    def get(self, company_id: str, payroll_id: str) -> Payroll:
        payroll = self._payrolls.get_by_id(company_id, payroll_id)
        if not payroll:
            raise NotFoundError("Folha de pagamento não encontrada")
        return payroll

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = self._fields(data)
        if not fields.get("reference_month"):
            raise ValidationError("Mês de referência inválido")
        if not fields.get("payment_date"):
            raise ValidationError("Data de pagamento inválida")
        fields["status"] = PayrollStatus.DRAFT
        return self._payrolls.create(company_id, fields)

    def update(self, company_id: str, payroll_id: str, data: Mapping[str, Any]) -> None:
        if not self._payrolls.update(company_id, payroll_id, self._fields(data)):
            raise NotFoundError("Folha de pagamento não encontrada")

    def delete(self, company_id: str, payroll_id: str) -> None:
        if not self._payrolls.soft_delete(company_id, payroll_id):
            raise NotFoundError("Folha de pagamento não encontrada")

    def items(self, company_id: str, payroll_id: str) -> list[PayrollItem]:
        self.get(company_id, payroll_id)
        return sorted(self._payrolls.list_items(payroll_id), key=lambda i: (i.employee_name or "").casefold())

    def calculate(self, company_id: str, payroll_id: str) -> Sequence[Mapping[str, Any]]:
        self.get(company_id, payroll_id)
        result = self._payrolls.calculate(payroll_id)
        logger.info("Payroll %s calculated", payroll_id)
        return result

    def approve(self, company_id: str, payroll_id: str) -> None:
        fields = {"status": PayrollStatus.APPROVED, "approved_at": db_timestamp()}
        if not self._payrolls.update(company_id, payroll_id, fields):
            raise NotFoundError("Folha de pagamento não encontrada")

    def cancel(self, company_id: str, payroll_id: str) -> None:
        if not self._payrolls.update(company_id, payroll_id, {"status": PayrollStatus.CANCELLED}):
            raise NotFoundError("Folha de pagamento não encontrada")

    def generate_financial_entries(self, company_id: str, payroll_id: str) -> Sequence[Mapping[str, Any]]:
        self.get(company_id, payroll_id)
        result = self._payrolls.generate_financial_entries(payroll_id)
        logger.info("Financial entries generated for payroll %s", payroll_id)
        return result

    def update_item(self, company_id: str, payroll_id: str, item_id: str, data: Mapping[str, Any]) -> None:
        self.get(company_id, payroll_id)
        fields = blank_to_none(data, allowed=_ITEM_FIELDS)
        for key in _ITEM_MONEY_FIELDS:
            if fields.get(key) is not None:
                fields[key] = require_money(fields[key], key)
        if fields.get("status") is not None:
            fields["status"] = require_enum(fields["status"], PayrollItemStatus, "Status do item")
        if "payment_date" in fields:
            fields["payment_date"] = optional_date(fields["payment_date"])
        if not self._payrolls.update_item(payroll_id, item_id, fields):
            raise NotFoundError("Item da folha não encontrado")

    def recalculate_totals(self, company_id: str, payroll_id: str) -> PayrollTotals:
        totals = compute_totals(self.items(company_id, payroll_id))
        self._payrolls.update(
            company_id,
            payroll_id,
            {
                "total_gross": totals.total_gross,
                "total_deductions": totals.total_deductions,
                "total_net": totals.total_net,
            },
        )
        return totals

    def with_items(self, company_id: str, payroll_id: str) -> tuple[Payroll, list[PayrollItem]]:
        return self.get(company_id, payroll_id), self.items(company_id, payroll_id)

    def find_for_month(self, company_id: str, month: Any) -> Optional[Payroll]:
        target = parse_reference_month(month)
        for payroll in self.list(company_id):
            if payroll.reference_month == target:
                return payroll
        return None
