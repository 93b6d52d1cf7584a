from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import ROUND_DOWN, Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import add_months, db_timestamp, optional_date
from ..common.payload import clean_payload
from ..common.validators import require_enum, require_money, require_non_empty, require_range
from ..core.constants import MONTH_LABELS
from ..core.enums import EntryStatus, EntryType, RecurringType
from ..core.exceptions import NotFoundError, ValidationError
from .model import EntryStats, FinancialEntry, TransactionFilters
from .repository import FinancialEntryRepository

logger = logging.getLogger(__name__)

_FIELDS = (
    "type",
    "status",
    "amount",
    "payment_amount",
    "due_date",
    "payment_date",
    "category_id",
    "payment_method_id",
    "customer_id",
    "supplier_id",
    "bank_account_id",
    "product_id",
    "contract_id",
    "description",
    "notes",
)
MAX_INSTALLMENTS = 48
MAX_RECURRENCES = 60
_CENT = Decimal("0.01")
# months between occurrences; weekly series step by days instead
_RECURRENCE_MONTHS = {
    RecurringType.MONTHLY: 1,
    RecurringType.BIMONTHLY: 2,
    RecurringType.QUARTERLY: 3,
    RecurringType.SEMIANNUAL: 6,
    RecurringType.ANNUAL: 12,
}


def compute_stats(entries: Iterable[FinancialEntry]) -> EntryStats:
    """Count and amount per status; paid entries count what was actually received."""
    counts = {status: 0 for status in EntryStatus}
    amounts = {status: Decimal("0") for status in EntryStatus}
    total = 0
    total_amount = Decimal("0")
    for entry in entries:
        total += 1
        total_amount += entry.amount
        counts[entry.status] += 1
        amounts[entry.status] += entry.settled_amount if entry.status == EntryStatus.PAID else entry.amount
    return EntryStats(
        total=total,
        total_amount=total_amount,
        pending=counts[EntryStatus.PENDING],
        pending_amount=amounts[EntryStatus.PENDING],
        paid=counts[EntryStatus.PAID],
        paid_amount=amounts[EntryStatus.PAID],
        overdue=counts[EntryStatus.OVERDUE],
        overdue_amount=amounts[EntryStatus.OVERDUE],
        cancelled=counts[EntryStatus.CANCELLED],
        cancelled_amount=amounts[EntryStatus.CANCELLED],
    )


def split_installments(amount: Decimal, count: int) -> list[Decimal]:
    """Split ``amount`` into ``count`` cent-rounded parts; the last part takes the remainder."""
    if amount < _CENT * count:
        raise ValidationError(f"Valor insuficiente para {count} parcelas")
    share = (amount / count).quantize(_CENT, rounding=ROUND_DOWN)
    parts = [share] * (count - 1)
    parts.append(amount - share * (count - 1))
    return parts


def recurrence_date(start: date, recurring_type: RecurringType, occurrence: int) -> date:
    """Due date of the ``occurrence``-th entry (0 is ``start`` itself) of a recurring series."""
    if recurring_type == RecurringType.WEEKLY:
        return start + timedelta(weeks=occurrence)
    return add_months(start, _RECURRENCE_MONTHS[recurring_type] * occurrence)


class TransactionService:
    """Use case: income/expense entries of a company."""

    def __init__(self, entries: FinancialEntryRepository):
        self._entries = entries

    def _validated(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        fields = clean_payload(data, allowed=_FIELDS)
        if not partial or "type" in fields:
            fields["type"] = require_enum(data.get("type"), EntryType, "Tipo do lançamento")
        if "status" in fields:
            fields["status"] = require_enum(fields["status"], EntryStatus, "Status do lançamento")
        elif not partial:
            fields["status"] = EntryStatus.PENDING
        if not partial or "amount" in fields:
            fields["amount"] = require_money(data.get("amount"), "Valor", allow_zero=False)
        if "payment_amount" in fields:
            fields["payment_amount"] = require_money(fields["payment_amount"], "Valor pago")
        if not partial or "due_date" in fields:
            due = optional_date(data.get("due_date"))
            if due is None:
                raise ValidationError("Data de vencimento inválida")
            fields["due_date"] = due
        if "payment_date" in fields:
            fields["payment_date"] = optional_date(fields["payment_date"])
        if not partial or "description" in data:
            fields["description"] = require_non_empty(data.get("description"), "Descrição")
        return fields

    def list(self, company_id: str, filters: Optional[TransactionFilters] = None) -> Sequence[FinancialEntry]:
        return self._entries.list_for_company(company_id, filters or TransactionFilters())

    def get(self, company_id: str, entry_id: str) -> FinancialEntry:
        entry = self._entries.get_by_id(company_id, entry_id)
        if not entry:
            raise NotFoundError("Lançamento não encontrado")
        return entry

    def create(self, company_id: str, data: Mapping[str, Any]) -> list[str]:
        """Create an entry.

        ``is_recurring`` with ``recurring_times`` > 1 creates a series, one entry
        per period, each pointing at the first through ``parent_transaction_id``.
        Otherwise ``installments`` > 1 splits the amount into monthly parts.
        Returns the ids in due-date order.
        """
        fields = self._validated(data, partial=False)
        if data.get("is_recurring") and data.get("recurring_times") not in (None, ""):
            times = require_range(data.get("recurring_times"), "Repetições", 1, MAX_RECURRENCES)
            if times > 1:
                return self._create_series(company_id, fields, times, data.get("recurring_type"))
        installments = data.get("installments")
        count = require_range(installments, "Parcelas", 1, MAX_INSTALLMENTS) if installments else 1
        if count == 1:
            return [self._entries.create(company_id, fields)]

        ids = []
        for index, amount in enumerate(split_installments(fields["amount"], count)):
            ids.append(
                self._entries.create(
                    company_id,
                    {
                        **fields,
                        "amount": amount,
                        "due_date": add_months(fields["due_date"], index),
                        "installment": index + 1,
                        "total_installments": count,
                        "description": f"{fields['description']} ({index + 1}/{count})",
                    },
                )
            )
        logger.info("Created %d installments for company %s", count, company_id)
        return ids

    def _create_series(self, company_id: str, fields: dict, times: int, raw_type: Any) -> list[str]:
        recurring_type = require_enum(raw_type or RecurringType.MONTHLY.value, RecurringType, "Tipo de recorrência")
        ids: list[str] = []
        for occurrence in range(times):
            due = recurrence_date(fields["due_date"], recurring_type, occurrence)
            entry = {
                **fields,
                "due_date": due,
                "description": f"{fields['description']} - {MONTH_LABELS[due.month - 1]}/{due.year}",
                "is_recurring": True,
                "recurring_type": recurring_type,
            }
            if ids:
                entry["parent_transaction_id"] = ids[0]
            ids.append(self._entries.create(company_id, entry))
        logger.info("Created %d %s entries for company %s", times, recurring_type.value, company_id)
        return ids

    def update(self, company_id: str, entry_id: str, data: Mapping[str, Any]) -> None:
        if not self._entries.update(company_id, entry_id, self._validated(data, partial=True)):
            raise NotFoundError("Lançamento não encontrado")

    def delete(self, company_id: str, entry_id: str) -> None:
        if not self._entries.soft_delete(company_id, entry_id):
            raise NotFoundError("Lançamento não encontrado")

    def update_status(self, company_id: str, entry_id: str, status: Any, payment_date: Any = None) -> None:
        new_status = require_enum(status, EntryStatus, "Status do lançamento")
        fields: dict = {"status": new_status}
        paid_on = optional_date(payment_date)
        if new_status == EntryStatus.PAID:
            if paid_on:
                fields["payment_date"] = paid_on
        else:
            fields["payment_date"] = None
        if not self._entries.update(company_id, entry_id, fields):
            raise NotFoundError("Lançamento não encontrado")

    def mark_as_paid(
        self,
        company_id: str,
        entry_id: str,
        *,
        payment_date: Any = None,
        payment_amount: Any = None,
        today: Optional[date] = None,
    ) -> None:
        entry = self.get(company_id, entry_id)
        amount = (
            require_money(payment_amount, "Valor pago", allow_zero=False)
            if payment_amount not in (None, "")
            else entry.amount
        )
        self._entries.update(
            company_id,
            entry_id,
            {
                "status": EntryStatus.PAID,
                "payment_date": optional_date(payment_date) or today or date.today(),
                "payment_amount": amount,
            },
        )

    def mark_as_pending(self, company_id: str, entry_id: str) -> None:
        fields = {"status": EntryStatus.PENDING, "payment_date": None, "payment_amount": None}
        if not self._entries.update(company_id, entry_id, fields):
            raise NotFoundError("Lançamento não encontrado")

    def cancel(self, company_id: str, entry_id: str, reason: str) -> None:
        fields = {
            "status": EntryStatus.CANCELLED,
            "cancellation_reason": require_non_empty(reason, "Motivo do cancelamento"),
            "cancelled_at": db_timestamp(),
        }
        if not self._entries.update(company_id, entry_id, fields):
            raise NotFoundError("Lançamento não encontrado")

    def stats(self, company_id: str, filters: Optional[TransactionFilters] = None) -> EntryStats:
        return compute_stats(self.list(company_id, filters))
