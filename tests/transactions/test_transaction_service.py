from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.finstrava.finstrava.core.enums import EntryStatus, EntryType, RecurringType
from src.finstrava.finstrava.core.exceptions import NotFoundError, ValidationError
from src.finstrava.finstrava.transactions.model import FinancialEntry
from src.finstrava.finstrava.transactions.service import TransactionService, compute_stats, split_installments


class InMemoryEntries:
    def __init__(self):
        self.rows: dict[str, dict] = {}
        self.entries: dict[str, FinancialEntry] = {}
        self._next = 0

    def add(self, entry: FinancialEntry) -> None:
        self.entries[entry.id] = entry

    def list_for_company(self, company_id, filters):
        return [e for e in self.entries.values() if e.company_id == company_id]

    def get_by_id(self, company_id, entry_id):
        entry = self.entries.get(entry_id)
        return entry if entry and entry.company_id == company_id else None

    def create(self, company_id, data):
        self._next += 1
        entry_id = f"fe{self._next}"
        self.rows[entry_id] = dict(data)
        return entry_id

    def update(self, company_id, entry_id, data):
        entry = self.get_by_id(company_id, entry_id)
        if not entry:
            return False
        self.entries[entry_id] = replace(entry, **{k: v for k, v in data.items() if hasattr(entry, k)})
        self.rows.setdefault(entry_id, {}).update(data)
        return True

    def soft_delete(self, company_id, entry_id):
        return self.entries.pop(entry_id, None) is not None


def _entry(entry_id="fe1", **overrides) -> FinancialEntry:
    data = dict(
        id=entry_id,
        company_id="co1",
        type=EntryType.INCOME,
        status=EntryStatus.PENDING,
        amount=Decimal("150.00"),
        due_date=date(2025, 3, 10),
        description="Mensalidade",
    )
    data.update(overrides)
    return FinancialEntry(**data)


def _payload(**overrides) -> dict:
    data = {"type": "income", "amount": "150.00", "due_date": "2025-03-10", "description": "Mensalidade"}
    data.update(overrides)
    return data


def test_create_defaults_to_pending():
    repo = InMemoryEntries()
    ids = TransactionService(repo).create("co1", _payload())

    assert ids == ["fe1"]
    assert repo.rows["fe1"]["status"] == EntryStatus.PENDING
    assert repo.rows["fe1"]["type"] == EntryType.INCOME
    assert repo.rows["fe1"]["amount"] == Decimal("150.00")


@pytest.mark.parametrize(
    "overrides",
    [{"type": "transfer"}, {"amount": "0"}, {"due_date": ""}, {"description": "  "}, {"status": "late"}],
)
def test_create_rejects_invalid_payload(overrides):
    with pytest.raises(ValidationError):
        TransactionService(InMemoryEntries()).create("co1", _payload(**overrides))


def test_create_with_installments_spreads_amount_and_due_dates():
    repo = InMemoryEntries()
    ids = TransactionService(repo).create("co1", _payload(amount="100.00", due_date="2025-01-31", installments=3))

    assert ids == ["fe1", "fe2", "fe3"]
    rows = [repo.rows[i] for i in ids]
    assert [r["amount"] for r in rows] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert [r["due_date"] for r in rows] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]
    assert [r["description"] for r in rows] == ["Mensalidade (1/3)", "Mensalidade (2/3)", "Mensalidade (3/3)"]
    assert all(r["total_installments"] == 3 for r in rows)


def test_too_many_installments_is_rejected():
    with pytest.raises(ValidationError):
        TransactionService(InMemoryEntries()).create("co1", _payload(installments=49))


def test_installments_smaller_than_a_cent_are_rejected():
    repo = InMemoryEntries()
    with pytest.raises(ValidationError):
        TransactionService(repo).create("co1", _payload(amount="0.10", installments=12))
    assert repo.rows == {}

    ids = TransactionService(repo).create("co1", _payload(amount="0.12", installments=12))
    assert all(repo.rows[i]["amount"] > 0 for i in ids)


def test_recurring_monthly_series_links_to_first_entry():
    repo = InMemoryEntries()
    ids = TransactionService(repo).create(
        "co1", _payload(due_date="2025-11-15", is_recurring=True, recurring_times=3, installments=4)
    )

    assert ids == ["fe1", "fe2", "fe3"]
    rows = [repo.rows[i] for i in ids]
    assert [r["due_date"] for r in rows] == [date(2025, 11, 15), date(2025, 12, 15), date(2026, 1, 15)]
    assert [r["description"] for r in rows] == [
        "Mensalidade - nov/2025",
        "Mensalidade - dez/2025",
        "Mensalidade - jan/2026",
    ]
    assert all(r["amount"] == Decimal("150.00") for r in rows)
    assert all(r["is_recurring"] is True and r["recurring_type"] == RecurringType.MONTHLY for r in rows)
    assert "parent_transaction_id" not in rows[0]
    assert [r["parent_transaction_id"] for r in rows[1:]] == ["fe1", "fe1"]
    assert "installment" not in rows[0]


@pytest.mark.parametrize(
    "recurring_type, expected",
    [
        ("weekly", [date(2025, 1, 31), date(2025, 2, 7), date(2025, 2, 14)]),
        ("bimonthly", [date(2025, 1, 31), date(2025, 3, 31), date(2025, 5, 31)]),
        ("quarterly", [date(2025, 1, 31), date(2025, 4, 30), date(2025, 7, 31)]),
        ("annual", [date(2025, 1, 31), date(2026, 1, 31), date(2027, 1, 31)]),
    ],
)
def test_recurrence_periods(recurring_type, expected):
    repo = InMemoryEntries()
    ids = TransactionService(repo).create(
        "co1",
        _payload(due_date="2025-01-31", is_recurring=True, recurring_times=3, recurring_type=recurring_type),
    )
    assert [repo.rows[i]["due_date"] for i in ids] == expected


@pytest.mark.parametrize("overrides", [{"recurring_times": 61}, {"recurring_times": "x"}, {"recurring_type": "daily"}])
def test_invalid_recurrence_is_rejected(overrides):
    payload = _payload(is_recurring=True, recurring_times=3)
    payload.update(overrides)
    with pytest.raises(ValidationError):
        TransactionService(InMemoryEntries()).create("co1", payload)


def test_single_recurrence_creates_plain_entry():
    repo = InMemoryEntries()
    ids = TransactionService(repo).create("co1", _payload(is_recurring=True, recurring_times=1))
    assert ids == ["fe1"]
    assert repo.rows["fe1"]["description"] == "Mensalidade"


def test_split_installments_sums_to_total():
    parts = split_installments(Decimal("1000.00"), 7)
    assert sum(parts) == Decimal("1000.00")
    assert len(parts) == 7


def test_mark_as_paid_defaults_amount_and_date():
    repo = InMemoryEntries()
    repo.add(_entry())
    TransactionService(repo).mark_as_paid("co1", "fe1", today=date(2025, 3, 12))

    entry = repo.entries["fe1"]
    assert entry.status == EntryStatus.PAID
    assert entry.payment_date == date(2025, 3, 12)
    assert entry.payment_amount == Decimal("150.00")


def test_mark_as_paid_keeps_partial_amount():
    repo = InMemoryEntries()
    repo.add(_entry())
    TransactionService(repo).mark_as_paid("co1", "fe1", payment_date="2025-03-11", payment_amount="120")

    entry = repo.entries["fe1"]
    assert entry.payment_date == date(2025, 3, 11)
    assert entry.payment_amount == Decimal("120")


def test_mark_as_pending_clears_payment():
    repo = InMemoryEntries()
    repo.add(_entry(status=EntryStatus.PAID, payment_date=date(2025, 3, 11), payment_amount=Decimal("150")))
    TransactionService(repo).mark_as_pending("co1", "fe1")

    entry = repo.entries["fe1"]
    assert entry.status == EntryStatus.PENDING
    assert entry.payment_date is None
    assert entry.payment_amount is None


def test_update_status_to_non_paid_clears_payment_date():
    repo = InMemoryEntries()
    repo.add(_entry(status=EntryStatus.PAID, payment_date=date(2025, 3, 11)))
    TransactionService(repo).update_status("co1", "fe1", "overdue", payment_date="2025-03-11")

    assert repo.entries["fe1"].status == EntryStatus.OVERDUE
    assert repo.entries["fe1"].payment_date is None


def test_update_status_to_paid_keeps_given_date():
    repo = InMemoryEntries()
    repo.add(_entry())
    TransactionService(repo).update_status("co1", "fe1", "paid", payment_date="2025-03-09")

    assert repo.entries["fe1"].payment_date == date(2025, 3, 9)


def test_cancel_requires_reason_and_stamps_time():
    repo = InMemoryEntries()
    repo.add(_entry())
    service = TransactionService(repo)

    with pytest.raises(ValidationError):
        service.cancel("co1", "fe1", "")
    service.cancel("co1", "fe1", "Lançado em duplicidade")

    assert repo.entries["fe1"].status == EntryStatus.CANCELLED
    assert repo.entries["fe1"].cancellation_reason == "Lançado em duplicidade"
    assert repo.entries["fe1"].cancelled_at is not None


def test_operations_on_other_company_entry_are_not_found():
    repo = InMemoryEntries()
    repo.add(_entry(company_id="co2"))
    with pytest.raises(NotFoundError):
        TransactionService(repo).mark_as_pending("co1", "fe1")


def test_compute_stats_uses_received_amount_for_paid_entries():
    stats = compute_stats(
        [
            _entry("a"),
            _entry("b", status=EntryStatus.PAID, payment_amount=Decimal("140.00")),
            _entry("c", status=EntryStatus.OVERDUE, amount=Decimal("50.00")),
            _entry("d", status=EntryStatus.CANCELLED, amount=Decimal("10.00")),
        ]
    )

    assert stats.total == 4
    assert stats.total_amount == Decimal("360.00")
    assert (stats.pending, stats.pending_amount) == (1, Decimal("150.00"))
    assert (stats.paid, stats.paid_amount) == (1, Decimal("140.00"))
    assert (stats.overdue, stats.overdue_amount) == (1, Decimal("50.00"))
    assert (stats.cancelled, stats.cancelled_amount) == (1, Decimal("10.00"))
