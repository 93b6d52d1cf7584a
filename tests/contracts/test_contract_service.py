from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.finstrava.finstrava.contracts.model import Contract
from src.finstrava.finstrava.contracts.service import ContractService
from src.finstrava.finstrava.core.enums import BillingType, ContractStatus
from src.finstrava.finstrava.core.exceptions import NotFoundError, ValidationError


class FakeContracts:
    """Stands in for the MySQL repository; billing dates are fixed answers."""

    FIRST = date(2025, 2, 10)
    NEXT = date(2025, 4, 10)

    def __init__(self):
        self.contracts: dict[str, Contract] = {}
        self.created: list[tuple[dict, list]] = []
        self.updates: list[dict] = []
        self.first_calls: list[tuple] = []
        self.next_calls: list[tuple] = []
        self.cancellations: list[tuple] = []

    def add(self, contract: Contract) -> None:
        self.contracts[contract.id] = contract

    def get_by_id(self, company_id, contract_id):
        contract = self.contracts.get(contract_id)
        return contract if contract and contract.company_id == company_id else None

    def create(self, company_id, data, items):
        self.created.append((dict(data), list(items)))
        return "c-new"

    def update(self, company_id, contract_id, data):
        self.updates.append(dict(data))
        return self.get_by_id(company_id, contract_id) is not None

    def set_status(self, company_id, contract_id, status):
        contract = self.get_by_id(company_id, contract_id)
        if not contract:
            return False
        self.contracts[contract_id] = replace(contract, status=status)
        return True

    def soft_delete(self, company_id, contract_id):
        return self.contracts.pop(contract_id, None) is not None

    def list_expiring(self, company_id, until):
        return [c for c in self.contracts.values() if c.end_date and c.end_date <= until]

    def list_due_on(self, company_id, day):
        return [c for c in self.contracts.values() if c.next_billing_date == day]

    def first_next_billing_date(self, start_date, billing_type, billing_day):
        self.first_calls.append((start_date, billing_type, billing_day))
        return self.FIRST

    def next_billing_date(self, current, billing_type, billing_day):
        self.next_calls.append((current, billing_type, billing_day))
        return self.NEXT

    def cancel_with_fee(self, contract_id, reason, fee, cancellation_date):
        self.cancellations.append((contract_id, reason, fee, cancellation_date))
        return [{"contract_id": contract_id, "fee_transaction_id": "fe-1"}]


def _contract(**overrides) -> Contract:
    base = dict(
        id="c1",
        company_id="co1",
        customer_id="cu1",
        title="Suporte mensal",
        start_date=date(2025, 1, 15),
        billing_type=BillingType.MONTHLY,
        billing_day=10,
        monthly_value=Decimal("500.00"),
        status=ContractStatus.ACTIVE,
        next_billing_date=date(2025, 3, 10),
    )
    base.update(overrides)
    return Contract(**base)


def _payload(**overrides) -> dict:
    data = {
        "customer_id": "cu1",
        "title": "Suporte mensal",
        "start_date": "2025-01-15",
        "billing_type": "monthly",
        "billing_day": 10,
        "monthly_value": "500.00",
    }
    data.update(overrides)
    return data


def test_create_asks_database_for_first_billing_date_and_starts_active():
    repo = FakeContracts()
    service = ContractService(repo)

    contract_id = service.create("co1", _payload(contract_items=[{"product_id": "p1", "unit_price": "100"}]))

    assert contract_id == "c-new"
    fields, items = repo.created[0]
    assert repo.first_calls == [(date(2025, 1, 15), BillingType.MONTHLY, 10)]
    assert fields["next_billing_date"] == FakeContracts.FIRST
    assert fields["status"] == ContractStatus.ACTIVE
    assert fields["first_billing_processed"] is False
    assert fields["created_with_first_billing"] is True
    assert fields["contract_duration_months"] is None
    assert fields["monthly_value"] == Decimal("500.00")
    assert len(items) == 1
    assert items[0].quantity == Decimal("1")


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": ""},
        {"billing_day": 32},
        {"monthly_value": "-1"},
        {"start_date": ""},
        {"billing_type": "weekly"},
        {"end_date": "2024-12-31"},
    ],
)
def test_create_rejects_invalid_input(overrides):
    service = ContractService(FakeContracts())
    with pytest.raises(ValidationError):
        service.create("co1", _payload(**overrides))


def test_update_before_first_billing_recomputes_from_start_date():
    repo = FakeContracts()
    repo.add(_contract(first_billing_processed=False))
    service = ContractService(repo)

    service.update("co1", "c1", {"billing_day": 20})

    assert repo.first_calls == [(date(2025, 1, 15), BillingType.MONTHLY, 20)]
    assert repo.next_calls == []
    assert repo.updates[-1]["next_billing_date"] == FakeContracts.FIRST


def test_update_after_first_billing_advances_from_current_next_billing():
    repo = FakeContracts()
    repo.add(_contract(first_billing_processed=True))
    service = ContractService(repo)

    service.update("co1", "c1", {"billing_type": "quarterly"})

    assert repo.first_calls == []
    assert repo.next_calls == [(date(2025, 3, 10), BillingType.QUARTERLY, 10)]
    assert repo.updates[-1]["next_billing_date"] == FakeContracts.NEXT


def test_update_without_billing_change_keeps_next_billing_date():
    repo = FakeContracts()
    repo.add(_contract())
    service = ContractService(repo)

    service.update("co1", "c1", {"notes": "renegociado"})

    assert "next_billing_date" not in repo.updates[-1]
    assert repo.first_calls == [] and repo.next_calls == []


def test_update_missing_contract_raises_not_found():
    service = ContractService(FakeContracts())
    with pytest.raises(NotFoundError):
        service.update("co1", "missing", {"notes": "x"})


def test_pause_and_activate_change_status():
    repo = FakeContracts()
    repo.add(_contract())
    service = ContractService(repo)

    service.pause("co1", "c1")
    assert repo.contracts["c1"].status == ContractStatus.PAUSED
    service.activate("co1", "c1")
    assert repo.contracts["c1"].status == ContractStatus.ACTIVE


def test_cancel_with_fee_defaults_fee_to_zero_and_date_to_today():
    repo = FakeContracts()
    repo.add(_contract())
    service = ContractService(repo)

    service.cancel_with_fee("co1", "c1", reason="Cliente encerrou", today=date(2025, 5, 2))

    assert repo.cancellations == [("c1", "Cliente encerrou", Decimal("0"), date(2025, 5, 2))]


def test_cancel_with_fee_requires_reason():
    repo = FakeContracts()
    repo.add(_contract())
    with pytest.raises(ValidationError):
        ContractService(repo).cancel_with_fee("co1", "c1", reason=" ", fee="100")


def test_list_expiring_uses_days_ahead_window():
    repo = FakeContracts()
    repo.add(_contract(id="soon", end_date=date(2025, 6, 20)))
    repo.add(_contract(id="later", end_date=date(2025, 9, 1)))
    service = ContractService(repo)

    result = service.list_expiring("co1", 30, today=date(2025, 6, 1))

    assert [c.id for c in result] == ["soon"]
