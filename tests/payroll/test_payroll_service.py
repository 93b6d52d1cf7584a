from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.finstrava.finstrava.core.enums import PayrollItemStatus, PayrollStatus
from src.finstrava.finstrava.core.exceptions import NotFoundError, ValidationError
from src.finstrava.finstrava.payroll.model import Payroll, PayrollItem
from src.finstrava.finstrava.payroll.service import PayrollService, compute_totals, parse_reference_month


class InMemoryPayrolls:
    def __init__(self, payrolls=(), items=()):
        self.payrolls = {p.id: p for p in payrolls}
        self.items = list(items)
        self.created = []
        self.updates = []
        self.item_updates = []
        self.procedures = []

    def list_for_company(self, company_id):
        return [p for p in self.payrolls.values() if p.company_id == company_id]

    def get_by_id(self, company_id, payroll_id):
        payroll = self.payrolls.get(payroll_id)
        return payroll if payroll and payroll.company_id == company_id else None

    def create(self, company_id, data):
        self.created.append(dict(data))
        return "pr-new"

    def update(self, company_id, payroll_id, data):
        self.updates.append(dict(data))
        return self.get_by_id(company_id, payroll_id) is not None

    def soft_delete(self, company_id, payroll_id):
        return self.payrolls.pop(payroll_id, None) is not None

    def list_items(self, payroll_id):
        return [i for i in self.items if i.payroll_id == payroll_id]

    def update_item(self, payroll_id, item_id, data):
        self.item_updates.append((item_id, dict(data)))
        return any(i.id == item_id for i in self.list_items(payroll_id))

    def calculate(self, payroll_id):
        self.procedures.append(("calculate_payroll", payroll_id))
        return [{"employees_processed": 2}]

    def generate_financial_entries(self, payroll_id):
        self.procedures.append(("generate_payroll_financial_entries", payroll_id))
        return []


PAYROLL = Payroll(
    id="pr1",
    company_id="co1",
    reference_month=date(2025, 3, 1),
    payment_date=date(2025, 4, 5),
    status=PayrollStatus.DRAFT,
)


def _item(item_id, name, gross, deductions):
    gross, deductions = Decimal(gross), Decimal(deductions)
    return PayrollItem(
        id=item_id,
        payroll_id="pr1",
        employee_id=f"emp-{item_id}",
        status=PayrollItemStatus.PENDING,
        gross_salary=gross,
        total_deductions=deductions,
        net_salary=gross - deductions,
        employee_name=name,
    )


ITEMS = [_item("i1", "Zeca", "5000.00", "900.00"), _item("i2", "ana", "3000.00", "330.50")]


def test_compute_totals_sums_gross_deductions_and_net():
    totals = compute_totals(ITEMS)
    assert totals.total_gross == Decimal("8000.00")
    assert totals.total_deductions == Decimal("1230.50")
    assert totals.total_net == Decimal("6769.50")


def test_compute_totals_of_no_items_is_zero():
    totals = compute_totals([])
    assert (totals.total_gross, totals.total_deductions, totals.total_net) == (0, 0, 0)


def test_recalculate_totals_writes_them_back():
    repo = InMemoryPayrolls([PAYROLL], ITEMS)
    PayrollService(repo).recalculate_totals("co1", "pr1")

    assert repo.updates == [
        {
            "total_gross": Decimal("8000.00"),
            "total_deductions": Decimal("1230.50"),
            "total_net": Decimal("6769.50"),
        }
    ]


def test_items_are_sorted_by_employee_name():
    items = PayrollService(InMemoryPayrolls([PAYROLL], ITEMS)).items("co1", "pr1")
    assert [i.employee_name for i in items] == ["ana", "Zeca"]


def test_create_starts_as_draft_on_first_day_of_month():
    repo = InMemoryPayrolls()
    PayrollService(repo).create("co1", {"reference_month": "2025-03", "payment_date": "2025-04-05", "status": "paid"})

    assert repo.created == [
        {"reference_month": date(2025, 3, 1), "payment_date": date(2025, 4, 5), "status": PayrollStatus.DRAFT}
    ]


@pytest.mark.parametrize("payload", [{"payment_date": "2025-04-05"}, {"reference_month": "2025-03"}])
def test_create_requires_month_and_payment_date(payload):
    with pytest.raises(ValidationError):
        PayrollService(InMemoryPayrolls()).create("co1", payload)


def test_parse_reference_month_accepts_full_dates():
    assert parse_reference_month("2025-03-17") == date(2025, 3, 1)
    with pytest.raises(ValidationError):
        parse_reference_month("março")


def test_approve_sets_status_and_timestamp():
    repo = InMemoryPayrolls([PAYROLL])
    PayrollService(repo).approve("co1", "pr1")

    assert repo.updates[0]["status"] == PayrollStatus.APPROVED
    assert repo.updates[0]["approved_at"] is not None


def test_calculate_checks_ownership_before_calling_procedure():
    repo = InMemoryPayrolls([PAYROLL])
    service = PayrollService(repo)

    with pytest.raises(NotFoundError):
        service.calculate("other-company", "pr1")
    service.calculate("co1", "pr1")

    assert repo.procedures == [("calculate_payroll", "pr1")]


def test_update_item_validates_money_and_status():
    repo = InMemoryPayrolls([PAYROLL], ITEMS)
    service = PayrollService(repo)

    service.update_item("co1", "pr1", "i1", {"bonuses": "250.00", "status": "paid", "employee_id": "hack"})
    assert repo.item_updates == [("i1", {"bonuses": Decimal("250.00"), "status": PayrollItemStatus.PAID})]

    with pytest.raises(ValidationError):
        service.update_item("co1", "pr1", "i1", {"bonuses": "-1"})
    with pytest.raises(NotFoundError):
        service.update_item("co1", "pr1", "missing", {"notes": "x"})
