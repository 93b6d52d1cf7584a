from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.finstrava.finstrava.contracts.automation import ContractAutomationService
from src.finstrava.finstrava.contracts.model import ExpiredContract, GeneratedTransaction, ProcessedRenewal
from src.finstrava.finstrava.core.exceptions import BackendError


class FakeAutomation:
    def __init__(self, *, fail: dict[str, Exception] | None = None, log_fails: bool = False):
        self.fail = fail or {}
        self.log_fails = log_fails
        self.calls: list[tuple[str, date]] = []
        self.recorded = []

    def _step(self, name, day, rows):
        self.calls.append((name, day))
        if name in self.fail:
            raise self.fail[name]
        return rows

    def process_renewals(self, day):
        return self._step(
            "renewals", day, [ProcessedRenewal("c1", date(2025, 1, 31), date(2026, 1, 31), "ACME", "Suporte")]
        )

    def expire_contracts(self, day):
        return self._step("expire", day, [ExpiredContract("c2", "Beta", "Hospedagem", date(2025, 1, 31))])

    def generate_transactions(self, day):
        return self._step(
            "generate", day, [GeneratedTransaction("c3", "fe1", "Gamma", "Consultoria", Decimal("900"))]
        )

    def record_run(self, run):
        if self.log_fails:
            raise RuntimeError("table automation_logs doesn't exist")
        self.recorded.append(run)


DAY = date(2025, 2, 1)


def test_run_scheduled_runs_steps_in_order_and_records_the_run():
    repo = FakeAutomation()
    run = ContractAutomationService(repo).run_scheduled(DAY)

    assert [name for name, _ in repo.calls] == ["renewals", "expire", "generate"]
    assert all(day == DAY for _, day in repo.calls)
    assert run.success
    assert run.errors == []
    assert run.total_processed == 3
    assert run.execution_time_ms >= 0
    assert repo.recorded == [run]


def test_run_scheduled_collects_failures_and_keeps_going():
    repo = FakeAutomation(fail={"renewals": BackendError("deadlock"), "expire": ValueError("boom")})
    run = ContractAutomationService(repo).run_scheduled(DAY)

    assert [name for name, _ in repo.calls] == ["renewals", "expire", "generate"]
    assert run.errors == ["Renewal error: deadlock", "Expiration exception: boom"]
    assert not run.success
    assert run.processed_renewals == []
    assert len(run.generated_transactions) == 1


def test_run_scheduled_labels_messageless_exceptions_as_unknown():
    repo = FakeAutomation(fail={"generate": RuntimeError()})
    run = ContractAutomationService(repo).run_scheduled(DAY)

    assert run.errors == ["Transaction exception: Unknown"]
    assert not run.success


def test_run_scheduled_ignores_automation_log_failure():
    run = ContractAutomationService(FakeAutomation(log_fails=True)).run_scheduled(DAY)
    assert run.success


def test_process_all_stops_at_first_failure():
    repo = FakeAutomation(fail={"expire": BackendError("timeout")})
    with pytest.raises(BackendError):
        ContractAutomationService(repo).process_all("2025-02-01")
    assert [name for name, _ in repo.calls] == ["renewals", "expire"]


def test_single_steps_accept_iso_dates():
    repo = FakeAutomation()
    service = ContractAutomationService(repo)

    service.generate_transactions("2025-03-05")

    assert repo.calls == [("generate", date(2025, 3, 5))]
