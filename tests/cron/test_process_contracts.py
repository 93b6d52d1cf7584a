from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.finstrava.finstrava.contracts.automation import ContractAutomationService
from src.finstrava.finstrava.contracts.model import GeneratedTransaction, ProcessedRenewal
from src.finstrava.finstrava.core.exceptions import BackendError

CRON_SECRET = "s3cret"

AUTH = {"Authorization": f"Bearer {CRON_SECRET}"}
URL = "/api/cron/process-contracts"


class FakeAutomation:
    def __init__(self, fail_step: str | None = None):
        self.fail_step = fail_step
        self.calls: list[str] = []

    def _run(self, name, rows):
        self.calls.append(name)
        if name == self.fail_step:
            raise BackendError(f"{name} failed")
        return rows

    def process_renewals(self, day):
        return self._run("renewals", [ProcessedRenewal("c1", date(2025, 1, 31), date(2026, 1, 31), "ACME", "Suporte")])

    def expire_contracts(self, day):
        return self._run("expire", [])

    def generate_transactions(self, day):
        return self._run(
            "generate",
            [
                GeneratedTransaction("c3", "fe1", "Gamma", "Consultoria", Decimal("900")),
                GeneratedTransaction("c4", "fe2", "Delta", "Suporte", Decimal("100.50")),
            ],
        )

    def record_run(self, run):
        pass


class ExplodingService:
    def run_scheduled(self, day=None):
        raise RuntimeError("connection refused")


def _client(make_client, automation=None, service=None):
    service = service or ContractAutomationService(automation or FakeAutomation())
    return make_client(login=False, config={"CRON_SECRET": CRON_SECRET}, contract_automation_service=service)


def test_post_without_token_is_unauthorized(make_client):
    automation = FakeAutomation()
    resp = _client(make_client, automation).post(URL)

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized"}
    assert automation.calls == []


def test_post_with_wrong_token_is_unauthorized(make_client):
    resp = _client(make_client).post(URL, headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


def test_non_ascii_token_is_unauthorized_not_an_error(make_client):
    automation = FakeAutomation()
    client = _client(make_client, automation)
    headers = {"Authorization": "Bearer café"}

    assert client.post(URL, headers=headers).status_code == 401
    resp = client.get(URL, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"
    assert automation.calls == []


def test_get_without_token_returns_health_payload(make_client):
    automation = FakeAutomation()
    resp = _client(make_client, automation).get(URL)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert "POST" in body["note"]
    assert automation.calls == []


def test_successful_run_returns_200_with_summary(make_client):
    resp = _client(make_client).post(URL, headers=AUTH)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["errors"] == []
    assert body["summary"] == {
        "transactionsGenerated": 2,
        "contractsRenewed": 1,
        "contractsExpired": 0,
        "totalProcessed": 3,
    }
    assert body["results"]["generatedTransactions"][1]["amount"] == 100.5
    assert body["timestamp"].endswith("Z")


def test_get_with_token_runs_the_automation(make_client):
    automation = FakeAutomation()
    resp = _client(make_client, automation).get(URL, headers=AUTH)

    assert resp.status_code == 200
    assert automation.calls == ["renewals", "expire", "generate"]


def test_failing_step_yields_partial_status_and_other_steps_still_run(make_client):
    automation = FakeAutomation(fail_step="renewals")
    resp = _client(make_client, automation).post(URL, headers=AUTH)

    assert resp.status_code == 207
    body = resp.get_json()
    assert body["success"] is False
    assert body["errors"] == ["Renewal error: renewals failed"]
    assert automation.calls == ["renewals", "expire", "generate"]
    assert body["summary"]["transactionsGenerated"] == 2


def test_unexpected_failure_returns_500(make_client):
    resp = _client(make_client, service=ExplodingService()).post(URL, headers=AUTH)

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"] == "connection refused"


def test_empty_secret_disables_the_check(make_client):
    client = make_client(
        login=False,
        config={"CRON_SECRET": ""},
        contract_automation_service=ContractAutomationService(FakeAutomation()),
    )
    assert client.post(URL).status_code == 200
