from __future__ import annotations

from decimal import Decimal

import pytest

from src.finstrava.finstrava.companies.model import CancellationReason, Company, CompanySettings
from src.finstrava.finstrava.companies.service import CompanyService, SettingsService
from src.finstrava.finstrava.core.exceptions import AuthorizationError, BackendError, ValidationError


class InMemoryCompanies:
    def __init__(self, memberships: dict[str, list[Company]], fail_create: bool = False):
        self.memberships = memberships
        self.fail_create = fail_create
        self.created = []

    def list_for_user(self, user_id):
        return list(self.memberships.get(user_id, []))

    def get_by_id(self, company_id):
        for companies in self.memberships.values():
            for company in companies:
                if company.id == company_id:
                    return company
        return None

    def create_with_admin(self, *, user_id, name, cnpj, legal_name):
        if self.fail_create:
            raise BackendError("duplicate key", procedure="create_company_with_admin")
        self.created.append((user_id, name, cnpj, legal_name))
        return "co-new"


ACME = Company(id="co1", name="ACME")
BETA = Company(id="co2", name="Beta")


def test_resolve_selected_prefers_saved_membership():
    service = CompanyService(InMemoryCompanies({"u1": [ACME, BETA]}))

    assert service.resolve_selected("u1", "co2") == BETA
    assert service.resolve_selected("u1", "gone") == ACME
    assert service.resolve_selected("u1", None) == ACME
    assert service.resolve_selected("u2", "co1") is None


def test_select_rejects_company_of_someone_else():
    service = CompanyService(InMemoryCompanies({"u1": [ACME], "u2": [BETA]}))
    with pytest.raises(AuthorizationError):
        service.select("u1", "co2")


def test_create_company_trims_optional_fields():
    repo = InMemoryCompanies({})
    CompanyService(repo).create_company_with_admin(user_id="u1", name=" ACME ", cnpj="  ", legal_name=None)
    assert repo.created == [("u1", "ACME", None, None)]


def test_create_company_requires_name():
    with pytest.raises(ValidationError):
        CompanyService(InMemoryCompanies({})).create_company_with_admin(user_id="u1", name="")


def test_company_list_endpoint_remembers_selection(make_client):
    client = make_client(company_id="gone", company_service=CompanyService(InMemoryCompanies({"u1": [ACME, BETA]})))

    body = client.get("/api/companies").get_json()

    assert [c["id"] for c in body["data"]] == ["co1", "co2"]
    assert body["selected"]["id"] == "co1"
    with client.session_transaction() as sess:
        assert sess["company_id"] == "co1"


def test_selecting_foreign_company_is_forbidden(make_client):
    client = make_client(company_service=CompanyService(InMemoryCompanies({"u1": [ACME], "u2": [BETA]})))
    resp = client.post("/api/companies/select", json={"company_id": "co2"})
    assert resp.status_code == 403


def test_procedure_failure_is_reported_with_localized_message(make_client):
    client = make_client(company_service=CompanyService(InMemoryCompanies({}, fail_create=True)))
    resp = client.post("/api/companies", json={"name": "ACME"})

    assert resp.status_code == 502
    assert resp.get_json()["message"].startswith("Erro ao criar empresa")


class InMemorySettings:
    def __init__(self, reasons=()):
        self.settings = None
        self.reasons = list(reasons)
        self.created = []
        self.reason_updates = []

    def get_settings(self, company_id):
        return self.settings

    def upsert_settings(self, company_id, data):
        self.settings = CompanySettings(company_id=company_id, **data)

    def list_cancellation_reasons(self, company_id):
        return list(self.reasons)

    def create_cancellation_reason(self, company_id, data):
        self.created.append(dict(data))
        return "r-new"

    def update_cancellation_reason(self, company_id, reason_id, data):
        self.reason_updates.append((reason_id, dict(data)))
        return True


def test_new_cancellation_reason_goes_last():
    repo = InMemorySettings(
        [
            CancellationReason(id="r1", company_id="co1", name="Preço", display_order=1),
            CancellationReason(id="r2", company_id="co1", name="Mudança", display_order=4),
        ]
    )
    SettingsService(repo).create_cancellation_reason("co1", {"name": "Outro"})

    assert repo.created[0]["display_order"] == 5
    assert repo.created[0]["is_active"] is True
    assert repo.created[0]["requires_details"] is False


def test_update_settings_validates_fee():
    repo = InMemorySettings()
    service = SettingsService(repo)

    settings = service.update_settings("co1", {"default_cancellation_fee": "150.00", "include_pj_in_payroll": True})
    assert settings.default_cancellation_fee == Decimal("150.00")
    assert settings.include_pj_in_payroll is True

    with pytest.raises(ValidationError):
        service.update_settings("co1", {"default_cancellation_fee": "abc"})


def test_reorder_requires_id_and_order():
    repo = InMemorySettings()
    service = SettingsService(repo)

    service.reorder_cancellation_reasons("co1", [{"id": "r2", "display_order": 1}, {"id": "r1", "display_order": "2"}])
    assert repo.reason_updates == [("r2", {"display_order": 1}), ("r1", {"display_order": 2})]

    with pytest.raises(ValidationError):
        service.reorder_cancellation_reasons("co1", [{"id": "r1"}])
