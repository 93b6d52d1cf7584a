from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.finstrava.finstrava.core.enums import EntryStatus, EntryType
from src.finstrava.finstrava.dashboard.model import ActiveContract, OverdueEntry, PaidEntry, RecentEntry
from src.finstrava.finstrava.dashboard.service import DashboardService


class FakeDashboard:
    """Answers every query with fixed data and records the date ranges asked for."""

    def __init__(self):
        self.ranges: dict[str, tuple] = {}
        self.recent_limit = None

    def active_contracts(self, company_id):
        return [ActiveContract("c1", Decimal("800"), "pk1", "Premium")]

    def count_new_contracts(self, company_id, start, end):
        self.ranges["new_contracts"] = (start, end)
        return 2

    def count_cancelled_contracts(self, company_id, start, end):
        return 1

    def paid_total(self, company_id, entry_type, start, end):
        self.ranges[f"paid_{entry_type.value}_{start.month}"] = (start, end)
        if entry_type == EntryType.INCOME:
            return Decimal("1000") if start.month == 3 else Decimal("800")
        return Decimal("400")

    def pending_total(self, company_id, entry_type):
        return Decimal("50")

    def overdue_income(self, company_id):
        return [OverdueEntry("o1", Decimal("250"), date(2025, 1, 10), "cu1", "ACME")]

    def count_active_customers(self, company_id):
        return 4

    def count_new_customers(self, company_id, start, end):
        return 1

    def count_churned_customers(self, company_id, start, end):
        return 1

    def paid_entries(self, company_id, start, end):
        self.ranges["chart"] = (start, end)
        return [PaidEntry(EntryType.INCOME, Decimal("1000"), date(2025, 3, 2))]

    def recent_entries(self, company_id, limit):
        self.recent_limit = limit
        return [
            RecentEntry("fe1", EntryType.INCOME, Decimal("1000"), "Mensalidade", date(2025, 3, 2), None, EntryStatus.PENDING)
        ]


TODAY = date(2025, 3, 20)


def test_snapshot_queries_current_previous_and_chart_ranges():
    repo = FakeDashboard()
    DashboardService(repo).snapshot("co1", today=TODAY)

    assert repo.ranges["new_contracts"] == (date(2025, 3, 1), date(2025, 3, 31))
    assert repo.ranges["paid_income_2"] == (date(2025, 2, 1), date(2025, 2, 28))
    assert repo.ranges["chart"] == (date(2024, 10, 1), date(2025, 3, 31))
    assert repo.recent_limit == 5


def test_overview_combines_kpis_and_charts():
    data = DashboardService(FakeDashboard()).overview("co1", today=TODAY)

    assert data.kpis.revenue == Decimal("1000")
    assert data.kpis.revenue_previous == Decimal("800")
    assert data.kpis.profit == Decimal("600")
    assert data.kpis.new_contracts == 2
    assert data.kpis.churn_rate == 20.0
    assert len(data.revenue_by_month) == 6
    assert data.revenue_by_month[-1].income == Decimal("1000")
    assert data.revenue_by_package[0].percentage == 100.0
    assert [a.id for a in data.alerts] == ["overdue-30", "churn"]
    assert [e.id for e in data.recent_entries] == ["fe1"]


def test_overview_without_company_is_empty():
    repo = FakeDashboard()
    data = DashboardService(repo).overview(None)

    assert data.kpis.mrr == 0
    assert data.alerts == []
    assert repo.ranges == {}


def test_dashboard_endpoint_serializes_money_as_numbers(make_client):
    client = make_client(dashboard_service=DashboardService(FakeDashboard()))
    body = client.get("/api/dashboard").get_json()

    assert body["success"] is True
    assert body["data"]["kpis"]["mrr"] == 800.0
    assert body["data"]["revenue_by_package"][0]["package_name"] == "Premium"
    assert len(body["data"]["revenue_by_month"]) == 6


def test_dashboard_endpoint_without_company_returns_empty_data(make_client):
    client = make_client(company_id=None, dashboard_service=DashboardService(FakeDashboard()))
    body = client.get("/api/dashboard").get_json()

    assert body["data"]["kpis"]["revenue"] == 0
    assert body["data"]["alerts"] == []
