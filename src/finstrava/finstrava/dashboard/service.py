from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import add_months, month_end, month_start
from ..core.constants import DEFAULT_RECENT_ENTRIES, DEFAULT_REVENUE_MONTHS
from ..core.enums import EntryType
from .metrics import build_dashboard
from .model import DashboardData, DashboardSnapshot
from .repository import DashboardRepository

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, dashboard: DashboardRepository):
        self._dashboard = dashboard

    def snapshot(self, company_id: str, *, today: Optional[date] = None) -> DashboardSnapshot:
        today = today or date.today()
        current_start, current_end = month_start(today), month_end(today)
        previous = add_months(current_start, -1)
        previous_start, previous_end = previous, month_end(previous)
        chart_start = add_months(current_start, -(DEFAULT_REVENUE_MONTHS - 1))

        repo = self._dashboard
        return DashboardSnapshot(
            active_contracts=list(repo.active_contracts(company_id)),
            new_contracts=repo.count_new_contracts(company_id, current_start, current_end),
            cancelled_contracts=repo.count_cancelled_contracts(company_id, current_start, current_end),
            revenue=repo.paid_total(company_id, EntryType.INCOME, current_start, current_end),
            revenue_previous=repo.paid_total(company_id, EntryType.INCOME, previous_start, previous_end),
            expenses=repo.paid_total(company_id, EntryType.EXPENSE, current_start, current_end),
            expenses_previous=repo.paid_total(company_id, EntryType.EXPENSE, previous_start, previous_end),
            receivables=repo.pending_total(company_id, EntryType.INCOME),
            payables=repo.pending_total(company_id, EntryType.EXPENSE),
            overdue_entries=list(repo.overdue_income(company_id)),
            active_customers=repo.count_active_customers(company_id),
            new_customers=repo.count_new_customers(company_id, current_start, current_end),
            churned_customers=repo.count_churned_customers(company_id, current_start, current_end),
            paid_entries=list(repo.paid_entries(company_id, chart_start, current_end)),
            recent_entries=list(repo.recent_entries(company_id, DEFAULT_RECENT_ENTRIES)),
        )

    def overview(self, company_id: Optional[str], *, today: Optional[date] = None) -> DashboardData:
        """Dashboard for the selected company; empty figures when none is selected."""
        if not company_id:
            return DashboardData()
        today = today or date.today()
        data = build_dashboard(self.snapshot(company_id, today=today), today)
        logger.debug("Dashboard built for company %s (%d alerts)", company_id, len(data.alerts))
        return data
