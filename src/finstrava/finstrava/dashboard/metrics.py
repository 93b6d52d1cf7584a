"""Pure aggregations over a :class:`DashboardSnapshot`.

Everything here is deterministic given ``today`` so it can be tested
without a database.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from ..common.datetime_utils import add_months
from ..core.constants import (
    DEFAULT_REVENUE_MONTHS,
    MONTH_LABELS,
    NO_PACKAGE_ID,
    NO_PACKAGE_NAME,
    OVERDUE_ALERT_DAYS,
    PENDING_ALERT_DAYS,
)
from ..core.enums import EntryType
from .model import (
    ActiveContract,
    DashboardAlert,
    DashboardData,
    DashboardKPIs,
    DashboardSnapshot,
    OverdueAging,
    OverdueEntry,
    PaidEntry,
    RevenueByMonth,
    RevenueByPackage,
)

ZERO = Decimal("0")

AGING_BUCKETS = (
    ("1-30 dias", 30),
    ("31-60 dias", 60),
    ("60+ dias", None),
)


def percentage(part: Decimal, whole: Decimal) -> float:
    if whole <= 0:
        return 0.0
    return float(part / whole * 100)


def growth(current: Decimal, previous: Decimal) -> float:
    """Percent change; 0 when there is no positive base to compare with."""
    if previous <= 0:
        return 0.0
    return float((current - previous) / previous * 100)


def format_brl(value: Decimal) -> str:
    text = f"{value:,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")


def compute_kpis(snapshot: DashboardSnapshot) -> DashboardKPIs:
    mrr = sum((c.monthly_value for c in snapshot.active_contracts), ZERO)
    profit = snapshot.revenue - snapshot.expenses
    profit_previous = snapshot.revenue_previous - snapshot.expenses_previous
    overdue_amount = sum((e.amount for e in snapshot.overdue_entries), ZERO)

    overdue_rate = 0.0
    if snapshot.revenue > 0:
        overdue_rate = percentage(overdue_amount, snapshot.revenue + overdue_amount)

    churn_rate = 0.0
    if snapshot.active_customers > 0:
        churn_rate = (
            snapshot.churned_customers / (snapshot.active_customers + snapshot.churned_customers) * 100
        )

    return DashboardKPIs(
        mrr=mrr,
        # No history of contract values is kept, so the previous MRR mirrors the current one.
        mrr_previous=mrr,
        mrr_growth=0.0,
        revenue=snapshot.revenue,
        revenue_previous=snapshot.revenue_previous,
        revenue_growth=growth(snapshot.revenue, snapshot.revenue_previous),
        receivables=snapshot.receivables,
        expenses=snapshot.expenses,
        expenses_previous=snapshot.expenses_previous,
        expenses_growth=growth(snapshot.expenses, snapshot.expenses_previous),
        payables=snapshot.payables,
        profit=profit,
        profit_previous=profit_previous,
        profit_growth=growth(profit, profit_previous),
        profit_margin=percentage(profit, snapshot.revenue),
        active_customers=snapshot.active_customers,
        new_customers=snapshot.new_customers,
        churned_customers=snapshot.churned_customers,
        churn_rate=churn_rate,
        active_contracts=len(snapshot.active_contracts),
        new_contracts=snapshot.new_contracts,
        cancelled_contracts=snapshot.cancelled_contracts,
        overdue_amount=overdue_amount,
        overdue_count=len(snapshot.overdue_entries),
        overdue_rate=overdue_rate,
    )


def revenue_by_month(
    entries: Iterable[PaidEntry], today: date, months: int = DEFAULT_REVENUE_MONTHS
) -> List[RevenueByMonth]:
    """One row per month, oldest first, ending with the month of ``today``."""
    totals: Dict[str, Dict[EntryType, Decimal]] = {}
    for entry in entries:
        key = entry.payment_date.strftime("%Y-%m")
        bucket = totals.setdefault(key, {EntryType.INCOME: ZERO, EntryType.EXPENSE: ZERO})
        bucket[entry.type] += entry.amount

    rows: List[RevenueByMonth] = []
    for offset in range(months - 1, -1, -1):
        month = add_months(today.replace(day=1), -offset)
        key = month.strftime("%Y-%m")
        bucket = totals.get(key, {})
        income = bucket.get(EntryType.INCOME, ZERO)
        expense = bucket.get(EntryType.EXPENSE, ZERO)
        rows.append(
            RevenueByMonth(
                month=key,
                month_label=MONTH_LABELS[month.month - 1],
                income=income,
                expense=expense,
                profit=income - expense,
            )
        )
    return rows


def revenue_by_package(contracts: Sequence[ActiveContract]) -> List[RevenueByPackage]:
    groups: Dict[str, dict] = {}
    total = ZERO
    for contract in contracts:
        package_id = contract.package_id or NO_PACKAGE_ID
        group = groups.setdefault(
            package_id,
            {"name": contract.package_name or NO_PACKAGE_NAME, "revenue": ZERO, "count": 0},
        )
        group["revenue"] += contract.monthly_value
        group["count"] += 1
        total += contract.monthly_value

    rows = [
        RevenueByPackage(
            package_id=package_id,
            package_name=group["name"],
            revenue=group["revenue"],
            contracts_count=group["count"],
            percentage=percentage(group["revenue"], total),
        )
        for package_id, group in groups.items()
    ]
    rows.sort(key=lambda r: r.revenue, reverse=True)
    return rows


def overdue_aging(entries: Iterable[OverdueEntry], today: date) -> List[OverdueAging]:
    amounts = [ZERO for _ in AGING_BUCKETS]
    counts = [0 for _ in AGING_BUCKETS]
    for entry in entries:
        days = (today - entry.due_date).days
        for index, (_, limit) in enumerate(AGING_BUCKETS):
            if limit is None or days <= limit:
                amounts[index] += entry.amount
                counts[index] += 1
                break
    return [
        OverdueAging(range=label, amount=amounts[i], count=counts[i])
        for i, (label, _) in enumerate(AGING_BUCKETS)
    ]


def build_alerts(overdue: Sequence[OverdueEntry], churned_customers: int, today: date) -> List[DashboardAlert]:
    alerts: List[DashboardAlert] = []

    late = [e for e in overdue if (today - e.due_date).days > OVERDUE_ALERT_DAYS]
    if late:
        alerts.append(
            DashboardAlert(
                id="overdue-30",
                type="overdue",
                title=f"{len(late)} cliente(s) com pagamento vencido há mais de {OVERDUE_ALERT_DAYS} dias",
                description=f"Total de {format_brl(sum((e.amount for e in late), ZERO))} em atraso",
                severity="error",
                link="/dashboard/transactions?status=overdue",
            )
        )

    if churned_customers > 0:
        alerts.append(
            DashboardAlert(
                id="churn",
                type="churn",
                title=f"{churned_customers} cliente(s) cancelaram este mês",
                description="Analise os motivos de cancelamento para melhorar a retenção",
                severity="warning",
                link="/dashboard/customers?status=churned",
            )
        )

    this_week = [e for e in overdue if 0 <= (today - e.due_date).days <= PENDING_ALERT_DAYS]
    if this_week:
        alerts.append(
            DashboardAlert(
                id="pending-week",
                type="pending",
                title=f"{len(this_week)} fatura(s) vencendo esta semana",
                description="Acompanhe os pagamentos para evitar atrasos",
                severity="info",
                link="/dashboard/transactions?status=pending",
            )
        )

    return alerts


def build_dashboard(snapshot: DashboardSnapshot, today: date) -> DashboardData:
    return DashboardData(
        kpis=compute_kpis(snapshot),
        revenue_by_month=revenue_by_month(snapshot.paid_entries, today),
        revenue_by_package=revenue_by_package(snapshot.active_contracts),
        overdue_aging=overdue_aging(snapshot.overdue_entries, today),
        alerts=build_alerts(snapshot.overdue_entries, snapshot.churned_customers, today),
        recent_entries=list(snapshot.recent_entries),
    )
