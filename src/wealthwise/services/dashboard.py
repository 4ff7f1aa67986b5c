"""Dashboard aggregation: balances, monthly totals, category spend and trends.

Everything here is arithmetic over already-fetched rows. Empty inputs yield
zeros and empty lists rather than errors.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from ..domain.repositories import AccountRepository, TransactionRepository
from ..models.account import Account
from ..models.transaction import Transaction
from .periods import half_up, month_bounds, percent, previous_month

TOP_ACCOUNTS = 4
RECENT_TRANSACTIONS = 5
TOP_CATEGORIES = 6
TREND_DAYS = 30


@dataclass(slots=True)
class MonthlySummary:
    """Income/expense/transfer totals for one calendar month."""

    income: float = 0.0
    expense: float = 0.0
    transfer: float = 0.0
    income_count: int = 0
    expense_count: int = 0

    @property
    def net(self) -> float:
        return self.income - self.expense

    def as_dict(self) -> dict[str, Any]:
        return {
            "income": round(self.income, 2),
            "expense": round(self.expense, 2),
            "transfer": round(self.transfer, 2),
            "incomeCount": self.income_count,
            "expenseCount": self.expense_count,
            "net": round(self.net, 2),
        }


def total_balance(*, accounts: Iterable[Account]) -> dict[str, Any]:
    """Sum active accounts flagged ``include_in_total``."""

    counted = [a for a in accounts if a.is_active and a.include_in_total]
    return {"total": round(sum(a.balance for a in counted), 2), "count": len(counted)}


def balance_by_type(*, accounts: Iterable[Account]) -> dict[str, dict[str, Any]]:
    grouped: dict[str, dict[str, Any]] = {}
    for account in accounts:
        if not account.is_active:
            continue
        bucket = grouped.setdefault(account.type, {"total": 0.0, "count": 0})
        bucket["total"] = round(bucket["total"] + account.balance, 2)
        bucket["count"] += 1
    return grouped


def monthly_summary(
    *, transactions: Iterable[Transaction], year: int, month: int
) -> MonthlySummary:
    start, end = month_bounds(year, month)
    summary = MonthlySummary()
    for txn in transactions:
        if not start <= txn.date < end:
            continue
        if txn.type == "income":
            summary.income += txn.amount
            summary.income_count += 1
        elif txn.type == "expense":
            summary.expense += txn.amount
            summary.expense_count += 1
        else:
            summary.transfer += txn.amount
    return summary


def spending_by_category(
    *,
    transactions: Iterable[Transaction],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Expense totals per category, largest first."""

    totals: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    for txn in transactions:
        if txn.type != "expense":
            continue
        if start is not None and txn.date < start:
            continue
        if end is not None and txn.date > end:
            continue
        totals[txn.category] += txn.amount
        counts[txn.category] += 1

    rows = [
        {"category": category, "total": round(total, 2), "count": counts[category]}
        for category, total in totals.items()
    ]
    rows.sort(key=lambda row: (-row["total"], row["category"]))
    return rows


def with_percentages(rows: list[dict[str, Any]]) -> tuple[float, list[dict[str, Any]]]:
    """Attach each category's share of total spending."""

    total_spending = round(sum(row["total"] for row in rows), 2)
    enriched = [{**row, "percentage": percent(row["total"], total_spending)} for row in rows]
    return total_spending, enriched


def daily_trend(
    *, transactions: Iterable[Transaction], days: int, now: datetime
) -> list[dict[str, Any]]:
    """Per-day income and expense totals since midnight ``days`` days ago."""

    window_start = datetime(now.year, now.month, now.day) - timedelta(days=days)
    buckets: dict[str, dict[str, Any]] = {}
    for txn in transactions:
        if txn.date < window_start or txn.type not in ("income", "expense"):
            continue
        key = txn.date.strftime("%Y-%m-%d")
        bucket = buckets.setdefault(key, {"date": key, "income": 0.0, "expense": 0.0})
        bucket[txn.type] = round(bucket[txn.type] + txn.amount, 2)
    return [buckets[key] for key in sorted(buckets)]


def percent_change(current: float, previous: float) -> int:
    """Rounded month-over-month change; 0 when there is no prior value."""

    if previous <= 0:
        return 0
    return half_up((current - previous) / previous * 100)


@dataclass(slots=True)
class DashboardData:
    """Everything the dashboard page renders, before serialization."""

    overview: dict[str, Any]
    accounts: list[Account]
    recent_transactions: list[Transaction]
    spending_by_category: list[dict[str, Any]]
    trend_data: list[dict[str, Any]]
    current_month: MonthlySummary


def build_overview(
    *,
    accounts: list[Account],
    transactions: list[Transaction],
    recent: list[Transaction],
    now: datetime,
) -> DashboardData:
    """Assemble dashboard figures from accounts and a window of transactions.

    ``transactions`` must cover at least the previous calendar month and the
    trailing trend window.
    """

    current = monthly_summary(transactions=transactions, year=now.year, month=now.month)
    last_year, last_month = previous_month(now.year, now.month)
    previous = monthly_summary(transactions=transactions, year=last_year, month=last_month)
    balance = total_balance(accounts=accounts)

    start, end = month_bounds(now.year, now.month)
    categories = spending_by_category(
        transactions=transactions, start=start, end=end - timedelta(microseconds=1)
    )

    active = sorted(
        (a for a in accounts if a.is_active), key=lambda a: a.balance, reverse=True
    )

    overview = {
        "totalBalance": balance["total"],
        "accountCount": balance["count"],
        "monthlyIncome": round(current.income, 2),
        "monthlyExpense": round(current.expense, 2),
        "monthlyNet": round(current.net, 2),
        "incomeChange": percent_change(current.income, previous.income),
        "expenseChange": percent_change(current.expense, previous.expense),
    }
    return DashboardData(
        overview=overview,
        accounts=active[:TOP_ACCOUNTS],
        recent_transactions=recent[:RECENT_TRANSACTIONS],
        spending_by_category=categories[:TOP_CATEGORIES],
        trend_data=daily_trend(transactions=transactions, days=TREND_DAYS, now=now),
        current_month=current,
    )


def dashboard_window_start(now: datetime) -> datetime:
    """Earliest date the overview needs: last month's start or the trend window."""

    last_year, last_month = previous_month(now.year, now.month)
    trend_start = datetime(now.year, now.month, now.day) - timedelta(days=TREND_DAYS)
    return min(datetime(last_year, last_month, 1), trend_start)


def load_dashboard(
    *,
    accounts_repo: AccountRepository,
    transactions_repo: TransactionRepository,
    user_id: int,
    now: datetime,
) -> DashboardData:
    accounts = accounts_repo.list_all(user_id=user_id, active_only=True)
    transactions = transactions_repo.list_between(
        dashboard_window_start(now), None, user_id=user_id
    )
    recent = transactions_repo.list_recent(RECENT_TRANSACTIONS, user_id=user_id)
    return build_overview(accounts=accounts, transactions=transactions, recent=recent, now=now)


def build_analytics(
    *, transactions: list[Transaction], period_days: int, now: datetime
) -> dict[str, Any]:
    """Category shares and daily trend over the trailing ``period_days``."""

    window_start = datetime(now.year, now.month, now.day) - timedelta(days=period_days)
    categories = spending_by_category(transactions=transactions, start=window_start, end=now)
    total_spending, categories = with_percentages(categories)
    return {
        "totalSpending": total_spending,
        "spendingByCategory": categories,
        "trendData": daily_trend(transactions=transactions, days=period_days, now=now),
        "period": period_days,
    }
