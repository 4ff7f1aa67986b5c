from __future__ import annotations

from datetime import datetime

import pytest

from wealthwise.models import Budget
from wealthwise.services import budgeting

NOW = datetime(2025, 3, 15, 12, 0)  # a Saturday


@pytest.mark.parametrize(
    "period,expected",
    [
        ("monthly", datetime(2025, 3, 1)),
        ("weekly", datetime(2025, 3, 9)),
        ("yearly", datetime(2025, 1, 1)),
    ],
)
def test_period_start(period, expected):
    assert budgeting.period_start(period, NOW) == expected


def test_weekly_period_starts_same_day_on_sunday():
    sunday = datetime(2025, 3, 16, 8, 30)
    assert budgeting.period_start("weekly", sunday) == datetime(2025, 3, 16)


def test_percent_used_is_unclamped_but_display_is_capped():
    evaluation = budgeting.BudgetEvaluation(
        budget=Budget(name="Food", category="Food", amount=200.0), spent=250.0
    )

    assert evaluation.percent_used == 125.0
    assert evaluation.display_percent == 100
    assert evaluation.remaining == 0.0
    assert evaluation.status == "exceeded"


def test_status_uses_alert_threshold():
    budget = Budget(name="Fun", category="Entertainment", amount=100.0, alert_threshold=70)

    assert budgeting.BudgetEvaluation(budget=budget, spent=69.0).status == "on-track"
    assert budgeting.BudgetEvaluation(budget=budget, spent=70.0).status == "warning"
    assert budgeting.BudgetEvaluation(budget=budget, spent=100.0).status == "exceeded"


def test_evaluate_budget_sums_current_period_expenses(
    ctx, user, account_factory, transaction_factory, budget_factory
):
    account = account_factory(balance=1000.0)
    budget = budget_factory(category="Groceries", amount=400.0)
    transaction_factory(account, 120.0, category="Groceries", date=datetime(2025, 3, 2))
    transaction_factory(account, 80.0, category="Groceries", date=datetime(2025, 3, 14))
    transaction_factory(account, 60.0, category="Groceries", date=datetime(2025, 2, 27))
    transaction_factory(account, 500.0, category="Travel", date=datetime(2025, 3, 5))
    transaction_factory(
        account, 900.0, type="income", category="Groceries", date=datetime(2025, 3, 5)
    )

    evaluation = budgeting.evaluate_budget(
        budget=budget, transactions=ctx.transaction_repo, user_id=user.id, now=NOW
    )

    assert evaluation.spent == 200.0
    assert evaluation.percent_used == 50.0


def test_summary_counts_statuses():
    budgets = [
        Budget(name="a", category="a", amount=100.0),
        Budget(name="b", category="b", amount=100.0),
        Budget(name="c", category="c", amount=100.0),
    ]
    evaluations = [
        budgeting.BudgetEvaluation(budget=budgets[0], spent=10.0),
        budgeting.BudgetEvaluation(budget=budgets[1], spent=85.0),
        budgeting.BudgetEvaluation(budget=budgets[2], spent=150.0),
    ]

    summary = budgeting.summarize(evaluations)

    assert summary["totalBudgeted"] == 300.0
    assert summary["totalSpent"] == 245.0
    assert (summary["onTrack"], summary["warning"], summary["exceeded"]) == (1, 1, 1)
    assert summary["percentUsed"] == 82


def test_alerts_fire_once_per_crossing(
    ctx, user, account_factory, transaction_factory, budget_factory
):
    account = account_factory(balance=1000.0)
    budget_factory(category="Shopping", amount=100.0)
    events = []

    def emit(user_id, event, data):
        events.append((user_id, event, data))

    def check():
        return budgeting.check_budget_alerts(
            budgets=ctx.budget_repo,
            transactions=ctx.transaction_repo,
            notifications=ctx.notification_repo,
            user=user,
            category="Shopping",
            now=NOW,
            emit=emit,
        )

    transaction_factory(account, 85.0, category="Shopping", date=datetime(2025, 3, 10))
    first = check()
    assert [n.type for n in first] == ["budget_warning"]

    transaction_factory(account, 5.0, category="Shopping", date=datetime(2025, 3, 11))
    assert check() == []

    transaction_factory(account, 20.0, category="Shopping", date=datetime(2025, 3, 12))
    second = check()
    assert [n.type for n in second] == ["budget_exceeded"]
    assert second[0].priority == "high"
    assert second[0].data["percentUsed"] == 110.0

    assert [event for _, event, _ in events] == ["notification:new", "notification:new"]


def test_alerts_respect_notification_preference(
    ctx, user_factory, account_factory, transaction_factory, budget_factory
):
    quiet = user_factory("quiet@example.com", notifications_enabled=False)
    account = account_factory(owner=quiet, balance=500.0)
    budget_factory(category="Travel", amount=50.0, owner=quiet)
    transaction_factory(account, 75.0, category="Travel", date=datetime(2025, 3, 3), owner=quiet)

    sent = budgeting.check_budget_alerts(
        budgets=ctx.budget_repo,
        transactions=ctx.transaction_repo,
        notifications=ctx.notification_repo,
        user=quiet,
        category="Travel",
        now=NOW,
        emit=lambda *args: None,
    )

    assert sent == []
    stored = ctx.budget_repo.list_all(user_id=quiet.id, active_only=True)
    assert stored[0].alert_state == "exceeded"


def test_ensure_unique_detects_duplicate_active_budget(ctx, user, budget_factory):
    existing = budget_factory(category="Groceries", period="monthly")

    assert not budgeting.ensure_unique(
        repository=ctx.budget_repo, category="Groceries", period="monthly", user_id=user.id
    )
    assert budgeting.ensure_unique(
        repository=ctx.budget_repo,
        category="Groceries",
        period="monthly",
        user_id=user.id,
        exclude_id=existing.id,
    )
    assert budgeting.ensure_unique(
        repository=ctx.budget_repo, category="Groceries", period="weekly", user_id=user.id
    )
