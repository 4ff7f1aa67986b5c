from __future__ import annotations

from datetime import datetime

from wealthwise.models import Goal, Transaction
from wealthwise.services.presentation import (
    STUDENT_TIPS,
    BusinessView,
    IndividualView,
    StudentView,
    build_role_view,
    view_to_dict,
)

NOW = datetime(2025, 5, 20, 9, 0)

OVERVIEW = {
    "totalBalance": 5000.0,
    "monthlyIncome": 4000.0,
    "monthlyExpense": 1000.0,
    "monthlyNet": 3000.0,
    "incomeChange": 10,
    "expenseChange": -5,
}


def _expense(amount, category, date=NOW):
    return Transaction(account_id=1, type="expense", amount=amount, category=category, date=date)


def test_missing_role_falls_back_to_individual():
    view = build_role_view(role=None, overview=OVERVIEW, transactions=[], goals=[], now=NOW)

    assert isinstance(view, IndividualView)
    data = view_to_dict(view)
    assert data["kind"] == "individual"
    assert data["cards"][1] == {"title": "Monthly Income", "value": 4000.0, "change": 10}


def test_student_view():
    goals = [
        Goal(id=1, name="Laptop", target_amount=1000, current_amount=250, target_date=NOW),
        Goal(id=2, name="Done", target_amount=10, current_amount=10, target_date=NOW,
             is_completed=True),
    ]

    view = build_role_view(role="student", overview=OVERVIEW, transactions=[], goals=goals, now=NOW)

    assert isinstance(view, StudentView)
    assert view.remaining == 3000.0
    assert view.tip_of_the_day == STUDENT_TIPS[NOW.timetuple().tm_yday % len(STUDENT_TIPS)]
    assert [g["name"] for g in view.savings_goals] == ["Laptop"]
    assert view.savings_goals[0]["progress"] == 25.0

    data = view_to_dict(view)
    assert data["partTimeIncome"] == 4000.0
    assert data["availableBalance"] == 5000.0


def test_business_view_summarizes_quarter_and_categories():
    transactions = [
        _expense(300, "Office Supplies"),
        _expense(500, "Software & Subscriptions"),
        _expense(200, "Food & Dining"),
        _expense(900, "Office Supplies", date=datetime(2025, 4, 30)),
    ]

    view = build_role_view(
        role="business", overview=OVERVIEW, transactions=transactions, goals=[], now=NOW
    )

    assert isinstance(view, BusinessView)
    assert view.quarter == "Q2"
    assert view.net_profit == 3000.0
    assert view.profit_margin == 75.0
    assert view.estimated_tax == 750.0
    assert [row["category"] for row in view.expense_categories] == [
        "Software & Subscriptions",
        "Office Supplies",
    ]


def test_business_view_without_revenue():
    overview = {**OVERVIEW, "monthlyIncome": 0.0}

    view = build_role_view(role="business", overview=overview, transactions=[], goals=[], now=NOW)

    assert view.profit_margin == 0
    assert view.estimated_tax == 0
