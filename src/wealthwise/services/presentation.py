"""Role-specific dashboard views.

A user's role picks exactly one view type; the client renders whichever
``kind`` it receives without re-deriving figures.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union

from ..constants.categories import BUSINESS_CATEGORIES
from ..models.goal import Goal
from ..models.transaction import Transaction
from .goals import GoalProgress
from .periods import month_bounds

STUDENT_TIPS = (
    "Set up automatic transfers to your savings account on payday",
    "Track your textbook expenses separately to find cheaper alternatives",
    "Cooking at home can save you $200+ per month compared to eating out",
    "Student discounts can save you 10-20% on many purchases",
    "Start an emergency fund with just $20/month",
)
ESTIMATED_TAX_RATE = 0.25


@dataclass(slots=True)
class StatCard:
    title: str
    value: float
    change: Optional[int] = None


@dataclass(slots=True)
class IndividualView:
    cards: list[StatCard]
    kind: str = "individual"


@dataclass(slots=True)
class StudentView:
    banner: str
    tips: list[str]
    tip_of_the_day: str
    savings_goals: list[dict[str, Any]]
    part_time_income: float
    spent: float
    remaining: float
    available_balance: float
    kind: str = "student"


@dataclass(slots=True)
class BusinessView:
    revenue: float
    expenses: float
    net_profit: float
    profit_margin: float
    estimated_tax: float
    quarter: str
    expense_categories: list[dict[str, Any]] = field(default_factory=list)
    kind: str = "business"


RoleView = Union[IndividualView, StudentView, BusinessView]

_CAMEL = {
    "tip_of_the_day": "tipOfTheDay",
    "savings_goals": "savingsGoals",
    "part_time_income": "partTimeIncome",
    "available_balance": "availableBalance",
    "net_profit": "netProfit",
    "profit_margin": "profitMargin",
    "estimated_tax": "estimatedTax",
    "expense_categories": "expenseCategories",
}


def view_to_dict(view: RoleView) -> dict[str, Any]:
    return {_CAMEL.get(key, key): value for key, value in asdict(view).items()}


def _individual(overview: Mapping[str, Any]) -> IndividualView:
    return IndividualView(
        cards=[
            StatCard("Total Balance", overview["totalBalance"]),
            StatCard("Monthly Income", overview["monthlyIncome"], overview["incomeChange"]),
            StatCard("Monthly Expenses", overview["monthlyExpense"], overview["expenseChange"]),
            StatCard("Net Savings", overview["monthlyNet"]),
        ]
    )


def _student(overview: Mapping[str, Any], goals: Iterable[Goal], now: datetime) -> StudentView:
    savings = [g for g in goals if g.is_active and not g.is_completed][:3]
    income = overview["monthlyIncome"]
    spent = overview["monthlyExpense"]
    return StudentView(
        banner="Student Financial Hub",
        tips=list(STUDENT_TIPS),
        tip_of_the_day=STUDENT_TIPS[now.timetuple().tm_yday % len(STUDENT_TIPS)],
        savings_goals=[
            {
                "id": g.id,
                "name": g.name,
                "targetAmount": g.target_amount,
                "currentAmount": g.current_amount,
                "progress": GoalProgress(goal=g, now=now).progress,
            }
            for g in savings
        ],
        part_time_income=income,
        spent=spent,
        remaining=round(income - spent, 2),
        available_balance=overview["totalBalance"],
    )


def _business_category(category: str) -> bool:
    lowered = (category or "").lower()
    return any(name.lower() in lowered for name in BUSINESS_CATEGORIES)


def _business(
    overview: Mapping[str, Any], transactions: Iterable[Transaction], now: datetime
) -> BusinessView:
    revenue = overview["monthlyIncome"]
    expenses = overview["monthlyExpense"]
    profit = round(revenue - expenses, 2)

    start, end = month_bounds(now.year, now.month)
    totals: dict[str, float] = {}
    for txn in transactions:
        if txn.type == "expense" and start <= txn.date < end and _business_category(txn.category):
            totals[txn.category] = totals.get(txn.category, 0.0) + txn.amount
    top = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:5]

    return BusinessView(
        revenue=revenue,
        expenses=expenses,
        net_profit=profit,
        profit_margin=round(profit / revenue * 100, 1) if revenue > 0 else 0,
        estimated_tax=round(profit * ESTIMATED_TAX_RATE, 2) if profit > 0 else 0,
        quarter=f"Q{math.ceil(now.month / 3)}",
        expense_categories=[{"category": c, "total": round(t, 2)} for c, t in top],
    )


def build_role_view(
    *,
    role: Optional[str],
    overview: Mapping[str, Any],
    transactions: Iterable[Transaction],
    goals: Iterable[Goal],
    now: datetime,
) -> RoleView:
    """Pick the dashboard view for ``role``; no role means individual."""

    if role == "student":
        return _student(overview, goals, now)
    if role == "business":
        return _business(overview, transactions, now)
    return _individual(overview)
