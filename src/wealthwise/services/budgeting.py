"""Budgeting domain services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..domain.repositories import (
    BudgetRepository,
    NotificationRepository,
    TransactionRepository,
)
from ..logging_config import get_logger
from ..models.budget import Budget
from ..models.notification import Notification
from ..models.user import User
from .notifications import Emitter, notify
from .periods import half_up, percent

logger = get_logger("services.budgeting")


def period_start(period: str, now: datetime) -> datetime:
    """Start of the budget window containing ``now``.

    Weeks start on Sunday; months on the 1st; years on January 1st.
    """

    if period == "weekly":
        days_since_sunday = (now.weekday() + 1) % 7
        day = now - timedelta(days=days_since_sunday)
        return datetime(day.year, day.month, day.day)
    if period == "yearly":
        return datetime(now.year, 1, 1)
    return datetime(now.year, now.month, 1)


@dataclass(slots=True)
class BudgetEvaluation:
    """Spend against a budget for its current period."""

    budget: Budget
    spent: float

    @property
    def remaining(self) -> float:
        return max(0.0, self.budget.amount - self.spent)

    @property
    def percent_used(self) -> float:
        """Unclamped share of the budget consumed."""
        if self.budget.amount <= 0:
            return 0.0
        return round(self.spent / self.budget.amount * 100, 2)

    @property
    def display_percent(self) -> int:
        return min(100, half_up(self.percent_used))

    @property
    def status(self) -> str:
        if self.percent_used >= 100:
            return "exceeded"
        if self.percent_used >= self.budget.alert_threshold:
            return "warning"
        return "on-track"


def evaluate_budget(
    *, budget: Budget, transactions: TransactionRepository, user_id: int, now: datetime
) -> BudgetEvaluation:
    start = period_start(budget.period, now)
    spent = transactions.sum_expenses(budget.category, start, now, user_id=user_id)
    return BudgetEvaluation(budget=budget, spent=round(spent, 2))


def evaluate_budgets(
    *,
    budgets: Iterable[Budget],
    transactions: TransactionRepository,
    user_id: int,
    now: datetime,
) -> list[BudgetEvaluation]:
    return [
        evaluate_budget(budget=b, transactions=transactions, user_id=user_id, now=now)
        for b in budgets
    ]


def summarize(evaluations: Iterable[BudgetEvaluation]) -> dict[str, object]:
    """Totals and status counts across active budgets."""

    evaluations = list(evaluations)
    total_budgeted = sum(e.budget.amount for e in evaluations)
    total_spent = sum(e.spent for e in evaluations)
    statuses = [e.status for e in evaluations]
    return {
        "totalBudgets": len(evaluations),
        "totalBudgeted": round(total_budgeted, 2),
        "totalSpent": round(total_spent, 2),
        "totalRemaining": round(max(0.0, total_budgeted - total_spent), 2),
        "onTrack": statuses.count("on-track"),
        "warning": statuses.count("warning"),
        "exceeded": statuses.count("exceeded"),
        "percentUsed": percent(total_spent, total_budgeted),
    }


def ensure_unique(
    *,
    repository: BudgetRepository,
    category: str,
    period: str,
    user_id: int,
    exclude_id: Optional[int] = None,
) -> bool:
    """True when no other active budget covers the same category and period."""

    existing = repository.find_active(category, period, user_id=user_id)
    return existing is None or existing.id == exclude_id


_ALERT_RANK = {"none": 0, "warning": 1, "exceeded": 2}


def alerts_to_send(
    *,
    evaluations: Iterable[BudgetEvaluation],
    repository: BudgetRepository,
    user_id: int,
) -> list[BudgetEvaluation]:
    """Persist each budget's alert level and return those that just escalated.

    A budget notifies once per level per crossing; dropping back under the
    threshold (new period, edits) re-arms it.
    """

    escalated: list[BudgetEvaluation] = []
    for evaluation in evaluations:
        budget = evaluation.budget
        level = "none" if evaluation.status == "on-track" else evaluation.status
        previous = budget.alert_state or "none"
        if level == previous and round(budget.spent, 2) == evaluation.spent:
            continue
        budget.spent = evaluation.spent
        budget.alert_state = level
        evaluation.budget = repository.update(budget, user_id=user_id)
        if _ALERT_RANK[level] > _ALERT_RANK[previous]:
            escalated.append(evaluation)
            logger.info(
                "Budget crossed alert threshold",
                extra={"budget_id": budget.id, "status": level, "user_id": user_id},
            )
    return escalated


def check_budget_alerts(
    *,
    budgets: BudgetRepository,
    transactions: TransactionRepository,
    notifications: NotificationRepository,
    user: User,
    category: str,
    now: datetime,
    emit: Optional[Emitter] = None,
) -> list[Notification]:
    """Notify the user about budgets in ``category`` that just crossed a threshold."""

    affected = [b for b in budgets.list_all(user_id=user.id, active_only=True) if b.category == category]
    if not affected:
        return []
    evaluations = evaluate_budgets(
        budgets=affected, transactions=transactions, user_id=user.id, now=now
    )
    escalated = alerts_to_send(evaluations=evaluations, repository=budgets, user_id=user.id)
    if not user.notifications_enabled:
        return []

    sent: list[Notification] = []
    for evaluation in escalated:
        budget = evaluation.budget
        if evaluation.status == "exceeded":
            kind, title, priority = "budget_exceeded", "Budget Exceeded", "high"
            message = (
                f"You've exceeded your {budget.name} budget by "
                f"${evaluation.spent - budget.amount:.2f}."
            )
        else:
            kind, title, priority = "budget_warning", "Budget Warning", "medium"
            message = (
                f"You've used {evaluation.display_percent}% of your {budget.name} budget."
            )
        sent.append(
            notify(
                repository=notifications,
                user_id=user.id,
                type=kind,
                title=title,
                message=message,
                priority=priority,
                data={
                    "budgetId": budget.id,
                    "category": budget.category,
                    "spent": evaluation.spent,
                    "amount": budget.amount,
                    "percentUsed": evaluation.percent_used,
                },
                action_url="/budgets",
                emit=emit,
            )
        )
    return sent
