"""Savings-goal progress, status and contribution handling."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from ..domain.repositories import GoalRepository
from ..errors import ApiError
from ..models.goal import Goal
from .periods import ceil_days, percent


@dataclass(slots=True)
class GoalProgress:
    """Derived figures for one goal at a point in time."""

    goal: Goal
    now: datetime

    @property
    def progress(self) -> float:
        if self.goal.target_amount <= 0:
            return 0.0
        return min(100.0, round(self.goal.current_amount / self.goal.target_amount * 100, 2))

    @property
    def remaining(self) -> float:
        return round(max(0.0, self.goal.target_amount - self.goal.current_amount), 2)

    @property
    def days_left(self) -> int:
        return max(0, ceil_days(self.goal.target_date - self.now))

    @property
    def monthly_required(self) -> float:
        if self.remaining <= 0 or self.days_left <= 0:
            return 0
        return math.ceil(self.remaining / (self.days_left / 30))

    @property
    def expected_progress(self) -> float:
        """Share of the goal's timeline already elapsed, in percent."""
        days_total = ceil_days(self.goal.target_date - self.goal.created_at)
        if days_total <= 0:
            return 0.0
        days_passed = days_total - self.days_left
        return max(0.0, min(100.0, days_passed / days_total * 100))

    @property
    def status(self) -> str:
        if self.goal.is_completed:
            return "completed"
        expected = self.expected_progress
        if self.progress >= expected * 0.9:
            return "on-track"
        if self.progress >= expected * 0.5:
            return "behind"
        return "at-risk"


def summarize_goals(*, goals: Iterable[Goal], now: datetime) -> dict[str, object]:
    evaluated = [GoalProgress(goal=g, now=now) for g in goals]
    total_target = sum(p.goal.target_amount for p in evaluated)
    total_saved = sum(p.goal.current_amount for p in evaluated)
    statuses = [p.status for p in evaluated]
    return {
        "totalGoals": len(evaluated),
        "totalTarget": round(total_target, 2),
        "totalSaved": round(total_saved, 2),
        "overallProgress": percent(total_saved, total_target),
        "completed": statuses.count("completed"),
        "inProgress": len(evaluated) - statuses.count("completed"),
        "onTrack": statuses.count("on-track"),
        "behind": statuses.count("behind"),
        "atRisk": statuses.count("at-risk"),
    }


def contribute(
    *, repository: GoalRepository, goal_id: int, amount: float, user_id: int
) -> Goal:
    """Add ``amount`` to the goal, completing it when the target is met."""

    if amount is None or amount <= 0:
        raise ApiError.bad_request("Valid contribution amount is required")
    goal = repository.get_by_id(goal_id, user_id=user_id)
    if goal is None:
        raise ApiError.not_found("Goal not found")
    if goal.is_completed:
        raise ApiError.bad_request("This goal is already completed")

    goal.current_amount = round(goal.current_amount + amount, 2)
    goal.sync_completion()
    return repository.update(goal, user_id=user_id)


def withdraw(
    *, repository: GoalRepository, goal_id: int, amount: float, user_id: int
) -> Goal:
    """Take ``amount`` back out of the goal; dropping below target re-opens it."""

    if amount is None or amount <= 0:
        raise ApiError.bad_request("Valid withdrawal amount is required")
    goal = repository.get_by_id(goal_id, user_id=user_id)
    if goal is None:
        raise ApiError.not_found("Goal not found")
    if amount > goal.current_amount:
        raise ApiError.bad_request("Withdrawal amount exceeds current balance")

    goal.current_amount = round(goal.current_amount - amount, 2)
    goal.sync_completion()
    return repository.update(goal, user_id=user_id)
