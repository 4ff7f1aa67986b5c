from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from wealthwise.errors import ApiError
from wealthwise.models import Goal
from wealthwise.services import goals

NOW = datetime(2025, 3, 15, 12, 0)


def _goal(**overrides) -> Goal:
    fields = {
        "name": "Vacation",
        "target_amount": 1200.0,
        "current_amount": 300.0,
        "target_date": NOW + timedelta(days=90),
        "created_at": NOW - timedelta(days=90),
    }
    fields.update(overrides)
    return Goal(**fields)


def test_progress_remaining_and_monthly_required():
    progress = goals.GoalProgress(goal=_goal(), now=NOW)

    assert progress.progress == 25.0
    assert progress.remaining == 900.0
    assert progress.days_left == 90
    assert progress.monthly_required == 300


def test_progress_is_capped_at_100():
    progress = goals.GoalProgress(goal=_goal(current_amount=1500.0), now=NOW)

    assert progress.progress == 100.0
    assert progress.remaining == 0.0
    assert progress.monthly_required == 0


def test_past_target_date_needs_no_monthly_amount():
    progress = goals.GoalProgress(goal=_goal(target_date=NOW - timedelta(days=3)), now=NOW)

    assert progress.days_left == 0
    assert progress.monthly_required == 0


@pytest.mark.parametrize(
    "current,expected",
    [(600.0, "on-track"), (400.0, "behind"), (100.0, "at-risk")],
)
def test_status_compares_against_elapsed_time(current, expected):
    # Halfway through the timeline, so 50% is expected
    progress = goals.GoalProgress(goal=_goal(current_amount=current), now=NOW)

    assert progress.expected_progress == 50.0
    assert progress.status == expected


def test_contribution_completes_goal(ctx, user, goal_factory):
    goal = goal_factory(target_amount=500.0, current_amount=450.0)

    updated = goals.contribute(
        repository=ctx.goal_repo, goal_id=goal.id, amount=50.0, user_id=user.id
    )

    assert updated.current_amount == 500.0
    assert updated.is_completed
    assert updated.completed_at is not None

    with pytest.raises(ApiError) as excinfo:
        goals.contribute(repository=ctx.goal_repo, goal_id=goal.id, amount=1.0, user_id=user.id)
    assert excinfo.value.status_code == 400


def test_contribution_rejects_non_positive_amount(ctx, user, goal_factory):
    goal = goal_factory()

    with pytest.raises(ApiError) as excinfo:
        goals.contribute(repository=ctx.goal_repo, goal_id=goal.id, amount=0, user_id=user.id)
    assert excinfo.value.message == "Valid contribution amount is required"


def test_withdrawal_reopens_completed_goal(ctx, user, goal_factory):
    goal = goal_factory(target_amount=100.0, current_amount=100.0, is_completed=True)

    updated = goals.withdraw(
        repository=ctx.goal_repo, goal_id=goal.id, amount=30.0, user_id=user.id
    )

    assert updated.current_amount == 70.0
    assert not updated.is_completed

    with pytest.raises(ApiError):
        goals.withdraw(repository=ctx.goal_repo, goal_id=goal.id, amount=500.0, user_id=user.id)


def test_other_users_goal_is_not_found(ctx, user_factory, goal_factory):
    goal = goal_factory()
    stranger = user_factory("stranger@example.com")

    with pytest.raises(ApiError) as excinfo:
        goals.contribute(
            repository=ctx.goal_repo, goal_id=goal.id, amount=10.0, user_id=stranger.id
        )
    assert excinfo.value.status_code == 404


def test_summary_totals():
    items = [
        _goal(target_amount=1000.0, current_amount=1000.0, is_completed=True),
        _goal(target_amount=1000.0, current_amount=500.0),
    ]

    summary = goals.summarize_goals(goals=items, now=NOW)

    assert summary["totalGoals"] == 2
    assert summary["totalSaved"] == 1500.0
    assert summary["overallProgress"] == 75
    assert summary["completed"] == 1
    assert summary["inProgress"] == 1
