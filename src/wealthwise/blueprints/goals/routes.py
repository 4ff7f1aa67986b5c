"""Savings-goal routes."""

from __future__ import annotations

from flask import request

from ...errors import ApiError
from ...extensions import get_context
from ...models.base import utcnow
from ...models.goal import Goal
from ...responses import created, success
from ...security import current_user, login_required
from ...services import goals as goal_service
from ...services.notifications import notify, resolve_emitter
from ...services.serializers import goal_to_dict
from ..forms import query_flag
from . import bp
from .forms import AmountForm, GoalForm


def _get_goal(goal_id: int) -> Goal:
    goal = get_context().goal_repo.get_by_id(goal_id, user_id=current_user().id)
    if goal is None:
        raise ApiError.not_found("Goal not found")
    return goal


def _check_linked_account(account_id: int | None) -> None:
    if account_id is None:
        return
    if get_context().account_repo.get_by_id(account_id, user_id=current_user().id) is None:
        raise ApiError.not_found("Linked account not found")


def _amount() -> float | None:
    form = AmountForm.from_mapping(request.get_json(silent=True))
    return form.cleaned.get("amount") if form.validate() else None


@bp.get("/")
@login_required
def list_goals():
    user_id = current_user().id
    args = request.args
    goals = get_context().goal_repo.list_all(
        user_id=user_id,
        category=args.get("category") or None,
        completed=query_flag(args, "completed"),
    )
    now = utcnow()
    return success([goal_to_dict(g, now) for g in goals], "Goals retrieved successfully")


@bp.get("/summary")
@login_required
def summary():
    goals = get_context().goal_repo.list_all(user_id=current_user().id)
    return success(
        goal_service.summarize_goals(goals=goals, now=utcnow()),
        "Goals summary retrieved successfully",
    )


@bp.post("/")
@login_required
def create_goal():
    data = GoalForm.from_mapping(request.get_json(silent=True)).validated()
    now = utcnow()
    if data["target_date"] <= now:
        raise ApiError.bad_request("Target date must be in the future")
    _check_linked_account(data.get("linked_account_id"))

    goal = Goal(**data)
    goal.sync_completion()
    user_id = current_user().id
    goal = get_context().goal_repo.create(goal, user_id=user_id)
    payload = goal_to_dict(goal, now)
    resolve_emitter()(user_id, "goal:created", payload)
    return created(payload, "Goal created successfully")


@bp.get("/<int:goal_id>")
@login_required
def get_goal(goal_id: int):
    return success(goal_to_dict(_get_goal(goal_id), utcnow()), "Goal retrieved successfully")


@bp.put("/<int:goal_id>")
@login_required
def update_goal(goal_id: int):
    changes = GoalForm.from_mapping(request.get_json(silent=True), partial=True).validated()
    goal = _get_goal(goal_id)
    _check_linked_account(changes.get("linked_account_id"))
    for key, value in changes.items():
        setattr(goal, key, value)
    goal.sync_completion()
    user_id = current_user().id
    goal = get_context().goal_repo.update(goal, user_id=user_id)
    payload = goal_to_dict(goal, utcnow())
    resolve_emitter()(user_id, "goal:updated", payload)
    return success(payload, "Goal updated successfully")


@bp.delete("/<int:goal_id>")
@login_required
def delete_goal(goal_id: int):
    user_id = current_user().id
    if not get_context().goal_repo.delete(goal_id, user_id=user_id):
        raise ApiError.not_found("Goal not found")
    resolve_emitter()(user_id, "goal:deleted", {"id": goal_id})
    return success(None, "Goal deleted successfully")


@bp.post("/<int:goal_id>/contribute")
@login_required
def contribute(goal_id: int):
    ctx = get_context()
    user = current_user()
    amount = _amount()
    goal = goal_service.contribute(
        repository=ctx.goal_repo, goal_id=goal_id, amount=amount, user_id=user.id
    )
    now = utcnow()
    payload = goal_to_dict(goal, now)
    emit = resolve_emitter()
    emit(
        user.id,
        "goal:contribution",
        {
            "goalId": goal.id,
            "amount": amount,
            "newTotal": goal.current_amount,
            "progress": payload["progress"],
            "isCompleted": goal.is_completed,
        },
    )

    message = f"Added ${amount:.2f} to {goal.name}"
    if goal.is_completed:
        message = f"Congratulations! You've reached your goal: {goal.name}"
        if user.notifications_enabled:
            notify(
                repository=ctx.notification_repo,
                user_id=user.id,
                type="goal_completed",
                title="Goal Achieved!",
                message=f"Congratulations! You've reached your {goal.name} goal!",
                priority="high",
                data={"goalId": goal.id},
                action_url="/goals",
                emit=emit,
            )
    return success(payload, message)


@bp.post("/<int:goal_id>/withdraw")
@login_required
def withdraw(goal_id: int):
    user_id = current_user().id
    goal = goal_service.withdraw(
        repository=get_context().goal_repo, goal_id=goal_id, amount=_amount(), user_id=user_id
    )
    payload = goal_to_dict(goal, utcnow())
    resolve_emitter()(user_id, "goal:updated", payload)
    return success(payload, "Withdrawal successful")
