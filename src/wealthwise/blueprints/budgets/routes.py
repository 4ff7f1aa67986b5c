"""Budget routes."""

from __future__ import annotations

from flask import request

from ...errors import ApiError
from ...extensions import get_context
from ...models.base import utcnow
from ...models.budget import Budget
from ...responses import created, success
from ...security import current_user, login_required
from ...services import budgeting
from ...services.notifications import resolve_emitter
from ...services.serializers import budget_to_dict
from . import bp
from .forms import BudgetForm


def _get_budget(budget_id: int) -> Budget:
    budget = get_context().budget_repo.get_by_id(budget_id, user_id=current_user().id)
    if budget is None:
        raise ApiError.not_found("Budget not found")
    return budget


def _evaluate(budget: Budget) -> budgeting.BudgetEvaluation:
    return budgeting.evaluate_budget(
        budget=budget,
        transactions=get_context().transaction_repo,
        user_id=current_user().id,
        now=utcnow(),
    )


def _ensure_unique(category: str, period: str, exclude_id: int | None = None) -> None:
    if not budgeting.ensure_unique(
        repository=get_context().budget_repo,
        category=category,
        period=period,
        user_id=current_user().id,
        exclude_id=exclude_id,
    ):
        raise ApiError.bad_request(f'A budget for "{category}" already exists for this period')


@bp.get("/")
@login_required
def list_budgets():
    ctx = get_context()
    user_id = current_user().id
    period = request.args.get("period") or None
    budgets = ctx.budget_repo.list_all(user_id=user_id, active_only=True, period=period)
    evaluations = budgeting.evaluate_budgets(
        budgets=budgets, transactions=ctx.transaction_repo, user_id=user_id, now=utcnow()
    )
    return success(
        [budget_to_dict(e.budget, e) for e in evaluations], "Budgets retrieved successfully"
    )


@bp.get("/summary")
@login_required
def summary():
    ctx = get_context()
    user_id = current_user().id
    evaluations = budgeting.evaluate_budgets(
        budgets=ctx.budget_repo.list_all(user_id=user_id, active_only=True),
        transactions=ctx.transaction_repo,
        user_id=user_id,
        now=utcnow(),
    )
    return success(budgeting.summarize(evaluations), "Budget summary retrieved successfully")


@bp.post("/")
@login_required
def create_budget():
    data = BudgetForm.from_mapping(request.get_json(silent=True)).validated()
    _ensure_unique(data["category"], data.get("period", "monthly"))
    user_id = current_user().id
    budget = get_context().budget_repo.create(Budget(**data), user_id=user_id)
    payload = budget_to_dict(budget, _evaluate(budget))
    resolve_emitter()(user_id, "budget:created", payload)
    return created(payload, "Budget created successfully")


@bp.get("/<int:budget_id>")
@login_required
def get_budget(budget_id: int):
    budget = _get_budget(budget_id)
    return success(budget_to_dict(budget, _evaluate(budget)), "Budget retrieved successfully")


@bp.put("/<int:budget_id>")
@login_required
def update_budget(budget_id: int):
    changes = BudgetForm.from_mapping(request.get_json(silent=True), partial=True).validated()
    budget = _get_budget(budget_id)
    if "category" in changes or "period" in changes:
        _ensure_unique(
            changes.get("category", budget.category),
            changes.get("period", budget.period),
            exclude_id=budget.id,
        )
    for key, value in changes.items():
        setattr(budget, key, value)
    user_id = current_user().id
    budget = get_context().budget_repo.update(budget, user_id=user_id)
    payload = budget_to_dict(budget, _evaluate(budget))
    resolve_emitter()(user_id, "budget:updated", payload)
    return success(payload, "Budget updated successfully")


@bp.delete("/<int:budget_id>")
@login_required
def delete_budget(budget_id: int):
    user_id = current_user().id
    if not get_context().budget_repo.delete(budget_id, user_id=user_id):
        raise ApiError.not_found("Budget not found")
    resolve_emitter()(user_id, "budget:deleted", {"id": budget_id})
    return success(None, "Budget deleted successfully")
