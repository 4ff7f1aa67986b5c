"""Investment (portfolio holding) routes."""

from __future__ import annotations

from flask import request

from ...errors import ApiError
from ...extensions import get_context
from ...models.investment import Investment
from ...responses import created, success
from ...security import current_user, login_required
from ...services.notifications import resolve_emitter
from ...services.portfolio import portfolio_summary
from ...services.serializers import investment_to_dict
from . import bp
from .forms import InvestmentForm


def _get_investment(investment_id: int) -> Investment:
    investment = get_context().investment_repo.get_by_id(
        investment_id, user_id=current_user().id
    )
    if investment is None:
        raise ApiError.not_found("Investment not found")
    return investment


@bp.get("/")
@login_required
def list_investments():
    investments = get_context().investment_repo.list_all(
        user_id=current_user().id, type=request.args.get("type") or None
    )
    return success(
        [investment_to_dict(i) for i in investments], "Investments retrieved successfully"
    )


@bp.get("/summary")
@login_required
def summary():
    investments = get_context().investment_repo.list_all(user_id=current_user().id)
    return success(portfolio_summary(investments), "Portfolio summary retrieved successfully")


@bp.post("/")
@login_required
def create_investment():
    data = InvestmentForm.from_mapping(request.get_json(silent=True)).validated()
    # A new holding is valued at its purchase price until a quote is entered
    data.setdefault("current_price", data["purchase_price"])
    user_id = current_user().id
    investment = get_context().investment_repo.create(Investment(**data), user_id=user_id)
    payload = investment_to_dict(investment)
    resolve_emitter()(user_id, "investment:created", payload)
    return created(payload, "Investment created successfully")


@bp.get("/<int:investment_id>")
@login_required
def get_investment(investment_id: int):
    return success(
        investment_to_dict(_get_investment(investment_id)), "Investment retrieved successfully"
    )


@bp.put("/<int:investment_id>")
@login_required
def update_investment(investment_id: int):
    changes = InvestmentForm.from_mapping(
        request.get_json(silent=True), partial=True
    ).validated()
    investment = _get_investment(investment_id)
    for key, value in changes.items():
        setattr(investment, key, value)
    user_id = current_user().id
    investment = get_context().investment_repo.update(investment, user_id=user_id)
    payload = investment_to_dict(investment)
    resolve_emitter()(user_id, "investment:updated", payload)
    return success(payload, "Investment updated successfully")


@bp.delete("/<int:investment_id>")
@login_required
def delete_investment(investment_id: int):
    user_id = current_user().id
    if not get_context().investment_repo.delete(investment_id, user_id=user_id):
        raise ApiError.not_found("Investment not found")
    resolve_emitter()(user_id, "investment:deleted", {"id": investment_id})
    return success(None, "Investment deleted successfully")
