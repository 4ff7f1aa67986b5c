"""Account routes."""

from __future__ import annotations

from flask import request

from ...errors import ApiError
from ...extensions import get_context
from ...models.account import Account
from ...responses import created, success
from ...security import current_user, login_required
from ...services.dashboard import balance_by_type, total_balance
from ...services.serializers import account_to_dict
from . import bp
from .forms import AccountForm, BalanceForm


def _get_account(account_id: int) -> Account:
    account = get_context().account_repo.get_by_id(account_id, user_id=current_user().id)
    if account is None:
        raise ApiError.not_found("Account not found")
    return account


@bp.get("/summary")
@login_required
def summary():
    accounts = get_context().account_repo.list_all(user_id=current_user().id, active_only=True)
    totals = total_balance(accounts=accounts)
    return success(
        {
            "totalBalance": totals["total"],
            "accountCount": totals["count"],
            "byType": balance_by_type(accounts=accounts),
        },
        "Account summary retrieved successfully",
    )


@bp.get("/")
@login_required
def list_accounts():
    accounts = get_context().account_repo.list_all(user_id=current_user().id, active_only=True)
    return success([account_to_dict(a) for a in accounts], "Accounts retrieved successfully")


@bp.post("/")
@login_required
def create_account():
    data = AccountForm.from_mapping(request.get_json(silent=True)).validated()
    account = get_context().account_repo.create(Account(**data), user_id=current_user().id)
    return created(account_to_dict(account), "Account created successfully")


@bp.get("/<int:account_id>")
@login_required
def get_account(account_id: int):
    return success(account_to_dict(_get_account(account_id)), "Account retrieved successfully")


@bp.put("/<int:account_id>")
@login_required
def update_account(account_id: int):
    changes = AccountForm.from_mapping(request.get_json(silent=True), partial=True).validated()
    account = _get_account(account_id)
    for key, value in changes.items():
        setattr(account, key, value)
    account = get_context().account_repo.update(account, user_id=current_user().id)
    return success(account_to_dict(account), "Account updated successfully")


@bp.delete("/<int:account_id>")
@login_required
def delete_account(account_id: int):
    if not get_context().account_repo.delete(account_id, user_id=current_user().id):
        raise ApiError.not_found("Account not found")
    return success(None, "Account deleted successfully")


@bp.put("/<int:account_id>/balance")
@login_required
def update_balance(account_id: int):
    data = BalanceForm.from_mapping(request.get_json(silent=True)).validated()
    account = _get_account(account_id)
    account.balance = data["balance"]
    account = get_context().account_repo.update(account, user_id=current_user().id)
    return success(account_to_dict(account), "Balance updated successfully")
