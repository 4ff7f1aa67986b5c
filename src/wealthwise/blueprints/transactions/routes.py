"""Transaction routes: CRUD, search, statistics and CSV import."""

from __future__ import annotations

from datetime import timedelta

from flask import Response, request

from ...constants.categories import get_categories
from ...domain.repositories.transaction import TransactionFilter
from ...errors import ApiError
from ...extensions import get_context
from ...models.base import utcnow
from ...models.transaction import Transaction
from ...responses import created, success
from ...security import current_user, login_required
from ...services import ledger_service
from ...services.import_csv import TEMPLATE_CSV, TEMPLATE_FILENAME, import_transactions
from ...services.serializers import transaction_to_dict
from ..forms import MAX_PERIOD_DAYS, query_date, query_int
from . import bp
from .forms import TransactionForm

_SORT_FIELDS = {"date", "amount", "category", "created", "createdAt"}


def _accounts_by_id(user_id: int) -> dict:
    return {a.id: a for a in get_context().account_repo.list_all(user_id=user_id)}


def _serialize_many(rows: list[Transaction], user_id: int) -> list[dict]:
    accounts = _accounts_by_id(user_id)
    return [transaction_to_dict(t, accounts.get(t.account_id)) for t in rows]


def _serialize(txn: Transaction, user_id: int) -> dict:
    return transaction_to_dict(
        txn, get_context().account_repo.get_by_id(txn.account_id, user_id=user_id)
    )


@bp.get("/")
@login_required
def list_transactions():
    args = request.args
    user_id = current_user().id
    account_raw = args.get("accountId")
    filters = TransactionFilter(
        type=args.get("type") or None,
        category=args.get("category") or None,
        account_id=int(account_raw) if account_raw and account_raw.isdigit() else None,
        start_date=query_date(args, "startDate"),
        end_date=query_date(args, "endDate"),
        text=(args.get("search") or "").strip() or None,
    )
    sort_by = args.get("sortBy", "date")
    if sort_by not in _SORT_FIELDS:
        sort_by = "date"
    rows, pagination = ledger_service.list_transactions(
        repository=get_context().transaction_repo,
        filters=filters,
        pagination=ledger_service.Pagination(
            page=query_int(args, "page", 1),
            limit=query_int(args, "limit", ledger_service.DEFAULT_PAGE_SIZE),
        ),
        user_id=user_id,
        sort_by="created" if sort_by == "createdAt" else sort_by,
        sort_order=args.get("sortOrder", "desc"),
    )
    return success(
        {"transactions": _serialize_many(rows, user_id), "pagination": pagination},
        "Transactions retrieved successfully",
    )


@bp.post("/")
@login_required
def create_transaction():
    data = TransactionForm.from_mapping(request.get_json(silent=True)).validated()
    ctx = get_context()
    user = current_user()
    txn = ledger_service.create_transaction(
        transaction=Transaction(**data),
        user=user,
        accounts=ctx.account_repo,
        transactions=ctx.transaction_repo,
        budgets=ctx.budget_repo,
        notifications=ctx.notification_repo,
        now=utcnow(),
    )
    return created(_serialize(txn, user.id), "Transaction created successfully")


@bp.get("/stats")
@login_required
def stats():
    period = query_int(request.args, "period", 30, maximum=MAX_PERIOD_DAYS)
    now = utcnow()
    rows = get_context().transaction_repo.list_between(
        now - timedelta(days=period), now, user_id=current_user().id
    )
    return success(
        ledger_service.transaction_stats(rows, period_days=period, now=now),
        "Transaction statistics retrieved successfully",
    )


@bp.get("/categories")
@login_required
def categories():
    return success(get_categories(), "Categories retrieved successfully")


@bp.post("/import")
@login_required
def import_csv():
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise ApiError.bad_request("No file uploaded")
    account_raw = request.form.get("accountId", "")
    user_id = current_user().id
    ctx = get_context()
    account = (
        ctx.account_repo.get_by_id(int(account_raw), user_id=user_id)
        if account_raw.isdigit()
        else None
    )
    if account is None:
        raise ApiError.not_found("Account not found")

    result = import_transactions(
        data=upload.read(),
        account_id=account.id,
        repository=ctx.transaction_repo,
        user_id=user_id,
    )
    return success(result.as_dict(), result.message)


@bp.get("/import/template")
@login_required
def import_template():
    return Response(
        TEMPLATE_CSV,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={TEMPLATE_FILENAME}"},
    )


@bp.get("/<int:transaction_id>")
@login_required
def get_transaction(transaction_id: int):
    user_id = current_user().id
    txn = get_context().transaction_repo.get_by_id(transaction_id, user_id=user_id)
    if txn is None:
        raise ApiError.not_found("Transaction not found")
    return success(_serialize(txn, user_id), "Transaction retrieved successfully")


@bp.put("/<int:transaction_id>")
@login_required
def update_transaction(transaction_id: int):
    changes = TransactionForm.from_mapping(request.get_json(silent=True), partial=True).validated()
    ctx = get_context()
    user = current_user()
    txn = ledger_service.update_transaction(
        transaction_id=transaction_id,
        changes=changes,
        user=user,
        accounts=ctx.account_repo,
        transactions=ctx.transaction_repo,
        budgets=ctx.budget_repo,
        notifications=ctx.notification_repo,
        now=utcnow(),
    )
    return success(_serialize(txn, user.id), "Transaction updated successfully")


@bp.delete("/<int:transaction_id>")
@login_required
def delete_transaction(transaction_id: int):
    ctx = get_context()
    ledger_service.delete_transaction(
        transaction_id=transaction_id,
        user=current_user(),
        transactions=ctx.transaction_repo,
        budgets=ctx.budget_repo,
        notifications=ctx.notification_repo,
        now=utcnow(),
    )
    return success(None, "Transaction deleted successfully")
