"""Export routes: CSV downloads, a JSON summary and the PDF report."""

from __future__ import annotations

from flask import make_response, request

from ...domain.repositories.transaction import TransactionFilter
from ...extensions import get_context
from ...logging_config import get_logger
from ...models.base import utcnow
from ...responses import success
from ...security import current_user, login_required
from ...services import budgeting
from ...services.export_csv import accounts_csv, build_summary, transactions_csv
from ...services.reports import render_pdf
from ..forms import query_date
from . import bp

logger = get_logger("blueprints.export")


def _download(body, *, content_type: str, prefix: str, extension: str):
    timestamp = utcnow().strftime("%Y%m%dT%H%M%SZ")
    response = make_response(body)
    response.headers["Content-Type"] = content_type
    response.headers["Content-Disposition"] = (
        f"attachment; filename=wealthwise_{prefix}_{timestamp}.{extension}"
    )
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _summary(args):
    ctx = get_context()
    user_id = current_user().id
    now = utcnow()
    start = query_date(args, "startDate")
    end = query_date(args, "endDate")
    transactions = ctx.transaction_repo.list_between(start, end, user_id=user_id)
    evaluations = budgeting.evaluate_budgets(
        budgets=ctx.budget_repo.list_all(user_id=user_id, active_only=True),
        transactions=ctx.transaction_repo,
        user_id=user_id,
        now=now,
    )
    summary = build_summary(
        accounts=ctx.account_repo.list_all(user_id=user_id, active_only=True),
        transactions=transactions,
        budgets=[(e.budget, e.spent) for e in evaluations],
        start=start,
        end=end,
        now=now,
    )
    return summary, transactions


@bp.get("/transactions")
@login_required
def export_transactions():
    args = request.args
    ctx = get_context()
    user_id = current_user().id
    account_raw = args.get("accountId")
    filters = TransactionFilter(
        type=args.get("type") or None,
        account_id=int(account_raw) if account_raw and account_raw.isdigit() else None,
        start_date=query_date(args, "startDate"),
        end_date=query_date(args, "endDate"),
    )
    rows, total = ctx.transaction_repo.search(filters, user_id=user_id, descending=True)
    accounts = {a.id: a for a in ctx.account_repo.list_all(user_id=user_id)}
    logger.info("Transactions exported", extra={"user_id": user_id, "rows": total})
    return _download(
        transactions_csv(transactions=rows, accounts=accounts),
        content_type="text/csv; charset=utf-8",
        prefix="transactions",
        extension="csv",
    )


@bp.get("/accounts")
@login_required
def export_accounts():
    accounts = get_context().account_repo.list_all(user_id=current_user().id)
    return _download(
        accounts_csv(accounts=accounts),
        content_type="text/csv; charset=utf-8",
        prefix="accounts",
        extension="csv",
    )


@bp.get("/summary")
@login_required
def export_summary():
    summary, _ = _summary(request.args)
    return success(summary, "Financial summary generated successfully")


@bp.get("/pdf")
@login_required
def export_pdf():
    summary, transactions = _summary(request.args)
    # Rows arrive newest first, which is the order the report lists them in
    pdf = render_pdf(summary=summary, recent=transactions)
    return _download(pdf, content_type="application/pdf", prefix="report", extension="pdf")
