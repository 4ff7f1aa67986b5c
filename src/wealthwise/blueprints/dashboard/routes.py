"""Dashboard routes: overview, analytics and the role-specific view."""

from __future__ import annotations

from datetime import datetime, timedelta

from flask import request

from ...extensions import get_context
from ...models.base import utcnow
from ...responses import success
from ...security import current_user, login_required
from ...services import dashboard as dashboard_service
from ...services.presentation import build_role_view, view_to_dict
from ...services.serializers import account_to_dict, transaction_to_dict
from ..forms import MAX_PERIOD_DAYS, query_int
from . import bp

DEFAULT_ANALYTICS_DAYS = 30


def _load(now: datetime) -> dashboard_service.DashboardData:
    ctx = get_context()
    return dashboard_service.load_dashboard(
        accounts_repo=ctx.account_repo,
        transactions_repo=ctx.transaction_repo,
        user_id=current_user().id,
        now=now,
    )


@bp.get("/")
@login_required
def overview():
    data = _load(utcnow())
    accounts = {a.id: a for a in get_context().account_repo.list_all(user_id=current_user().id)}
    return success(
        {
            "overview": data.overview,
            "accounts": [account_to_dict(a) for a in data.accounts],
            "recentTransactions": [
                transaction_to_dict(t, accounts.get(t.account_id))
                for t in data.recent_transactions
            ],
            "spendingByCategory": data.spending_by_category,
            "trendData": data.trend_data,
            "currentMonth": data.current_month.as_dict(),
        },
        "Dashboard data retrieved successfully",
    )


@bp.get("/analytics")
@login_required
def analytics():
    now = utcnow()
    period = query_int(
        request.args, "period", DEFAULT_ANALYTICS_DAYS, maximum=MAX_PERIOD_DAYS
    )
    start = datetime(now.year, now.month, now.day) - timedelta(days=period)
    transactions = get_context().transaction_repo.list_between(
        start, None, user_id=current_user().id
    )
    return success(
        dashboard_service.build_analytics(transactions=transactions, period_days=period, now=now),
        "Analytics retrieved successfully",
    )


@bp.get("/view")
@login_required
def role_view():
    now = utcnow()
    ctx = get_context()
    user = current_user()
    data = _load(now)
    month_start = datetime(now.year, now.month, 1)
    transactions = ctx.transaction_repo.list_between(month_start, None, user_id=user.id)
    view = build_role_view(
        role=user.role,
        overview=data.overview,
        transactions=transactions,
        goals=ctx.goal_repo.list_all(user_id=user.id),
        now=now,
    )
    return success(view_to_dict(view), "Dashboard view retrieved successfully")
