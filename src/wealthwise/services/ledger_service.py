"""Ledger workflows: listing, balance-aware writes, and statistics."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional

from ..domain.repositories import (
    AccountRepository,
    BudgetRepository,
    NotificationRepository,
    TransactionRepository,
)
from ..domain.repositories.transaction import TransactionFilter
from ..errors import ApiError
from ..logging_config import get_logger
from ..models.account import Account
from ..models.transaction import Transaction
from ..models.user import User
from .budgeting import check_budget_alerts
from .notifications import Emitter, resolve_emitter
from .serializers import transaction_to_dict

logger = get_logger("services.ledger")

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20
TOP_MERCHANTS = 5


@dataclass(slots=True)
class Pagination:
    """Page/limit parameters; ``limit`` is capped at ``MAX_PAGE_SIZE``."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        self.page = max(1, self.page)
        self.limit = min(MAX_PAGE_SIZE, max(1, self.limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "pages": math.ceil(total / self.limit) if total else 0,
        }


def list_transactions(
    *,
    repository: TransactionRepository,
    filters: TransactionFilter,
    pagination: Pagination,
    user_id: int,
    sort_by: str = "date",
    sort_order: str = "desc",
) -> tuple[list[Transaction], dict[str, int]]:
    rows, total = repository.search(
        filters,
        user_id=user_id,
        sort_by=sort_by,
        descending=sort_order != "asc",
        offset=pagination.offset,
        limit=pagination.limit,
    )
    return rows, pagination.meta(total)


def _owned_account(accounts: AccountRepository, account_id: Optional[int], user_id: int) -> Account:
    account = accounts.get_by_id(account_id, user_id=user_id) if account_id else None
    if account is None:
        raise ApiError.not_found("Account not found")
    return account


def _recheck_budgets(
    categories: Iterable[str],
    *,
    user: User,
    budgets: BudgetRepository,
    transactions: TransactionRepository,
    notifications: NotificationRepository,
    now: datetime,
    emit: Optional[Emitter],
) -> None:
    for category in sorted(set(categories)):
        check_budget_alerts(
            budgets=budgets,
            transactions=transactions,
            notifications=notifications,
            user=user,
            category=category,
            now=now,
            emit=emit,
        )


def create_transaction(
    *,
    transaction: Transaction,
    user: User,
    accounts: AccountRepository,
    transactions: TransactionRepository,
    budgets: BudgetRepository,
    notifications: NotificationRepository,
    now: datetime,
    emit: Optional[Emitter] = None,
) -> Transaction:
    """Book a transaction, move the account balance and check budget alerts."""

    _owned_account(accounts, transaction.account_id, user.id)
    created = transactions.create(transaction, user_id=user.id)
    account = accounts.get_by_id(created.account_id, user_id=user.id)
    resolve_emitter(emit)(user.id, "transaction:created", transaction_to_dict(created, account))
    logger.info(
        "Transaction created",
        extra={"user_id": user.id, "transaction_id": created.id, "type": created.type},
    )

    if created.type == "expense":
        _recheck_budgets(
            [created.category],
            user=user,
            budgets=budgets,
            transactions=transactions,
            notifications=notifications,
            now=now,
            emit=emit,
        )
    return created


def update_transaction(
    *,
    transaction_id: int,
    changes: Mapping[str, Any],
    user: User,
    accounts: AccountRepository,
    transactions: TransactionRepository,
    budgets: BudgetRepository,
    notifications: NotificationRepository,
    now: datetime,
    emit: Optional[Emitter] = None,
) -> Transaction:
    """Apply ``changes`` and re-evaluate budgets in the old and new category."""

    if "account_id" in changes:
        _owned_account(accounts, changes["account_id"], user.id)
    previous = transactions.get_by_id(transaction_id, user_id=user.id)
    if previous is None:
        raise ApiError.not_found("Transaction not found")
    touched = [previous.category] if previous.type == "expense" else []

    updated = transactions.update(transaction_id, changes, user_id=user.id)
    if updated is None:
        raise ApiError.not_found("Transaction not found")
    account = accounts.get_by_id(updated.account_id, user_id=user.id)
    resolve_emitter(emit)(user.id, "transaction:updated", transaction_to_dict(updated, account))

    if updated.type == "expense":
        touched.append(updated.category)
    _recheck_budgets(
        touched,
        user=user,
        budgets=budgets,
        transactions=transactions,
        notifications=notifications,
        now=now,
        emit=emit,
    )
    return updated


def delete_transaction(
    *,
    transaction_id: int,
    user: User,
    transactions: TransactionRepository,
    budgets: BudgetRepository,
    notifications: NotificationRepository,
    now: datetime,
    emit: Optional[Emitter] = None,
) -> Transaction:
    removed = transactions.delete(transaction_id, user_id=user.id)
    if removed is None:
        raise ApiError.not_found("Transaction not found")
    resolve_emitter(emit)(user.id, "transaction:deleted", {"id": transaction_id})

    if removed.type == "expense":
        _recheck_budgets(
            [removed.category],
            user=user,
            budgets=budgets,
            transactions=transactions,
            notifications=notifications,
            now=now,
            emit=emit,
        )
    return removed


def transaction_stats(
    transactions: Iterable[Transaction], *, period_days: int, now: datetime
) -> dict[str, Any]:
    """Per-type totals, category breakdown and top merchants over a trailing window."""

    start = now - timedelta(days=period_days)
    window = [t for t in transactions if start <= t.date <= now]

    by_type: dict[str, dict[str, float]] = {}
    for txn in window:
        bucket = by_type.setdefault(txn.type, {"total": 0.0, "count": 0})
        bucket["total"] += txn.amount
        bucket["count"] += 1
    summary = {
        kind: {
            "total": round(bucket["total"], 2),
            "count": int(bucket["count"]),
            "avg": round(bucket["total"] / bucket["count"], 2),
        }
        for kind, bucket in by_type.items()
    }

    categories: dict[tuple[str, str], dict[str, float]] = defaultdict(
        lambda: {"total": 0.0, "count": 0}
    )
    merchants: dict[str, dict[str, float]] = defaultdict(lambda: {"total": 0.0, "count": 0})
    for txn in window:
        cat = categories[(txn.category, txn.type)]
        cat["total"] += txn.amount
        cat["count"] += 1
        if txn.type == "expense" and txn.merchant:
            merchant = merchants[txn.merchant]
            merchant["total"] += txn.amount
            merchant["count"] += 1

    by_category = sorted(
        (
            {"category": c, "type": kind, "total": round(v["total"], 2), "count": int(v["count"])}
            for (c, kind), v in categories.items()
        ),
        key=lambda row: row["total"],
        reverse=True,
    )
    top_merchants = sorted(
        (
            {"merchant": m, "total": round(v["total"], 2), "count": int(v["count"])}
            for m, v in merchants.items()
        ),
        key=lambda row: row["total"],
        reverse=True,
    )[:TOP_MERCHANTS]

    return {
        "summary": summary,
        "byCategory": by_category,
        "topMerchants": top_merchants,
        "period": period_days,
    }
