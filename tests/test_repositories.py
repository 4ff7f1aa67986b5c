from __future__ import annotations

from datetime import datetime

from sqlmodel import select

from wealthwise.domain.repositories.transaction import TransactionFilter
from wealthwise.models import Notification, Transaction


def test_transaction_lifecycle_keeps_balance_consistent(
    ctx, user, account_factory, transaction_factory
):
    checking = account_factory(name="Checking", balance=1000.0)
    savings = account_factory(name="Savings", type="savings", balance=0.0)

    expense = transaction_factory(checking, 200.0)
    transaction_factory(checking, 50.0, type="income", category="Salary")
    assert ctx.account_repo.get_by_id(checking.id, user_id=user.id).balance == 850.0

    ctx.transaction_repo.update(expense.id, {"amount": 300.0}, user_id=user.id)
    assert ctx.account_repo.get_by_id(checking.id, user_id=user.id).balance == 750.0

    ctx.transaction_repo.update(
        expense.id, {"account_id": savings.id, "type": "income"}, user_id=user.id
    )
    assert ctx.account_repo.get_by_id(checking.id, user_id=user.id).balance == 1050.0
    assert ctx.account_repo.get_by_id(savings.id, user_id=user.id).balance == 300.0

    ctx.transaction_repo.delete(expense.id, user_id=user.id)
    assert ctx.account_repo.get_by_id(savings.id, user_id=user.id).balance == 0.0


def test_transfer_does_not_move_balance(ctx, user, account_factory, transaction_factory):
    account = account_factory(balance=100.0)

    transaction_factory(account, 40.0, type="transfer", category="Transfer")

    assert ctx.account_repo.get_by_id(account.id, user_id=user.id).balance == 100.0


def test_deleting_account_cascades_transactions(
    ctx, user, session_factory, account_factory, transaction_factory, goal_factory
):
    account = account_factory(balance=500.0)
    other = account_factory(name="Other")
    transaction_factory(account, 10.0)
    transaction_factory(account, 20.0)
    kept = transaction_factory(other, 5.0)
    goal = goal_factory(linked_account_id=account.id)

    assert ctx.account_repo.delete(account.id, user_id=user.id)

    with session_factory() as session:
        remaining = session.exec(select(Transaction)).all()
    assert [t.id for t in remaining] == [kept.id]
    assert ctx.goal_repo.get_by_id(goal.id, user_id=user.id).linked_account_id is None


def test_rows_are_scoped_to_their_owner(ctx, user, user_factory, account_factory):
    account = account_factory()
    stranger = user_factory("stranger@example.com")

    assert ctx.account_repo.get_by_id(account.id, user_id=stranger.id) is None
    assert ctx.account_repo.list_all(user_id=stranger.id) == []
    assert not ctx.account_repo.delete(account.id, user_id=stranger.id)


def test_search_filters_sorts_and_paginates(ctx, user, account_factory, transaction_factory):
    account = account_factory(balance=1000.0)
    for day, amount in [(1, 10.0), (2, 30.0), (3, 20.0)]:
        transaction_factory(
            account, amount, category="Groceries", date=datetime(2025, 3, day),
            description=f"Market run {day}",
        )
    transaction_factory(account, 99.0, category="Travel", date=datetime(2025, 3, 4))

    rows, total = ctx.transaction_repo.search(
        TransactionFilter(category="Groceries"),
        user_id=user.id,
        sort_by="amount",
        descending=True,
        limit=2,
    )
    assert total == 3
    assert [t.amount for t in rows] == [30.0, 20.0]

    rows, total = ctx.transaction_repo.search(
        TransactionFilter(text="run 3"), user_id=user.id
    )
    assert [t.amount for t in rows] == [20.0]

    between = ctx.transaction_repo.list_between(
        datetime(2025, 3, 2), datetime(2025, 3, 3, 23, 59), user_id=user.id
    )
    assert sorted(t.amount for t in between) == [20.0, 30.0]


def test_due_recurring_respects_end_date(ctx, user, account_factory, transaction_factory):
    account = account_factory()
    today = datetime(2025, 3, 15)
    due = transaction_factory(
        account, 15.0, is_recurring=True, recurring_frequency="monthly",
        recurring_next_date=datetime(2025, 3, 15),
    )
    transaction_factory(
        account, 15.0, is_recurring=True, recurring_frequency="monthly",
        recurring_next_date=datetime(2025, 3, 10), recurring_end_date=datetime(2025, 3, 1),
    )
    transaction_factory(
        account, 15.0, is_recurring=True, recurring_frequency="monthly",
        recurring_next_date=datetime(2025, 4, 1),
    )

    assert [t.id for t in ctx.transaction_repo.list_due_recurring(today)] == [due.id]


def test_notification_inbox_operations(ctx, user):
    repo = ctx.notification_repo
    for index in range(3):
        repo.create(
            Notification(user_id=user.id, title=f"Note {index}", message="hello"),
            user_id=user.id,
        )

    rows, total = repo.list_page(user_id=user.id, offset=0, limit=2)
    assert total == 3
    assert len(rows) == 2

    first = repo.mark_read(rows[0].id, user_id=user.id)
    assert first.is_read and first.read_at is not None
    assert repo.count_unread(user_id=user.id) == 2

    assert repo.mark_all_read(user_id=user.id) == 2
    assert repo.count_unread(user_id=user.id) == 0
    assert repo.clear_read(user_id=user.id) == 3
    assert repo.list_page(user_id=user.id)[1] == 0


def test_refresh_tokens_expire(ctx, user):
    now = datetime(2025, 3, 15)
    ctx.user_repo.add_refresh_token(user.id, "live", datetime(2025, 3, 20))
    ctx.user_repo.add_refresh_token(user.id, "stale", datetime(2025, 3, 1))

    assert ctx.user_repo.has_refresh_token(user.id, "live", now=now)
    assert not ctx.user_repo.has_refresh_token(user.id, "stale", now=now)
    assert ctx.user_repo.delete_expired_tokens(now) == 1
