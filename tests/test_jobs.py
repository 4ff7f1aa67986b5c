from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from wealthwise.services.jobs import (
    JOBS,
    cleanup_expired_tokens,
    next_recurring_date,
    process_recurring_transactions,
    send_bill_reminders,
)

NOW = datetime(2024, 5, 10, 12, 0)


@pytest.fixture
def emitted():
    events: list[tuple[int, str, dict]] = []

    def _emit(user_id, event, payload):
        events.append((user_id, event, payload))

    _emit.events = events
    return _emit


@pytest.mark.parametrize(
    ("frequency", "expected"),
    [
        ("daily", datetime(2024, 1, 31) + timedelta(days=1)),
        ("weekly", datetime(2024, 2, 7)),
        ("monthly", datetime(2024, 2, 29)),
        (None, datetime(2024, 2, 29)),
        ("yearly", datetime(2025, 1, 31)),
    ],
)
def test_next_recurring_date(frequency, expected):
    assert next_recurring_date(datetime(2024, 1, 31), frequency) == expected


def test_recurring_job_books_copy_once(ctx, user, account_factory, transaction_factory, emitted):
    account = account_factory(balance=1000)
    template = transaction_factory(
        account,
        100,
        description="Gym",
        date=NOW - timedelta(days=30),
        is_recurring=True,
        recurring_frequency="monthly",
        recurring_next_date=datetime(2024, 5, 9),
    )

    assert process_recurring_transactions(ctx, now=NOW, emit=emitted) == 1
    assert process_recurring_transactions(ctx, now=NOW, emit=emitted) == 0

    rows = ctx.transaction_repo.list_between(
        datetime(2024, 5, 10), datetime(2024, 5, 11), user_id=user.id
    )
    assert [(t.description, t.is_recurring) for t in rows] == [("Gym (Recurring)", False)]
    refreshed = ctx.transaction_repo.get_by_id(template.id, user_id=user.id)
    assert refreshed.recurring_next_date == datetime(2024, 6, 9)
    assert ctx.account_repo.get_by_id(account.id, user_id=user.id).balance == 800

    events = [event for _, event, _ in emitted.events]
    assert events == ["notification:new", "transaction:created"]
    assert ctx.notification_repo.count_unread(user_id=user.id) == 1


def test_recurring_job_respects_end_date(ctx, account_factory, transaction_factory):
    account = account_factory()
    transaction_factory(
        account,
        20,
        is_recurring=True,
        recurring_frequency="weekly",
        recurring_next_date=datetime(2024, 5, 1),
        recurring_end_date=datetime(2024, 5, 5),
    )

    assert process_recurring_transactions(ctx, now=NOW, emit=lambda *a: None) == 0


def test_bill_reminders(ctx, user, user_factory, bill_factory, emitted):
    bill_factory(name="Rent", due_date=NOW + timedelta(days=1))
    bill_factory(name="Phone", due_date=NOW - timedelta(days=2))
    bill_factory(name="Later", due_date=NOW + timedelta(days=10))
    bill_factory(name="Done", due_date=NOW + timedelta(days=1), is_paid=True)
    quiet = user_factory("quiet@example.com", notifications_enabled=False)
    bill_factory(name="Muted", due_date=NOW + timedelta(days=1), owner=quiet)

    counts = send_bill_reminders(ctx, now=NOW, emit=emitted)

    assert counts == {"upcoming": 1, "overdue": 1}
    items, total = ctx.notification_repo.list_page(user_id=user.id, limit=10)
    assert total == 2
    types = sorted(n.type for n in items)
    assert types == ["bill_overdue", "bill_reminder"]
    assert {user_id for user_id, _, _ in emitted.events} == {user.id}


def test_cleanup_expired_tokens(ctx, user):
    ctx.user_repo.add_refresh_token(user.id, "old", NOW - timedelta(seconds=1))
    ctx.user_repo.add_refresh_token(user.id, "fresh", NOW + timedelta(days=1))

    assert cleanup_expired_tokens(ctx, now=NOW) == 1
    assert ctx.user_repo.has_refresh_token(user.id, "fresh", now=NOW)


def test_job_registry_names():
    assert set(JOBS) == {"recurring", "bill-reminders", "cleanup-tokens"}
