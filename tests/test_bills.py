from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from wealthwise.errors import ApiError
from wealthwise.models import Bill
from wealthwise.services import bills

NOW = datetime(2025, 3, 15, 12, 0)


def _bill(days: float, **overrides) -> Bill:
    fields = {"name": "Rent", "amount": 1000.0, "due_date": NOW + timedelta(days=days)}
    fields.update(overrides)
    return Bill(**fields)


@pytest.mark.parametrize(
    "days,expected",
    [(-1, "overdue"), (2, "upcoming"), (3, "upcoming"), (10, "scheduled")],
)
def test_bill_status_from_due_date(days, expected):
    assert bills.bill_status(_bill(days), NOW) == expected


def test_paid_bill_status_wins():
    assert bills.bill_status(_bill(-5, is_paid=True), NOW) == "paid"


def test_upcoming_and_overdue_exclude_paid_bills():
    items = [
        _bill(1, name="soon"),
        _bill(6, name="later"),
        _bill(9, name="too far"),
        _bill(-2, name="late"),
        _bill(2, name="paid", is_paid=True),
        _bill(-3, name="paid late", is_paid=True),
    ]

    assert [b.name for b in bills.upcoming(items, now=NOW)] == ["soon", "later"]
    assert [b.name for b in bills.upcoming(items, now=NOW, days=30)] == [
        "soon",
        "later",
        "too far",
    ]
    assert [b.name for b in bills.overdue(items, now=NOW)] == ["late"]


@pytest.mark.parametrize(
    "due,frequency,expected",
    [
        (datetime(2025, 1, 31), "monthly", datetime(2025, 2, 28)),
        (datetime(2025, 1, 10), "weekly", datetime(2025, 1, 17)),
        (datetime(2025, 1, 10), "biweekly", datetime(2025, 1, 24)),
        (datetime(2025, 11, 30), "quarterly", datetime(2026, 2, 28)),
        (datetime(2024, 2, 29), "yearly", datetime(2025, 2, 28)),
        (datetime(2025, 1, 10), "once", None),
    ],
)
def test_next_due_date(due, frequency, expected):
    assert bills.next_due_date(due, frequency) == expected


def test_paying_recurring_bill_schedules_next(ctx, user, bill_factory):
    bill = bill_factory(due_date=datetime(2025, 3, 20), frequency="monthly")

    result = bills.pay_bill(
        repository=ctx.bill_repo, bill_id=bill.id, user_id=user.id, paid_at=NOW
    )

    assert result.bill.is_paid
    assert result.bill.paid_date == NOW
    assert result.next_bill is not None
    assert result.next_bill.due_date == datetime(2025, 4, 20)
    assert not result.next_bill.is_paid

    stored = ctx.bill_repo.list_all(user_id=user.id)
    assert bills.bill_status(result.bill, NOW) == "paid"
    assert [b.id for b in bills.upcoming(stored, now=NOW)] == []

    with pytest.raises(ApiError) as excinfo:
        bills.pay_bill(repository=ctx.bill_repo, bill_id=bill.id, user_id=user.id)
    assert excinfo.value.message == "Bill is already paid"


def test_paying_one_off_bill_has_no_successor(ctx, user, bill_factory):
    bill = bill_factory(frequency="once")

    result = bills.pay_bill(repository=ctx.bill_repo, bill_id=bill.id, user_id=user.id)

    assert result.next_bill is None
    assert len(ctx.bill_repo.list_all(user_id=user.id)) == 1


def test_summary_covers_current_month():
    items = [
        _bill(3, amount=100.0),
        _bill(-1, amount=50.0),
        _bill(-10, amount=25.0, is_paid=True, paid_date=NOW - timedelta(days=2)),
        _bill(40, amount=999.0),
    ]

    summary = bills.summarize_bills(items, now=NOW)

    assert summary["unpaidCount"] == 2
    assert summary["unpaidTotal"] == 150.0
    assert summary["paidTotal"] == 25.0
    assert summary["overdueCount"] == 1
    assert summary["totalMonthly"] == 175.0
