"""Bill status, reminders and payment handling."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..domain.repositories import BillRepository
from ..errors import ApiError
from ..logging_config import get_logger
from ..models.base import utcnow
from ..models.bill import Bill
from .periods import add_months, ceil_days, month_end, month_start

logger = get_logger("services.bills")

DEFAULT_UPCOMING_DAYS = 7


def days_until_due(bill: Bill, now: datetime) -> int:
    return ceil_days(bill.due_date - now)


def bill_status(bill: Bill, now: datetime) -> str:
    if bill.is_paid:
        return "paid"
    days = days_until_due(bill, now)
    if days < 0:
        return "overdue"
    if days <= bill.reminder_days:
        return "upcoming"
    return "scheduled"


def next_due_date(due_date: datetime, frequency: str) -> Optional[datetime]:
    """Due date of the following occurrence, or None for one-off bills."""

    if frequency == "weekly":
        return due_date + timedelta(days=7)
    if frequency == "biweekly":
        return due_date + timedelta(days=14)
    if frequency == "monthly":
        return add_months(due_date, 1)
    if frequency == "quarterly":
        return add_months(due_date, 3)
    if frequency == "yearly":
        return add_months(due_date, 12)
    return None


def upcoming(bills: Iterable[Bill], *, now: datetime, days: int = DEFAULT_UPCOMING_DAYS) -> list[Bill]:
    horizon = now + timedelta(days=days)
    return sorted(
        (b for b in bills if b.is_active and not b.is_paid and now <= b.due_date <= horizon),
        key=lambda b: b.due_date,
    )


def overdue(bills: Iterable[Bill], *, now: datetime) -> list[Bill]:
    return sorted(
        (b for b in bills if b.is_active and not b.is_paid and b.due_date < now),
        key=lambda b: b.due_date,
    )


def summarize_bills(bills: Iterable[Bill], *, now: datetime) -> dict[str, object]:
    bills = [b for b in bills if b.is_active]
    end = month_end(now)
    start = month_start(now)
    unpaid = [b for b in bills if not b.is_paid and b.due_date <= end]
    paid = [b for b in bills if b.is_paid and b.paid_date is not None and b.paid_date >= start]
    late = overdue(bills, now=now)
    unpaid_total = sum(b.amount for b in unpaid)
    paid_total = sum(b.amount for b in paid)
    return {
        "unpaidCount": len(unpaid),
        "unpaidTotal": round(unpaid_total, 2),
        "paidCount": len(paid),
        "paidTotal": round(paid_total, 2),
        "overdueCount": len(late),
        "overdueTotal": round(sum(b.amount for b in late), 2),
        "totalMonthly": round(unpaid_total + paid_total, 2),
    }


@dataclass(slots=True)
class PaymentResult:
    bill: Bill
    next_bill: Optional[Bill] = None


def pay_bill(
    *,
    repository: BillRepository,
    bill_id: int,
    user_id: int,
    paid_at: Optional[datetime] = None,
) -> PaymentResult:
    """Mark a bill paid and schedule the next occurrence for recurring bills."""

    bill = repository.get_by_id(bill_id, user_id=user_id)
    if bill is None:
        raise ApiError.not_found("Bill not found")
    if bill.is_paid:
        raise ApiError.bad_request("Bill is already paid")

    bill.is_paid = True
    bill.paid_date = paid_at or utcnow()

    next_bill = None
    due = next_due_date(bill.due_date, bill.frequency)
    if due is not None:
        next_bill = repository.create(
            Bill(
                name=bill.name,
                amount=bill.amount,
                category=bill.category,
                due_date=due,
                frequency=bill.frequency,
                linked_account_id=bill.linked_account_id,
                auto_pay=bill.auto_pay,
                reminder_days=bill.reminder_days,
                notes=bill.notes,
                color=bill.color,
                user_id=user_id,
            ),
            user_id=user_id,
        )
        logger.info(
            "Scheduled next bill occurrence",
            extra={"bill_id": bill.id, "next_bill_id": next_bill.id, "due": due.isoformat()},
        )

    return PaymentResult(bill=repository.update(bill, user_id=user_id), next_bill=next_bill)
