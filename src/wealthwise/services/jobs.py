"""Periodic jobs run by the background scheduler (and ``flask run-job``)."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from ..logging_config import get_logger
from ..models.base import utcnow
from ..models.transaction import Transaction
from .bills import days_until_due
from .notifications import Emitter, notify, resolve_emitter
from .periods import add_months
from .serializers import transaction_to_dict

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger("services.jobs")

BILL_REMINDER_DAYS = 3


def next_recurring_date(current: datetime, frequency: Optional[str]) -> datetime:
    if frequency == "daily":
        return current + timedelta(days=1)
    if frequency == "weekly":
        return current + timedelta(weeks=1)
    if frequency == "yearly":
        return add_months(current, 12)
    return add_months(current, 1)


def _start_of_day(value: datetime) -> datetime:
    return datetime(value.year, value.month, value.day)


def _notifications_on(ctx: AppContext, user_id: int) -> bool:
    user = ctx.user_repo.get_by_id(user_id)
    return user is not None and user.notifications_enabled


def process_recurring_transactions(
    ctx: AppContext, *, now: Optional[datetime] = None, emit: Optional[Emitter] = None
) -> int:
    """Book today's copy of every due recurring transaction; returns how many."""

    today = _start_of_day(now or utcnow())
    emitter = resolve_emitter(emit)
    processed = 0
    for template in ctx.transaction_repo.list_due_recurring(today):
        copy = ctx.transaction_repo.create(
            Transaction(
                account_id=template.account_id,
                type=template.type,
                amount=template.amount,
                category=template.category,
                subcategory=template.subcategory,
                description=f"{template.description} (Recurring)",
                merchant=template.merchant,
                date=today,
                tags=list(template.tags or []),
                is_recurring=False,
            ),
            user_id=template.user_id,
        )
        ctx.transaction_repo.update(
            template.id,
            {
                "recurring_next_date": next_recurring_date(
                    template.recurring_next_date, template.recurring_frequency
                )
            },
            user_id=template.user_id,
        )
        if _notifications_on(ctx, template.user_id):
            notify(
                repository=ctx.notification_repo,
                user_id=template.user_id,
                type="transaction",
                title="Recurring Transaction Processed",
                message=(
                    f"Your recurring {template.type} of ${template.amount:.2f} "
                    f"for {template.category} has been recorded."
                ),
                data={"transactionId": copy.id},
                emit=emitter,
            )
        emitter(template.user_id, "transaction:created", transaction_to_dict(copy))
        processed += 1
        logger.info(
            "Processed recurring transaction",
            extra={"template_id": template.id, "transaction_id": copy.id},
        )

    logger.info("Recurring transactions job finished", extra={"processed": processed})
    return processed


def send_bill_reminders(
    ctx: AppContext, *, now: Optional[datetime] = None, emit: Optional[Emitter] = None
) -> dict[str, int]:
    """Remind about bills due within three days and flag overdue ones."""

    now = now or utcnow()
    horizon = now + timedelta(days=BILL_REMINDER_DAYS)
    emitter = resolve_emitter(emit)
    counts = {"upcoming": 0, "overdue": 0}

    for bill in ctx.bill_repo.list_unpaid_all_users():
        if not _notifications_on(ctx, bill.user_id):
            continue
        if now <= bill.due_date <= horizon:
            days = days_until_due(bill, now)
            notify(
                repository=ctx.notification_repo,
                user_id=bill.user_id,
                type="bill_reminder",
                title="Upcoming Bill Reminder",
                message=(
                    f"{bill.name} (${bill.amount:.2f}) is due in {days} "
                    f"day{'s' if days != 1 else ''}."
                ),
                priority="high" if days <= 1 else "medium",
                data={"billId": bill.id},
                action_url="/bills",
                emit=emitter,
            )
            counts["upcoming"] += 1
        elif bill.due_date < now:
            notify(
                repository=ctx.notification_repo,
                user_id=bill.user_id,
                type="bill_overdue",
                title="Overdue Bill Alert",
                message=f"{bill.name} (${bill.amount:.2f}) is overdue! Please pay immediately.",
                priority="high",
                data={"billId": bill.id},
                action_url="/bills",
                emit=emitter,
            )
            counts["overdue"] += 1

    logger.info("Bill reminder job finished", extra=counts)
    return counts


def cleanup_expired_tokens(ctx: AppContext, *, now: Optional[datetime] = None) -> int:
    removed = ctx.user_repo.delete_expired_tokens(now or utcnow())
    logger.info("Expired refresh tokens removed", extra={"removed": removed})
    return removed


JOBS = {
    "recurring": process_recurring_transactions,
    "bill-reminders": send_bill_reminders,
    "cleanup-tokens": cleanup_expired_tokens,
}
