"""JSON shapes returned by the API (camelCase keys, ISO-8601 datetimes)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from ..models import (
    AIConversation,
    Account,
    Bill,
    Budget,
    Goal,
    Investment,
    Notification,
    Transaction,
    User,
)
from .bills import bill_status, days_until_due
from .goals import GoalProgress
from .portfolio import holding_metrics

if TYPE_CHECKING:
    from .budgeting import BudgetEvaluation


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _timestamps(obj: Any) -> dict[str, Optional[str]]:
    return {"createdAt": iso(obj.created_at), "updatedAt": iso(obj.updated_at)}


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "fullName": user.full_name,
        "profile": {
            "firstName": user.first_name,
            "lastName": user.last_name,
            "avatar": user.avatar,
            "phone": user.phone,
            "currency": user.currency,
            "timezone": user.timezone,
        },
        "preferences": {
            "notifications": user.notifications_enabled,
            "weeklyReport": user.weekly_report,
            "theme": user.theme,
        },
        "lastLogin": iso(user.last_login),
        **_timestamps(user),
    }


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "type": account.type,
        "balance": round(account.balance, 2),
        "currency": account.currency,
        "institution": account.institution,
        "color": account.color,
        "icon": account.icon,
        "isActive": account.is_active,
        "includeInTotal": account.include_in_total,
        **_timestamps(account),
    }


def account_ref(account: Optional[Account]) -> Optional[dict[str, Any]]:
    if account is None:
        return None
    return {"id": account.id, "name": account.name, "type": account.type, "color": account.color}


def transaction_to_dict(
    txn: Transaction, account: Optional[Account] = None
) -> dict[str, Any]:
    recurring_rule = None
    if txn.recurring_frequency:
        recurring_rule = {
            "frequency": txn.recurring_frequency,
            "nextDate": iso(txn.recurring_next_date),
            "endDate": iso(txn.recurring_end_date),
        }
    return {
        "id": txn.id,
        "accountId": txn.account_id,
        "account": account_ref(account),
        "type": txn.type,
        "amount": round(txn.amount, 2),
        "category": txn.category,
        "subcategory": txn.subcategory,
        "description": txn.description,
        "merchant": txn.merchant,
        "date": iso(txn.date),
        "isRecurring": txn.is_recurring,
        "recurringRule": recurring_rule,
        "tags": list(txn.tags or []),
        "notes": txn.notes,
        **_timestamps(txn),
    }


def budget_to_dict(budget: Budget, evaluation: Optional[BudgetEvaluation] = None) -> dict[str, Any]:
    data = {
        "id": budget.id,
        "name": budget.name,
        "category": budget.category,
        "amount": round(budget.amount, 2),
        "spent": round(budget.spent, 2),
        "period": budget.period,
        "startDate": iso(budget.start_date),
        "endDate": iso(budget.end_date),
        "isRecurring": budget.is_recurring,
        "alertThreshold": budget.alert_threshold,
        "color": budget.color,
        "isActive": budget.is_active,
        **_timestamps(budget),
    }
    if evaluation is not None:
        data.update(
            {
                "spent": evaluation.spent,
                "remaining": round(evaluation.remaining, 2),
                "percentUsed": evaluation.percent_used,
                "displayPercent": evaluation.display_percent,
                "status": evaluation.status,
            }
        )
    return data


def goal_to_dict(goal: Goal, now: datetime) -> dict[str, Any]:
    progress = GoalProgress(goal=goal, now=now)
    return {
        "id": goal.id,
        "name": goal.name,
        "description": goal.description,
        "targetAmount": round(goal.target_amount, 2),
        "currentAmount": round(goal.current_amount, 2),
        "category": goal.category,
        "targetDate": iso(goal.target_date),
        "priority": goal.priority,
        "autoContribute": dict(goal.auto_contribute or {}),
        "linkedAccountId": goal.linked_account_id,
        "isCompleted": goal.is_completed,
        "completedAt": iso(goal.completed_at),
        "color": goal.color,
        "icon": goal.icon,
        "isActive": goal.is_active,
        "progress": progress.progress,
        "remaining": progress.remaining,
        "daysLeft": progress.days_left,
        "monthlyRequired": progress.monthly_required,
        "status": progress.status,
        **_timestamps(goal),
    }


def bill_to_dict(bill: Bill, now: datetime) -> dict[str, Any]:
    return {
        "id": bill.id,
        "name": bill.name,
        "amount": round(bill.amount, 2),
        "category": bill.category,
        "dueDate": iso(bill.due_date),
        "frequency": bill.frequency,
        "linkedAccountId": bill.linked_account_id,
        "isPaid": bill.is_paid,
        "paidDate": iso(bill.paid_date),
        "autoPay": bill.auto_pay,
        "reminderDays": bill.reminder_days,
        "notes": bill.notes,
        "color": bill.color,
        "isActive": bill.is_active,
        "daysUntilDue": days_until_due(bill, now),
        "status": bill_status(bill, now),
        **_timestamps(bill),
    }


def investment_to_dict(investment: Investment) -> dict[str, Any]:
    return {
        "id": investment.id,
        "name": investment.name,
        "symbol": investment.symbol,
        "type": investment.type,
        "shares": investment.shares,
        "purchasePrice": investment.purchase_price,
        "currentPrice": investment.current_price,
        "purchaseDate": iso(investment.purchase_date),
        "notes": investment.notes,
        "isActive": investment.is_active,
        **holding_metrics(investment),
        **_timestamps(investment),
    }


def notification_to_dict(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "data": dict(notification.data or {}),
        "isRead": notification.is_read,
        "readAt": iso(notification.read_at),
        "priority": notification.priority,
        "actionUrl": notification.action_url,
        **_timestamps(notification),
    }


def conversation_to_dict(conversation: AIConversation, *, with_messages: bool = True) -> dict[str, Any]:
    data = {
        "id": conversation.id,
        "title": conversation.title,
        "contextType": conversation.context_type,
        "isArchived": conversation.is_archived,
        "lastMessageAt": iso(conversation.last_message_at),
        "messageCount": len(conversation.messages or []),
        **_timestamps(conversation),
    }
    if with_messages:
        data["messages"] = list(conversation.messages or [])
    return data
