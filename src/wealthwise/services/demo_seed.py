"""Demo data for local development (``flask seed-demo``)."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from ..logging_config import get_logger
from ..models import Account, Bill, Budget, Goal, Investment, Transaction, User
from ..models.base import utcnow
from .auth import hash_password

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger("services.demo_seed")

DEMO_EMAIL = "demo@wealthwise.app"
DEMO_PASSWORD = "Demo1234!"

_DEMO_EXPENSES = (
    (2, 82.45, "Food & Dining", "Weekly groceries", "Fresh Market"),
    (4, 1450.00, "Home", "Rent", "Oakwood Apartments"),
    (6, 64.10, "Transportation", "Fuel", "Shell"),
    (9, 39.99, "Entertainment", "Streaming bundle", "StreamCo"),
    (12, 120.35, "Bills & Utilities", "Electricity", "City Power"),
    (15, 56.20, "Food & Dining", "Dinner out", "Bistro 21"),
)


def seed_demo(ctx: AppContext, *, now: Optional[datetime] = None) -> User:
    """Create (or reuse) the demo user and fill in a month of activity."""

    now = now or utcnow()
    user = ctx.user_repo.get_by_email(DEMO_EMAIL)
    if user is not None:
        logger.info("Demo user already present", extra={"user_id": user.id})
        return user

    user = ctx.user_repo.create(
        User(
            email=DEMO_EMAIL,
            password_hash=hash_password(DEMO_PASSWORD),
            role="individual",
            first_name="Demo",
            last_name="User",
        )
    )
    uid = user.id

    checking = ctx.account_repo.create(
        Account(name="Everyday Checking", type="checking", balance=2500.0, institution="Demo Bank"),
        user_id=uid,
    )
    ctx.account_repo.create(
        Account(name="Rainy Day Savings", type="savings", balance=8000.0, institution="Demo Bank"),
        user_id=uid,
    )

    ctx.transaction_repo.create(
        Transaction(
            account_id=checking.id,
            type="income",
            amount=4200.0,
            category="Salary",
            description="Monthly salary",
            merchant="Acme Corp",
            date=now - timedelta(days=1),
            is_recurring=True,
            recurring_frequency="monthly",
            recurring_next_date=now + timedelta(days=29),
        ),
        user_id=uid,
    )
    for days_ago, amount, category, description, merchant in _DEMO_EXPENSES:
        ctx.transaction_repo.create(
            Transaction(
                account_id=checking.id,
                type="expense",
                amount=amount,
                category=category,
                description=description,
                merchant=merchant,
                date=now - timedelta(days=days_ago),
            ),
            user_id=uid,
        )

    ctx.budget_repo.create(
        Budget(name="Groceries & Dining", category="Food & Dining", amount=400.0), user_id=uid
    )
    ctx.budget_repo.create(
        Budget(name="Fun money", category="Entertainment", amount=100.0), user_id=uid
    )
    ctx.goal_repo.create(
        Goal(
            name="Emergency fund",
            category="Emergency Fund",
            target_amount=10000.0,
            current_amount=3500.0,
            target_date=now + timedelta(days=365),
            priority="high",
        ),
        user_id=uid,
    )
    ctx.bill_repo.create(
        Bill(
            name="Internet",
            amount=59.99,
            category="utilities",
            due_date=now + timedelta(days=2),
            linked_account_id=checking.id,
        ),
        user_id=uid,
    )
    ctx.investment_repo.create(
        Investment(
            name="Total Market ETF",
            symbol="VTI",
            type="etf",
            shares=12,
            purchase_price=210.0,
            current_price=245.5,
            purchase_date=now - timedelta(days=200),
        ),
        user_id=uid,
    )
    logger.info("Demo data seeded", extra={"user_id": uid})
    return user
