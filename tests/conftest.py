"""Pytest configuration and shared fixtures for WealthWise tests.

Provides an isolated SQLite database per test, repository context and
factories for domain rows, plus an app/client pair for API tests.
"""

from __future__ import annotations

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import event
from sqlmodel import SQLModel, create_engine

from wealthwise import create_app
from wealthwise.config import TestConfig
from wealthwise.context import create_app_context
from wealthwise.infra.database import create_session_factory
from wealthwise.models import Account, Bill, Budget, Goal, Transaction, User, utcnow
from wealthwise.services.auth import hash_password, issue_access_token

TEST_PASSWORD = "Passw0rd!"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Keep config side effects (data dir, logs) inside the test's tmp dir."""

    monkeypatch.setenv("WEALTHWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WEALTHWISE_DEV_MODE", "true")
    monkeypatch.delenv("WEALTHWISE_SCHEDULER_ENABLED", raising=False)


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: engine with every WealthWise table created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )

    @event.listens_for(engine, "connect")
    def _foreign_keys(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=on")
        cursor.close()

    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory matching the one the app uses."""

    return create_session_factory(db_engine)


@pytest.fixture
def config():
    return TestConfig()


@pytest.fixture
def ctx(config, session_factory):
    """Repository bundle backed by the per-test database."""

    return create_app_context(config, session_factory=session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(ctx):
    def _create_user(email: str = "tester@example.com", **overrides) -> User:
        fields = {"email": email, "password_hash": hash_password(TEST_PASSWORD)}
        fields.update(overrides)
        return ctx.user_repo.create(User(**fields))

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory(first_name="Test", last_name="User", role="individual")


@pytest.fixture
def account_factory(ctx, user):
    """Factory for creating test accounts.

    Returns:
        Callable: Function that creates and persists Account instances
    """

    def _create_account(
        name: str = "Checking",
        type: str = "checking",
        balance: float = 0.0,
        owner: User | None = None,
        **overrides,
    ) -> Account:
        owner = owner or user
        account = Account(name=name, type=type, balance=balance, **overrides)
        return ctx.account_repo.create(account, user_id=owner.id)

    return _create_account


@pytest.fixture
def transaction_factory(ctx, user):
    """Factory for transactions; creation applies the balance effect."""

    def _create_transaction(
        account: Account,
        amount: float,
        type: str = "expense",
        category: str = "Food & Dining",
        date: datetime | None = None,
        owner: User | None = None,
        **overrides,
    ) -> Transaction:
        owner = owner or user
        transaction = Transaction(
            account_id=account.id,
            type=type,
            amount=amount,
            category=category,
            date=date or utcnow(),
            **overrides,
        )
        return ctx.transaction_repo.create(transaction, user_id=owner.id)

    return _create_transaction


@pytest.fixture
def budget_factory(ctx, user):
    def _create_budget(
        category: str = "Food & Dining",
        amount: float = 500.0,
        period: str = "monthly",
        name: str | None = None,
        owner: User | None = None,
        **overrides,
    ) -> Budget:
        owner = owner or user
        budget = Budget(
            name=name or f"{category} budget",
            category=category,
            amount=amount,
            period=period,
            **overrides,
        )
        return ctx.budget_repo.create(budget, user_id=owner.id)

    return _create_budget


@pytest.fixture
def goal_factory(ctx, user):
    def _create_goal(
        name: str = "Emergency Fund",
        target_amount: float = 1000.0,
        current_amount: float = 0.0,
        target_date: datetime | None = None,
        owner: User | None = None,
        **overrides,
    ) -> Goal:
        owner = owner or user
        goal = Goal(
            name=name,
            target_amount=target_amount,
            current_amount=current_amount,
            target_date=target_date or utcnow() + timedelta(days=90),
            **overrides,
        )
        return ctx.goal_repo.create(goal, user_id=owner.id)

    return _create_goal


@pytest.fixture
def bill_factory(ctx, user):
    def _create_bill(
        name: str = "Electricity",
        amount: float = 80.0,
        due_date: datetime | None = None,
        frequency: str = "monthly",
        owner: User | None = None,
        **overrides,
    ) -> Bill:
        owner = owner or user
        bill = Bill(
            name=name,
            amount=amount,
            due_date=due_date or utcnow() + timedelta(days=2),
            frequency=frequency,
            **overrides,
        )
        return ctx.bill_repo.create(bill, user_id=owner.id)

    return _create_bill


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("WEALTHWISE_DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    return create_app("testing")


@pytest.fixture()
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def app_ctx(app):
    return app.extensions["wealthwise"]


@pytest.fixture()
def api_user(app_ctx) -> User:
    return app_ctx.user_repo.create(
        User(
            email="api@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            first_name="Api",
            role="individual",
        )
    )


@pytest.fixture()
def auth_headers(app_ctx, api_user) -> dict[str, str]:
    token = issue_access_token(api_user, config=app_ctx.config, now=utcnow())
    return {"Authorization": f"Bearer {token}"}
