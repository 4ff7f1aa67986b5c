"""Application context bundling configuration, sessions and repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelAccountRepository,
    SQLModelBillRepository,
    SQLModelBudgetRepository,
    SQLModelConversationRepository,
    SQLModelGoalRepository,
    SQLModelInvestmentRepository,
    SQLModelNotificationRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)


@dataclass
class AppContext:
    """Everything a request handler, job or CLI command needs to reach storage."""

    config: BaseConfig
    session_factory: SessionFactory

    user_repo: SQLModelUserRepository
    account_repo: SQLModelAccountRepository
    transaction_repo: SQLModelTransactionRepository
    budget_repo: SQLModelBudgetRepository
    goal_repo: SQLModelGoalRepository
    bill_repo: SQLModelBillRepository
    investment_repo: SQLModelInvestmentRepository
    notification_repo: SQLModelNotificationRepository
    conversation_repo: SQLModelConversationRepository


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    session_factory: Optional[SessionFactory] = None,
) -> AppContext:
    """Create the context, bootstrapping the database unless a factory is supplied."""

    config = config or BaseConfig()
    if session_factory is None:
        _, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        session_factory=session_factory,
        user_repo=SQLModelUserRepository(session_factory),
        account_repo=SQLModelAccountRepository(session_factory),
        transaction_repo=SQLModelTransactionRepository(session_factory),
        budget_repo=SQLModelBudgetRepository(session_factory),
        goal_repo=SQLModelGoalRepository(session_factory),
        bill_repo=SQLModelBillRepository(session_factory),
        investment_repo=SQLModelInvestmentRepository(session_factory),
        notification_repo=SQLModelNotificationRepository(session_factory),
        conversation_repo=SQLModelConversationRepository(session_factory),
    )
