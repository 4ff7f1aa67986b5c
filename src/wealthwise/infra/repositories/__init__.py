"""Concrete repository implementations using SQLModel."""

from .account import SQLModelAccountRepository
from .bill import SQLModelBillRepository
from .budget import SQLModelBudgetRepository
from .conversation import SQLModelConversationRepository
from .goal import SQLModelGoalRepository
from .investment import SQLModelInvestmentRepository
from .notification import SQLModelNotificationRepository
from .transaction import SQLModelTransactionRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelBillRepository",
    "SQLModelBudgetRepository",
    "SQLModelConversationRepository",
    "SQLModelGoalRepository",
    "SQLModelInvestmentRepository",
    "SQLModelNotificationRepository",
    "SQLModelTransactionRepository",
    "SQLModelUserRepository",
]
