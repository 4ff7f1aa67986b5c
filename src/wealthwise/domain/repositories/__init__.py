"""Repository protocols consumed by services."""

from .account import AccountRepository
from .bill import BillRepository
from .budget import BudgetRepository
from .conversation import ConversationRepository
from .goal import GoalRepository
from .investment import InvestmentRepository
from .notification import NotificationRepository
from .transaction import TransactionFilter, TransactionRepository
from .user import UserRepository

__all__ = [
    "AccountRepository",
    "BillRepository",
    "BudgetRepository",
    "ConversationRepository",
    "GoalRepository",
    "InvestmentRepository",
    "NotificationRepository",
    "TransactionFilter",
    "TransactionRepository",
    "UserRepository",
]
