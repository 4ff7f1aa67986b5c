"""SQLModel table exports."""

from .account import Account
from .base import utcnow
from .bill import Bill
from .budget import Budget
from .conversation import AIConversation
from .goal import Goal
from .investment import Investment
from .notification import Notification
from .refresh_token import RefreshToken
from .transaction import Transaction
from .user import User

__all__ = [
    "AIConversation",
    "Account",
    "Bill",
    "Budget",
    "Goal",
    "Investment",
    "Notification",
    "RefreshToken",
    "Transaction",
    "User",
    "utcnow",
]
