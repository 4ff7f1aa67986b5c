"""Python client for the WealthWise API: a thin HTTP wrapper plus cached stores."""

from __future__ import annotations

from .api import ApiClient, ApiRequestError
from .notifications import NotificationStore
from .stores import (
    DEFAULT_DASHBOARD,
    AccountStore,
    BillStore,
    BudgetStore,
    DashboardStore,
    GoalStore,
    InvestmentStore,
    ResourceStore,
    StoreResult,
    TransactionStore,
)

__all__ = [
    "ApiClient",
    "ApiRequestError",
    "NotificationStore",
    "DEFAULT_DASHBOARD",
    "AccountStore",
    "BillStore",
    "BudgetStore",
    "DashboardStore",
    "GoalStore",
    "InvestmentStore",
    "ResourceStore",
    "StoreResult",
    "TransactionStore",
]
