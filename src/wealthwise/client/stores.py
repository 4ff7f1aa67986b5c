"""In-memory caches over API resources.

Every store method returns a :class:`StoreResult` instead of raising, and
keeps the cached state untouched when a request fails.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from typing import Any, Optional

from .api import ApiClient, ApiRequestError

DEFAULT_DASHBOARD: dict[str, Any] = {
    "overview": {
        "totalBalance": 0,
        "accountCount": 0,
        "monthlyIncome": 0,
        "monthlyExpense": 0,
        "monthlyNet": 0,
        "incomeChange": 0,
        "expenseChange": 0,
    },
    "accounts": [],
    "recentTransactions": [],
    "spendingByCategory": [],
    "trendData": [],
}


@dataclass(slots=True)
class StoreResult:
    success: bool
    error: Optional[str] = None
    data: Any = None


class ResourceStore:
    """Cached list and summary for one REST collection."""

    def __init__(self, client: ApiClient, path: str) -> None:
        self.client = client
        self.path = "/" + path.strip("/")
        self._lock = threading.Lock()
        self.items: list[dict[str, Any]] = []
        self.summary: Optional[dict[str, Any]] = None
        self.error: Optional[str] = None

    def _fail(self, exc: ApiRequestError) -> StoreResult:
        with self._lock:
            self.error = exc.message
        return StoreResult(success=False, error=exc.message)

    def _list_from(self, data: Any) -> list[dict[str, Any]]:
        return list(data or [])

    def fetch(self, **params: Any) -> StoreResult:
        try:
            data = self.client.get(self.path, params=params or None)
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            self.items = self._list_from(data)
            self.error = None
        return StoreResult(success=True, data=data)

    def fetch_summary(self) -> StoreResult:
        try:
            data = self.client.get(f"{self.path}/summary")
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            self.summary = data
            self.error = None
        return StoreResult(success=True, data=data)

    def create(self, payload: dict[str, Any]) -> StoreResult:
        try:
            item = self.client.post(self.path, json=payload)
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            self.items = [item, *self.items]
        return StoreResult(success=True, data=item)

    def _replace(self, item: dict[str, Any]) -> None:
        with self._lock:
            self.items = [
                {**existing, **item} if existing.get("id") == item.get("id") else existing
                for existing in self.items
            ]

    def update(self, item_id: int, payload: dict[str, Any]) -> StoreResult:
        try:
            item = self.client.put(f"{self.path}/{item_id}", json=payload)
        except ApiRequestError as exc:
            return self._fail(exc)
        self._replace(item)
        return StoreResult(success=True, data=item)

    def delete(self, item_id: int) -> StoreResult:
        try:
            self.client.delete(f"{self.path}/{item_id}")
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            self.items = [i for i in self.items if i.get("id") != item_id]
        return StoreResult(success=True)


class AccountStore(ResourceStore):
    def __init__(self, client: ApiClient) -> None:
        super().__init__(client, "/accounts")

    def set_balance(self, account_id: int, balance: float) -> StoreResult:
        try:
            item = self.client.put(f"{self.path}/{account_id}/balance", json={"balance": balance})
        except ApiRequestError as exc:
            return self._fail(exc)
        self._replace(item)
        return StoreResult(success=True, data=item)


class TransactionStore(ResourceStore):
    """Transactions arrive paginated; the last page's metadata is kept."""

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client, "/transactions")
        self.pagination: dict[str, int] = {"page": 1, "limit": 20, "total": 0, "pages": 0}

    def _list_from(self, data: Any) -> list[dict[str, Any]]:
        return list((data or {}).get("transactions", []))

    def fetch(self, **params: Any) -> StoreResult:
        result = super().fetch(**params)
        if result.success and isinstance(result.data, dict):
            with self._lock:
                self.pagination = dict(result.data.get("pagination") or self.pagination)
        return result

    def fetch_summary(self) -> StoreResult:
        try:
            data = self.client.get(f"{self.path}/stats")
        except ApiRequestError as exc:
            return self._fail(exc)
        with self._lock:
            self.summary = data
        return StoreResult(success=True, data=data)


class BudgetStore(ResourceStore):
    def __init__(self, client: ApiClient) -> None:
        super().__init__(client, "/budgets")


class GoalStore(ResourceStore):
    def __init__(self, client: ApiClient) -> None:
        super().__init__(client, "/goals")

    def contribute(self, goal_id: int, amount: float) -> StoreResult:
        try:
            item = self.client.post(f"{self.path}/{goal_id}/contribute", json={"amount": amount})
        except ApiRequestError as exc:
            return self._fail(exc)
        self._replace(item)
        return StoreResult(success=True, data=item)


class BillStore(ResourceStore):
    def __init__(self, client: ApiClient) -> None:
        super().__init__(client, "/bills")

    def pay(self, bill_id: int) -> StoreResult:
        try:
            data = self.client.post(f"{self.path}/{bill_id}/pay")
        except ApiRequestError as exc:
            return self._fail(exc)
        self._replace(data["bill"])
        if data.get("nextBill"):
            with self._lock:
                self.items = [*self.items, data["nextBill"]]
        return StoreResult(success=True, data=data)


class InvestmentStore(ResourceStore):
    def __init__(self, client: ApiClient) -> None:
        super().__init__(client, "/investments")


class DashboardStore:
    """Dashboard payload; reads that fail fall back to :data:`DEFAULT_DASHBOARD`."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self._lock = threading.Lock()
        self.data: dict[str, Any] = copy.deepcopy(DEFAULT_DASHBOARD)
        self.analytics: Optional[dict[str, Any]] = None
        self.view: Optional[dict[str, Any]] = None
        self.error: Optional[str] = None

    def fetch(self) -> StoreResult:
        try:
            data = self.client.get("/dashboard")
        except ApiRequestError as exc:
            with self._lock:
                self.data = copy.deepcopy(DEFAULT_DASHBOARD)
                self.error = exc.message
            return StoreResult(success=False, error=exc.message)
        with self._lock:
            self.data = data
            self.error = None
        return StoreResult(success=True, data=data)

    def fetch_analytics(self, period: int = 30) -> StoreResult:
        try:
            data = self.client.get("/dashboard/analytics", params={"period": period})
        except ApiRequestError as exc:
            with self._lock:
                self.error = exc.message
            return StoreResult(success=False, error=exc.message)
        with self._lock:
            self.analytics = data
        return StoreResult(success=True, data=data)

    def fetch_view(self) -> StoreResult:
        try:
            data = self.client.get("/dashboard/view")
        except ApiRequestError as exc:
            with self._lock:
                self.error = exc.message
            return StoreResult(success=False, error=exc.message)
        with self._lock:
            self.view = data
        return StoreResult(success=True, data=data)
