"""Transaction repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Protocol

from ...models.transaction import Transaction


@dataclass(slots=True)
class TransactionFilter:
    """Filters accepted by :meth:`TransactionRepository.search`."""

    type: Optional[str] = None
    category: Optional[str] = None
    account_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    text: Optional[str] = None


class TransactionRepository(Protocol):
    """Ledger persistence; create/update/delete keep account balances in step."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        ...

    def search(
        self,
        filters: TransactionFilter,
        *,
        user_id: int,
        sort_by: str = "date",
        descending: bool = True,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Transaction], int]:
        """Return one page of matches and the total match count."""
        ...

    def list_between(
        self, start: Optional[datetime], end: Optional[datetime], *, user_id: int
    ) -> list[Transaction]:
        ...

    def list_recent(self, limit: int, *, user_id: int) -> list[Transaction]:
        ...

    def sum_expenses(
        self, category: str, start: datetime, end: datetime, *, user_id: int
    ) -> float:
        ...

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Persist and apply the balance effect to the account."""
        ...

    def update(
        self, transaction_id: int, changes: Mapping[str, Any], *, user_id: int
    ) -> Optional[Transaction]:
        """Apply changes, moving the balance effect between old and new state."""
        ...

    def delete(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Delete and reverse the balance effect; returns the removed row."""
        ...

    def list_due_recurring(self, today: datetime) -> list[Transaction]:
        """Recurring templates due on or before ``today`` across all users."""
        ...
