"""Bill repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.bill import Bill


class BillRepository(Protocol):
    def get_by_id(self, bill_id: int, *, user_id: int) -> Optional[Bill]:
        ...

    def list_all(
        self,
        *,
        user_id: int,
        active_only: bool = True,
        is_paid: Optional[bool] = None,
        category: Optional[str] = None,
    ) -> list[Bill]:
        """List bills ordered by due date."""
        ...

    def list_unpaid_all_users(self) -> list[Bill]:
        """Every active unpaid bill; used by the reminder job."""
        ...

    def create(self, bill: Bill, *, user_id: int) -> Bill:
        ...

    def update(self, bill: Bill, *, user_id: int) -> Bill:
        ...

    def delete(self, bill_id: int, *, user_id: int) -> bool:
        ...
