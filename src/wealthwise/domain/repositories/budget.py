"""Budget repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.budget import Budget


class BudgetRepository(Protocol):
    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        ...

    def list_all(
        self, *, user_id: int, active_only: bool = True, period: Optional[str] = None
    ) -> list[Budget]:
        ...

    def find_active(self, category: str, period: str, *, user_id: int) -> Optional[Budget]:
        """Return the active budget for a category/period pair, if any."""
        ...

    def create(self, budget: Budget, *, user_id: int) -> Budget:
        ...

    def update(self, budget: Budget, *, user_id: int) -> Budget:
        ...

    def delete(self, budget_id: int, *, user_id: int) -> bool:
        ...
