"""Investment repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.investment import Investment


class InvestmentRepository(Protocol):
    def get_by_id(self, investment_id: int, *, user_id: int) -> Optional[Investment]:
        ...

    def list_all(
        self, *, user_id: int, active_only: bool = True, type: Optional[str] = None
    ) -> list[Investment]:
        ...

    def create(self, investment: Investment, *, user_id: int) -> Investment:
        ...

    def update(self, investment: Investment, *, user_id: int) -> Investment:
        ...

    def delete(self, investment_id: int, *, user_id: int) -> bool:
        ...
