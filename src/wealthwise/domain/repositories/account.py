"""Account repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Repository for managing account entities."""

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        ...

    def list_all(self, *, user_id: int, active_only: bool = False) -> list[Account]:
        """List accounts, highest balance first."""
        ...

    def create(self, account: Account, *, user_id: int) -> Account:
        ...

    def update(self, account: Account, *, user_id: int) -> Account:
        ...

    def delete(self, account_id: int, *, user_id: int) -> bool:
        """Delete an account and its transactions; False when not found."""
        ...
