"""User and refresh-token repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def create(self, user: User) -> User:
        ...

    def update(self, user: User) -> User:
        ...

    def delete(self, user_id: int) -> bool:
        """Delete the user and every record they own."""
        ...

    def add_refresh_token(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        ...

    def has_refresh_token(self, user_id: int, token_hash: str, *, now: datetime) -> bool:
        ...

    def remove_refresh_token(self, user_id: int, token_hash: str) -> None:
        ...

    def clear_refresh_tokens(self, user_id: int) -> int:
        ...

    def delete_expired_tokens(self, now: datetime) -> int:
        ...
