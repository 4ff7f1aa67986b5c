"""Notification repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.notification import Notification


class NotificationRepository(Protocol):
    def get_by_id(self, notification_id: int, *, user_id: int) -> Optional[Notification]:
        ...

    def list_page(
        self, *, user_id: int, offset: int = 0, limit: int = 20, unread_only: bool = False
    ) -> tuple[list[Notification], int]:
        ...

    def count_unread(self, *, user_id: int) -> int:
        ...

    def create(self, notification: Notification, *, user_id: int) -> Notification:
        ...

    def mark_read(self, notification_id: int, *, user_id: int) -> Optional[Notification]:
        ...

    def mark_all_read(self, *, user_id: int) -> int:
        """Mark every unread notification read; returns how many changed."""
        ...

    def clear_read(self, *, user_id: int) -> int:
        ...

    def delete(self, notification_id: int, *, user_id: int) -> bool:
        ...
