"""SQLModel implementation of Notification repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from ...models.base import utcnow
from ...models.notification import Notification
from .base import UserScopedRepository


class SQLModelNotificationRepository(UserScopedRepository[Notification]):
    model = Notification

    def list_page(
        self, *, user_id: int, offset: int = 0, limit: int = 20, unread_only: bool = False
    ) -> tuple[list[Notification], int]:
        with self.session_factory() as session:
            count_statement = (
                select(func.count()).select_from(Notification).where(Notification.user_id == user_id)
            )
            statement = select(Notification).where(Notification.user_id == user_id)
            if unread_only:
                count_statement = count_statement.where(Notification.is_read == False)  # noqa: E712
                statement = statement.where(Notification.is_read == False)  # noqa: E712
            total = session.exec(count_statement).one()
            statement = (
                statement.order_by(Notification.created_at.desc(), Notification.id.desc())  # type: ignore
                .offset(offset)
                .limit(limit)
            )
            return self._fetch(session, statement), int(total)

    def count_unread(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            total = session.exec(
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.is_read == False)  # noqa: E712
            ).one()
            return int(total)

    def mark_read(self, notification_id: int, *, user_id: int) -> Optional[Notification]:
        with self.session_factory() as session:
            notification = self._owned(session, notification_id, user_id)
            if notification is None:
                return None
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = utcnow()
                session.add(notification)
                session.commit()
                session.refresh(notification)
            session.expunge(notification)
            return notification

    def mark_all_read(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            unread = session.exec(
                select(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.is_read == False)  # noqa: E712
            ).all()
            now = utcnow()
            for notification in unread:
                notification.is_read = True
                notification.read_at = now
                session.add(notification)
            session.commit()
            return len(unread)

    def clear_read(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            read = session.exec(
                select(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.is_read == True)  # noqa: E712
            ).all()
            for notification in read:
                session.delete(notification)
            session.commit()
            return len(read)
