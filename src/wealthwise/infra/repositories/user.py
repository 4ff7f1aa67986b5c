"""SQLModel implementation of the User repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models import (
    AIConversation,
    Account,
    Bill,
    Budget,
    Goal,
    Investment,
    Notification,
    RefreshToken,
    Transaction,
    User,
)

# Child tables first so foreign keys never dangle mid-delete
_OWNED_TABLES = (
    Transaction,
    Goal,
    Bill,
    Budget,
    Investment,
    Notification,
    AIConversation,
    RefreshToken,
    Account,
)


class SQLModelUserRepository:
    """Users plus their hashed refresh tokens."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user:
                session.expunge(user)
            return user

    def get_by_email(self, email: str) -> Optional[User]:
        with self.session_factory() as session:
            user = session.exec(select(User).where(User.email == email.strip().lower())).first()
            if user:
                session.expunge(user)
            return user

    def create(self, user: User) -> User:
        with self.session_factory() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def update(self, user: User) -> User:
        with self.session_factory() as session:
            user.touch()
            merged = session.merge(user)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, user_id: int) -> bool:
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user is None:
                return False
            for table in _OWNED_TABLES:
                for row in session.exec(select(table).where(table.user_id == user_id)).all():
                    session.delete(row)
                session.flush()
            session.delete(user)
            session.commit()
            return True

    def add_refresh_token(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        with self.session_factory() as session:
            session.add(RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at))
            session.commit()

    def has_refresh_token(self, user_id: int, token_hash: str, *, now: datetime) -> bool:
        with self.session_factory() as session:
            row = session.exec(
                select(RefreshToken.id)
                .where(RefreshToken.user_id == user_id)
                .where(RefreshToken.token_hash == token_hash)
                .where(RefreshToken.expires_at > now)
            ).first()
            return row is not None

    def _delete_tokens(self, statement) -> int:
        with self.session_factory() as session:
            rows = session.exec(statement).all()
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)

    def remove_refresh_token(self, user_id: int, token_hash: str) -> None:
        self._delete_tokens(
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .where(RefreshToken.token_hash == token_hash)
        )

    def clear_refresh_tokens(self, user_id: int) -> int:
        return self._delete_tokens(select(RefreshToken).where(RefreshToken.user_id == user_id))

    def delete_expired_tokens(self, now: datetime) -> int:
        return self._delete_tokens(select(RefreshToken).where(RefreshToken.expires_at <= now))
