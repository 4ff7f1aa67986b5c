"""SQLModel implementation of Investment repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.investment import Investment
from .base import UserScopedRepository


class SQLModelInvestmentRepository(UserScopedRepository[Investment]):
    model = Investment

    def list_all(
        self, *, user_id: int, active_only: bool = True, type: Optional[str] = None
    ) -> list[Investment]:
        with self.session_factory() as session:
            statement = select(Investment).where(Investment.user_id == user_id)
            if active_only:
                statement = statement.where(Investment.is_active == True)  # noqa: E712
            if type:
                statement = statement.where(Investment.type == type)
            statement = statement.order_by(Investment.created_at.desc(), Investment.id.desc())  # type: ignore
            return self._fetch(session, statement)
