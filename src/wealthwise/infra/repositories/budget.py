"""SQLModel implementation of Budget repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.budget import Budget
from .base import UserScopedRepository


class SQLModelBudgetRepository(UserScopedRepository[Budget]):
    model = Budget

    def list_all(
        self, *, user_id: int, active_only: bool = True, period: Optional[str] = None
    ) -> list[Budget]:
        with self.session_factory() as session:
            statement = select(Budget).where(Budget.user_id == user_id)
            if active_only:
                statement = statement.where(Budget.is_active == True)  # noqa: E712
            if period:
                statement = statement.where(Budget.period == period)
            statement = statement.order_by(Budget.created_at.desc(), Budget.id.desc())  # type: ignore
            return self._fetch(session, statement)

    def find_active(self, category: str, period: str, *, user_id: int) -> Optional[Budget]:
        with self.session_factory() as session:
            budget = session.exec(
                select(Budget)
                .where(Budget.user_id == user_id)
                .where(Budget.category == category)
                .where(Budget.period == period)
                .where(Budget.is_active == True)  # noqa: E712
            ).first()
            if budget:
                session.expunge(budget)
            return budget
