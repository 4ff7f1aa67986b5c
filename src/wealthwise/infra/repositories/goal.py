"""SQLModel implementation of Goal repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import case
from sqlmodel import select

from ...models.goal import Goal
from .base import UserScopedRepository

_PRIORITY_RANK = case(
    (Goal.priority == "high", 3),
    (Goal.priority == "medium", 2),
    else_=1,
)


class SQLModelGoalRepository(UserScopedRepository[Goal]):
    model = Goal

    def list_all(
        self,
        *,
        user_id: int,
        active_only: bool = True,
        category: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> list[Goal]:
        with self.session_factory() as session:
            statement = select(Goal).where(Goal.user_id == user_id)
            if active_only:
                statement = statement.where(Goal.is_active == True)  # noqa: E712
            if category:
                statement = statement.where(Goal.category == category)
            if completed is not None:
                statement = statement.where(Goal.is_completed == completed)
            statement = statement.order_by(_PRIORITY_RANK.desc(), Goal.target_date.asc())  # type: ignore
            return self._fetch(session, statement)
