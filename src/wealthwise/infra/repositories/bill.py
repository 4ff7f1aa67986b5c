"""SQLModel implementation of Bill repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.bill import Bill
from .base import UserScopedRepository


class SQLModelBillRepository(UserScopedRepository[Bill]):
    model = Bill

    def list_all(
        self,
        *,
        user_id: int,
        active_only: bool = True,
        is_paid: Optional[bool] = None,
        category: Optional[str] = None,
    ) -> list[Bill]:
        with self.session_factory() as session:
            statement = select(Bill).where(Bill.user_id == user_id)
            if active_only:
                statement = statement.where(Bill.is_active == True)  # noqa: E712
            if is_paid is not None:
                statement = statement.where(Bill.is_paid == is_paid)
            if category:
                statement = statement.where(Bill.category == category)
            statement = statement.order_by(Bill.due_date.asc(), Bill.id)  # type: ignore
            return self._fetch(session, statement)

    def list_unpaid_all_users(self) -> list[Bill]:
        with self.session_factory() as session:
            statement = (
                select(Bill)
                .where(Bill.is_paid == False)  # noqa: E712
                .where(Bill.is_active == True)  # noqa: E712
                .order_by(Bill.due_date.asc())  # type: ignore
            )
            return self._fetch(session, statement)
