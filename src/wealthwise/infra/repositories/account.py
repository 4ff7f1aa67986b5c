"""SQLModel implementation of Account repository."""

from __future__ import annotations

from sqlmodel import select

from ...models.account import Account
from ...models.bill import Bill
from ...models.goal import Goal
from .base import UserScopedRepository


class SQLModelAccountRepository(UserScopedRepository[Account]):
    """SQLModel-based account repository implementation."""

    model = Account

    def list_all(self, *, user_id: int, active_only: bool = False) -> list[Account]:
        with self.session_factory() as session:
            statement = select(Account).where(Account.user_id == user_id)
            if active_only:
                statement = statement.where(Account.is_active == True)  # noqa: E712
            statement = statement.order_by(Account.balance.desc(), Account.id)  # type: ignore
            return self._fetch(session, statement)

    def delete(self, account_id: int, *, user_id: int) -> bool:
        """Delete an account; the ORM cascade removes its transactions.

        Goals and bills that pointed at the account are unlinked, not removed.
        """
        with self.session_factory() as session:
            account = self._owned(session, account_id, user_id)
            if account is None:
                return False
            for model in (Goal, Bill):
                linked = session.exec(
                    select(model)
                    .where(model.user_id == user_id)
                    .where(model.linked_account_id == account_id)
                ).all()
                for row in linked:
                    row.linked_account_id = None
                    session.add(row)
            session.flush()
            session.delete(account)
            session.commit()
            return True
