"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ...domain.repositories.transaction import TransactionFilter
from ...models.account import Account
from ...models.transaction import Transaction
from .base import UserScopedRepository

_SORT_COLUMNS = {
    "date": Transaction.date,
    "amount": Transaction.amount,
    "category": Transaction.category,
    "created": Transaction.created_at,
}


class SQLModelTransactionRepository(UserScopedRepository[Transaction]):
    """SQLModel-based transaction repository implementation.

    Writes go through one session so the transaction row and the account
    balance commit together.
    """

    model = Transaction

    def _account(self, session: Session, account_id: int, user_id: int) -> Account:
        account = session.exec(
            select(Account).where(Account.id == account_id).where(Account.user_id == user_id)
        ).first()
        if account is None:
            raise LookupError(f"Account {account_id} not found")
        return account

    def _apply_filters(self, statement, filters: TransactionFilter, user_id: int):
        statement = statement.where(Transaction.user_id == user_id)
        if filters.type:
            statement = statement.where(Transaction.type == filters.type)
        if filters.category:
            statement = statement.where(Transaction.category == filters.category)
        if filters.account_id:
            statement = statement.where(Transaction.account_id == filters.account_id)
        if filters.start_date:
            statement = statement.where(Transaction.date >= filters.start_date)
        if filters.end_date:
            statement = statement.where(Transaction.date <= filters.end_date)
        if filters.text:
            pattern = f"%{filters.text.lower()}%"
            statement = statement.where(
                or_(
                    func.lower(Transaction.description).like(pattern),
                    func.lower(Transaction.merchant).like(pattern),
                    func.lower(Transaction.category).like(pattern),
                )
            )
        return statement

    def search(
        self,
        filters: TransactionFilter,
        *,
        user_id: int,
        sort_by: str = "date",
        descending: bool = True,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Transaction], int]:
        """Advanced search with multiple filters and pagination."""
        column = _SORT_COLUMNS.get(sort_by, Transaction.date)
        order = column.desc() if descending else column.asc()  # type: ignore[union-attr]
        with self.session_factory() as session:
            count_statement = self._apply_filters(
                select(func.count()).select_from(Transaction), filters, user_id
            )
            total = session.exec(count_statement).one()
            statement = self._apply_filters(select(Transaction), filters, user_id)
            statement = statement.order_by(order, Transaction.id.desc()).offset(offset)  # type: ignore
            if limit is not None:
                statement = statement.limit(limit)
            return self._fetch(session, statement), int(total)

    def list_between(
        self, start: Optional[datetime], end: Optional[datetime], *, user_id: int
    ) -> list[Transaction]:
        rows, _ = self.search(
            TransactionFilter(start_date=start, end_date=end), user_id=user_id
        )
        return rows

    def list_recent(self, limit: int, *, user_id: int) -> list[Transaction]:
        rows, _ = self.search(TransactionFilter(), user_id=user_id, limit=limit)
        return rows

    def sum_expenses(
        self, category: str, start: datetime, end: datetime, *, user_id: int
    ) -> float:
        with self.session_factory() as session:
            total = session.exec(
                select(func.coalesce(func.sum(Transaction.amount), 0.0))
                .where(Transaction.user_id == user_id)
                .where(Transaction.type == "expense")
                .where(Transaction.category == category)
                .where(Transaction.date >= start)
                .where(Transaction.date <= end)
            ).one()
            return float(total or 0.0)

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a transaction and apply its balance effect."""
        with self.session_factory() as session:
            account = self._account(session, transaction.account_id, user_id)
            transaction.user_id = user_id
            account.balance += transaction.signed_amount
            account.touch()
            session.add(account)
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def update(
        self, transaction_id: int, changes: Mapping[str, Any], *, user_id: int
    ) -> Optional[Transaction]:
        """Update a transaction, reversing the old balance effect first."""
        with self.session_factory() as session:
            transaction = self._owned(session, transaction_id, user_id)
            if transaction is None:
                return None
            old_account = self._account(session, transaction.account_id, user_id)
            old_account.balance -= transaction.signed_amount

            for key, value in changes.items():
                setattr(transaction, key, value)
            transaction.touch()

            new_account = (
                old_account
                if transaction.account_id == old_account.id
                else self._account(session, transaction.account_id, user_id)
            )
            new_account.balance += transaction.signed_amount
            session.add_all([old_account, new_account, transaction])
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def delete(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Delete a transaction and reverse its balance effect."""
        with self.session_factory() as session:
            transaction = self._owned(session, transaction_id, user_id)
            if transaction is None:
                return None
            account = session.get(Account, transaction.account_id)
            if account is not None:
                account.balance -= transaction.signed_amount
                session.add(account)
            session.delete(transaction)
            session.commit()
            return transaction

    def list_due_recurring(self, today: datetime) -> list[Transaction]:
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.is_recurring == True)  # noqa: E712
                .where(Transaction.recurring_next_date != None)  # noqa: E711
                .where(Transaction.recurring_next_date <= today)
                .where(
                    or_(
                        Transaction.recurring_end_date == None,  # noqa: E711
                        Transaction.recurring_end_date >= today,
                    )
                )
                .order_by(Transaction.id)  # type: ignore
            )
            return self._fetch(session, statement)
