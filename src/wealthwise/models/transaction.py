"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from .base import TimestampedModel, utcnow

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .account import Account


class Transaction(TimestampedModel, table=True):
    """A single income, expense or transfer booked against an account.

    ``amount`` is always positive; ``type`` carries the direction.
    """

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    type: str = Field(nullable=False, max_length=16, index=True)
    amount: float = Field(nullable=False)
    category: str = Field(nullable=False, max_length=64, index=True)
    subcategory: Optional[str] = Field(default=None, max_length=64)
    description: str = Field(default="", max_length=500)
    merchant: str = Field(default="", max_length=100)
    date: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    notes: str = Field(default="", max_length=1000)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    is_recurring: bool = Field(default=False, nullable=False, index=True)
    recurring_frequency: Optional[str] = Field(default=None, max_length=16)
    recurring_next_date: Optional[datetime] = Field(default=None, index=True)
    recurring_end_date: Optional[datetime] = Field(default=None)

    account: "Account | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Account", back_populates="transactions"),
    )

    @property
    def signed_amount(self) -> float:
        """Effect of this transaction on its account balance."""
        if self.type == "income":
            return self.amount
        if self.type == "expense":
            return -self.amount
        return 0.0
