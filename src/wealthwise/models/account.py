"""Financial account model."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from .base import TimestampedModel

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction


class Account(TimestampedModel, table=True):
    """A user-owned container (checking, savings, credit, ...) with a balance."""

    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    type: str = Field(nullable=False, max_length=16, index=True)
    balance: float = Field(default=0.0, nullable=False)
    currency: str = Field(default="USD", max_length=3)
    institution: Optional[str] = Field(default=None, max_length=100)
    color: str = Field(default="#6366f1", max_length=16)
    icon: str = Field(default="wallet", max_length=32)
    is_active: bool = Field(default=True, nullable=False, index=True)
    include_in_total: bool = Field(default=True, nullable=False)

    # Deleting an account removes its ledger rows
    transactions: list["Transaction"] = Relationship(
        back_populates="account",
        sa_relationship=relationship(
            "Transaction", back_populates="account", cascade="all, delete-orphan"
        ),
    )
