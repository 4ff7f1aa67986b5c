"""Bill (payment obligation) model."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field

from .base import TimestampedModel


class Bill(TimestampedModel, table=True):
    """A recurring or one-time payment with due-date-derived status."""

    __tablename__: ClassVar[str] = "bill"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    amount: float = Field(nullable=False)
    category: str = Field(default="other", max_length=32)
    due_date: datetime = Field(nullable=False, index=True)
    frequency: str = Field(default="monthly", max_length=16)
    linked_account_id: Optional[int] = Field(default=None, foreign_key="account.id")
    is_paid: bool = Field(default=False, nullable=False, index=True)
    paid_date: Optional[datetime] = Field(default=None)
    auto_pay: bool = Field(default=False, nullable=False)
    reminder_days: int = Field(default=3, nullable=False)
    notes: str = Field(default="", max_length=500)
    color: str = Field(default="#f59e0b", max_length=16)
    is_active: bool = Field(default=True, nullable=False, index=True)
