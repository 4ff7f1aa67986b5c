"""Budgeting tables."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field

from .base import TimestampedModel, utcnow


def _month_start() -> datetime:
    now = utcnow()
    return datetime(now.year, now.month, 1)


class Budget(TimestampedModel, table=True):
    """A spending cap for one category over a recurring period."""

    __tablename__: ClassVar[str] = "budget"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    category: str = Field(nullable=False, max_length=64, index=True)
    amount: float = Field(nullable=False)
    # Last computed spend; recalculated from the ledger on read
    spent: float = Field(default=0.0, nullable=False)
    period: str = Field(default="monthly", max_length=16)
    start_date: datetime = Field(default_factory=_month_start, nullable=False)
    end_date: Optional[datetime] = Field(default=None)
    is_recurring: bool = Field(default=True, nullable=False)
    alert_threshold: int = Field(default=80, nullable=False)
    color: str = Field(default="#6366f1", max_length=16)
    is_active: bool = Field(default=True, nullable=False, index=True)
    # Last alert level emitted (none/warning/exceeded) so crossings notify once
    alert_state: str = Field(default="none", max_length=16)
