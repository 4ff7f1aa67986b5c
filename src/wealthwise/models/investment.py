"""Portfolio holding model."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field

from .base import TimestampedModel, utcnow


class Investment(TimestampedModel, table=True):
    """A position in a security or other asset."""

    __tablename__: ClassVar[str] = "investment"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    symbol: str = Field(default="", max_length=10, index=True)
    type: str = Field(default="stock", max_length=16, index=True)
    shares: float = Field(default=0.0, nullable=False)
    purchase_price: float = Field(default=0.0, nullable=False)
    current_price: float = Field(default=0.0, nullable=False)
    purchase_date: datetime = Field(default_factory=utcnow, nullable=False)
    notes: str = Field(default="", max_length=500)
    is_active: bool = Field(default=True, nullable=False, index=True)

    @property
    def total_invested(self) -> float:
        return self.shares * self.purchase_price

    @property
    def current_value(self) -> float:
        return self.shares * self.current_price
