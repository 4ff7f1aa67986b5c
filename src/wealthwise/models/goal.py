"""Savings goal model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from .base import TimestampedModel, utcnow


class Goal(TimestampedModel, table=True):
    """A savings target with progress tracked via contributions."""

    __tablename__: ClassVar[str] = "goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    description: str = Field(default="", max_length=500)
    target_amount: float = Field(nullable=False)
    current_amount: float = Field(default=0.0, nullable=False)
    category: str = Field(default="Other", max_length=32)
    target_date: datetime = Field(nullable=False)
    priority: str = Field(default="medium", max_length=8)
    auto_contribute: dict[str, Any] = Field(
        default_factory=lambda: {"enabled": False, "amount": 0, "frequency": "monthly"},
        sa_column=Column(JSON, nullable=False),
    )
    linked_account_id: Optional[int] = Field(default=None, foreign_key="account.id")
    is_completed: bool = Field(default=False, nullable=False, index=True)
    completed_at: Optional[datetime] = Field(default=None)
    color: str = Field(default="#10b981", max_length=16)
    icon: str = Field(default="target", max_length=32)
    is_active: bool = Field(default=True, nullable=False, index=True)

    def sync_completion(self) -> None:
        """Mark the goal completed once the target is reached, and back again."""
        if self.current_amount >= self.target_amount:
            if not self.is_completed:
                self.is_completed = True
                self.completed_at = utcnow()
        elif self.is_completed:
            self.is_completed = False
            self.completed_at = None
