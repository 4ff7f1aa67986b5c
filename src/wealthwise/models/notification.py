"""In-app notification model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from .base import TimestampedModel


class Notification(TimestampedModel, table=True):
    __tablename__: ClassVar[str] = "notification"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    type: str = Field(default="system", max_length=32)
    title: str = Field(nullable=False, max_length=100)
    message: str = Field(nullable=False, max_length=500)
    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    is_read: bool = Field(default=False, nullable=False, index=True)
    read_at: Optional[datetime] = Field(default=None)
    priority: str = Field(default="medium", max_length=8)
    action_url: Optional[str] = Field(default=None, max_length=255)
