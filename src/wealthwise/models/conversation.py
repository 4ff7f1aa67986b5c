"""Stored assistant conversations."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from .base import TimestampedModel, utcnow

TITLE_LENGTH = 50


class AIConversation(TimestampedModel, table=True):
    """A persisted chat thread; messages are kept inline as JSON."""

    __tablename__: ClassVar[str] = "ai_conversation"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(default="", max_length=100)
    messages: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    context_type: str = Field(default="general", max_length=16)
    is_archived: bool = Field(default=False, nullable=False, index=True)
    last_message_at: datetime = Field(default_factory=utcnow, nullable=False)

    def add_message(self, role: str, content: str) -> dict[str, Any]:
        now = utcnow()
        message = {"role": role, "content": content, "timestamp": now.isoformat()}
        # Reassign so SQLAlchemy sees the JSON column change
        self.messages = [*self.messages, message]
        self.last_message_at = now
        if not self.title:
            self.title = content[:TITLE_LENGTH] + ("..." if len(content) > TITLE_LENGTH else "")
        return message
