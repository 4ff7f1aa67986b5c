"""Hashed refresh tokens issued to a user."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .base import utcnow


class RefreshToken(SQLModel, table=True):
    """A sha256 digest of an issued refresh JWT; the raw token is never stored."""

    __tablename__: ClassVar[str] = "refresh_token"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    token_hash: str = Field(nullable=False, index=True, max_length=64)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    expires_at: datetime = Field(nullable=False, index=True)
