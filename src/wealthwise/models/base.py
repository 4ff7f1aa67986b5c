"""Shared column helpers for SQLModel tables."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite stores datetimes without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampedModel(SQLModel):
    """Adds created/updated timestamps to a table."""

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = utcnow()
