"""User model supporting authentication, roles and preferences."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field

from .base import TimestampedModel


class User(TimestampedModel, table=True):
    """Application user with credentials, profile and preferences."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    # Null until the user picks individual/student/business
    role: Optional[str] = Field(default=None, max_length=16, index=True)

    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)
    avatar: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    currency: str = Field(default="USD", max_length=3)
    timezone: str = Field(default="UTC", max_length=64)

    notifications_enabled: bool = Field(default=True, nullable=False)
    weekly_report: bool = Field(default=True, nullable=False)
    theme: str = Field(default="dark", max_length=8)

    last_login: Optional[datetime] = Field(default=None)
    password_changed_at: Optional[datetime] = Field(default=None)

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or "User"
