"""
User and profile entity models.

A user is an account that can sign in; its profile holds the personal
details shown in the admin screens (name, picture, country).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Text

from ..base import Base, utc_now_naive


class User(Base, table=True):
    """Entity for user accounts.

    Table: users
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=128, unique=True, index=True)
    email: str = Field(max_length=256, unique=True, index=True)
    password: str = Field(max_length=128)
    role_id: int = Field(default=2, index=True)

    # Refresh session
    refresh_token: Optional[str] = Field(default=None, max_length=255, index=True)
    refresh_expires: Optional[datetime] = Field(default=None, sa_type=DateTime)

    created_at: datetime = Field(default_factory=utc_now_naive, sa_type=DateTime)
    updated_at: datetime = Field(
        default_factory=utc_now_naive, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now_naive}
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, role_id={self.role_id})"


class Profile(Base, table=True):
    """Entity for the personal details of a user.

    Table: profiles
    """

    __tablename__ = "profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)
    first_name: Optional[str] = Field(default=None, max_length=128)
    last_name: Optional[str] = Field(default=None, max_length=128)
    picture: Optional[str] = Field(default=None, max_length=1024)
    country: Optional[str] = Field(default=None, max_length=8, description="ISO country code")
    bio: Optional[str] = Field(default=None, sa_type=Text)

    def __repr__(self) -> str:
        return f"Profile(user_id={self.user_id}, first_name={self.first_name}, last_name={self.last_name})"
