"""Firm entity model."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import Base


class Firm(Base, table=True):
    """Entity for firms subject to practice reviews.

    Table: firms
    """

    __tablename__ = "firms"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=256, index=True)
    firm_number: Optional[str] = Field(default=None, max_length=32, unique=True)

    def __repr__(self) -> str:
        return f"Firm(id={self.id}, name={self.name})"
