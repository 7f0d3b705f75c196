"""Country reference data, looked up by the code stored on a profile."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import Base


class Country(Base, table=True):
    """Entity for countries.

    Table: countries
    """

    __tablename__ = "countries"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=8, unique=True, index=True)
    name: str = Field(max_length=128)
