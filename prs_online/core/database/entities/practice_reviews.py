"""
Practice review entity model.

A practice review is a scheduled review of a firm. Its tentative start date
decides which monthly batch its upcoming review notice belongs to.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from sqlmodel import Field

from ..base import Base

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(address: Optional[str]) -> bool:
    """Loose syntactic check used to flag contacts that cannot receive a notice."""
    return bool(address) and EMAIL_PATTERN.match(address.strip()) is not None


class PracticeReview(Base, table=True):
    """Entity for practice reviews.

    Table: practice_reviews
    """

    __tablename__ = "practice_reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    pr_number: str = Field(max_length=32, unique=True, index=True)
    firm_id: int = Field(foreign_key="firms.id", index=True)
    start_date: date = Field(index=True, description="Tentative review date")
    contact_name: Optional[str] = Field(default=None, max_length=256)
    contact_email: Optional[str] = Field(default=None, max_length=256)
    review_type: str = Field(default="Full", max_length=64)
    has_increased_risk: bool = Field(default=False)

    @property
    def has_valid_contact_email(self) -> bool:
        return is_valid_email(self.contact_email)

    def __repr__(self) -> str:
        return f"PracticeReview(id={self.id}, pr_number={self.pr_number}, start_date={self.start_date})"
