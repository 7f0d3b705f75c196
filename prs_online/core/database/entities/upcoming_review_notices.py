"""
Upcoming review notice entity model.

A notice informs a firm of its upcoming practice review. It is generated,
reviewed and released at the generate stage, then reviewed and approved at
the approve stage. ``stage`` holds a ``NoticeState`` value.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Text

from prs_online.core.models.enums import NoticeState

from ..base import Base, utc_now_naive


class UpcomingReviewNotice(Base, table=True):
    """Entity for upcoming review notices.

    Table: upcoming_review_notices
    """

    __tablename__ = "upcoming_review_notices"

    id: Optional[int] = Field(default=None, primary_key=True)
    practice_review_id: int = Field(foreign_key="practice_reviews.id", unique=True, index=True)
    stage: str = Field(default=NoticeState.pending_generation.value, max_length=32, index=True)

    notes: Optional[str] = Field(default=None, sa_type=Text)
    notice_html: Optional[str] = Field(default=None, sa_type=Text)

    # Workflow flags
    is_generated: bool = Field(default=False)
    is_modified: bool = Field(default=False)
    is_reviewed_at_generate_stage: bool = Field(default=False)
    is_reviewed_at_approval_stage: bool = Field(default=False)

    # Audit trail
    generated_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    released_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    approved_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    approved_by_user_id: Optional[int] = Field(default=None, foreign_key="users.id")

    created_at: datetime = Field(default_factory=utc_now_naive, sa_type=DateTime)
    updated_at: datetime = Field(
        default_factory=utc_now_naive, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now_naive}
    )

    def __repr__(self) -> str:
        return f"UpcomingReviewNotice(id={self.id}, stage={self.stage}, is_generated={self.is_generated})"
