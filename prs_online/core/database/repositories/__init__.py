"""
Database repository layer using SQLModel.

This package contains the repository classes of the PRS Online domain. Each
module provides async data access operations for its SQLModel entities.

Modules:
- base: AsyncBaseRepository with the shared create/get/update/list operations
- users: User, profile and country repositories
- upcoming_review_notices: Notice repository and the joined notice records
"""

from .base import AsyncBaseRepository
from .upcoming_review_notices import NoticeRecord, UpcomingReviewNoticeRepository
from .users import CountryRepository, ProfileRepository, UserRepository

__all__ = [
    "AsyncBaseRepository",
    "CountryRepository",
    "NoticeRecord",
    "ProfileRepository",
    "UpcomingReviewNoticeRepository",
    "UserRepository",
]
