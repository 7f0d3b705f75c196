"""Domain enums for the PRS Online models."""

from __future__ import annotations

from enum import Enum, IntEnum


class UserRole(IntEnum):
    """Role identifiers stored in ``users.role_id``."""

    admin = 1
    user = 2


class NoticeStage(str, Enum):
    """
    Review stage of the upcoming review notice screens.

    Each stage has its own review checkbox on a notice.
    """

    GENERATE_NOTICES = "GenerateNotices"
    APPROVE_NOTICES = "ApproveNotices"


class NoticeState(str, Enum):
    """Persisted position of a notice in the workflow (``upcoming_review_notices.stage``)."""

    pending_generation = "GenerateNotices"
    pending_approval = "ApproveNotices"
    approved = "Approved"

    @classmethod
    def for_stage(cls, stage: NoticeStage) -> "NoticeState":
        """Map a review stage to the state of the notices listed at that stage."""
        if stage == NoticeStage.GENERATE_NOTICES:
            return cls.pending_generation
        return cls.pending_approval
