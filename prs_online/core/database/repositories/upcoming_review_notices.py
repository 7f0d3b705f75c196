"""
Upcoming review notice repository.

Notices are always read together with their practice review and firm, since
both the batch grouping and the rendered notice need them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from prs_online.core.models.enums import NoticeState

from ..entities.firms import Firm
from ..entities.practice_reviews import PracticeReview
from ..entities.upcoming_review_notices import UpcomingReviewNotice
from .base import AsyncBaseRepository


@dataclass
class NoticeRecord:
    """A notice joined with its practice review and firm."""

    notice: UpcomingReviewNotice
    practice_review: PracticeReview
    firm: Firm


class UpcomingReviewNoticeRepository(AsyncBaseRepository[UpcomingReviewNotice]):
    """Repository for upcoming review notices."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UpcomingReviewNotice)

    def _joined(self):
        return (
            select(UpcomingReviewNotice, PracticeReview, Firm)
            .join(PracticeReview, col(PracticeReview.id) == col(UpcomingReviewNotice.practice_review_id))
            .join(Firm, col(Firm.id) == col(PracticeReview.firm_id))
        )

    async def list_by_state(self, state: NoticeState) -> List[NoticeRecord]:
        """List the notices at a workflow state, ordered by review start date."""
        stmt = (
            self._joined()
            .where(UpcomingReviewNotice.stage == state.value)
            .order_by(col(PracticeReview.start_date), col(UpcomingReviewNotice.id))
        )
        result = await self.session.execute(stmt)
        return [NoticeRecord(*row) for row in result.all()]

    async def get_records(self, notice_ids: Iterable[int]) -> List[NoticeRecord]:
        """Fetch the given notices, ignoring ids that do not exist."""
        ids = list(notice_ids)
        if not ids:
            return []
        stmt = (
            self._joined()
            .where(col(UpcomingReviewNotice.id).in_(ids))
            .order_by(col(PracticeReview.start_date), col(UpcomingReviewNotice.id))
        )
        result = await self.session.execute(stmt)
        return [NoticeRecord(*row) for row in result.all()]

    async def get_record(self, notice_id: int) -> Optional[NoticeRecord]:
        records = await self.get_records([notice_id])
        return records[0] if records else None

    async def save_all(self, notices: Iterable[UpcomingReviewNotice]) -> None:
        """Persist a set of modified notices in one commit."""
        items = list(notices)
        if not items:
            return
        self.session.add_all(items)
        await self.session.commit()
        for notice in items:
            await self.session.refresh(notice)
