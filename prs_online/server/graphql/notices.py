"""
Upcoming review notice queries and mutations.

Mutations are grouped under ``Mutation.upcomingReviewNotice``. Workflow
errors (unknown notice, notice not generated, bad date window) are raised and
reported as GraphQL errors.
"""

from datetime import date
from typing import List, Optional

import strawberry
from strawberry.types import Info

from .permissions import IsAuthenticated
from .types import NoticeBatches, NoticeStage, UpcomingReviewNotice


def _ids(values: List[Optional[int]]) -> List[int]:
    return [v for v in values if v is not None]


@strawberry.type
class NoticeQuery:
    @strawberry.field(permission_classes=[IsAuthenticated])
    async def upcoming_review_notices(self, info: Info, notice_stage: NoticeStage) -> List[UpcomingReviewNotice]:
        records = await info.context.notices.list_notices(notice_stage.to_domain())
        return UpcomingReviewNotice.from_records(records)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def upcoming_review_notice_batches(self, info: Info, notice_stage: NoticeStage) -> NoticeBatches:
        return NoticeBatches.from_batches(await info.context.notices.batches(notice_stage.to_domain()))


@strawberry.type
class UpcomingReviewNoticeMutations:
    @strawberry.mutation
    async def generate(
        self, info: Info, upcoming_review_notice_ids: List[Optional[int]], from_date: date, to_date: date
    ) -> List[UpcomingReviewNotice]:
        records = await info.context.notices.generate(_ids(upcoming_review_notice_ids), from_date, to_date)
        return UpcomingReviewNotice.from_records(records)

    @strawberry.mutation(description="Generate the pending notices of a month given as e.g. 'January 2027'")
    async def generate_month(self, info: Info, month: str) -> List[UpcomingReviewNotice]:
        return UpcomingReviewNotice.from_records(await info.context.notices.generate_month(month))

    @strawberry.mutation
    async def release_for_approval(
        self, info: Info, upcoming_review_notice_ids: List[Optional[int]]
    ) -> List[UpcomingReviewNotice]:
        records = await info.context.notices.release_for_approval(_ids(upcoming_review_notice_ids))
        return UpcomingReviewNotice.from_records(records)

    @strawberry.mutation
    async def approve_notices(
        self, info: Info, upcoming_review_notice_ids: List[Optional[int]]
    ) -> List[UpcomingReviewNotice]:
        approver = info.context.current_user
        records = await info.context.notices.approve(
            _ids(upcoming_review_notice_ids), approver_id=approver.user_id if approver else None
        )
        return UpcomingReviewNotice.from_records(records)

    @strawberry.mutation
    async def toggle_reviewed(
        self, info: Info, upcoming_review_notice_id: int, notice_stage: NoticeStage
    ) -> UpcomingReviewNotice:
        record = await info.context.notices.toggle_reviewed(upcoming_review_notice_id, notice_stage.to_domain())
        return UpcomingReviewNotice.from_record(record)

    @strawberry.mutation
    async def edit(
        self,
        info: Info,
        upcoming_review_notice_id: int,
        notice_html: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> UpcomingReviewNotice:
        record = await info.context.notices.edit(upcoming_review_notice_id, notice_html=notice_html, notes=notes)
        return UpcomingReviewNotice.from_record(record)


@strawberry.type
class NoticeMutation:
    @strawberry.field(permission_classes=[IsAuthenticated])
    def upcoming_review_notice(self) -> UpcomingReviewNoticeMutations:
        return UpcomingReviewNoticeMutations()
