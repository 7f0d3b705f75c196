"""
Upcoming review notice workflow.

Notices move through three states::

    GenerateNotices --release--> ApproveNotices --approve--> Approved

At the generate stage a notice is generated (rendered), then reviewed, then
released for approval. At the approve stage it is reviewed again and
approved. Each stage has its own review flag; regenerating a notice clears
the generate-stage flag.

For the screens, the notices of a stage are grouped into monthly batches by
the start date of their practice review.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from prs_online.core.database import utc_now_naive
from prs_online.core.database.entities import Firm, PracticeReview
from prs_online.core.database.repositories import NoticeRecord, UpcomingReviewNoticeRepository
from prs_online.core.errors import NoticeNotFoundError, NoticeWorkflowError
from prs_online.core.logging_config import get_logger
from prs_online.core.models import NoticeStage, NoticeState
from prs_online.core.monitoring import log_notice_transition

from .notice_renderer import render_notice_html

logger = get_logger(__name__)

MONTH_FORMAT = "%B %Y"

NoticeRenderer = Callable[[PracticeReview, Firm], str]


def month_label(value: date) -> str:
    """Key of the monthly batch a review date falls in, e.g. ``March 2027``."""
    return value.strftime(MONTH_FORMAT)


def month_window(month: str) -> Tuple[date, date]:
    """First and last day of a month given as ``"<Month name> <year>"``.

    Raises:
        NoticeWorkflowError: When ``month`` is not in that format
    """
    try:
        first = datetime.strptime(month.strip(), MONTH_FORMAT).date()
    except ValueError as e:
        raise NoticeWorkflowError(f"Invalid month '{month}', expected e.g. 'January 2027'") from e
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


@dataclass
class MonthlyNoticeBatch:
    """Notices of one stage whose reviews start in the same month."""

    month: str
    from_date: date
    to_date: date
    notices: List[NoticeRecord] = field(default_factory=list)

    @property
    def regenerating(self) -> bool:
        """Every notice of the batch has been generated already."""
        return all(r.notice.is_generated for r in self.notices)

    @property
    def can_generate(self) -> bool:
        """At least one notice is not both generated and reviewed."""
        return not all(r.notice.is_generated and r.notice.is_reviewed_at_generate_stage for r in self.notices)

    @property
    def can_release(self) -> bool:
        return any(r.notice.is_reviewed_at_generate_stage for r in self.notices)

    @property
    def can_approve(self) -> bool:
        return any(r.notice.is_reviewed_at_approval_stage for r in self.notices)

    def ids_to_generate(self) -> List[int]:
        return [
            r.notice.id
            for r in self.notices
            if not r.notice.is_generated or not r.notice.is_reviewed_at_generate_stage
        ]


@dataclass
class NoticeBatches:
    """Screen shape of one stage: monthly batches plus unreachable contacts."""

    stage: NoticeStage
    batches: List[MonthlyNoticeBatch] = field(default_factory=list)
    invalid_contact_email_notices: List[NoticeRecord] = field(default_factory=list)


def group_into_batches(records: Iterable[NoticeRecord], stage: NoticeStage) -> NoticeBatches:
    """Group the notices of a stage into monthly batches.

    Notices whose practice review has no valid contact email are kept out of
    the batches; they are only reported at the generate stage.
    """
    valid: List[NoticeRecord] = []
    invalid: List[NoticeRecord] = []
    for record in records:
        (valid if record.practice_review.has_valid_contact_email else invalid).append(record)

    valid.sort(key=lambda r: (r.practice_review.start_date, r.notice.id))
    batches: Dict[str, MonthlyNoticeBatch] = {}
    for record in valid:
        label = month_label(record.practice_review.start_date)
        batch = batches.get(label)
        if batch is None:
            from_date, to_date = month_window(label)
            batch = batches[label] = MonthlyNoticeBatch(month=label, from_date=from_date, to_date=to_date)
        batch.notices.append(record)

    return NoticeBatches(
        stage=stage,
        batches=list(batches.values()),
        invalid_contact_email_notices=invalid if stage == NoticeStage.GENERATE_NOTICES else [],
    )


class NoticeWorkflowService:
    """Operations of the upcoming review notice screens."""

    def __init__(self, session: AsyncSession, renderer: NoticeRenderer = render_notice_html) -> None:
        self.notices = UpcomingReviewNoticeRepository(session)
        self.renderer = renderer

    async def list_notices(self, stage: NoticeStage) -> List[NoticeRecord]:
        return await self.notices.list_by_state(NoticeState.for_stage(stage))

    async def batches(self, stage: NoticeStage) -> NoticeBatches:
        return group_into_batches(await self.list_notices(stage), stage)

    async def _require(self, notice_id: int) -> NoticeRecord:
        record = await self.notices.get_record(notice_id)
        if record is None:
            raise NoticeNotFoundError(notice_id)
        return record

    async def generate(self, notice_ids: Iterable[int], from_date: date, to_date: date) -> List[NoticeRecord]:
        """Render the given notices whose review starts within ``[from_date, to_date]``.

        Notices outside the window or not at the generate stage are left untouched.

        Returns:
            The generated notices
        """
        if from_date > to_date:
            raise NoticeWorkflowError(f"fromDate {from_date} is after toDate {to_date}")

        now = utc_now_naive()
        generated: List[NoticeRecord] = []
        for record in await self.notices.get_records(notice_ids):
            notice = record.notice
            if notice.stage != NoticeState.pending_generation.value:
                continue
            if not from_date <= record.practice_review.start_date <= to_date:
                continue
            notice.notice_html = self.renderer(record.practice_review, record.firm)
            notice.is_generated = True
            notice.is_modified = False
            notice.is_reviewed_at_generate_stage = False
            notice.generated_at = now
            generated.append(record)

        await self.notices.save_all(r.notice for r in generated)
        log_notice_transition("generate", [r.notice.id for r in generated])
        return generated

    async def generate_month(self, month: str) -> List[NoticeRecord]:
        """Generate the notices of one monthly batch that are not generated and reviewed yet."""
        from_date, to_date = month_window(month)
        label = month_label(from_date)
        batches = await self.batches(NoticeStage.GENERATE_NOTICES)
        batch = next((b for b in batches.batches if b.month == label), None)
        if batch is None:
            logger.info(f"No notices to generate for {label}")
            return []
        return await self.generate(batch.ids_to_generate(), from_date, to_date)

    async def release_for_approval(self, notice_ids: Iterable[int]) -> List[NoticeRecord]:
        """Move generated notices reviewed at the generate stage to the approve stage."""
        now = utc_now_naive()
        released: List[NoticeRecord] = []
        for record in await self.notices.get_records(notice_ids):
            notice = record.notice
            if notice.stage != NoticeState.pending_generation.value:
                continue
            if not (notice.is_generated and notice.is_reviewed_at_generate_stage):
                continue
            notice.stage = NoticeState.pending_approval.value
            notice.is_reviewed_at_approval_stage = False
            notice.released_at = now
            released.append(record)

        await self.notices.save_all(r.notice for r in released)
        log_notice_transition("release", [r.notice.id for r in released])
        return released

    async def approve(self, notice_ids: Iterable[int], approver_id: Optional[int] = None) -> List[NoticeRecord]:
        """Approve approve-stage notices reviewed at the approval stage."""
        now = utc_now_naive()
        approved: List[NoticeRecord] = []
        for record in await self.notices.get_records(notice_ids):
            notice = record.notice
            if notice.stage != NoticeState.pending_approval.value or not notice.is_reviewed_at_approval_stage:
                continue
            notice.stage = NoticeState.approved.value
            notice.approved_at = now
            notice.approved_by_user_id = approver_id
            approved.append(record)

        await self.notices.save_all(r.notice for r in approved)
        log_notice_transition("approve", [r.notice.id for r in approved], actor_id=approver_id)
        return approved

    async def toggle_reviewed(self, notice_id: int, stage: NoticeStage) -> NoticeRecord:
        """Flip the review flag of a generated notice at the given stage."""
        record = await self._require(notice_id)
        notice = record.notice
        if not notice.is_generated:
            raise NoticeWorkflowError(f"Upcoming review notice {notice_id} has not been generated")
        if notice.stage != NoticeState.for_stage(stage).value:
            raise NoticeWorkflowError(
                f"Upcoming review notice {notice_id} is not at the {stage.value} stage (state: {notice.stage})"
            )

        if stage == NoticeStage.APPROVE_NOTICES:
            notice.is_reviewed_at_approval_stage = not notice.is_reviewed_at_approval_stage
        else:
            notice.is_reviewed_at_generate_stage = not notice.is_reviewed_at_generate_stage
        await self.notices.update(notice)
        return record

    async def edit(self, notice_id: int, notice_html: Optional[str] = None, notes: Optional[str] = None) -> NoticeRecord:
        """Edit a notice's HTML and notes; changing the HTML marks it modified."""
        record = await self._require(notice_id)
        notice = record.notice
        if notice_html is not None and notice_html != notice.notice_html:
            notice.notice_html = notice_html
            notice.is_modified = True
        if notes is not None:
            notice.notes = notes
        await self.notices.update(notice)
        return record
