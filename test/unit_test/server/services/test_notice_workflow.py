"""Unit tests for the upcoming review notice workflow service."""

from datetime import date

import pytest

from prs_online.core.database.entities import UpcomingReviewNotice
from prs_online.core.errors import NoticeNotFoundError, NoticeWorkflowError
from prs_online.core.models import NoticeStage, NoticeState
from prs_online.server.services.notices import NoticeWorkflowService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(session) -> NoticeWorkflowService:
    return NoticeWorkflowService(session)


async def _reload(session, notice: UpcomingReviewNotice) -> UpcomingReviewNotice:
    await session.refresh(notice)
    return notice


class TestGenerate:
    async def test_generates_notices_in_window(self, service, session, create_notice):
        inside = await create_notice(date(2027, 1, 15), is_reviewed_at_generate_stage=True)
        outside = await create_notice(date(2027, 2, 1))

        generated = await service.generate([inside.id, outside.id], date(2027, 1, 1), date(2027, 1, 31))

        assert [r.notice.id for r in generated] == [inside.id]
        inside = await _reload(session, inside)
        assert inside.is_generated is True
        assert inside.is_modified is False
        assert inside.is_reviewed_at_generate_stage is False
        assert inside.generated_at is not None
        assert "PR-" in inside.notice_html
        assert (await _reload(session, outside)).is_generated is False

    async def test_window_bounds_are_inclusive(self, service, create_notice):
        first = await create_notice(date(2027, 1, 1))
        last = await create_notice(date(2027, 1, 31))

        generated = await service.generate([first.id, last.id], date(2027, 1, 1), date(2027, 1, 31))

        assert {r.notice.id for r in generated} == {first.id, last.id}

    async def test_skips_notices_past_generate_stage(self, service, create_notice):
        released = await create_notice(date(2027, 1, 15), stage=NoticeState.pending_approval, is_generated=True)

        assert await service.generate([released.id], date(2027, 1, 1), date(2027, 1, 31)) == []

    async def test_regenerating_clears_modified_flag(self, service, session, create_notice):
        notice = await create_notice(date(2027, 1, 15))
        await service.generate([notice.id], date(2027, 1, 1), date(2027, 1, 31))
        await service.edit(notice.id, notice_html="<p>hand edited</p>")

        await service.generate([notice.id], date(2027, 1, 1), date(2027, 1, 31))

        notice = await _reload(session, notice)
        assert notice.is_modified is False
        assert notice.notice_html != "<p>hand edited</p>"

    async def test_inverted_window(self, service):
        with pytest.raises(NoticeWorkflowError):
            await service.generate([1], date(2027, 2, 1), date(2027, 1, 1))

    async def test_uses_injected_renderer(self, session, create_notice):
        notice = await create_notice(date(2027, 1, 15))
        service = NoticeWorkflowService(session, renderer=lambda review, firm: f"<p>{review.pr_number}</p>")

        [record] = await service.generate([notice.id], date(2027, 1, 1), date(2027, 1, 31))

        assert record.notice.notice_html == f"<p>{record.practice_review.pr_number}</p>"


class TestGenerateMonth:
    async def test_generates_pending_notices_of_the_month(self, service, create_notice):
        pending = await create_notice(date(2027, 1, 10))
        done = await create_notice(date(2027, 1, 11), is_generated=True, is_reviewed_at_generate_stage=True)
        unreviewed = await create_notice(date(2027, 1, 12), is_generated=True)
        await create_notice(date(2027, 2, 1))
        await create_notice(date(2027, 1, 13), contact_email="invalid")

        generated = await service.generate_month("January 2027")

        assert [r.notice.id for r in generated] == [pending.id, unreviewed.id]
        assert done.id not in [r.notice.id for r in generated]

    async def test_month_without_notices(self, service):
        assert await service.generate_month("June 2030") == []

    async def test_invalid_month(self, service):
        with pytest.raises(NoticeWorkflowError):
            await service.generate_month("2027-01")


class TestReleaseAndApprove:
    async def test_release_moves_reviewed_notices_only(self, service, session, create_notice):
        reviewed = await create_notice(date(2027, 1, 10), is_generated=True, is_reviewed_at_generate_stage=True)
        unreviewed = await create_notice(date(2027, 1, 11), is_generated=True)
        not_generated = await create_notice(date(2027, 1, 12), is_reviewed_at_generate_stage=True)

        released = await service.release_for_approval([reviewed.id, unreviewed.id, not_generated.id])

        assert [r.notice.id for r in released] == [reviewed.id]
        reviewed = await _reload(session, reviewed)
        assert reviewed.stage == NoticeState.pending_approval.value
        assert reviewed.released_at is not None
        assert (await _reload(session, unreviewed)).stage == NoticeState.pending_generation.value
        assert (await _reload(session, not_generated)).stage == NoticeState.pending_generation.value

    async def test_approve_records_approver(self, service, session, create_notice, create_user):
        approver = await create_user("admin")
        reviewed = await create_notice(
            date(2027, 1, 10),
            stage=NoticeState.pending_approval,
            is_generated=True,
            is_reviewed_at_approval_stage=True,
        )
        unreviewed = await create_notice(date(2027, 1, 11), stage=NoticeState.pending_approval, is_generated=True)

        approved = await service.approve([reviewed.id, unreviewed.id], approver_id=approver.id)

        assert [r.notice.id for r in approved] == [reviewed.id]
        reviewed = await _reload(session, reviewed)
        assert reviewed.stage == NoticeState.approved.value
        assert reviewed.approved_by_user_id == approver.id
        assert reviewed.approved_at is not None
        assert (await _reload(session, unreviewed)).stage == NoticeState.pending_approval.value

    async def test_approve_ignores_generate_stage_notices(self, service, create_notice):
        notice = await create_notice(date(2027, 1, 10), is_generated=True, is_reviewed_at_approval_stage=True)
        assert await service.approve([notice.id]) == []


class TestToggleAndEdit:
    async def test_toggle_flips_flag_for_stage(self, service, create_notice):
        notice = await create_notice(date(2027, 1, 10), is_generated=True)

        record = await service.toggle_reviewed(notice.id, NoticeStage.GENERATE_NOTICES)
        assert record.notice.is_reviewed_at_generate_stage is True
        assert record.notice.is_reviewed_at_approval_stage is False

        record = await service.toggle_reviewed(notice.id, NoticeStage.GENERATE_NOTICES)
        assert record.notice.is_reviewed_at_generate_stage is False

    async def test_toggle_approval_flag_at_approve_stage(self, service, create_notice):
        notice = await create_notice(date(2027, 1, 10), stage=NoticeState.pending_approval, is_generated=True)

        record = await service.toggle_reviewed(notice.id, NoticeStage.APPROVE_NOTICES)

        assert record.notice.is_reviewed_at_approval_stage is True
        assert record.notice.is_reviewed_at_generate_stage is False

    async def test_toggle_rejects_other_stage(self, service, create_notice):
        pending = await create_notice(date(2027, 1, 10), is_generated=True)
        released = await create_notice(date(2027, 1, 11), stage=NoticeState.pending_approval, is_generated=True)
        approved = await create_notice(date(2027, 1, 12), stage=NoticeState.approved, is_generated=True)

        with pytest.raises(NoticeWorkflowError, match="not at the ApproveNotices stage"):
            await service.toggle_reviewed(pending.id, NoticeStage.APPROVE_NOTICES)
        with pytest.raises(NoticeWorkflowError, match="not at the GenerateNotices stage"):
            await service.toggle_reviewed(released.id, NoticeStage.GENERATE_NOTICES)
        for stage in NoticeStage:
            with pytest.raises(NoticeWorkflowError):
                await service.toggle_reviewed(approved.id, stage)

    async def test_approval_needs_review_after_release(self, service, session, create_notice):
        notice = await create_notice(
            date(2027, 1, 10),
            is_generated=True,
            is_reviewed_at_generate_stage=True,
            is_reviewed_at_approval_stage=True,
        )

        await service.release_for_approval([notice.id])
        assert (await _reload(session, notice)).is_reviewed_at_approval_stage is False
        assert await service.approve([notice.id]) == []

        await service.toggle_reviewed(notice.id, NoticeStage.APPROVE_NOTICES)
        approved = await service.approve([notice.id])

        assert [r.notice.id for r in approved] == [notice.id]

    async def test_toggle_requires_generated_notice(self, service, create_notice):
        notice = await create_notice(date(2027, 1, 10))

        with pytest.raises(NoticeWorkflowError):
            await service.toggle_reviewed(notice.id, NoticeStage.GENERATE_NOTICES)

    async def test_toggle_unknown_notice(self, service):
        with pytest.raises(NoticeNotFoundError):
            await service.toggle_reviewed(404, NoticeStage.GENERATE_NOTICES)

    async def test_edit_html_marks_modified(self, service, create_notice):
        notice = await create_notice(date(2027, 1, 10))

        record = await service.edit(notice.id, notice_html="<p>custom</p>", notes="check contact")

        assert record.notice.notice_html == "<p>custom</p>"
        assert record.notice.notes == "check contact"
        assert record.notice.is_modified is True

    async def test_edit_notes_only_keeps_modified_flag(self, service, create_notice):
        notice = await create_notice(date(2027, 1, 10))

        record = await service.edit(notice.id, notes="just a note")

        assert record.notice.is_modified is False
        assert record.notice.notes == "just a note"

    async def test_edit_unknown_notice(self, service):
        with pytest.raises(NoticeNotFoundError):
            await service.edit(404, notes="x")
