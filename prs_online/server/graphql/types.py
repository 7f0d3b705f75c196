"""
GraphQL object types.

Each type is built from the SQLModel entities (or service results) through a
``from_*`` constructor; resolvers never hand entities to strawberry directly.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

import strawberry

from prs_online.core.database import entities
from prs_online.core.database.repositories import NoticeRecord
from prs_online.core.models import NoticeStage as NoticeStageEnum
from prs_online.server import schemas
from prs_online.server.services import notices as notice_services


@strawberry.enum(name="NoticeStage", description="Review stage of a notice")
class NoticeStage(Enum):
    GenerateNotices = NoticeStageEnum.GENERATE_NOTICES.value
    ApproveNotices = NoticeStageEnum.APPROVE_NOTICES.value

    @classmethod
    def from_domain(cls, stage: NoticeStageEnum) -> "NoticeStage":
        return cls(stage.value)

    def to_domain(self) -> NoticeStageEnum:
        return NoticeStageEnum(self.value)


@strawberry.type
class FieldError:
    field: str
    message: str


@strawberry.type
class Country:
    id: int
    code: str
    name: str

    @classmethod
    def from_entity(cls, country: entities.Country) -> "Country":
        return cls(id=country.id, code=country.code, name=country.name)


@strawberry.type
class Profile:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    picture: Optional[str] = None
    country: Optional[str] = strawberry.field(default=None, description="ISO country code")
    bio: Optional[str] = None

    @classmethod
    def from_entity(cls, profile: entities.Profile) -> "Profile":
        return cls(
            first_name=profile.first_name,
            last_name=profile.last_name,
            picture=profile.picture,
            country=profile.country,
            bio=profile.bio,
        )


@strawberry.type
class User:
    id: int
    username: str
    email: str
    role_id: int = strawberry.field(name="role_id")
    created_at: datetime
    updated_at: datetime
    profile: Optional[Profile] = None
    country: Optional[Country] = strawberry.field(
        default=None, description="Country of the profile, only resolved by userByUsername"
    )

    @strawberry.field(description="Same profile as `profile`, under the name the admin front end selects")
    def info(self) -> Optional[Profile]:
        return self.profile

    @classmethod
    def from_entity(
        cls,
        user: entities.User,
        profile: Optional[entities.Profile] = None,
        country: Optional[entities.Country] = None,
    ) -> "User":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role_id=user.role_id,
            created_at=user.created_at,
            updated_at=user.updated_at,
            profile=Profile.from_entity(profile) if profile is not None else None,
            country=Country.from_entity(country) if country is not None else None,
        )

    @classmethod
    def from_details(cls, details: schemas.UserDetails) -> "User":
        return cls.from_entity(details.user, details.profile, details.country)


@strawberry.type
class UserResponse:
    errors: Optional[List[FieldError]] = None
    user: Optional[User] = None
    token: Optional[str] = None

    @classmethod
    def from_result(cls, result: schemas.AuthResult) -> "UserResponse":
        return cls(
            errors=[FieldError(field=e.field, message=e.message) for e in result.errors] if result.errors else None,
            user=User.from_entity(result.user, result.profile) if result.user is not None else None,
            token=result.token,
        )


@strawberry.type
class Firm:
    id: int
    name: str
    firm_number: Optional[str] = None


@strawberry.type
class PracticeReview:
    id: int
    pr_number: str
    start_date: date
    contact_name: Optional[str]
    contact_email: Optional[str]
    review_type: str
    has_increased_risk: bool
    has_valid_contact_email: bool
    firm: Firm


@strawberry.type
class UpcomingReviewNotice:
    id: int
    stage: str
    notes: Optional[str]
    notice_html: Optional[str]
    is_generated: bool
    is_modified: bool
    is_reviewed_at_generate_stage: bool
    is_reviewed_at_approval_stage: bool
    generated_at: Optional[datetime]
    released_at: Optional[datetime]
    approved_at: Optional[datetime]
    practice_review: PracticeReview

    @classmethod
    def from_record(cls, record: NoticeRecord) -> "UpcomingReviewNotice":
        notice, pr, firm = record.notice, record.practice_review, record.firm
        return cls(
            id=notice.id,
            stage=notice.stage,
            notes=notice.notes,
            notice_html=notice.notice_html,
            is_generated=notice.is_generated,
            is_modified=notice.is_modified,
            is_reviewed_at_generate_stage=notice.is_reviewed_at_generate_stage,
            is_reviewed_at_approval_stage=notice.is_reviewed_at_approval_stage,
            generated_at=notice.generated_at,
            released_at=notice.released_at,
            approved_at=notice.approved_at,
            practice_review=PracticeReview(
                id=pr.id,
                pr_number=pr.pr_number,
                start_date=pr.start_date,
                contact_name=pr.contact_name,
                contact_email=pr.contact_email,
                review_type=pr.review_type,
                has_increased_risk=pr.has_increased_risk,
                has_valid_contact_email=pr.has_valid_contact_email,
                firm=Firm(id=firm.id, name=firm.name, firm_number=firm.firm_number),
            ),
        )

    @classmethod
    def from_records(cls, records: List[NoticeRecord]) -> List["UpcomingReviewNotice"]:
        return [cls.from_record(r) for r in records]


@strawberry.type
class MonthlyNoticeBatch:
    month: str
    from_date: date
    to_date: date
    regenerating: bool
    can_generate: bool
    can_release: bool
    can_approve: bool
    notices: List[UpcomingReviewNotice]

    @classmethod
    def from_batch(cls, batch: notice_services.MonthlyNoticeBatch) -> "MonthlyNoticeBatch":
        return cls(
            month=batch.month,
            from_date=batch.from_date,
            to_date=batch.to_date,
            regenerating=batch.regenerating,
            can_generate=batch.can_generate,
            can_release=batch.can_release,
            can_approve=batch.can_approve,
            notices=UpcomingReviewNotice.from_records(batch.notices),
        )


@strawberry.type
class NoticeBatches:
    stage: NoticeStage
    batches: List[MonthlyNoticeBatch]
    invalid_contact_email_notices: List[UpcomingReviewNotice]

    @classmethod
    def from_batches(cls, result: notice_services.NoticeBatches) -> "NoticeBatches":
        return cls(
            stage=NoticeStage.from_domain(result.stage),
            batches=[MonthlyNoticeBatch.from_batch(b) for b in result.batches],
            invalid_contact_email_notices=UpcomingReviewNotice.from_records(result.invalid_contact_email_notices),
        )
