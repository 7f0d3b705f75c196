"""
GraphQL request context.

One context is built per request from FastAPI dependencies. It exposes the
caller's identity (decoded from the ``Authorization: Bearer`` header) and the
services the resolvers need.
"""

from functools import cached_property
from typing import Optional

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from prs_online.core.database import get_session
from prs_online.core.security import TokenClaims, decode_access_token
from prs_online.server.core.config import Settings
from prs_online.server.services.auth import AuthService
from prs_online.server.services.deps import get_email_sender, get_redis, get_settings
from prs_online.server.services.email import EmailSender
from prs_online.server.services.notices import NoticeWorkflowService
from prs_online.server.services.token_store import PasswordResetTokenStore

BEARER_PREFIX = "bearer "


class GraphQLContext(BaseContext):
    """Per-request context shared by all resolvers."""

    def __init__(self, session: AsyncSession, redis: Redis, mailer: EmailSender, settings: Settings) -> None:
        super().__init__()
        self.session = session
        self.redis = redis
        self.mailer = mailer
        self.settings = settings

    @cached_property
    def current_user(self) -> Optional[TokenClaims]:
        """Identity of the caller, or None when no valid access token was sent."""
        if self.request is None:
            return None
        header = self.request.headers.get("Authorization", "")
        if not header.lower().startswith(BEARER_PREFIX):
            return None
        token = header[len(BEARER_PREFIX):].strip()
        if not token:
            return None
        return decode_access_token(token, self.settings.auth.jwt_secret, algorithm=self.settings.auth.jwt_algorithm)

    @property
    def refresh_cookie(self) -> Optional[str]:
        if self.request is None:
            return None
        return self.request.cookies.get(self.settings.cookie.name)

    @cached_property
    def auth(self) -> AuthService:
        token_store = PasswordResetTokenStore(
            self.redis,
            prefix=self.settings.auth.password_reset_prefix,
            ttl_seconds=self.settings.auth.password_reset_ttl_seconds,
        )
        return AuthService(self.session, settings=self.settings, token_store=token_store, mailer=self.mailer)

    @cached_property
    def notices(self) -> NoticeWorkflowService:
        return NoticeWorkflowService(self.session)


async def get_context(
    session: AsyncSession = Depends(get_session),
    redis: Redis = Depends(get_redis),
    mailer: EmailSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings),
) -> GraphQLContext:
    return GraphQLContext(session=session, redis=redis, mailer=mailer, settings=settings)
