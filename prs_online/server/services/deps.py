"""
Service Dependencies.

Provides the process-wide clients (Redis, object storage, SMTP sender) and
the request-scoped services built on top of them for API endpoints.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from prs_online.core.database import get_session
from prs_online.server.core.config import Settings, settings

from .email import EmailSender
from .media import MediaService
from .storage import ObjectStorage, build_storage


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_redis() -> Redis:
    """Shared Redis client; connections are opened lazily by the pool."""
    return Redis.from_url(settings.redis_url, decode_responses=True)


@lru_cache(maxsize=1)
def get_storage() -> ObjectStorage:
    return build_storage(settings.storage)


@lru_cache(maxsize=1)
def get_email_sender() -> EmailSender:
    return EmailSender(settings.smtp)


SessionDep = Annotated[AsyncSession, Depends(get_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
RedisDep = Annotated[Redis, Depends(get_redis)]
StorageDep = Annotated[ObjectStorage, Depends(get_storage)]
EmailSenderDep = Annotated[EmailSender, Depends(get_email_sender)]


def get_media_service(session: SessionDep, storage: StorageDep) -> MediaService:
    return MediaService(session, storage)


MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]
