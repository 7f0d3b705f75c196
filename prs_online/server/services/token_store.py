"""
Password reset tokens kept in Redis.

Each token maps ``<prefix><uuid>`` to the id of the user who asked for the
reset and expires on its own after the configured TTL.
"""

from __future__ import annotations

import uuid
from typing import Optional

from redis.asyncio import Redis

from prs_online.core.logging_config import get_logger

logger = get_logger(__name__)


class PasswordResetTokenStore:
    """Issue, resolve and consume password reset tokens."""

    def __init__(self, redis: Redis, *, prefix: str = "forgotPassword", ttl_seconds: int = 60 * 60 * 24 * 3) -> None:
        self.redis = redis
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

    def key(self, token: str) -> str:
        return f"{self.prefix}{token}"

    async def issue(self, user_id: int) -> str:
        """Store a new token for the user and return it."""
        token = str(uuid.uuid4())
        await self.redis.set(self.key(token), str(user_id), ex=self.ttl_seconds)
        logger.debug(f"Issued password reset token for user {user_id}")
        return token

    async def get_user_id(self, token: str) -> Optional[int]:
        """Resolve a token to its user id, or None when unknown or expired."""
        value = await self.redis.get(self.key(token))
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Malformed password reset entry for key {self.key(token)}")
            return None

    async def consume(self, token: str) -> None:
        await self.redis.delete(self.key(token))
