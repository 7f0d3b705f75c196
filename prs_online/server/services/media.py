"""
Profile picture upload.

The uploaded file is stored under a unique object name and its public URL is
written to the profile of the user owning the given email.
"""

from __future__ import annotations

import time
import uuid
from typing import BinaryIO, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from prs_online.core.database.repositories import ProfileRepository, UserRepository
from prs_online.core.errors import UserNotFoundError
from prs_online.core.logging_config import get_logger

from .storage import ObjectStorage

logger = get_logger(__name__)


def profile_object_name() -> str:
    """Unique object name of a profile picture: ``<uuid4><epoch-ms>-profile``."""
    return f"{uuid.uuid4()}{int(time.time() * 1000)}-profile"


class MediaService:
    """Store uploads and attach them to user profiles."""

    def __init__(self, session: AsyncSession, storage: ObjectStorage) -> None:
        self.users = UserRepository(session)
        self.profiles = ProfileRepository(session)
        self.storage = storage

    async def upload_profile_picture(
        self, stream: BinaryIO, email: str, content_type: Optional[str] = None
    ) -> str:
        """Stream a profile picture for the user with ``email`` to the object store.

        Returns:
            Public URL of the stored picture

        Raises:
            UserNotFoundError: No user has this email; nothing is stored
            StorageError: The object store rejected the upload
        """
        user = await self.users.get_by_email(email)
        if user is None:
            raise UserNotFoundError(email)

        url = await self.storage.upload(profile_object_name(), stream, content_type=content_type)
        await self.profiles.set_picture(user.id, url)
        logger.info(f"Updated profile picture of user {user.id}")
        return url
