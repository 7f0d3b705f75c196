"""
User, profile and country repositories.

Provides the lookups used by authentication (by email, username, refresh
token), the admin user search, and profile maintenance.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.countries import Country
from ..entities.users import Profile, User
from .base import AsyncBaseRepository

UserWithProfile = Tuple[User, Optional[Profile]]


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def get_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.refresh_token == refresh_token))
        return result.scalars().first()

    async def exists(self, *, email: Optional[str] = None, username: Optional[str] = None) -> bool:
        """Check whether a user with the given email or username exists."""
        stmt = select(func.count()).select_from(User)
        if email is not None:
            stmt = stmt.where(User.email == email)
        if username is not None:
            stmt = stmt.where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def get_with_profile(self, user_id: int) -> Optional[UserWithProfile]:
        stmt = (
            select(User, Profile)
            .join(Profile, col(Profile.user_id) == col(User.id), isouter=True)
            .where(User.id == user_id)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        return (row[0], row[1]) if row else None

    async def search(self, s: str, *, role_id: int) -> List[UserWithProfile]:
        """Search users of one role by name or username.

        A two-word query matches first and last name exactly (case-insensitive);
        anything else is a substring match on username, first name or last name.
        """
        stmt = select(User, Profile).join(Profile, col(Profile.user_id) == col(User.id), isouter=True)
        words = s.split(" ")
        if len(words) == 2:
            stmt = stmt.where(
                func.lower(Profile.first_name) == words[0].lower(),
                func.lower(Profile.last_name) == words[1].lower(),
            )
        else:
            pattern = f"%{s.lower()}%"
            stmt = stmt.where(
                or_(
                    col(User.username).like(f"%{s}%"),
                    func.lower(Profile.first_name).like(pattern),
                    func.lower(Profile.last_name).like(pattern),
                )
            )
        stmt = stmt.where(User.role_id == role_id).order_by(User.id)
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def set_refresh_token(self, user: User, refresh_token: str, expires: datetime) -> User:
        user.refresh_token = refresh_token
        user.refresh_expires = expires
        return await self.update(user)

    async def delete_by_email(self, email: str) -> int:
        """Delete every user with this email together with their profiles.

        Returns:
            Number of users deleted
        """
        result = await self.session.execute(select(User.id).where(User.email == email))
        user_ids = list(result.scalars().all())
        if user_ids:
            await self.session.execute(sa_delete(Profile).where(col(Profile.user_id).in_(user_ids)))
            await self.session.execute(sa_delete(User).where(col(User.id).in_(user_ids)))
        await self.session.commit()
        return len(user_ids)


class ProfileRepository(AsyncBaseRepository[Profile]):
    """Repository for user profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Profile)

    async def get_by_user_id(self, user_id: int) -> Optional[Profile]:
        result = await self.session.execute(select(Profile).where(Profile.user_id == user_id))
        return result.scalars().first()

    async def set_picture(self, user_id: int, picture: str) -> Profile:
        """Store the picture URL on the user's profile, creating the profile if needed."""
        profile = await self.get_by_user_id(user_id)
        if profile is None:
            return await self.create(Profile(user_id=user_id, picture=picture))
        profile.picture = picture
        return await self.update(profile)


class CountryRepository(AsyncBaseRepository[Country]):
    """Repository for country reference data."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Country)

    async def get_by_code(self, code: str) -> Optional[Country]:
        result = await self.session.execute(select(Country).where(Country.code == code))
        return result.scalars().first()
