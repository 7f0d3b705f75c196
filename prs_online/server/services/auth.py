"""
Account service.

Implements registration, login, access token refresh, logout, password
reset and the admin user operations. Validation problems come back as
``FieldError`` lists inside an ``AuthResult``; only infrastructure failures
raise.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from prs_online.core.database import utc_now_naive
from prs_online.core.database.entities import User
from prs_online.core.database.repositories import CountryRepository, UserRepository
from prs_online.core.errors import EmailDeliveryError
from prs_online.core.logging_config import get_logger
from prs_online.core.models import UserRole
from prs_online.core.security import (
    MAX_PASSWORD_BYTES,
    TokenClaims,
    create_access_token,
    generate_refresh_token,
    hash_password,
    password_too_long,
    verify_password,
)
from prs_online.server.core.config import Settings
from prs_online.server.schemas import AuthResult, IssuedRefreshToken, RegisterInput, UserDetails

from .email import EmailSender
from .token_store import PasswordResetTokenStore
from .validation import validate_register

logger = get_logger(__name__)

INVALID_REFRESH_TOKEN = "Invalid Refresh Token"


def set_refresh_cookie(response: Response, refresh: IssuedRefreshToken, settings: Settings) -> None:
    """Write the refresh token cookie on an outgoing response."""
    response.set_cookie(
        key=settings.cookie.name,
        value=refresh.token,
        max_age=refresh.max_age_seconds,
        path=settings.cookie.path,
        domain=settings.cookie.domain,
        secure=settings.is_production,
        httponly=True,
        samesite=settings.cookie.same_site,
    )


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    """Expire the refresh token cookie in the browser."""
    response.delete_cookie(
        key=settings.cookie.name,
        path=settings.cookie.path,
        domain=settings.cookie.domain,
        secure=settings.is_production,
        httponly=True,
        samesite=settings.cookie.same_site,
    )


class AuthService:
    """Account operations over one database session."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        settings: Settings,
        token_store: PasswordResetTokenStore,
        mailer: EmailSender,
    ) -> None:
        self.users = UserRepository(session)
        self.countries = CountryRepository(session)
        self.settings = settings
        self.token_store = token_store
        self.mailer = mailer

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def access_token_for(self, user: User) -> str:
        claims = TokenClaims(user_id=user.id, username=user.username, role=user.role_id, email=user.email)
        return create_access_token(
            claims,
            self.settings.auth.jwt_secret,
            expires_in=self.settings.auth.access_token_ttl_seconds,
            algorithm=self.settings.auth.jwt_algorithm,
        )

    async def _start_session(self, user: User, remember_me: bool = False) -> AuthResult:
        auth = self.settings.auth
        days = auth.remember_me_duration_days if remember_me else auth.not_remember_me_duration_days
        expires = utc_now_naive() + timedelta(days=days)
        refresh_token = generate_refresh_token(auth.refresh_token_length)
        user = await self.users.set_refresh_token(user, refresh_token, expires)
        return AuthResult(
            user=user,
            token=self.access_token_for(user),
            refresh=IssuedRefreshToken(token=refresh_token, expires=expires, max_age_seconds=days * 24 * 60 * 60),
        )

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self.settings.auth.bcrypt_rounds)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_user(self, user_id: int) -> Optional[UserDetails]:
        found = await self.users.get_with_profile(user_id)
        if found is None:
            return None
        user, profile = found
        return UserDetails(user=user, profile=profile)

    async def get_user_by_username(self, username: str) -> Optional[UserDetails]:
        user = await self.users.get_by_username(username)
        if user is None:
            return None
        details = await self.get_user(user.id)
        if details is not None and details.profile is not None and details.profile.country:
            details.country = await self.countries.get_by_code(details.profile.country)
        return details

    async def search_users(self, s: str) -> List[UserDetails]:
        rows = await self.users.search(s, role_id=UserRole.user.value)
        return [UserDetails(user=user, profile=profile) for user, profile in rows]

    async def list_users(self) -> List[User]:
        return await self.users.list()

    async def refresh(self, refresh_token: Optional[str]) -> AuthResult:
        """Exchange a refresh token cookie for a new access token."""
        if not refresh_token:
            return AuthResult.failure("refreshToken", INVALID_REFRESH_TOKEN)
        user = await self.users.get_by_refresh_token(refresh_token)
        if user is None or user.refresh_expires is None or user.refresh_expires < utc_now_naive():
            return AuthResult.failure("refreshToken", INVALID_REFRESH_TOKEN)
        return AuthResult(user=user, token=self.access_token_for(user))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def register(self, options: RegisterInput) -> AuthResult:
        errors = validate_register(options)
        if errors:
            return AuthResult(errors=errors)

        if await self.users.exists(email=options.email):
            return AuthResult.failure("email", "The email already exists")
        if await self.users.exists(username=options.username):
            return AuthResult.failure("username", "The username already exists")

        user = await self.users.create(
            User(
                username=options.username,
                email=options.email,
                password=await self._hash(options.password),
                role_id=UserRole.user.value,
            )
        )
        logger.info(f"Registered user {user.id} ({user.username})")
        return await self._start_session(user)

    async def login(
        self, username_or_email: str, password: str, role_id: int = UserRole.user.value, remember_me: bool = False
    ) -> AuthResult:
        if "@" in username_or_email:
            user = await self.users.get_by_email(username_or_email)
        else:
            user = await self.users.get_by_username(username_or_email)

        if user is None:
            return AuthResult.failure("usernameOrEmail", "Username doesn't exist")
        if user.role_id != role_id:
            logger.warning(f"User {user.id} tried to sign in with role {role_id}")
            return AuthResult.failure("usernameOrEmail", "Access denied.")
        if not await asyncio.to_thread(verify_password, password, user.password):
            return AuthResult.failure("password", "Incorrect password")

        logger.info(f"User {user.id} logged in")
        return await self._start_session(user, remember_me)

    async def forgot_password(self, email: str) -> bool:
        """Email a password reset link to the user owning ``email``.

        Returns:
            False when no user has this email, True otherwise
        """
        user = await self.users.get_by_email(email)
        if user is None:
            return False

        token = await self.token_store.issue(user.id)
        url = f"{self.settings.frontend_url.rstrip('/')}/change-password/{token}"
        try:
            await self.mailer.send_forgot_password(email, url)
        except EmailDeliveryError as e:
            logger.error(f"Password reset email for user {user.id} was not delivered: {e}")
        return True

    async def change_password(self, token: str, new_password: str) -> AuthResult:
        if len(new_password) <= 3:
            return AuthResult.failure("newPassword", "Length must be greater than 3")
        if password_too_long(new_password):
            return AuthResult.failure("newPassword", f"Length must be at most {MAX_PASSWORD_BYTES} bytes")

        user_id = await self.token_store.get_user_id(token)
        if user_id is None:
            return AuthResult.failure("token", "token expired")

        user = await self.users.get_by_id(user_id)
        if user is None:
            return AuthResult.failure("token", "user no longer exists")

        user.password = await self._hash(new_password)
        user = await self.users.update(user)
        await self.token_store.consume(token)
        logger.info(f"User {user.id} changed their password")
        return await self._start_session(user)

    async def logout(self, claims: Optional[TokenClaims]) -> bool:
        if claims is None:
            return False
        user = await self.users.get_by_id(claims.user_id)
        if user is not None:
            user.refresh_token = None
            user.refresh_expires = utc_now_naive() - timedelta(seconds=1)
            await self.users.update(user)
        return True

    async def delete_users(self, email: str) -> bool:
        deleted = await self.users.delete_by_email(email)
        logger.info(f"Deleted {deleted} user(s) with email {email}")
        return True

    async def update_user(
        self,
        user_id: int,
        email: Optional[str] = None,
        username: Optional[str] = None,
        role_id: Optional[int] = None,
    ) -> AuthResult:
        """Toggle a user's role, or change their username and email."""
        user = await self.users.get_by_id(user_id)
        if user is None:
            return AuthResult.failure("id", "User not found")

        if role_id:
            user.role_id = UserRole.user.value if role_id == UserRole.admin.value else UserRole.admin.value
        else:
            if email is not None and email != user.email:
                if await self.users.exists(email=email):
                    return AuthResult.failure("email", "The email already exists")
                user.email = email
            if username is not None and username != user.username:
                if await self.users.exists(username=username):
                    return AuthResult.failure("username", "The username already exists")
                user.username = username

        user = await self.users.update(user)
        return AuthResult(user=user)
