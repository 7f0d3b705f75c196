"""
API Schemas.

This module contains Pydantic models shared by the GraphQL resolvers, the
REST endpoints and the services behind them. They define the interface
contract between the client and the server.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from prs_online.core.database.entities import Country, Profile, User


class FieldError(BaseModel):
    """
    A user-facing validation failure bound to one input field.

    Validation problems are returned as lists of these instead of raised.
    """

    field: str = Field(..., description="Name of the offending input field.", examples=["email"])
    message: str = Field(..., description="Human readable description.", examples=["Invalid email"])


class RegisterInput(BaseModel):
    """Credentials submitted on registration."""

    username: str = Field(..., description="Unique login name.", examples=["jdoe"])
    email: str = Field(..., description="Unique email address.", examples=["jdoe@example.com"])
    password: str = Field(..., description="Plain text password; stored as a bcrypt hash.")


class IssuedRefreshToken(BaseModel):
    """A refresh token that must be handed to the browser as a cookie."""

    token: str
    expires: datetime
    max_age_seconds: int


class AuthResult(BaseModel):
    """
    Outcome of an account operation.

    Either ``errors`` is set, or the operation succeeded and ``user`` and/or
    ``token`` describe the result. ``refresh`` is set when a new refresh
    cookie has to be written.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    errors: Optional[List[FieldError]] = None
    user: Optional[User] = None
    profile: Optional[Profile] = None
    token: Optional[str] = None
    refresh: Optional[IssuedRefreshToken] = None

    @classmethod
    def failure(cls, field: str, message: str) -> "AuthResult":
        return cls(errors=[FieldError(field=field, message=message)])


class UserDetails(BaseModel):
    """A user together with its profile and, when resolved, the profile's country."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    user: User
    profile: Optional[Profile] = None
    country: Optional[Country] = None


class MediaUploadResponse(BaseModel):
    """Response of the profile picture upload endpoint."""

    url: str = Field(..., description="Public URL of the stored object.")
