"""
Password hashing and token helpers.

- Passwords are hashed with bcrypt.
- Access tokens are short-lived HS256 JWTs carrying the user's id, name,
  role and email.
- Refresh tokens are long opaque random strings stored on the user row and
  handed to the browser in a cookie.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from prs_online.core.logging_config import get_logger

logger = get_logger(__name__)

REFRESH_TOKEN_ALPHABET = string.ascii_letters + string.digits

# bcrypt only hashes the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a plain text password with a fresh bcrypt salt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        The bcrypt hash as text
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plain text password against a stored bcrypt hash."""
    if password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Password check against a malformed hash")
        return False


def generate_refresh_token(length: int = 255) -> str:
    """Generate an opaque alphanumeric refresh token."""
    return "".join(secrets.choice(REFRESH_TOKEN_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by an access token."""

    user_id: int
    username: str
    role: int
    email: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "userName": self.username,
            "role": self.role,
            "email": self.email,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        return cls(
            user_id=int(payload["userId"]),
            username=str(payload["userName"]),
            role=int(payload["role"]),
            email=str(payload["email"]),
        )


def create_access_token(
    claims: TokenClaims,
    secret: str,
    *,
    expires_in: int = 300,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> str:
    """Sign an access token for the given identity.

    Args:
        claims: Identity to embed in the token
        secret: Signing secret
        expires_in: Lifetime in seconds
        algorithm: JWT algorithm
        now: Issue time (defaults to the current UTC time)

    Returns:
        The encoded JWT
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = claims.to_payload()
    payload["iat"] = issued_at
    payload["exp"] = issued_at + timedelta(seconds=expires_in)
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, *, algorithm: str = "HS256") -> Optional[TokenClaims]:
    """Decode and verify an access token.

    Returns:
        The token's identity, or None when the token is invalid or expired
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
        return TokenClaims.from_payload(payload)
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired access token")
        return None
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
        logger.debug(f"Rejected invalid access token: {e}")
        return None
