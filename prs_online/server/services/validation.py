"""Input validation for account registration."""

from typing import List, Optional

from prs_online.core.security import MAX_PASSWORD_BYTES, password_too_long
from prs_online.server.schemas import FieldError, RegisterInput


def validate_register(options: RegisterInput) -> Optional[List[FieldError]]:
    """Validate registration input.

    Returns:
        A single-item error list for the first failing rule, or None when the input is valid
    """
    if "@" not in options.email:
        return [FieldError(field="email", message="Invalid email")]

    if len(options.username) <= 2:
        return [FieldError(field="username", message="Length must be greater than 2")]

    if "@" in options.username:
        return [FieldError(field="username", message="Cannot include an @")]

    if len(options.password) <= 2:
        return [FieldError(field="password", message="Length must be greater than 2")]

    if password_too_long(options.password):
        return [FieldError(field="password", message=f"Length must be at most {MAX_PASSWORD_BYTES} bytes")]

    return None
