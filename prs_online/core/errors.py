"""Error types for PRS Online.

Defines a small hierarchy of exceptions raised by services to signal missing
records and workflow rule violations. They are surfaced to GraphQL clients by
the execution layer as ordinary GraphQL errors.
"""

from __future__ import annotations


class PrsOnlineError(Exception):
    """Base error for all PRS Online exceptions."""


class NoticeNotFoundError(PrsOnlineError):
    """Raised when an upcoming review notice id does not exist."""

    def __init__(self, notice_id: int) -> None:
        self.notice_id = notice_id
        super().__init__(f"Upcoming review notice not found: {notice_id}")


class NoticeWorkflowError(PrsOnlineError):
    """Raised when a notice operation is not allowed in the notice's current state."""


class StorageError(PrsOnlineError):
    """Raised when an object store rejects an upload."""

    def __init__(self, object_name: str, message: str) -> None:
        self.object_name = object_name
        super().__init__(f"Failed to store '{object_name}': {message}")


class EmailDeliveryError(PrsOnlineError):
    """Raised when an email cannot be handed over to the SMTP server."""


class UserNotFoundError(PrsOnlineError):
    """Raised when no user matches the given email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"User not found: {email}")
