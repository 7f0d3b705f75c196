"""Domain models shared by the persistence layer and the API layer."""

from .enums import NoticeStage, NoticeState, UserRole

__all__ = ["NoticeStage", "NoticeState", "UserRole"]
