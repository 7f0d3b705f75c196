"""Permission classes guarding GraphQL fields."""

from typing import Any

from strawberry.permission import BasePermission
from strawberry.types import Info

from prs_online.core.models import UserRole


class IsAuthenticated(BasePermission):
    """Allow callers that sent a valid access token."""

    message = "Not authenticated"

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        return info.context.current_user is not None


class IsAdmin(BasePermission):
    """Allow authenticated administrators only."""

    message = "Admin access required"

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        user = info.context.current_user
        return user is not None and user.role == UserRole.admin
