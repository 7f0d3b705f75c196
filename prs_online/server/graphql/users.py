"""
User queries and mutations.

Account failures that the user can fix (taken email, wrong password, expired
token...) are returned as ``UserResponse.errors``. Refresh cookies are written
on the GraphQL HTTP response.
"""

from typing import Annotated, List, Optional

import strawberry
from strawberry.types import Info

from prs_online.core.models import UserRole
from prs_online.server.schemas import AuthResult, RegisterInput
from prs_online.server.services.auth import clear_refresh_cookie, set_refresh_cookie

from .permissions import IsAdmin
from .types import User, UserResponse


@strawberry.input
class UsernamePasswordInput:
    username: str
    email: str
    password: str


def _respond(info: Info, result: AuthResult) -> UserResponse:
    if result.refresh is not None:
        set_refresh_cookie(info.context.response, result.refresh, info.context.settings)
    return UserResponse.from_result(result)


@strawberry.type
class UserQuery:
    @strawberry.field(description="The logged in user, or null")
    async def me(self, info: Info) -> Optional[User]:
        claims = info.context.current_user
        if claims is None:
            return None
        details = await info.context.auth.get_user(claims.user_id)
        return User.from_details(details) if details else None

    @strawberry.field(description="Search regular users by name or username")
    async def search_user(self, info: Info, s: str) -> List[User]:
        return [User.from_details(d) for d in await info.context.auth.search_users(s)]

    @strawberry.field
    async def user_by_id(self, info: Info, user_id: Annotated[int, strawberry.argument(name="id")]) -> Optional[User]:
        details = await info.context.auth.get_user(user_id)
        return User.from_details(details) if details else None

    @strawberry.field
    async def user_by_username(self, info: Info, username: str) -> Optional[User]:
        details = await info.context.auth.get_user_by_username(username)
        return User.from_details(details) if details else None

    @strawberry.field(permission_classes=[IsAdmin])
    async def user_list(self, info: Info) -> List[User]:
        return [User.from_entity(u) for u in await info.context.auth.list_users()]

    @strawberry.field(description="Exchange the refresh token cookie for a new access token")
    async def refresh_token(self, info: Info) -> UserResponse:
        result = await info.context.auth.refresh(info.context.refresh_cookie)
        return UserResponse(errors=UserResponse.from_result(result).errors, token=result.token)


@strawberry.type
class UserMutation:
    @strawberry.mutation
    async def register(self, info: Info, options: UsernamePasswordInput) -> UserResponse:
        result = await info.context.auth.register(
            RegisterInput(username=options.username, email=options.email, password=options.password)
        )
        return _respond(info, result)

    @strawberry.mutation
    async def login(
        self,
        info: Info,
        username_or_email: str,
        password: str,
        role_id: Annotated[Optional[int], strawberry.argument(name="role_id")] = UserRole.user.value,
        remember_me: Annotated[Optional[bool], strawberry.argument(name="remember_me")] = False,
    ) -> UserResponse:
        result = await info.context.auth.login(
            username_or_email,
            password,
            role_id=role_id if role_id is not None else UserRole.user.value,
            remember_me=bool(remember_me),
        )
        return _respond(info, result)

    @strawberry.mutation
    async def forgot_password(self, info: Info, email: str) -> bool:
        return await info.context.auth.forgot_password(email)

    @strawberry.mutation
    async def change_password(self, info: Info, token: str, new_password: str) -> UserResponse:
        result = await info.context.auth.change_password(token, new_password)
        return _respond(info, result)

    @strawberry.mutation
    async def logout(self, info: Info) -> bool:
        clear_refresh_cookie(info.context.response, info.context.settings)
        return await info.context.auth.logout(info.context.current_user)

    @strawberry.mutation(permission_classes=[IsAdmin])
    async def delete(self, info: Info, email: str) -> bool:
        return await info.context.auth.delete_users(email)

    @strawberry.mutation(permission_classes=[IsAdmin])
    async def update_user(
        self,
        info: Info,
        user_id: Annotated[int, strawberry.argument(name="id")],
        email: Optional[str] = None,
        username: Optional[str] = None,
        role_id: Annotated[Optional[int], strawberry.argument(name="role_id")] = None,
    ) -> UserResponse:
        result = await info.context.auth.update_user(user_id, email=email, username=username, role_id=role_id)
        return UserResponse.from_result(result)
