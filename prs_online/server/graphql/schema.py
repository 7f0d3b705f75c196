"""
GraphQL schema and router.

Queries and mutations are split by domain (users, notices) and merged into
the root types here.
"""

import strawberry
from strawberry.fastapi import GraphQLRouter

from .context import get_context
from .notices import NoticeMutation, NoticeQuery
from .users import UserMutation, UserQuery


@strawberry.type
class Query(UserQuery, NoticeQuery):
    pass


@strawberry.type
class Mutation(UserMutation, NoticeMutation):
    pass


schema = strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router() -> GraphQLRouter:
    """Create the router serving the schema (and GraphiQL on GET)."""
    return GraphQLRouter(schema, context_getter=get_context)
