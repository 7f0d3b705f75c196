"""
GraphQL API of PRS Online.

The schema is built with strawberry and mounted on the FastAPI app through
``strawberry.fastapi.GraphQLRouter``.
"""

from .schema import create_graphql_router, schema

__all__ = ["create_graphql_router", "schema"]
