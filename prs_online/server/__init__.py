"""
PRS Online Server Package.

This package contains the web server of PRS Online: the GraphQL API for
accounts and upcoming review notices, the REST media upload and the
operational endpoints.

Subpackages:
    api: FastAPI route definitions (health, media upload).
    core: Configuration and constants.
    graphql: Strawberry schema, context and resolvers.
    services: Business logic behind the resolvers and endpoints.
    middleware: Request logging and timing.
    exception_handlers: Global error handling.
"""
