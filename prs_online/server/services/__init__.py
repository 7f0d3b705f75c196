"""Request-scoped services behind the GraphQL resolvers and REST endpoints."""
