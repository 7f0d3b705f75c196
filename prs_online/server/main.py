"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and mounts the GraphQL router
and the REST routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from prs_online.core.database import init_db
from prs_online.core.logging_config import get_logger, setup_logging
from prs_online.core.monitoring import initialize_logfire

from .api.v1 import health, media
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .graphql import create_graphql_router
from .middleware import RequestLoggingMiddleware
from .services.deps import get_redis

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables on startup and closes the shared Redis client on
    shutdown.
    """
    # Startup
    try:
        logger.info("Starting up PRS Online Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down PRS Online Server...")
    if get_redis.cache_info().currsize:
        await get_redis().aclose()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    PRS Online Server API

    This API provides the backend of the PRS Online admin application.
    Accounts and upcoming review notices are served over GraphQL at /graphql;
    profile pictures are uploaded over REST.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(media.router, prefix=f"{constant.API_V1_STR}/media", tags=["media"])
app.include_router(create_graphql_router(), prefix=constant.GRAPHQL_PATH, tags=["graphql"])

if settings.storage.backend == "local":
    app.mount("/media", StaticFiles(directory=settings.storage.local_directory, check_dir=False), name="media")
