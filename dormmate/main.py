"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from dormmate.api.middleware.error_handler import error_handler_middleware
from dormmate.api.middleware.latency_logging import latency_logging_with_stats_middleware
from dormmate.api.middleware.request_size import request_size_limit_middleware
from dormmate.api.routes import (
    auth,
    conversations,
    events,
    health,
    matches,
    messaging,
    navigation,
    profiles,
    search,
)
from dormmate.core.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control back to the application.
    """
    settings = get_settings()
    logger.info("Starting %s in %s mode", settings.app_name, settings.app_env)
    if not settings.supabase_signing_key_jwk:
        logger.info("No signing key configured, access tokens are verified with the auth server")

    yield

    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Missing required settings raise a validation error here, before the
    application is built.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Dormmate API",
        description="Find dormitory neighbors with shared interests, match, meet at events and chat",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add error handler middleware (catches all errors raised by routes)
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)

    # Add latency logging middleware (tracks request timing)
    app.add_middleware(BaseHTTPMiddleware, dispatch=latency_logging_with_stats_middleware)

    # Add request size limit middleware (rejects oversized requests early)
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_size_limit_middleware)

    # Mount health routes at root level (no prefix)
    app.include_router(health.router)

    # Create API v1 router for versioned endpoints
    api_v1_router = APIRouter(prefix="/api/v1")

    api_v1_router.include_router(auth.router)
    api_v1_router.include_router(navigation.router)

    # Profile, interest and search routes
    api_v1_router.include_router(profiles.router)
    api_v1_router.include_router(profiles.interests_router)
    api_v1_router.include_router(search.router)

    # Social routes
    api_v1_router.include_router(matches.router)
    api_v1_router.include_router(events.router)

    # Conversation routes and the realtime messaging session
    api_v1_router.include_router(conversations.router)
    api_v1_router.include_router(messaging.router)

    app.include_router(api_v1_router)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "dormmate.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
