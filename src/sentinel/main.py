"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sentinel.api.router import api_router
from sentinel.config import settings
from sentinel.core.auth import OAuthEngine, RequestIdMiddleware, build_oauth_engine
from sentinel.core.database import async_engine
from sentinel.core.errors import register_exception_handlers
from sentinel.core.logging import RequestLoggingMiddleware, configure_logging


configure_logging()

logger = structlog.get_logger()

DEV_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    if app.state.oauth_engine is None:
        # Token and admin routes answer 503 until an engine URL is set
        logger.warning("oauth_engine_not_configured")

    logger.info(
        "application_startup",
        environment=settings.environment,
        email_provider=settings.email_provider,
    )
    yield

    await async_engine.dispose()
    logger.info("application_shutdown")


def _add_middleware(app: FastAPI) -> None:
    origins = settings.cors_origins or (DEV_CORS_ORIGINS if settings.is_development else [])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    # Last added runs first: the request ID must be bound before access logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)


def create_app(oauth_engine: OAuthEngine | None = None) -> FastAPI:
    """Create the Sentinel application.

    Args:
        oauth_engine: Engine collaborator to use instead of the one built
            from ``OAUTH_ENGINE_URL``

    Returns:
        Configured FastAPI application instance.
    """
    docs_enabled = not settings.is_production
    app = FastAPI(
        title=settings.app_name,
        description="Credential and authorization core of a multi-tenant identity provider",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.oauth_engine = oauth_engine or build_oauth_engine()

    _add_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router)

    return app
