"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, conversation_service.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI

from conversation_service.boundary.db import dispose_engine, init_models
from conversation_service.configs import get_settings
from conversation_service.observability.logger import configure_logging
from conversation_service.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)
from .routers import health_router, sessions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and creates tables on startup; releases pooled
    connections on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    # Startup
    await init_models()
    logger.info("Database schema ready", extra={"environment": settings.environment})

    yield

    # Shutdown
    await dispose_engine()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Conversation sessions and their ordered, idempotently ingested events",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add observability middleware; the last one added runs first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "conversation_service.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
