# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the courseflow API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from courseflow import __version__
from courseflow.api.dependencies import close_db, init_db
from courseflow.api.middleware.principal import PrincipalMiddleware
from courseflow.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from courseflow.api.routes import health
from courseflow.api.v1 import router as v1_router
from courseflow.core.config import get_settings
from courseflow.domains.errors import DomainError
from courseflow.infrastructure.database.connection import DatabaseError
from courseflow.infrastructure.events import (
    EventNotifier,
    get_event_bus,
    register_log_broadcaster,
    set_event_notifier,
)
from courseflow.utils.logging import setup_logging

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[str, int] = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "conflict": status.HTTP_409_CONFLICT,
    "invalid_state": status.HTTP_409_CONFLICT,
    "validation_error": 422,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a domain error using its code."""
    status_code = ERROR_STATUS_CODES.get(exc.code, status.HTTP_400_BAD_REQUEST)
    headers = {"WWW-Authenticate": "Bearer"} if exc.code == "unauthorized" else None
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code, "detail": exc.message},
        headers=headers,
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Render store failures without internal details."""
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"code": "service_unavailable", "detail": "Service temporarily unavailable"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup: logging, database pool, event notifier.
    Shutdown: flush pending events, close the database pool.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting courseflow API",
        extra={"environment": settings.environment, "debug": settings.debug},
    )

    await init_db()
    logger.info("Database connection initialized")

    bus = get_event_bus()
    if settings.events.log_broadcast:
        register_log_broadcaster(bus)
    notifier = EventNotifier(bus=bus, queue_size=settings.events.queue_size)
    set_event_notifier(notifier)
    await notifier.start()

    yield

    await notifier.stop()
    await close_db()
    logger.info("Shutting down courseflow API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="courseflow API",
        description="Role-scoped academic workflow engine",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.state.limiter = limiter

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)

    # Last added runs first: CORS, then principal resolution, then rate limiting.
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(PrincipalMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
