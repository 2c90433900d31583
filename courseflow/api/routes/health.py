# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints."""

import logging
import time
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from courseflow import __version__
from courseflow.core.config import get_settings
from courseflow.infrastructure.database.connection import check_database_connection
from courseflow.infrastructure.events import get_event_notifier
from courseflow.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""

    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    checked_at: datetime = Field(description="When health was checked")
    database: ComponentHealth
    pending_events: int = Field(description="Events waiting for delivery")


async def check_database() -> ComponentHealth:
    """Check store connectivity."""
    start = time.time()
    reachable = await check_database_connection()
    if not reachable:
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy")
    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health() -> HealthResponse:
    """Report service and database health."""
    settings = get_settings()
    database = await check_database()
    return HealthResponse(
        status="healthy" if database.status == "healthy" else "degraded",
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        checked_at=utc_now(),
        database=database,
        pending_events=get_event_notifier().pending,
    )
