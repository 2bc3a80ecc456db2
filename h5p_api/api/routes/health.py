# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

Components are only checked when the corresponding backend is
configured; in-memory backends report "not_configured".
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from h5p_api import __version__
from h5p_api.api.dependencies import get_app_settings
from h5p_api.core.config import Settings
from h5p_api.infrastructure.cache import RedisError, get_redis
from h5p_api.infrastructure.database import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class ComponentsHealth(BaseModel):
    """All components health status."""
    database: ComponentHealth
    redis: ComponentHealth


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    checked_at: datetime = Field(description="When health was checked")
    components: ComponentsHealth


async def check_database(settings: Settings) -> ComponentHealth:
    """Check the content bank database connection."""
    if settings.h5p.repository_backend != "database":
        return ComponentHealth(status="not_configured")

    start = time.time()
    if not await check_database_connection():
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy", message="Database unreachable")

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


async def check_redis(settings: Settings) -> ComponentHealth:
    """Check the Redis staging backend connection."""
    if settings.h5p.staging_backend != "redis":
        return ComponentHealth(status="not_configured")

    start = time.time()
    try:
        reachable = await get_redis().ping()
    except RedisError as e:
        logger.error("Redis health check failed: %s", e)
        return ComponentHealth(status="unhealthy", message=str(e))

    if not reachable:
        return ComponentHealth(status="unhealthy", message="Redis unreachable")

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Check if the API is healthy with component details.

    Returns:
        HealthResponse with detailed status.
    """
    db_health = await check_database(settings)
    redis_health = await check_redis(settings)

    statuses = [db_health.status, redis_health.status]
    overall_status = "unhealthy" if "unhealthy" in statuses else "healthy"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        checked_at=datetime.now(timezone.utc),
        components=ComponentsHealth(database=db_health, redis=redis_health),
    )
