"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.config import settings
from app.core.redis_client import check_redis_connection
from app.database import check_database_connection

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Detailed health check response model."""

    storage_backend: str
    database: str
    redis: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        Basic health status
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
)
async def detailed_health_check() -> DetailedHealthResponse:
    """
    Detailed health check with database and Redis status.

    Dependencies the current configuration does not use are reported as
    ``disabled`` and do not degrade the overall status.
    """
    if settings.uses_memory_store:
        database = "disabled"
    else:
        database = "healthy" if await check_database_connection() else "unhealthy"

    if settings.cache_enabled:
        redis = "healthy" if await check_redis_connection() else "unhealthy"
    else:
        redis = "disabled"

    return DetailedHealthResponse(
        status="degraded" if "unhealthy" in (database, redis) else "healthy",
        version=settings.app_version,
        environment=settings.environment,
        storage_backend=settings.storage_backend,
        database=database,
        redis=redis,
    )


@router.get(
    "/ping",
    status_code=status.HTTP_200_OK,
    summary="Simple ping",
)
async def ping() -> dict[str, str]:
    """
    Simple ping endpoint.

    Returns:
        Pong response
    """
    return {"message": "pong"}
