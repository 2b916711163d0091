"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from labtrack.api.dependencies import get_app_settings, get_store_bundle
from labtrack.application.dto.responses import DatabaseHealthResponse, HealthResponse
from labtrack.config import Settings
from labtrack.infrastructure.storage import StoreBundle

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        storage_backend=settings.storage.backend,
    )


@router.get("/db", response_model=DatabaseHealthResponse)
async def db_health(
    settings: Settings = Depends(get_app_settings),
    stores: StoreBundle = Depends(get_store_bundle),
) -> DatabaseHealthResponse:
    """
    Storage health check.

    Runs a trivial query against the configured backend and reports latency.
    """
    backend = settings.storage.backend
    start = time.time()

    try:
        if backend == "sqlite":
            from labtrack.infrastructure.storage.sqlite import get_connection

            async with get_connection() as conn:
                await conn.execute("SELECT 1")
        else:
            await stores.notifications.list_notifications(limit=1)

    except Exception as e:
        return DatabaseHealthResponse(status="unhealthy", backend=backend, error=str(e))

    return DatabaseHealthResponse(
        status="healthy",
        backend=backend,
        latency_ms=(time.time() - start) * 1000,
    )
