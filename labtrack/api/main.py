"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from labtrack.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from labtrack.api.middleware.error_handler import setup_exception_handlers
from labtrack.api.routes import (
    analytics_router,
    health_router,
    inventory_router,
    machines_router,
    maintenance_router,
    notifications_router,
    reports_router,
    usage_router,
)
from labtrack.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Initializes resources on startup and cleans up on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
        storage_backend=settings.storage.backend,
    )

    # Initialize database
    if settings.storage.backend == "sqlite":
        try:
            from labtrack.infrastructure.storage.sqlite import get_pool
            from labtrack.infrastructure.storage.sqlite.migrations import run_migrations

            await run_migrations()
            logger.info("database_initialized")

            await get_pool()
            logger.info("connection_pool_ready")

        except Exception as e:
            logger.error("database_init_failed", error=str(e))
            raise

    # Start usage dashboard polling
    monitor = None
    if settings.monitor.enabled:
        from labtrack.application.usage_monitor import get_usage_monitor

        monitor = get_usage_monitor()
        await monitor.start()

    logger.info("application_started")

    yield

    # Shutdown
    logger.info("application_stopping")

    if monitor is not None:
        await monitor.stop()

    if settings.storage.backend == "sqlite":
        try:
            from labtrack.infrastructure.storage.sqlite import close_pool

            await close_pool()
            logger.info("connection_pool_closed")

        except Exception as e:
            logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="LabTrack Equipment Management API",
        description="Machines, wear-part usage tracking, maintenance and inventory",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(inventory_router)
    app.include_router(machines_router)
    app.include_router(usage_router)
    app.include_router(maintenance_router)
    app.include_router(notifications_router)
    app.include_router(reports_router)
    app.include_router(analytics_router)

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {
            "status": "healthy",
            "version": settings.app_version,
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "labtrack.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
