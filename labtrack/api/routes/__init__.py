"""API route modules."""

from labtrack.api.routes.analytics import router as analytics_router
from labtrack.api.routes.health import router as health_router
from labtrack.api.routes.inventory import router as inventory_router
from labtrack.api.routes.machines import router as machines_router
from labtrack.api.routes.maintenance import router as maintenance_router
from labtrack.api.routes.notifications import router as notifications_router
from labtrack.api.routes.reports import router as reports_router
from labtrack.api.routes.usage import router as usage_router

__all__ = [
    "health_router",
    "inventory_router",
    "machines_router",
    "usage_router",
    "maintenance_router",
    "notifications_router",
    "reports_router",
    "analytics_router",
]
