"""
Storage backends.

``get_stores()`` returns the process-wide StoreBundle for the backend named
in ``settings.storage.backend``. Every store in a bundle shares the bundle's
unit of work, so a transaction spans all of them.
"""

from dataclasses import dataclass

from labtrack.config import get_logger, get_settings
from labtrack.core.exceptions import ConfigurationError
from labtrack.core.interfaces import (
    IIncidentReportStore,
    IInventoryStore,
    IMachineStore,
    IMaintenanceStore,
    INotificationStore,
    IUnitOfWork,
    IUsageLogStore,
)

logger = get_logger(__name__)


@dataclass
class StoreBundle:
    """All stores of one backend plus their shared unit of work."""

    inventory: IInventoryStore
    machines: IMachineStore
    usage_logs: IUsageLogStore
    maintenance: IMaintenanceStore
    notifications: INotificationStore
    reports: IIncidentReportStore
    uow: IUnitOfWork


def create_memory_stores(timeout: float | None = None) -> StoreBundle:
    """Fresh in-memory bundle; nothing survives the process."""
    from labtrack.infrastructure.storage.memory import (
        MemoryDatabase,
        MemoryIncidentReportStore,
        MemoryInventoryStore,
        MemoryMachineStore,
        MemoryMaintenanceStore,
        MemoryNotificationStore,
        MemoryUnitOfWork,
        MemoryUsageLogStore,
    )

    db = MemoryDatabase()
    return StoreBundle(
        inventory=MemoryInventoryStore(db),
        machines=MemoryMachineStore(db),
        usage_logs=MemoryUsageLogStore(db),
        maintenance=MemoryMaintenanceStore(db),
        notifications=MemoryNotificationStore(db),
        reports=MemoryIncidentReportStore(db),
        uow=MemoryUnitOfWork(db, timeout=timeout),
    )


def create_sqlite_stores(timeout: float | None = None) -> StoreBundle:
    """Bundle over the global SQLite connection pool."""
    from labtrack.infrastructure.storage.sqlite import (
        SQLiteIncidentReportStore,
        SQLiteInventoryStore,
        SQLiteMachineStore,
        SQLiteMaintenanceStore,
        SQLiteNotificationStore,
        SQLiteUnitOfWork,
        SQLiteUsageLogStore,
    )

    return StoreBundle(
        inventory=SQLiteInventoryStore(),
        machines=SQLiteMachineStore(),
        usage_logs=SQLiteUsageLogStore(),
        maintenance=SQLiteMaintenanceStore(),
        notifications=SQLiteNotificationStore(),
        reports=SQLiteIncidentReportStore(),
        uow=SQLiteUnitOfWork(timeout=timeout),
    )


# Singleton bundle
_stores: StoreBundle | None = None


def get_stores() -> StoreBundle:
    """Get singleton store bundle for the configured backend."""
    global _stores
    if _stores is None:
        storage = get_settings().storage
        if storage.backend == "memory":
            _stores = create_memory_stores(timeout=storage.operation_timeout)
        elif storage.backend == "sqlite":
            _stores = create_sqlite_stores(timeout=storage.operation_timeout)
        else:
            raise ConfigurationError(f"Unknown storage backend: {storage.backend}")
        logger.info("stores_initialized", backend=storage.backend)
    return _stores


def reset_stores() -> None:
    """Drop the singleton bundle (for testing)."""
    global _stores
    _stores = None


__all__ = [
    "StoreBundle",
    "create_memory_stores",
    "create_sqlite_stores",
    "get_stores",
    "reset_stores",
]
