"""In-memory storage implementations (ephemeral)."""

from labtrack.infrastructure.storage.memory.database import MemoryDatabase, MemoryUnitOfWork
from labtrack.infrastructure.storage.memory.stores import (
    MemoryIncidentReportStore,
    MemoryInventoryStore,
    MemoryMachineStore,
    MemoryMaintenanceStore,
    MemoryNotificationStore,
    MemoryUsageLogStore,
)

__all__ = [
    "MemoryDatabase",
    "MemoryUnitOfWork",
    "MemoryInventoryStore",
    "MemoryMachineStore",
    "MemoryMaintenanceStore",
    "MemoryNotificationStore",
    "MemoryIncidentReportStore",
    "MemoryUsageLogStore",
]
