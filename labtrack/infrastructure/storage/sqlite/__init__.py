"""SQLite storage implementations."""

from labtrack.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from labtrack.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from labtrack.infrastructure.storage.sqlite.machine_store import SQLiteMachineStore
from labtrack.infrastructure.storage.sqlite.maintenance_store import SQLiteMaintenanceStore
from labtrack.infrastructure.storage.sqlite.notification_store import SQLiteNotificationStore
from labtrack.infrastructure.storage.sqlite.report_store import SQLiteIncidentReportStore
from labtrack.infrastructure.storage.sqlite.unit_of_work import SQLiteUnitOfWork
from labtrack.infrastructure.storage.sqlite.usage_log_store import SQLiteUsageLogStore

__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteMachineStore",
    "SQLiteMaintenanceStore",
    "SQLiteNotificationStore",
    "SQLiteIncidentReportStore",
    "SQLiteUsageLogStore",
    "SQLiteUnitOfWork",
]
