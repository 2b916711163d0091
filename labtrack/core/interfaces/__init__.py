"""Core interfaces (ports) for dependency injection."""

from labtrack.core.interfaces.inventory_store import IInventoryStore
from labtrack.core.interfaces.machine_store import IMachineStore
from labtrack.core.interfaces.maintenance_store import IMaintenanceStore
from labtrack.core.interfaces.notification_store import INotificationStore
from labtrack.core.interfaces.permissions import IPermissionChecker
from labtrack.core.interfaces.report_store import IIncidentReportStore
from labtrack.core.interfaces.transaction import IUnitOfWork
from labtrack.core.interfaces.usage_log_store import IUsageLogStore

__all__ = [
    # Storage interfaces
    "IInventoryStore",
    "IMachineStore",
    "IMaintenanceStore",
    "INotificationStore",
    "IIncidentReportStore",
    "IUsageLogStore",
    "IUnitOfWork",
    # Access control
    "IPermissionChecker",
]
