"""Core domain entities."""

from labtrack.core.entities.inventory import (
    InventoryItem,
    ItemType,
    MovementType,
    StockMovement,
    StockStatus,
    classify_stock,
)
from labtrack.core.entities.machine import (
    WARNING_THRESHOLD,
    Machine,
    MachinePart,
    MachineStatus,
    PartStatus,
    classify_usage,
    usage_percentage,
)
from labtrack.core.entities.maintenance import (
    Maintenance,
    MaintenancePart,
    MaintenanceStatus,
    MaintenanceType,
)
from labtrack.core.entities.notification import (
    Notification,
    NotificationSeverity,
    NotificationType,
)
from labtrack.core.entities.report import (
    IncidentReport,
    ReportPriority,
    ReportStatus,
    ReportType,
)
from labtrack.core.entities.usage import UsageInfo, UsageLog
from labtrack.core.entities.user import Action, Actor, UserRole

__all__ = [
    # Inventory
    "InventoryItem",
    "ItemType",
    "MovementType",
    "StockMovement",
    "StockStatus",
    "classify_stock",
    # Machines
    "Machine",
    "MachinePart",
    "MachineStatus",
    "PartStatus",
    "WARNING_THRESHOLD",
    "classify_usage",
    "usage_percentage",
    # Maintenance
    "Maintenance",
    "MaintenancePart",
    "MaintenanceStatus",
    "MaintenanceType",
    # Notifications
    "Notification",
    "NotificationSeverity",
    "NotificationType",
    # Reports
    "IncidentReport",
    "ReportPriority",
    "ReportStatus",
    "ReportType",
    # Usage
    "UsageInfo",
    "UsageLog",
    # Users
    "Action",
    "Actor",
    "UserRole",
]
