"""Application use cases."""

from labtrack.application.use_cases.adjust_stock import AdjustStockResult, AdjustStockUseCase
from labtrack.application.use_cases.analytics import (
    GetMaintenanceAnalyticsUseCase,
    MaintenanceAnalytics,
)
from labtrack.application.use_cases.get_usage_info import GetUsageInfoUseCase
from labtrack.application.use_cases.history import (
    GetInventoryItemHistoryUseCase,
    GetMachineHistoryUseCase,
    ItemHistory,
    MachineHistory,
)
from labtrack.application.use_cases.install_part import InstallPartUseCase
from labtrack.application.use_cases.maintenance_reset import (
    MaintenanceResetResult,
    RegisterMaintenanceResetUseCase,
)
from labtrack.application.use_cases.manage_maintenance import (
    AddMaintenancePartUseCase,
    CreateMaintenanceUseCase,
    DeleteMaintenanceUseCase,
    MaintenancePartChange,
    RemoveMaintenancePartUseCase,
    UpdateMaintenanceUseCase,
)
from labtrack.application.use_cases.record_usage import RecordUsageResult, RecordUsageUseCase
from labtrack.application.use_cases.replace_part import ReplacePartResult, ReplacePartUseCase

__all__ = [
    # Usage accounting
    "RecordUsageUseCase",
    "RecordUsageResult",
    "GetUsageInfoUseCase",
    "RegisterMaintenanceResetUseCase",
    "MaintenanceResetResult",
    "ReplacePartUseCase",
    "ReplacePartResult",
    "InstallPartUseCase",
    # Inventory
    "AdjustStockUseCase",
    "AdjustStockResult",
    # Maintenance
    "CreateMaintenanceUseCase",
    "UpdateMaintenanceUseCase",
    "DeleteMaintenanceUseCase",
    "AddMaintenancePartUseCase",
    "RemoveMaintenancePartUseCase",
    "MaintenancePartChange",
    # History
    "GetMachineHistoryUseCase",
    "GetInventoryItemHistoryUseCase",
    "MachineHistory",
    "ItemHistory",
    # Analytics
    "GetMaintenanceAnalyticsUseCase",
    "MaintenanceAnalytics",
]
