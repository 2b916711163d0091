"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from labtrack.application.dto.requests import (
    AdjustStockRequest,
    CreateIncidentReportRequest,
    CreateInventoryItemRequest,
    CreateMachineRequest,
    CreateMaintenanceRequest,
    HistoryFilter,
    InstallPartRequest,
    MaintenancePartRequest,
    MaintenanceResetRequest,
    RecordUsageRequest,
    ReplacePartRequest,
    UpdateIncidentReportRequest,
    UpdateInventoryItemRequest,
    UpdateMachineRequest,
    UpdateMaintenanceRequest,
    UpdatePartRequest,
)
from labtrack.application.dto.responses import (
    AdjustStockResponse,
    DatabaseHealthResponse,
    ErrorResponse,
    HealthResponse,
    IncidentReportResponse,
    InventoryItemHistoryResponse,
    InventoryItemResponse,
    InventoryListResponse,
    MachineDetailResponse,
    MachineHistoryResponse,
    MachinePartResponse,
    MachineResponse,
    MaintenanceAnalyticsResponse,
    MaintenancePartResponse,
    MaintenanceResetResponse,
    MaintenanceResponse,
    NotificationResponse,
    RecordUsageResponse,
    ReplacePartResponse,
    StockMovementResponse,
    UsageDashboardResponse,
    UsageInfoResponse,
    UsageLogResponse,
)

__all__ = [
    # Requests
    "AdjustStockRequest",
    "CreateIncidentReportRequest",
    "CreateInventoryItemRequest",
    "CreateMachineRequest",
    "CreateMaintenanceRequest",
    "HistoryFilter",
    "InstallPartRequest",
    "MaintenancePartRequest",
    "MaintenanceResetRequest",
    "RecordUsageRequest",
    "ReplacePartRequest",
    "UpdateIncidentReportRequest",
    "UpdateInventoryItemRequest",
    "UpdateMachineRequest",
    "UpdateMaintenanceRequest",
    "UpdatePartRequest",
    # Responses
    "AdjustStockResponse",
    "DatabaseHealthResponse",
    "ErrorResponse",
    "HealthResponse",
    "IncidentReportResponse",
    "InventoryItemHistoryResponse",
    "InventoryItemResponse",
    "InventoryListResponse",
    "MachineDetailResponse",
    "MachineHistoryResponse",
    "MachinePartResponse",
    "MachineResponse",
    "MaintenanceAnalyticsResponse",
    "MaintenancePartResponse",
    "MaintenanceResetResponse",
    "MaintenanceResponse",
    "NotificationResponse",
    "RecordUsageResponse",
    "ReplacePartResponse",
    "StockMovementResponse",
    "UsageDashboardResponse",
    "UsageInfoResponse",
    "UsageLogResponse",
]
