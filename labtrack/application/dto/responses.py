"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
Entity-backed responses are built with ``Model.model_validate(entity)``;
derived properties such as ``status`` are read like plain attributes.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from labtrack.core.entities.inventory import ItemType, MovementType, StockStatus
from labtrack.core.entities.machine import MachineStatus, PartStatus
from labtrack.core.entities.maintenance import MaintenanceStatus, MaintenanceType
from labtrack.core.entities.notification import NotificationSeverity, NotificationType
from labtrack.core.entities.report import ReportPriority, ReportStatus, ReportType

# --- Inventory ---


class InventoryItemResponse(BaseModel):
    """Inventory item response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    quantity: int
    min_quantity: int
    status: StockStatus
    location: str | None = None
    description: str | None = None
    unit_price: float | None = None
    supplier: str | None = None
    item_type: ItemType
    usage_unit: str | None = None
    max_lifespan: float | None = None
    version: int
    created_at: datetime
    updated_at: datetime


class StockMovementResponse(BaseModel):
    """Stock movement response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    inventory_item_id: int
    movement_type: MovementType
    quantity: int
    reference: str | None = None
    notes: str | None = None
    movement_date: date
    created_at: datetime


class InventoryListResponse(BaseModel):
    """Paginated inventory listing."""

    items: list[InventoryItemResponse]
    total: int


class AdjustStockResponse(BaseModel):
    """Response for a manual stock adjustment."""

    inventory_item: InventoryItemResponse
    movement: StockMovementResponse
    low_stock_alert: bool = Field(
        default=False,
        description="True when this adjustment raised a low-stock notification",
    )


# --- Machines ---


class MachineResponse(BaseModel):
    """Machine response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    model: str
    serial_number: str | None = None
    manufacturer: str | None = None
    status: MachineStatus
    location: str | None = None
    description: str | None = None
    purchase_date: date | None = None
    last_maintenance: date | None = None
    next_maintenance: date | None = None
    associated_item_id: int | None = None
    version: int
    created_at: datetime
    updated_at: datetime


class MachinePartResponse(BaseModel):
    """Installed wear part response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    machine_id: int
    inventory_item_id: int
    name: str
    installation_id: str
    installation_date: date
    usage_type: str
    current_usage: float
    max_usage: float
    usage_percentage: float
    status: PartStatus
    alerted_status: PartStatus
    version: int


class MachineDetailResponse(MachineResponse):
    """Machine with its installed parts."""

    parts: list[MachinePartResponse] = Field(default_factory=list)


# --- Usage ---


class UsageLogResponse(BaseModel):
    """Usage log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    machine_id: int
    machine_name: str
    inventory_item_id: int
    inventory_item_name: str
    part_id: int
    installation_id: str
    usage_date: date
    quantity_used: float
    unit: str
    responsible: str
    notes: str | None = None
    created_at: datetime


class NotificationResponse(BaseModel):
    """Notification response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: NotificationType
    title: str
    message: str
    severity: NotificationSeverity
    read: bool
    related_id: str | None = None
    created_at: datetime


class RecordUsageResponse(BaseModel):
    """Outcome of recording a usage event."""

    log: UsageLogResponse
    part: MachinePartResponse
    usage_percentage: float = Field(..., description="100 * current_usage / max_usage, uncapped")
    status: PartStatus
    previous_status: PartStatus
    alert: NotificationResponse | None = Field(
        default=None,
        description="Alert raised by this event, if it crossed into a new band",
    )


class UsageInfoResponse(BaseModel):
    """Computed usage record for one installed part."""

    model_config = ConfigDict(from_attributes=True)

    machine_id: int
    machine_name: str
    part_id: int
    part_name: str
    inventory_item_id: int
    inventory_item_name: str
    usage_unit: str
    accumulated_usage: float
    max_usage: float
    usage_percentage: float
    status: PartStatus
    requires_maintenance: bool
    alert: bool


class UsageDashboardResponse(BaseModel):
    """Latest snapshot taken by the usage monitor."""

    refreshed_at: datetime | None = None
    records: list[UsageInfoResponse]
    warning_count: int
    critical_count: int


# --- Maintenance ---


class MaintenancePartResponse(BaseModel):
    """Maintenance part response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    maintenance_id: int | None = None
    inventory_item_id: int
    inventory_item_name: str
    quantity_used: int
    unit_cost: float
    total_cost: float
    recorded_date: date


class MaintenanceResponse(BaseModel):
    """Maintenance response DTO with its parts and costs."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    machine_id: int
    machine_name: str
    maintenance_type: MaintenanceType
    description: str
    start_date: date | None = None
    end_date: date | None = None
    status: MaintenanceStatus
    technician: str
    labor_cost: float
    observations: str | None = None
    resolution: str | None = None
    parts: list[MaintenancePartResponse] = Field(default_factory=list)
    parts_cost: float
    total_cost: float
    version: int
    created_at: datetime
    updated_at: datetime


class MaintenanceResetResponse(BaseModel):
    """Outcome of a maintenance reset."""

    part: MachinePartResponse
    maintenance: MaintenanceResponse
    notification: NotificationResponse
    replaced: bool


class ReplacePartResponse(BaseModel):
    """Outcome of a part replacement."""

    part: MachinePartResponse
    inventory_item: InventoryItemResponse
    previous_installation_id: str


# --- Reports ---


class IncidentReportResponse(BaseModel):
    """Incident report response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    machine_id: int
    machine_name: str
    report_type: ReportType
    description: str
    reported_by: str
    report_date: date
    status: ReportStatus
    priority: ReportPriority
    assigned_to: str | None = None
    completed_date: date | None = None
    resolution: str | None = None
    created_at: datetime
    updated_at: datetime


# --- History ---


class MachineHistoryStats(BaseModel):
    total_parts: int
    total_cost: float
    total_maintenances: int
    total_usage_logs: int


class MachineHistoryResponse(BaseModel):
    """Usage and maintenance history of one machine."""

    machine: MachineResponse
    usage_logs: list[UsageLogResponse]
    maintenances: list[MaintenanceResponse]
    maintenance_parts: list[MaintenancePartResponse]
    stats: MachineHistoryStats


class ItemMaintenanceUse(BaseModel):
    """One consumption of an item by a maintenance job."""

    maintenance_id: int
    machine_id: int
    machine_name: str
    technician: str
    start_date: date | None = None
    part: MaintenancePartResponse


class InventoryItemHistoryStats(BaseModel):
    total_used: float
    total_used_in_maintenance: int
    total_cost: float
    total_usage_logs: int
    total_maintenances: int


class InventoryItemHistoryResponse(BaseModel):
    """Usage and consumption history of one inventory item."""

    item: InventoryItemResponse
    usage_logs: list[UsageLogResponse]
    maintenance_uses: list[ItemMaintenanceUse]
    movements: list[StockMovementResponse]
    stats: InventoryItemHistoryStats


# --- Analytics ---


class MachineCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    machine_id: int
    machine_name: str
    location: str
    maintenance_count: int
    labor_cost: float
    parts_cost: float
    total_cost: float


class MonthlyCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str = Field(..., examples=["2024-03"])
    cost: float


class LocationMonthlyCostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    location: str
    months: list[MonthlyCostResponse]


class PartConsumptionResponse(BaseModel):
    """Inventory consumed by maintenance jobs, totalled per item."""

    model_config = ConfigDict(from_attributes=True)

    inventory_item_id: int
    name: str
    total_quantity: int
    total_cost: float
    uses: int = Field(..., description="Number of maintenance lines that used the item")


class MaintenanceTypeSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    maintenance_type: MaintenanceType
    count: int
    labor_cost: float
    parts_cost: float
    total_cost: float


class MonthlyTypeCountsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    counts: dict[MaintenanceType, int]


class LocationSpendResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    location: str
    total_cost: float
    machines: list[MachineCostResponse]


class MaintenanceAnalyticsResponse(BaseModel):
    """Maintenance spend and part wear aggregates."""

    model_config = ConfigDict(from_attributes=True)

    months: list[str] = Field(..., description="Months covered by the monthly series, oldest first")
    total_cost: float
    cost_by_machine: list[MachineCostResponse]
    monthly_cost_by_location: list[LocationMonthlyCostResponse]
    top_parts: list[PartConsumptionResponse]
    type_summary: list[MaintenanceTypeSummaryResponse]
    type_trend: list[MonthlyTypeCountsResponse]
    active_alerts: list[UsageInfoResponse] = Field(
        ..., description="Installed parts at or above 75% of their service life"
    )
    critical_parts: list[UsageInfoResponse] = Field(
        ..., description="Installed parts at or beyond their service life"
    )
    cumulative_spend: list[LocationSpendResponse]


# --- Common ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    storage_backend: str


class DatabaseHealthResponse(BaseModel):
    """Storage health response."""

    status: str
    backend: str
    latency_ms: float | None = None
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. MACHINE_PART_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
