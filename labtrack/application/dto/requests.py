"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date

from pydantic import BaseModel, Field

from labtrack.core.entities.inventory import ItemType
from labtrack.core.entities.machine import MachineStatus
from labtrack.core.entities.maintenance import MaintenanceStatus, MaintenanceType
from labtrack.core.entities.report import ReportPriority, ReportStatus, ReportType

# --- Inventory ---


class CreateInventoryItemRequest(BaseModel):
    """Request to create an inventory item."""

    name: str = Field(..., min_length=1, description="Item name")
    category: str = Field(default="", description="Free-form category")
    quantity: int = Field(default=0, ge=0, description="Units on hand")
    min_quantity: int = Field(default=0, ge=0, description="Reorder floor")
    location: str | None = Field(default=None, description="Storage location")
    description: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    supplier: str | None = None
    item_type: ItemType = Field(default=ItemType.GENERAL_SPARE)
    usage_unit: str | None = Field(
        default=None,
        description="Unit usage is measured in; required for wear parts",
        examples=["hours", "cycles", "samples"],
    )
    max_lifespan: float | None = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Service life in usage_unit; required for wear parts",
    )


class UpdateInventoryItemRequest(BaseModel):
    """
    Metadata update for an inventory item.

    Quantity changes go through the adjust endpoint so that every change
    leaves a stock movement behind.
    """

    name: str | None = Field(default=None, min_length=1)
    category: str | None = None
    min_quantity: int | None = Field(default=None, ge=0)
    location: str | None = None
    description: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    supplier: str | None = None
    usage_unit: str | None = None
    max_lifespan: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    version: int | None = Field(
        default=None,
        description="Version last read; the update fails with 409 if it changed",
    )


class AdjustStockRequest(BaseModel):
    """Manual stock correction."""

    delta: int = Field(..., description="Units to add (positive) or remove (negative)")
    reference: str | None = Field(default=None, description="External reference")
    notes: str | None = Field(default=None, description="Reason for the adjustment")


# --- Machines ---


class CreateMachineRequest(BaseModel):
    """Request to register a machine."""

    name: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    serial_number: str | None = None
    manufacturer: str | None = None
    status: MachineStatus = MachineStatus.OPERATIONAL
    location: str | None = None
    description: str | None = None
    purchase_date: date | None = None
    last_maintenance: date | None = None
    next_maintenance: date | None = None
    associated_item_id: int | None = None


class UpdateMachineRequest(BaseModel):
    """Partial machine update."""

    name: str | None = Field(default=None, min_length=1)
    model: str | None = Field(default=None, min_length=1)
    serial_number: str | None = None
    manufacturer: str | None = None
    status: MachineStatus | None = None
    location: str | None = None
    description: str | None = None
    purchase_date: date | None = None
    last_maintenance: date | None = None
    next_maintenance: date | None = None
    associated_item_id: int | None = None
    version: int | None = None


class InstallPartRequest(BaseModel):
    """
    Install a wear part on a machine.

    Name, unit and max usage default to the inventory item's name, usage
    unit and max lifespan.
    """

    inventory_item_id: int = Field(..., description="Wear part inventory item")
    name: str | None = Field(default=None, min_length=1)
    usage_type: str | None = Field(default=None, min_length=1)
    max_usage: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    installation_date: date | None = None


class UpdatePartRequest(BaseModel):
    """Metadata update for an installed part; usage is never set directly."""

    name: str | None = Field(default=None, min_length=1)
    installation_date: date | None = None
    version: int | None = None


class ReplacePartRequest(BaseModel):
    """Swap an installed part for a fresh one from stock."""

    new_inventory_item_id: int = Field(..., description="Item the new part is drawn from")
    notes: str | None = None


# --- Usage ---


class RecordUsageRequest(BaseModel):
    """A usage event for a part on a machine."""

    machine_id: int
    inventory_item_id: int
    amount: float = Field(
        ..., allow_inf_nan=False, description="Usage to add, in the part's usage unit"
    )
    unit: str = Field(..., min_length=1, examples=["hours"])
    usage_date: date | None = None
    responsible: str | None = Field(
        default=None,
        description="Who used the machine; defaults to the caller",
    )
    notes: str | None = None


class MaintenanceResetRequest(BaseModel):
    """Record that a part was serviced and restart its usage count."""

    machine_id: int
    inventory_item_id: int
    replaced: bool = Field(
        default=False,
        description="True when a physical part was taken from stock",
    )
    maintenance_type: MaintenanceType = MaintenanceType.PREVENTIVE
    description: str | None = None
    technician: str | None = Field(default=None, description="Defaults to the caller")
    labor_cost: float = Field(default=0.0, ge=0)
    observations: str | None = None


# --- Maintenance ---


class MaintenancePartRequest(BaseModel):
    """Inventory consumed by a maintenance job."""

    inventory_item_id: int
    quantity_used: int = Field(..., gt=0)
    unit_cost: float | None = Field(
        default=None,
        ge=0,
        description="Defaults to the item's unit price",
    )


class CreateMaintenanceRequest(BaseModel):
    """Schedule or record a maintenance job."""

    machine_id: int
    maintenance_type: MaintenanceType = MaintenanceType.PREVENTIVE
    description: str = ""
    start_date: date | None = None
    end_date: date | None = None
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    technician: str | None = Field(default=None, description="Defaults to the caller")
    labor_cost: float = Field(default=0.0, ge=0)
    observations: str | None = None
    parts: list[MaintenancePartRequest] = Field(default_factory=list)


class UpdateMaintenanceRequest(BaseModel):
    """Partial maintenance update; completed jobs accept only notes."""

    maintenance_type: MaintenanceType | None = None
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: MaintenanceStatus | None = None
    technician: str | None = None
    labor_cost: float | None = Field(default=None, ge=0)
    observations: str | None = None
    resolution: str | None = None
    version: int | None = None


# --- Reports ---


class CreateIncidentReportRequest(BaseModel):
    """File an incident report against a machine."""

    machine_id: int
    report_type: ReportType = ReportType.FAILURE
    description: str = Field(..., min_length=1)
    priority: ReportPriority = ReportPriority.MEDIUM
    report_date: date | None = None
    assigned_to: str | None = None


class UpdateIncidentReportRequest(BaseModel):
    """Partial incident report update."""

    report_type: ReportType | None = None
    description: str | None = Field(default=None, min_length=1)
    status: ReportStatus | None = None
    priority: ReportPriority | None = None
    assigned_to: str | None = None
    resolution: str | None = None


# --- History ---


class HistoryFilter(BaseModel):
    """Date range and responsible-party filter for history views."""

    start_date: date | None = None
    end_date: date | None = None
    responsible: str | None = Field(
        default=None,
        description="Case-insensitive substring of the responsible person or technician",
    )
