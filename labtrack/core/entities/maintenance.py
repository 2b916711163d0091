"""Maintenance domain entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MaintenanceType(str, Enum):
    """Kinds of maintenance work."""

    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    CALIBRATION = "calibration"


class MaintenanceStatus(str, Enum):
    """Lifecycle of a maintenance record."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MaintenancePart(BaseModel):
    """Inventory consumed by a maintenance job."""

    id: int | None = None
    maintenance_id: int | None = None
    inventory_item_id: int
    inventory_item_name: str
    quantity_used: int = Field(..., gt=0)
    unit_cost: float = Field(default=0.0, ge=0)
    recorded_date: date = Field(default_factory=date.today)

    @property
    def total_cost(self) -> float:
        return self.quantity_used * self.unit_cost


class Maintenance(BaseModel):
    """A scheduled or completed maintenance job on a machine."""

    id: int | None = None
    machine_id: int
    machine_name: str
    maintenance_type: MaintenanceType = MaintenanceType.PREVENTIVE
    description: str = ""
    start_date: date | None = None
    end_date: date | None = None
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    technician: str
    labor_cost: float = Field(default=0.0, ge=0)
    observations: str | None = None
    resolution: str | None = None
    parts: list[MaintenancePart] = Field(default_factory=list)
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_completed(self) -> bool:
        return self.status == MaintenanceStatus.COMPLETED

    @property
    def parts_cost(self) -> float:
        return sum(p.total_cost for p in self.parts)

    @property
    def total_cost(self) -> float:
        """Parts plus labor."""
        return self.parts_cost + self.labor_cost
