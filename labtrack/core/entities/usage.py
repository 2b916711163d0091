"""Usage log and usage projection entities."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from labtrack.core.entities.machine import PartStatus


class UsageLog(BaseModel):
    """
    One reported usage event for a part on a machine.

    Append-only audit trail: never updated or deleted once written.
    """

    id: int | None = None
    machine_id: int
    machine_name: str
    inventory_item_id: int
    inventory_item_name: str
    part_id: int
    installation_id: str
    usage_date: date = Field(default_factory=date.today)
    quantity_used: float = Field(..., gt=0)
    unit: str
    responsible: str
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class UsageInfo(BaseModel):
    """Computed usage record for one installed part."""

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
