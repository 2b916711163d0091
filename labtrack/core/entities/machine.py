"""Machine and installed wear-part entities."""

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

# Fraction of max usage at which a part enters the warning band
WARNING_THRESHOLD = 0.75


class MachineStatus(str, Enum):
    """Operational status of a machine."""

    OPERATIONAL = "operational"
    MAINTENANCE = "maintenance"
    INOPERATIVE = "inoperative"


class PartStatus(str, Enum):
    """Wear band of an installed part, ordered normal < warning < critical."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PART_STATUS_RANK[self]


_PART_STATUS_RANK = {
    PartStatus.NORMAL: 0,
    PartStatus.WARNING: 1,
    PartStatus.CRITICAL: 2,
}


def usage_percentage(current_usage: float, max_usage: float) -> float:
    """Percentage of life consumed; not capped at 100."""
    return 100.0 * current_usage / max_usage


def classify_usage(current_usage: float, max_usage: float) -> PartStatus:
    """Map cumulative usage onto its wear band."""
    if current_usage >= max_usage:
        return PartStatus.CRITICAL
    if current_usage >= WARNING_THRESHOLD * max_usage:
        return PartStatus.WARNING
    return PartStatus.NORMAL


def new_installation_id() -> str:
    return uuid.uuid4().hex


class Machine(BaseModel):
    """A piece of laboratory equipment."""

    id: int | None = None
    name: str
    model: str
    serial_number: str | None = None
    manufacturer: str | None = None
    status: MachineStatus = MachineStatus.OPERATIONAL
    location: str | None = None
    description: str | None = None
    purchase_date: date | None = None
    last_maintenance: date | None = None
    next_maintenance: date | None = None
    associated_item_id: int | None = None
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class MachinePart(BaseModel):
    """
    A wear part installed on a machine.

    ``status`` is derived from ``current_usage`` and ``max_usage`` and has no
    setter. ``alerted_status`` remembers the highest band already announced
    during the current usage epoch so that alerts fire on edges only.
    """

    id: int | None = None
    machine_id: int
    inventory_item_id: int
    name: str
    installation_id: str = Field(default_factory=new_installation_id)
    installation_date: date = Field(default_factory=date.today)
    usage_type: str
    current_usage: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    max_usage: float = Field(..., gt=0, allow_inf_nan=False)
    alerted_status: PartStatus = PartStatus.NORMAL
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def status(self) -> PartStatus:
        return classify_usage(self.current_usage, self.max_usage)

    @property
    def usage_percentage(self) -> float:
        return usage_percentage(self.current_usage, self.max_usage)

    def start_new_epoch(self, new_installation: bool = False) -> None:
        """Zero the counter and forget alerts; optionally mark a fresh install."""
        self.current_usage = 0.0
        self.alerted_status = PartStatus.NORMAL
        if new_installation:
            self.installation_id = new_installation_id()
            self.installation_date = date.today()
