"""Incident report entity."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ReportType(str, Enum):
    FAILURE = "failure"
    MAINTENANCE = "maintenance"
    CALIBRATION = "calibration"


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ReportPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IncidentReport(BaseModel):
    """A failure or service request filed against a machine."""

    id: int | None = None
    machine_id: int
    machine_name: str
    report_type: ReportType = ReportType.FAILURE
    description: str
    reported_by: str
    report_date: date = Field(default_factory=date.today)
    status: ReportStatus = ReportStatus.PENDING
    priority: ReportPriority = ReportPriority.MEDIUM
    assigned_to: str | None = None
    completed_date: date | None = None
    resolution: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def mark_status(self, status: ReportStatus) -> None:
        """Change status, stamping the completion date on first completion."""
        self.status = status
        if status == ReportStatus.COMPLETED and self.completed_date is None:
            self.completed_date = date.today()
