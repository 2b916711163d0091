"""Notification entity."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class NotificationSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class NotificationType(str, Enum):
    USAGE_ALERT = "usage_alert"
    MAINTENANCE = "maintenance"
    LOW_STOCK = "low_stock"


def new_notification_id() -> str:
    return f"notification_{uuid.uuid4().hex}"


class Notification(BaseModel):
    """A user-facing alert; only the read flag changes after creation."""

    id: str = Field(default_factory=new_notification_id)
    type: NotificationType
    title: str
    message: str
    severity: NotificationSeverity
    read: bool = False
    related_id: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
