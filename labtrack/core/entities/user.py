"""Caller identity as supplied by the external identity provider."""

from enum import Enum

from pydantic import BaseModel


class UserRole(str, Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    TECHNICIAN = "technician"
    OPERATOR = "operator"
    GUEST = "guest"


class Action(str, Enum):
    """Capabilities checked by the permission collaborator."""

    VIEW_BASIC = "view_basic"
    VIEW_MACHINES = "view_machines"
    EDIT_MACHINES = "edit_machines"
    MANAGE_INVENTORY = "manage_inventory"
    RECORD_USAGE = "record_usage"
    PERFORM_MAINTENANCE = "perform_maintenance"
    VIEW_REPORTS = "view_reports"
    CREATE_REPORTS = "create_reports"
    EDIT_REPORTS = "edit_reports"
    VIEW_ANALYTICS = "view_analytics"
    MANAGE_NOTIFICATIONS = "manage_notifications"


class Actor(BaseModel):
    """The authenticated caller; trusted as given."""

    user_id: str
    display_name: str | None = None
    role: str = UserRole.GUEST.value

    @property
    def label(self) -> str:
        """Name recorded as the responsible party."""
        return self.display_name or self.user_id
