"""
Domain exceptions for the LabTrack application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LabTrackError(Exception):
    """Base exception for all LabTrack errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(LabTrackError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class UnitMismatchError(ValidationError):
    """Usage was reported in a unit the part is not tracked in."""

    def __init__(self, part_id: int, expected: str, actual: str):
        super().__init__(
            field="unit",
            message=f"Part {part_id} tracks usage in '{expected}', got '{actual}'",
            value=actual,
        )
        self.code = "UNIT_MISMATCH"
        self.details.update({"part_id": part_id, "expected": expected})


class MaintenanceLockedError(ValidationError):
    """Completed maintenance records only accept resolution changes."""

    def __init__(self, maintenance_id: int, operation: str):
        super().__init__(
            field="status",
            message=f"Maintenance {maintenance_id} is completed; cannot {operation}",
        )
        self.code = "MAINTENANCE_LOCKED"
        self.details.update({"maintenance_id": maintenance_id, "operation": operation})


# Lookup Exceptions
class NotFoundError(LabTrackError):
    """Referenced entity does not exist."""

    entity = "Entity"
    error_code = "NOT_FOUND"

    def __init__(self, entity_id: int | str):
        super().__init__(
            f"{self.entity} not found: {entity_id}",
            code=self.error_code,
            details={"id": entity_id},
        )


class InventoryItemNotFoundError(NotFoundError):
    """Inventory item not found."""

    entity = "Inventory item"
    error_code = "INVENTORY_ITEM_NOT_FOUND"


class MachineNotFoundError(NotFoundError):
    """Machine not found."""

    entity = "Machine"
    error_code = "MACHINE_NOT_FOUND"


class MachinePartNotFoundError(NotFoundError):
    """Installed machine part not found."""

    entity = "Machine part"
    error_code = "MACHINE_PART_NOT_FOUND"

    @classmethod
    def for_pair(cls, machine_id: int, inventory_item_id: int) -> "MachinePartNotFoundError":
        error = cls(f"machine={machine_id}, item={inventory_item_id}")
        error.details = {"machine_id": machine_id, "inventory_item_id": inventory_item_id}
        return error


class MaintenanceNotFoundError(NotFoundError):
    """Maintenance record not found."""

    entity = "Maintenance"
    error_code = "MAINTENANCE_NOT_FOUND"


class MaintenancePartNotFoundError(NotFoundError):
    """Maintenance part entry not found."""

    entity = "Maintenance part"
    error_code = "MAINTENANCE_PART_NOT_FOUND"


class IncidentReportNotFoundError(NotFoundError):
    """Incident report not found."""

    entity = "Incident report"
    error_code = "INCIDENT_REPORT_NOT_FOUND"


# Business rule Exceptions
class ConflictError(LabTrackError):
    """Entity changed since it was read; the caller should re-read and retry."""

    def __init__(self, entity: str, entity_id: int | str, expected_version: int):
        super().__init__(
            f"{entity} {entity_id} was modified concurrently (expected version {expected_version})",
            code="CONFLICT",
            details={
                "entity": entity,
                "id": entity_id,
                "expected_version": expected_version,
            },
        )


class InsufficientStockError(LabTrackError):
    """Not enough stock on hand."""

    def __init__(self, item_id: int, requested: float, available: float):
        super().__init__(
            f"Insufficient stock for item {item_id}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "requested": requested,
                "available": available,
            },
        )


class IncompatiblePartError(LabTrackError):
    """Replacement item cannot stand in for the installed part."""

    def __init__(self, part_id: int, item_id: int, reason: str):
        super().__init__(
            f"Item {item_id} is not compatible with part {part_id}: {reason}",
            code="INCOMPATIBLE_PART",
            details={"part_id": part_id, "item_id": item_id, "reason": reason},
        )


class PermissionDeniedError(LabTrackError):
    """Caller lacks the capability for an action."""

    def __init__(self, user_id: str, action: str):
        super().__init__(
            f"User '{user_id}' is not allowed to {action}",
            code="PERMISSION_DENIED",
            details={"user_id": user_id, "action": action},
        )


# Storage Exceptions
class StorageError(LabTrackError):
    """Base exception for storage operations."""

    pass


class TransientStoreError(StorageError):
    """Backing store unavailable; safe for the caller to retry with backoff."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Store unavailable during {operation}: {reason}",
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "reason": reason},
        )


class StoreTimeoutError(TransientStoreError):
    """Store call exceeded its time limit."""

    def __init__(self, operation: str, timeout: float):
        super().__init__(operation, f"timed out after {timeout} seconds")
        self.code = "STORE_TIMEOUT"
        self.details["timeout"] = timeout


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(LabTrackError):
    """Configuration error."""

    pass
