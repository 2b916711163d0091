"""
Core business logic services.

Layer-pure services that depend only on:
- labtrack/core/entities/*
- labtrack/core/interfaces/*
- labtrack/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from labtrack.core.services.alert_emitter import AlertEmitter
from labtrack.core.services.inventory_service import InventoryService, StockAdjustment
from labtrack.core.services.permissions import ROLE_PERMISSIONS, RolePermissionChecker
from labtrack.core.services.usage_accounting import (
    UsageAccountingService,
    UsageUpdate,
    units_match,
)

__all__ = [
    # Alerts
    "AlertEmitter",
    # Inventory
    "InventoryService",
    "StockAdjustment",
    # Permissions
    "ROLE_PERMISSIONS",
    "RolePermissionChecker",
    # Usage accounting
    "UsageAccountingService",
    "UsageUpdate",
    "units_match",
]
