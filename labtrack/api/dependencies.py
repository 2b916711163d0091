"""
Dependency injection container for FastAPI.

Provides stores, use cases and the caller's identity to route handlers.
Tests swap the store bundle through ``app.dependency_overrides``.
"""

from collections.abc import Awaitable, Callable
from functools import lru_cache

from fastapi import Depends, Header

from labtrack.application.usage_monitor import UsageDashboardMonitor, get_usage_monitor
from labtrack.application.use_cases import (
    AddMaintenancePartUseCase,
    AdjustStockUseCase,
    CreateMaintenanceUseCase,
    DeleteMaintenanceUseCase,
    GetInventoryItemHistoryUseCase,
    GetMachineHistoryUseCase,
    GetMaintenanceAnalyticsUseCase,
    GetUsageInfoUseCase,
    InstallPartUseCase,
    RecordUsageUseCase,
    RegisterMaintenanceResetUseCase,
    RemoveMaintenancePartUseCase,
    ReplacePartUseCase,
    UpdateMaintenanceUseCase,
)
from labtrack.config import Settings, get_logger, get_settings
from labtrack.core.entities.user import Action, Actor
from labtrack.core.exceptions import PermissionDeniedError
from labtrack.core.interfaces import IPermissionChecker
from labtrack.core.services import AlertEmitter, InventoryService, RolePermissionChecker
from labtrack.infrastructure.storage import StoreBundle, get_stores

logger = get_logger(__name__)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
def get_store_bundle() -> StoreBundle:
    """Get the configured store bundle."""
    return get_stores()


def get_inventory_service(
    stores: StoreBundle = Depends(get_store_bundle),
) -> InventoryService:
    return InventoryService(stores.inventory)


def get_alert_emitter(
    stores: StoreBundle = Depends(get_store_bundle),
) -> AlertEmitter:
    return AlertEmitter(stores.notifications)


def get_monitor() -> UsageDashboardMonitor:
    """Get the usage dashboard monitor."""
    return get_usage_monitor()


# Identity and permissions
def get_current_actor(
    x_user_id: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Actor | None:
    """
    Caller identity supplied by the upstream identity provider.

    Returns None when no user id header is present.
    """
    if not x_user_id:
        return None
    return Actor(
        user_id=x_user_id,
        display_name=x_user_name,
        role=(x_user_role or settings.auth.default_role).lower(),
    )


def get_permission_checker() -> IPermissionChecker:
    return RolePermissionChecker()


def require_permission(action: Action) -> Callable[..., Awaitable[Actor | None]]:
    """Build a dependency that rejects callers lacking ``action``."""

    async def check(
        actor: Actor | None = Depends(get_current_actor),
        checker: IPermissionChecker = Depends(get_permission_checker),
        settings: Settings = Depends(get_app_settings),
    ) -> Actor | None:
        if settings.auth.enforce_permissions and not checker.has_permission(actor, action):
            user_id = actor.user_id if actor else "anonymous"
            logger.warning("permission_denied", user_id=user_id, action=action.value)
            raise PermissionDeniedError(user_id, action.value)
        return actor

    return check


# Use case dependencies
def get_record_usage_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> RecordUsageUseCase:
    return RecordUsageUseCase(stores)


def get_usage_info_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> GetUsageInfoUseCase:
    return GetUsageInfoUseCase(stores)


def get_maintenance_reset_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> RegisterMaintenanceResetUseCase:
    return RegisterMaintenanceResetUseCase(stores)


def get_replace_part_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> ReplacePartUseCase:
    return ReplacePartUseCase(stores)


def get_install_part_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> InstallPartUseCase:
    return InstallPartUseCase(stores)


def get_adjust_stock_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> AdjustStockUseCase:
    return AdjustStockUseCase(stores)


def get_create_maintenance_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> CreateMaintenanceUseCase:
    return CreateMaintenanceUseCase(stores)


def get_update_maintenance_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> UpdateMaintenanceUseCase:
    return UpdateMaintenanceUseCase(stores)


def get_delete_maintenance_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> DeleteMaintenanceUseCase:
    return DeleteMaintenanceUseCase(stores)


def get_add_maintenance_part_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> AddMaintenancePartUseCase:
    return AddMaintenancePartUseCase(stores)


def get_remove_maintenance_part_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> RemoveMaintenancePartUseCase:
    return RemoveMaintenancePartUseCase(stores)


def get_machine_history_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> GetMachineHistoryUseCase:
    return GetMachineHistoryUseCase(stores)


def get_item_history_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> GetInventoryItemHistoryUseCase:
    return GetInventoryItemHistoryUseCase(stores)


def get_maintenance_analytics_use_case(
    stores: StoreBundle = Depends(get_store_bundle),
) -> GetMaintenanceAnalyticsUseCase:
    return GetMaintenanceAnalyticsUseCase(stores)
