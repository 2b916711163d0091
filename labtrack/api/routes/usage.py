"""
Wear-part usage endpoints.

Recording usage, the usage projection, the monitor's dashboard snapshot and
maintenance resets.
"""

from fastapi import APIRouter, Depends, status

from labtrack.api.dependencies import (
    get_maintenance_reset_use_case,
    get_monitor,
    get_record_usage_use_case,
    get_store_bundle,
    get_usage_info_use_case,
    require_permission,
)
from labtrack.application.dto.requests import MaintenanceResetRequest, RecordUsageRequest
from labtrack.application.dto.responses import (
    ErrorResponse,
    MaintenanceResetResponse,
    RecordUsageResponse,
    UsageDashboardResponse,
    UsageInfoResponse,
    UsageLogResponse,
)
from labtrack.application.usage_monitor import UsageDashboardMonitor, UsageSnapshot
from labtrack.application.use_cases import (
    GetUsageInfoUseCase,
    RecordUsageUseCase,
    RegisterMaintenanceResetUseCase,
)
from labtrack.core.entities.user import Action, Actor
from labtrack.infrastructure.storage import StoreBundle

router = APIRouter(prefix="/api/usage", tags=["usage"])


def _snapshot_to_response(snapshot: UsageSnapshot) -> UsageDashboardResponse:
    return UsageDashboardResponse(
        refreshed_at=snapshot.refreshed_at,
        records=[UsageInfoResponse.model_validate(r) for r in snapshot.records],
        warning_count=snapshot.warning_count,
        critical_count=snapshot.critical_count,
    )


@router.get(
    "",
    response_model=list[UsageInfoResponse],
)
async def get_usage_info(
    use_case: GetUsageInfoUseCase = Depends(get_usage_info_use_case),
) -> list[UsageInfoResponse]:
    """Usage record for every installed part, computed now."""
    records = await use_case.execute()
    return [UsageInfoResponse.model_validate(r) for r in records]


@router.get(
    "/dashboard",
    response_model=UsageDashboardResponse,
)
async def get_dashboard(
    monitor: UsageDashboardMonitor = Depends(get_monitor),
) -> UsageDashboardResponse:
    """Latest snapshot taken by the background monitor."""
    return _snapshot_to_response(monitor.snapshot)


@router.post(
    "/dashboard/refresh",
    response_model=UsageDashboardResponse,
    responses={503: {"model": ErrorResponse}},
)
async def refresh_dashboard(
    monitor: UsageDashboardMonitor = Depends(get_monitor),
    actor: Actor | None = Depends(require_permission(Action.VIEW_MACHINES)),
) -> UsageDashboardResponse:
    """Take a snapshot now instead of waiting for the next poll."""
    snapshot = await monitor.refresh()
    return _snapshot_to_response(snapshot)


@router.post(
    "/logs",
    response_model=RecordUsageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_usage(
    request: RecordUsageRequest,
    use_case: RecordUsageUseCase = Depends(get_record_usage_use_case),
    actor: Actor | None = Depends(require_permission(Action.RECORD_USAGE)),
) -> RecordUsageResponse:
    """
    Record usage of a part on a machine.

    Returns the new usage percentage and status, and the alert raised if
    this event moved the part into a higher band.
    """
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.get(
    "/logs",
    response_model=list[UsageLogResponse],
)
async def list_usage_logs(
    machine_id: int | None = None,
    inventory_item_id: int | None = None,
    limit: int = 100,
    offset: int = 0,
    stores: StoreBundle = Depends(get_store_bundle),
) -> list[UsageLogResponse]:
    """List usage logs, newest first."""
    logs = await stores.usage_logs.list_logs(
        machine_id=machine_id,
        inventory_item_id=inventory_item_id,
        limit=limit,
        offset=offset,
    )
    return [UsageLogResponse.model_validate(log) for log in logs]


@router.post(
    "/reset",
    response_model=MaintenanceResetResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def maintenance_reset(
    request: MaintenanceResetRequest,
    use_case: RegisterMaintenanceResetUseCase = Depends(get_maintenance_reset_use_case),
    actor: Actor | None = Depends(require_permission(Action.PERFORM_MAINTENANCE)),
) -> MaintenanceResetResponse:
    """Register maintenance on a part and restart its usage count."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)
