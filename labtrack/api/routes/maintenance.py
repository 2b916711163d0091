"""Maintenance job endpoints."""

from fastapi import APIRouter, Depends, status

from labtrack.api.dependencies import (
    get_add_maintenance_part_use_case,
    get_create_maintenance_use_case,
    get_delete_maintenance_use_case,
    get_remove_maintenance_part_use_case,
    get_store_bundle,
    get_update_maintenance_use_case,
    require_permission,
)
from labtrack.application.dto.requests import (
    CreateMaintenanceRequest,
    MaintenancePartRequest,
    UpdateMaintenanceRequest,
)
from labtrack.application.dto.responses import ErrorResponse, MaintenanceResponse
from labtrack.application.use_cases import (
    AddMaintenancePartUseCase,
    CreateMaintenanceUseCase,
    DeleteMaintenanceUseCase,
    RemoveMaintenancePartUseCase,
    UpdateMaintenanceUseCase,
)
from labtrack.core.entities.user import Action, Actor
from labtrack.core.exceptions import MaintenanceNotFoundError
from labtrack.infrastructure.storage import StoreBundle

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.post(
    "",
    response_model=MaintenanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_maintenance(
    request: CreateMaintenanceRequest,
    use_case: CreateMaintenanceUseCase = Depends(get_create_maintenance_use_case),
    actor: Actor | None = Depends(require_permission(Action.PERFORM_MAINTENANCE)),
) -> MaintenanceResponse:
    """Create a maintenance job; listed parts are drawn from stock."""
    maintenance = await use_case.execute(request, actor)
    return MaintenanceResponse.model_validate(maintenance)


@router.get(
    "",
    response_model=list[MaintenanceResponse],
)
async def list_maintenance(
    machine_id: int | None = None,
    limit: int = 100,
    offset: int = 0,
    stores: StoreBundle = Depends(get_store_bundle),
) -> list[MaintenanceResponse]:
    """List maintenance jobs, optionally for one machine."""
    jobs = await stores.maintenance.list_maintenance(
        machine_id=machine_id, limit=limit, offset=offset
    )
    return [MaintenanceResponse.model_validate(m) for m in jobs]


@router.get(
    "/{maintenance_id}",
    response_model=MaintenanceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_maintenance(
    maintenance_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
) -> MaintenanceResponse:
    """Get a maintenance job with its parts and costs."""
    maintenance = await stores.maintenance.get(maintenance_id)
    if maintenance is None:
        raise MaintenanceNotFoundError(maintenance_id)
    return MaintenanceResponse.model_validate(maintenance)


@router.put(
    "/{maintenance_id}",
    response_model=MaintenanceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_maintenance(
    maintenance_id: int,
    request: UpdateMaintenanceRequest,
    use_case: UpdateMaintenanceUseCase = Depends(get_update_maintenance_use_case),
    actor: Actor | None = Depends(require_permission(Action.PERFORM_MAINTENANCE)),
) -> MaintenanceResponse:
    """Partial update. Completed jobs only accept observations and resolution."""
    maintenance = await use_case.execute(maintenance_id, request)
    return MaintenanceResponse.model_validate(maintenance)


@router.delete(
    "/{maintenance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_maintenance(
    maintenance_id: int,
    use_case: DeleteMaintenanceUseCase = Depends(get_delete_maintenance_use_case),
    actor: Actor | None = Depends(require_permission(Action.PERFORM_MAINTENANCE)),
) -> None:
    """Delete an open job and return its parts to stock."""
    await use_case.execute(maintenance_id)


@router.post(
    "/{maintenance_id}/parts",
    response_model=MaintenanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def add_maintenance_part(
    maintenance_id: int,
    request: MaintenancePartRequest,
    use_case: AddMaintenancePartUseCase = Depends(get_add_maintenance_part_use_case),
    actor: Actor | None = Depends(require_permission(Action.PERFORM_MAINTENANCE)),
) -> MaintenanceResponse:
    """Record inventory consumed by an open job."""
    change = await use_case.execute(maintenance_id, request)
    return MaintenanceResponse.model_validate(change.maintenance)


@router.delete(
    "/{maintenance_id}/parts/{part_id}",
    response_model=MaintenanceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def remove_maintenance_part(
    maintenance_id: int,
    part_id: int,
    use_case: RemoveMaintenancePartUseCase = Depends(get_remove_maintenance_part_use_case),
    actor: Actor | None = Depends(require_permission(Action.PERFORM_MAINTENANCE)),
) -> MaintenanceResponse:
    """Remove a part line from an open job and return its stock."""
    change = await use_case.execute(maintenance_id, part_id)
    return MaintenanceResponse.model_validate(change.maintenance)
