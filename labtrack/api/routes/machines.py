"""Machine and installed-part endpoints."""

from fastapi import APIRouter, Depends, status

from labtrack.api.dependencies import (
    get_install_part_use_case,
    get_machine_history_use_case,
    get_replace_part_use_case,
    get_store_bundle,
    require_permission,
)
from labtrack.application.dto.requests import (
    CreateMachineRequest,
    HistoryFilter,
    InstallPartRequest,
    ReplacePartRequest,
    UpdateMachineRequest,
    UpdatePartRequest,
)
from labtrack.application.dto.responses import (
    ErrorResponse,
    MachineDetailResponse,
    MachineHistoryResponse,
    MachinePartResponse,
    MachineResponse,
    ReplacePartResponse,
)
from labtrack.application.use_cases import (
    GetMachineHistoryUseCase,
    InstallPartUseCase,
    ReplacePartUseCase,
)
from labtrack.config import get_logger
from labtrack.core.entities.machine import Machine
from labtrack.core.entities.user import Action, Actor
from labtrack.core.exceptions import (
    ConflictError,
    MachineNotFoundError,
    MachinePartNotFoundError,
)
from labtrack.infrastructure.storage import StoreBundle

logger = get_logger(__name__)

router = APIRouter(prefix="/api/machines", tags=["machines"])


async def _get_machine(stores: StoreBundle, machine_id: int) -> Machine:
    machine = await stores.machines.get_machine(machine_id)
    if machine is None:
        raise MachineNotFoundError(machine_id)
    return machine


@router.post(
    "",
    response_model=MachineResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}},
)
async def create_machine(
    request: CreateMachineRequest,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.EDIT_MACHINES)),
) -> MachineResponse:
    """Register a machine."""
    machine = await stores.machines.create_machine(Machine(**request.model_dump()))
    logger.info("machine_created", machine_id=machine.id, name=machine.name)
    return MachineResponse.model_validate(machine)


@router.get(
    "",
    response_model=list[MachineResponse],
)
async def list_machines(
    limit: int = 100,
    offset: int = 0,
    stores: StoreBundle = Depends(get_store_bundle),
) -> list[MachineResponse]:
    """List machines."""
    machines = await stores.machines.list_machines(limit=limit, offset=offset)
    return [MachineResponse.model_validate(m) for m in machines]


# Part routes are declared before /{machine_id} so "parts" is never read as an id


@router.get(
    "/parts/{part_id}",
    response_model=MachinePartResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_part(
    part_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
) -> MachinePartResponse:
    """Get an installed part with its usage and status."""
    part = await stores.machines.get_part(part_id)
    if part is None:
        raise MachinePartNotFoundError(part_id)
    return MachinePartResponse.model_validate(part)


@router.put(
    "/parts/{part_id}",
    response_model=MachinePartResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_part(
    part_id: int,
    request: UpdatePartRequest,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.EDIT_MACHINES)),
) -> MachinePartResponse:
    """Update part metadata. Usage only changes by recording usage or a reset."""
    part = await stores.machines.get_part(part_id)
    if part is None:
        raise MachinePartNotFoundError(part_id)
    if request.version is not None and request.version != part.version:
        raise ConflictError("Machine part", part_id, request.version)

    if request.name is not None:
        part.name = request.name
    if request.installation_date is not None:
        part.installation_date = request.installation_date

    updated = await stores.machines.update_part(part)
    return MachinePartResponse.model_validate(updated)


@router.delete(
    "/parts/{part_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_part(
    part_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.EDIT_MACHINES)),
) -> None:
    """Uninstall a part. Its usage logs are kept."""
    if not await stores.machines.delete_part(part_id):
        raise MachinePartNotFoundError(part_id)
    logger.info("part_removed", part_id=part_id)


@router.post(
    "/parts/{part_id}/replace",
    response_model=ReplacePartResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def replace_part(
    part_id: int,
    request: ReplacePartRequest,
    use_case: ReplacePartUseCase = Depends(get_replace_part_use_case),
    actor: Actor | None = Depends(require_permission(Action.PERFORM_MAINTENANCE)),
) -> ReplacePartResponse:
    """Swap an installed part for a fresh unit drawn from stock."""
    result = await use_case.execute(part_id, request, actor)
    return use_case.to_response(result)


@router.get(
    "/{machine_id}",
    response_model=MachineDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_machine(
    machine_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
) -> MachineDetailResponse:
    """Get a machine with its installed parts."""
    machine = await _get_machine(stores, machine_id)
    parts = await stores.machines.list_parts(machine_id)
    return MachineDetailResponse(
        **MachineResponse.model_validate(machine).model_dump(),
        parts=[MachinePartResponse.model_validate(p) for p in parts],
    )


@router.put(
    "/{machine_id}",
    response_model=MachineResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_machine(
    machine_id: int,
    request: UpdateMachineRequest,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.EDIT_MACHINES)),
) -> MachineResponse:
    """Apply a partial machine update."""
    machine = await _get_machine(stores, machine_id)
    if request.version is not None and request.version != machine.version:
        raise ConflictError("Machine", machine_id, request.version)

    changes = request.model_dump(exclude_unset=True, exclude={"version"})
    for field, value in changes.items():
        setattr(machine, field, value)

    updated = await stores.machines.update_machine(machine)
    logger.info("machine_updated", machine_id=machine_id, fields=sorted(changes))
    return MachineResponse.model_validate(updated)


@router.delete(
    "/{machine_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_machine(
    machine_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.EDIT_MACHINES)),
) -> None:
    """Delete a machine and its installed parts."""
    if not await stores.machines.delete_machine(machine_id):
        raise MachineNotFoundError(machine_id)
    logger.info("machine_deleted", machine_id=machine_id)


@router.post(
    "/{machine_id}/parts",
    response_model=MachinePartResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def install_part(
    machine_id: int,
    request: InstallPartRequest,
    use_case: InstallPartUseCase = Depends(get_install_part_use_case),
    actor: Actor | None = Depends(require_permission(Action.EDIT_MACHINES)),
) -> MachinePartResponse:
    """Install a wear part on a machine with zero usage."""
    part = await use_case.execute(machine_id, request)
    return MachinePartResponse.model_validate(part)


@router.get(
    "/{machine_id}/parts",
    response_model=list[MachinePartResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_parts(
    machine_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
) -> list[MachinePartResponse]:
    """List the parts installed on a machine."""
    await _get_machine(stores, machine_id)
    parts = await stores.machines.list_parts(machine_id)
    return [MachinePartResponse.model_validate(p) for p in parts]


@router.get(
    "/{machine_id}/history",
    response_model=MachineHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_machine_history(
    machine_id: int,
    filters: HistoryFilter = Depends(),
    use_case: GetMachineHistoryUseCase = Depends(get_machine_history_use_case),
) -> MachineHistoryResponse:
    """Usage logs and maintenance jobs of one machine."""
    history = await use_case.execute(machine_id, filters)
    return use_case.to_response(history)
