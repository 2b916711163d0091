"""Inventory management endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError as PydanticValidationError

from labtrack.api.dependencies import (
    get_adjust_stock_use_case,
    get_inventory_service,
    get_item_history_use_case,
    get_store_bundle,
    require_permission,
)
from labtrack.application.dto.requests import (
    AdjustStockRequest,
    CreateInventoryItemRequest,
    HistoryFilter,
    UpdateInventoryItemRequest,
)
from labtrack.application.dto.responses import (
    AdjustStockResponse,
    ErrorResponse,
    InventoryItemHistoryResponse,
    InventoryItemResponse,
    InventoryListResponse,
    StockMovementResponse,
)
from labtrack.application.use_cases import AdjustStockUseCase, GetInventoryItemHistoryUseCase
from labtrack.config import get_logger
from labtrack.core.entities.inventory import InventoryItem, ItemType, MovementType, StockMovement
from labtrack.core.entities.user import Action, Actor
from labtrack.core.exceptions import ConflictError, InventoryItemNotFoundError, ValidationError
from labtrack.core.services import InventoryService
from labtrack.infrastructure.storage import StoreBundle

logger = get_logger(__name__)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def _build_item(data: dict[str, Any]) -> InventoryItem:
    """Validate item fields, including the wear-part requirements."""
    try:
        return InventoryItem.model_validate(data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "item"
        raise ValidationError(field, error["msg"]) from e


@router.post(
    "",
    response_model=InventoryItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateInventoryItemRequest,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.MANAGE_INVENTORY)),
) -> InventoryItemResponse:
    """Create an inventory item; opening stock is logged as an IN movement."""
    item = _build_item(request.model_dump())

    async with stores.uow.transaction():
        item = await stores.inventory.create_item(item)
        if item.quantity > 0:
            await stores.inventory.add_movement(
                StockMovement(
                    inventory_item_id=item.id,
                    movement_type=MovementType.IN,
                    quantity=item.quantity,
                    notes="Opening stock",
                )
            )

    logger.info(
        "inventory_item_created",
        item_id=item.id,
        item_type=item.item_type.value,
        quantity=item.quantity,
    )
    return InventoryItemResponse.model_validate(item)


@router.get(
    "",
    response_model=InventoryListResponse,
)
async def list_items(
    limit: int = 100,
    offset: int = 0,
    item_type: ItemType | None = None,
    stores: StoreBundle = Depends(get_store_bundle),
) -> InventoryListResponse:
    """List inventory items, optionally filtered by type."""
    items = await stores.inventory.list_items(limit=limit, offset=offset, item_type=item_type)
    return InventoryListResponse(
        items=[InventoryItemResponse.model_validate(item) for item in items],
        total=len(items),
    )


@router.get(
    "/wear-parts",
    response_model=list[InventoryItemResponse],
)
async def list_wear_parts(
    limit: int = 500,
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemResponse]:
    """List items that can be installed as machine parts."""
    items = await service.get_wear_parts(limit=limit)
    return [InventoryItemResponse.model_validate(item) for item in items]


@router.get(
    "/low-stock",
    response_model=list[InventoryItemResponse],
)
async def list_low_stock(
    limit: int = 100,
    stores: StoreBundle = Depends(get_store_bundle),
) -> list[InventoryItemResponse]:
    """List items at or below their reorder floor."""
    items = await stores.inventory.list_low_stock(limit=limit)
    return [InventoryItemResponse.model_validate(item) for item in items]


@router.get(
    "/{item_id}",
    response_model=InventoryItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemResponse:
    """Get an inventory item by ID."""
    item = await service.get_item_by_id(item_id)
    return InventoryItemResponse.model_validate(item)


@router.put(
    "/{item_id}",
    response_model=InventoryItemResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_item(
    item_id: int,
    request: UpdateInventoryItemRequest,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.MANAGE_INVENTORY)),
) -> InventoryItemResponse:
    """Update item metadata. Quantity changes go through /adjust."""
    existing = await stores.inventory.get_item(item_id)
    if existing is None:
        raise InventoryItemNotFoundError(item_id)
    if request.version is not None and request.version != existing.version:
        raise ConflictError("Inventory item", item_id, request.version)

    changes = request.model_dump(exclude_unset=True, exclude={"version"})
    item = _build_item({**existing.model_dump(), **changes})
    updated = await stores.inventory.update_item(item)

    logger.info("inventory_item_updated", item_id=item_id, fields=sorted(changes))
    return InventoryItemResponse.model_validate(updated)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: int,
    stores: StoreBundle = Depends(get_store_bundle),
    actor: Actor | None = Depends(require_permission(Action.MANAGE_INVENTORY)),
) -> None:
    """Delete an inventory item that is not installed on any machine."""
    async with stores.uow.transaction():
        installed = [
            part for part in await stores.machines.list_all_parts()
            if part.inventory_item_id == item_id
        ]
        if installed:
            raise ValidationError(
                "item_id",
                f"item is installed on {len(installed)} machine(s); remove those parts first",
                item_id,
            )
        if not await stores.inventory.delete_item(item_id):
            raise InventoryItemNotFoundError(item_id)

    logger.info("inventory_item_deleted", item_id=item_id)


@router.post(
    "/{item_id}/adjust",
    response_model=AdjustStockResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    item_id: int,
    request: AdjustStockRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
    actor: Actor | None = Depends(require_permission(Action.MANAGE_INVENTORY)),
) -> AdjustStockResponse:
    """Add or remove units by hand, logging an ADJUST movement."""
    result = await use_case.execute(item_id, request, actor)
    return use_case.to_response(result)


@router.get(
    "/{item_id}/movements",
    response_model=list[StockMovementResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_movements(
    item_id: int,
    limit: int = 100,
    service: InventoryService = Depends(get_inventory_service),
    stores: StoreBundle = Depends(get_store_bundle),
) -> list[StockMovementResponse]:
    """Get stock movements for an inventory item, newest first."""
    await service.get_item_by_id(item_id)
    movements = await stores.inventory.get_movements(item_id, limit=limit)
    return [StockMovementResponse.model_validate(m) for m in movements]


@router.get(
    "/{item_id}/history",
    response_model=InventoryItemHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item_history(
    item_id: int,
    filters: HistoryFilter = Depends(),
    use_case: GetInventoryItemHistoryUseCase = Depends(get_item_history_use_case),
) -> InventoryItemHistoryResponse:
    """Usage logs, maintenance consumption and movements of one item."""
    history = await use_case.execute(item_id, filters)
    return use_case.to_response(history)
