"""
Inventory collaborator.

Lookups and quantity adjustments used by the usage and maintenance
workflows. Every quantity change is version-checked and leaves a stock
movement behind.
"""

from dataclasses import dataclass

from labtrack.config import get_logger
from labtrack.core.entities.inventory import (
    InventoryItem,
    ItemType,
    MovementType,
    StockMovement,
    StockStatus,
)
from labtrack.core.exceptions import (
    InsufficientStockError,
    InventoryItemNotFoundError,
    ValidationError,
)
from labtrack.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


@dataclass
class StockAdjustment:
    """Result of a quantity change."""

    item: InventoryItem
    movement: StockMovement
    previous_status: StockStatus

    @property
    def entered_low_stock(self) -> bool:
        """True when this change took the item out of the in-stock band."""
        return (
            self.previous_status == StockStatus.IN_STOCK
            and self.item.status != StockStatus.IN_STOCK
        )


class InventoryService:
    """Inventory lookups and stock adjustments over an injected store."""

    def __init__(self, store: IInventoryStore) -> None:
        self._store = store

    async def get_item_by_id(self, item_id: int) -> InventoryItem:
        item = await self._store.get_item(item_id)
        if item is None:
            raise InventoryItemNotFoundError(item_id)
        return item

    async def get_wear_parts(self, limit: int = 500) -> list[InventoryItem]:
        return await self._store.list_items(limit=limit, item_type=ItemType.WEAR_PART)

    async def adjust_quantity(
        self,
        item_id: int,
        delta: int,
        reference: str | None = None,
        notes: str | None = None,
        movement_type: MovementType | None = None,
    ) -> StockAdjustment:
        """
        Add ``delta`` (may be negative) to an item's quantity.

        Raises:
            ValidationError: delta is zero
            InventoryItemNotFoundError: item does not exist
            InsufficientStockError: the result would be negative
            ConflictError: the item changed since it was read
        """
        if delta == 0:
            raise ValidationError("delta", "quantity adjustment cannot be zero", delta)

        item = await self.get_item_by_id(item_id)
        if item.quantity + delta < 0:
            raise InsufficientStockError(
                item_id=item_id,
                requested=-delta,
                available=item.quantity,
            )

        previous_status = item.status
        item.quantity += delta
        item = await self._store.update_item(item)

        if movement_type is None:
            movement_type = MovementType.IN if delta > 0 else MovementType.OUT
        movement = await self._store.add_movement(
            StockMovement(
                inventory_item_id=item_id,
                movement_type=movement_type,
                quantity=abs(delta),
                reference=reference,
                notes=notes,
            )
        )

        logger.info(
            "stock_adjusted",
            item_id=item_id,
            delta=delta,
            quantity=item.quantity,
            reference=reference,
        )
        return StockAdjustment(item=item, movement=movement, previous_status=previous_status)
