"""Adjust Stock Use Case: manual stock correction with movement log."""

from dataclasses import dataclass

from labtrack.application.dto.requests import AdjustStockRequest
from labtrack.application.dto.responses import (
    AdjustStockResponse,
    InventoryItemResponse,
    StockMovementResponse,
)
from labtrack.application.use_cases.base import StoreUseCase
from labtrack.config import get_logger
from labtrack.core.entities.inventory import MovementType
from labtrack.core.entities.notification import Notification
from labtrack.core.entities.user import Actor
from labtrack.core.services import StockAdjustment

logger = get_logger(__name__)


@dataclass
class AdjustStockResult:
    """Result of a manual adjustment."""

    adjustment: StockAdjustment
    notification: Notification | None = None


class AdjustStockUseCase(StoreUseCase):
    """
    Add or remove units by hand.

    Raises a low-stock notification when the change takes the item out of
    the in-stock band.
    """

    async def execute(
        self,
        item_id: int,
        request: AdjustStockRequest,
        actor: Actor | None = None,
    ) -> AdjustStockResult:
        notes = request.notes
        if actor is not None:
            notes = f"{notes} ({actor.label})" if notes else f"Adjusted by {actor.label}"

        async with self.stores.uow.transaction():
            adjustment = await self.inventory.adjust_quantity(
                item_id,
                request.delta,
                reference=request.reference,
                notes=notes,
                movement_type=MovementType.ADJUST,
            )
            notification = None
            if adjustment.entered_low_stock:
                notification = await self.alerts.emit_low_stock(adjustment.item)

        return AdjustStockResult(adjustment=adjustment, notification=notification)

    def to_response(self, result: AdjustStockResult) -> AdjustStockResponse:
        return AdjustStockResponse(
            inventory_item=InventoryItemResponse.model_validate(result.adjustment.item),
            movement=StockMovementResponse.model_validate(result.adjustment.movement),
            low_stock_alert=result.notification is not None,
        )
