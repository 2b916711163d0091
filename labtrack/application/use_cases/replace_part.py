"""Replace Part Use Case: swap an installed part for a new one from stock."""

from dataclasses import dataclass

from labtrack.application.dto.requests import ReplacePartRequest
from labtrack.application.dto.responses import (
    InventoryItemResponse,
    MachinePartResponse,
    ReplacePartResponse,
)
from labtrack.application.use_cases.base import StoreUseCase
from labtrack.config import get_logger
from labtrack.core.entities.inventory import InventoryItem
from labtrack.core.entities.machine import MachinePart
from labtrack.core.entities.user import Actor
from labtrack.core.exceptions import (
    IncompatiblePartError,
    InsufficientStockError,
    MachinePartNotFoundError,
    ValidationError,
)
from labtrack.core.services import units_match

logger = get_logger(__name__)


@dataclass
class ReplacePartResult:
    """Result of a part replacement."""

    part: MachinePart
    item: InventoryItem
    previous_installation_id: str


def check_compatible(
    part: MachinePart,
    current_item: InventoryItem | None,
    new_item: InventoryItem,
) -> None:
    """
    A replacement must be a wear part and match the installed one by item
    name or by usage unit.

    Raises:
        IncompatiblePartError: otherwise
    """
    if not new_item.is_wear_part or not new_item.max_lifespan:
        raise IncompatiblePartError(part.id or 0, new_item.id or 0, "item is not a wear part")

    same_name = (
        current_item is not None
        and current_item.name.strip().casefold() == new_item.name.strip().casefold()
    )
    same_unit = units_match(part.usage_type, new_item.usage_unit or "")
    if not (same_name or same_unit):
        raise IncompatiblePartError(
            part.id or 0,
            new_item.id or 0,
            f"usage unit '{new_item.usage_unit}' does not match '{part.usage_type}'",
        )


class ReplacePartUseCase(StoreUseCase):
    """
    Replace an installed part.

    Draws one unit of the new item from stock, adopts its unit and lifespan,
    and starts a fresh installation with zero usage. Nothing changes if any
    check fails.
    """

    async def execute(
        self,
        part_id: int,
        request: ReplacePartRequest,
        actor: Actor | None = None,
    ) -> ReplacePartResult:
        logger.info(
            "replace_part_started",
            part_id=part_id,
            new_item_id=request.new_inventory_item_id,
            actor=actor.user_id if actor else None,
        )
        stores = self.stores

        async with stores.uow.transaction():
            part = await stores.machines.get_part(part_id)
            if part is None:
                raise MachinePartNotFoundError(part_id)

            new_item = await self.inventory.get_item_by_id(request.new_inventory_item_id)
            current_item = await stores.inventory.get_item(part.inventory_item_id)
            check_compatible(part, current_item, new_item)

            if new_item.quantity <= 0:
                raise InsufficientStockError(
                    item_id=new_item.id,
                    requested=1,
                    available=new_item.quantity,
                )

            if new_item.id != part.inventory_item_id:
                existing = await stores.machines.get_part_for_item(part.machine_id, new_item.id)
                if existing is not None:
                    raise ValidationError(
                        "new_inventory_item_id",
                        f"machine {part.machine_id} already has a part for item {new_item.id}",
                        new_item.id,
                    )

            adjustment = await self.inventory.adjust_quantity(
                new_item.id,
                -1,
                reference=f"part:{part.id}",
                notes=request.notes or "Part replacement",
            )

            previous_installation_id = part.installation_id
            part.inventory_item_id = new_item.id
            part.usage_type = new_item.usage_unit
            part.max_usage = new_item.max_lifespan
            part.start_new_epoch(new_installation=True)
            part = await stores.machines.update_part(part)

            if adjustment.entered_low_stock:
                await self.alerts.emit_low_stock(adjustment.item)

        logger.info(
            "part_replaced",
            part_id=part.id,
            item_id=new_item.id,
            installation_id=part.installation_id,
            remaining_qty=adjustment.item.quantity,
        )
        return ReplacePartResult(
            part=part,
            item=adjustment.item,
            previous_installation_id=previous_installation_id,
        )

    def to_response(self, result: ReplacePartResult) -> ReplacePartResponse:
        return ReplacePartResponse(
            part=MachinePartResponse.model_validate(result.part),
            inventory_item=InventoryItemResponse.model_validate(result.item),
            previous_installation_id=result.previous_installation_id,
        )
