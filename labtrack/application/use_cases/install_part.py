"""Install Part Use Case: put a wear part into service on a machine."""

from labtrack.application.dto.requests import InstallPartRequest
from labtrack.application.use_cases.base import StoreUseCase
from labtrack.config import get_logger
from labtrack.core.entities.machine import MachinePart
from labtrack.core.exceptions import MachineNotFoundError, ValidationError

logger = get_logger(__name__)


class InstallPartUseCase(StoreUseCase):
    """Install a part with zero usage; one part per machine and item."""

    async def execute(self, machine_id: int, request: InstallPartRequest) -> MachinePart:
        stores = self.stores

        async with stores.uow.transaction():
            machine = await stores.machines.get_machine(machine_id)
            if machine is None:
                raise MachineNotFoundError(machine_id)

            item = await self.inventory.get_item_by_id(request.inventory_item_id)
            if not item.is_wear_part:
                raise ValidationError(
                    "inventory_item_id",
                    f"item {item.id} is a {item.item_type.value}, not a wear part",
                    item.id,
                )

            existing = await stores.machines.get_part_for_item(machine_id, item.id)
            if existing is not None:
                raise ValidationError(
                    "inventory_item_id",
                    f"machine {machine_id} already has part {existing.id} for item {item.id}",
                    item.id,
                )

            fields = {}
            if request.installation_date is not None:
                fields["installation_date"] = request.installation_date
            part = await stores.machines.create_part(
                MachinePart(
                    machine_id=machine_id,
                    inventory_item_id=item.id,
                    name=request.name or item.name,
                    usage_type=request.usage_type or item.usage_unit,
                    max_usage=request.max_usage or item.max_lifespan,
                    **fields,
                )
            )

        logger.info(
            "part_installed",
            part_id=part.id,
            machine_id=machine_id,
            item_id=item.id,
            max_usage=part.max_usage,
            usage_type=part.usage_type,
        )
        return part
