"""Get Usage Info Use Case: usage projection over every installed part."""

from labtrack.application.use_cases.base import StoreUseCase
from labtrack.config import get_logger
from labtrack.core.entities.inventory import InventoryItem
from labtrack.core.entities.machine import Machine
from labtrack.core.entities.usage import UsageInfo
from labtrack.core.services import UsageAccountingService

logger = get_logger(__name__)


class GetUsageInfoUseCase(StoreUseCase):
    """Read-only; each call reflects the current part state and nothing else."""

    async def execute(self) -> list[UsageInfo]:
        stores = self.stores
        parts = await stores.machines.list_all_parts()
        if not parts:
            return []

        machines: dict[int, Machine] = {}
        for machine_id in {p.machine_id for p in parts}:
            machine = await stores.machines.get_machine(machine_id)
            if machine is not None:
                machines[machine_id] = machine

        items: dict[int, InventoryItem] = {}
        for item_id in {p.inventory_item_id for p in parts}:
            item = await stores.inventory.get_item(item_id)
            if item is not None:
                items[item_id] = item

        records = UsageAccountingService.project(parts, machines, items)
        logger.debug(
            "usage_info_projected",
            parts=len(records),
            alerts=sum(1 for r in records if r.alert),
        )
        return records
