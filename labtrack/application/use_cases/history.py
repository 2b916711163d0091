"""
History use cases.

Machine history gathers a machine's usage logs and maintenance jobs; item
history gathers an inventory item's usage logs, the jobs that consumed it and
its stock movements. Both accept a date range and a responsible-person filter
and report totals over what survived the filter.
"""

from dataclasses import dataclass, field
from datetime import date

from labtrack.application.dto.requests import HistoryFilter
from labtrack.application.dto.responses import (
    InventoryItemHistoryResponse,
    InventoryItemHistoryStats,
    InventoryItemResponse,
    ItemMaintenanceUse,
    MachineHistoryResponse,
    MachineHistoryStats,
    MachineResponse,
    MaintenancePartResponse,
    MaintenanceResponse,
    StockMovementResponse,
    UsageLogResponse,
)
from labtrack.application.use_cases.base import StoreUseCase
from labtrack.config import get_logger
from labtrack.core.entities.inventory import InventoryItem, StockMovement
from labtrack.core.entities.machine import Machine
from labtrack.core.entities.maintenance import Maintenance, MaintenancePart
from labtrack.core.entities.usage import UsageLog
from labtrack.core.exceptions import MachineNotFoundError

logger = get_logger(__name__)

# Upper bound on rows pulled per history view
HISTORY_LIMIT = 10_000


def matches(
    filters: HistoryFilter | None,
    when: date | None,
    responsible: str | None,
) -> bool:
    """Apply the date range and case-insensitive responsible substring."""
    if filters is None:
        return True
    if filters.start_date and (when is None or when < filters.start_date):
        return False
    if filters.end_date and (when is None or when > filters.end_date):
        return False
    if filters.responsible:
        needle = filters.responsible.casefold()
        if needle not in (responsible or "").casefold():
            return False
    return True


@dataclass
class MachineHistory:
    machine: Machine
    usage_logs: list[UsageLog]
    maintenances: list[Maintenance]

    @property
    def maintenance_parts(self) -> list[MaintenancePart]:
        return [part for m in self.maintenances for part in m.parts]

    @property
    def total_parts(self) -> int:
        return sum(p.quantity_used for p in self.maintenance_parts)

    @property
    def total_cost(self) -> float:
        return sum(m.total_cost for m in self.maintenances)


class GetMachineHistoryUseCase(StoreUseCase):
    """Usage logs and maintenance jobs of one machine."""

    async def execute(
        self,
        machine_id: int,
        filters: HistoryFilter | None = None,
    ) -> MachineHistory:
        stores = self.stores
        machine = await stores.machines.get_machine(machine_id)
        if machine is None:
            raise MachineNotFoundError(machine_id)

        logs = await stores.usage_logs.list_logs(machine_id=machine_id, limit=HISTORY_LIMIT)
        maintenances = await stores.maintenance.list_maintenance(
            machine_id=machine_id, limit=HISTORY_LIMIT
        )

        history = MachineHistory(
            machine=machine,
            usage_logs=[log for log in logs if matches(filters, log.usage_date, log.responsible)],
            maintenances=[
                m for m in maintenances if matches(filters, m.start_date, m.technician)
            ],
        )
        logger.debug(
            "machine_history_loaded",
            machine_id=machine_id,
            usage_logs=len(history.usage_logs),
            maintenances=len(history.maintenances),
        )
        return history

    def to_response(self, history: MachineHistory) -> MachineHistoryResponse:
        return MachineHistoryResponse(
            machine=MachineResponse.model_validate(history.machine),
            usage_logs=[UsageLogResponse.model_validate(log) for log in history.usage_logs],
            maintenances=[MaintenanceResponse.model_validate(m) for m in history.maintenances],
            maintenance_parts=[
                MaintenancePartResponse.model_validate(p) for p in history.maintenance_parts
            ],
            stats=MachineHistoryStats(
                total_parts=history.total_parts,
                total_cost=history.total_cost,
                total_maintenances=len(history.maintenances),
                total_usage_logs=len(history.usage_logs),
            ),
        )


@dataclass
class ItemHistory:
    item: InventoryItem
    usage_logs: list[UsageLog]
    maintenance_uses: list[tuple[Maintenance, MaintenancePart]]
    movements: list[StockMovement] = field(default_factory=list)

    @property
    def total_used(self) -> float:
        return sum(log.quantity_used for log in self.usage_logs)

    @property
    def total_used_in_maintenance(self) -> int:
        return sum(part.quantity_used for _, part in self.maintenance_uses)

    @property
    def total_cost(self) -> float:
        return sum(part.total_cost for _, part in self.maintenance_uses)


class GetInventoryItemHistoryUseCase(StoreUseCase):
    """Usage logs, maintenance consumption and stock movements of one item."""

    async def execute(
        self,
        item_id: int,
        filters: HistoryFilter | None = None,
    ) -> ItemHistory:
        stores = self.stores
        item = await self.inventory.get_item_by_id(item_id)

        logs = await stores.usage_logs.list_logs(inventory_item_id=item_id, limit=HISTORY_LIMIT)

        uses: list[tuple[Maintenance, MaintenancePart]] = []
        jobs: dict[int, Maintenance | None] = {}
        for part in await stores.maintenance.list_parts_for_item(item_id):
            if part.maintenance_id not in jobs:
                jobs[part.maintenance_id] = await stores.maintenance.get(part.maintenance_id)
            job = jobs[part.maintenance_id]
            if job is None:
                continue
            if matches(filters, job.start_date or part.recorded_date, job.technician):
                uses.append((job, part))

        # Movements carry no responsible party; filter them by date only
        date_only = filters.model_copy(update={"responsible": None}) if filters else None
        movements = [
            m
            for m in await stores.inventory.get_movements(item_id, limit=HISTORY_LIMIT)
            if matches(date_only, m.movement_date, None)
        ]

        return ItemHistory(
            item=item,
            usage_logs=[log for log in logs if matches(filters, log.usage_date, log.responsible)],
            maintenance_uses=uses,
            movements=movements,
        )

    def to_response(self, history: ItemHistory) -> InventoryItemHistoryResponse:
        return InventoryItemHistoryResponse(
            item=InventoryItemResponse.model_validate(history.item),
            usage_logs=[UsageLogResponse.model_validate(log) for log in history.usage_logs],
            maintenance_uses=[
                ItemMaintenanceUse(
                    maintenance_id=job.id,
                    machine_id=job.machine_id,
                    machine_name=job.machine_name,
                    technician=job.technician,
                    start_date=job.start_date,
                    part=MaintenancePartResponse.model_validate(part),
                )
                for job, part in history.maintenance_uses
            ],
            movements=[StockMovementResponse.model_validate(m) for m in history.movements],
            stats=InventoryItemHistoryStats(
                total_used=history.total_used,
                total_used_in_maintenance=history.total_used_in_maintenance,
                total_cost=history.total_cost,
                total_usage_logs=len(history.usage_logs),
                total_maintenances=len(history.maintenance_uses),
            ),
        )
