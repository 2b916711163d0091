"""
Maintenance record use cases.

Creating a job consumes the stock of its parts; parts can be added or
removed later while the job is open. A completed job is locked: only its
observations and resolution may change and it cannot be deleted.
"""

from dataclasses import dataclass
from datetime import date

from labtrack.application.dto.requests import (
    CreateMaintenanceRequest,
    MaintenancePartRequest,
    UpdateMaintenanceRequest,
)
from labtrack.application.use_cases.base import StoreUseCase, resolve_responsible
from labtrack.config import get_logger
from labtrack.core.entities.maintenance import Maintenance, MaintenancePart
from labtrack.core.entities.user import Actor
from labtrack.core.exceptions import (
    ConflictError,
    MachineNotFoundError,
    MaintenanceLockedError,
    MaintenanceNotFoundError,
    MaintenancePartNotFoundError,
)

logger = get_logger(__name__)

# Fields a completed maintenance record still accepts
COMPLETED_EDITABLE_FIELDS = frozenset({"observations", "resolution"})


class _MaintenanceUseCase(StoreUseCase):
    async def _get_maintenance(self, maintenance_id: int) -> Maintenance:
        maintenance = await self.stores.maintenance.get(maintenance_id)
        if maintenance is None:
            raise MaintenanceNotFoundError(maintenance_id)
        return maintenance

    async def _consume(self, maintenance_id: int, request: MaintenancePartRequest) -> MaintenancePart:
        """Draw stock for one part line and persist the line."""
        adjustment = await self.inventory.adjust_quantity(
            request.inventory_item_id,
            -request.quantity_used,
            reference=f"maintenance:{maintenance_id}",
            notes="Consumed by maintenance",
        )
        if adjustment.entered_low_stock:
            await self.alerts.emit_low_stock(adjustment.item)

        item = adjustment.item
        unit_cost = request.unit_cost if request.unit_cost is not None else item.unit_price or 0.0
        return await self.stores.maintenance.add_part(
            MaintenancePart(
                maintenance_id=maintenance_id,
                inventory_item_id=item.id,
                inventory_item_name=item.name,
                quantity_used=request.quantity_used,
                unit_cost=unit_cost,
            )
        )

    async def _stamp_last_maintenance(self, maintenance: Maintenance) -> None:
        machine = await self.stores.machines.get_machine(maintenance.machine_id)
        if machine is None:
            return
        machine.last_maintenance = maintenance.end_date or maintenance.start_date or date.today()
        await self.stores.machines.update_machine(machine)


class CreateMaintenanceUseCase(_MaintenanceUseCase):
    """Create a maintenance job, consuming stock for each part line."""

    async def execute(
        self,
        request: CreateMaintenanceRequest,
        actor: Actor | None = None,
    ) -> Maintenance:
        technician = resolve_responsible(request.technician, actor, field="technician")
        stores = self.stores

        async with stores.uow.transaction():
            machine = await stores.machines.get_machine(request.machine_id)
            if machine is None:
                raise MachineNotFoundError(request.machine_id)

            maintenance = await stores.maintenance.create(
                Maintenance(
                    machine_id=machine.id,
                    machine_name=machine.name,
                    maintenance_type=request.maintenance_type,
                    description=request.description,
                    start_date=request.start_date,
                    end_date=request.end_date,
                    status=request.status,
                    technician=technician,
                    labor_cost=request.labor_cost,
                    observations=request.observations,
                )
            )
            for line in request.parts:
                maintenance.parts.append(await self._consume(maintenance.id, line))

            if maintenance.is_completed:
                await self._stamp_last_maintenance(maintenance)

        logger.info(
            "maintenance_created",
            maintenance_id=maintenance.id,
            machine_id=machine.id,
            parts=len(maintenance.parts),
            total_cost=maintenance.total_cost,
        )
        return maintenance


class UpdateMaintenanceUseCase(_MaintenanceUseCase):
    """Apply a partial update, honouring the completed-record lock."""

    async def execute(
        self,
        maintenance_id: int,
        request: UpdateMaintenanceRequest,
    ) -> Maintenance:
        changes = request.model_dump(exclude_unset=True, exclude={"version"})

        async with self.stores.uow.transaction():
            maintenance = await self._get_maintenance(maintenance_id)
            if request.version is not None and request.version != maintenance.version:
                raise ConflictError("Maintenance", maintenance_id, request.version)

            if maintenance.is_completed:
                locked = sorted(
                    field
                    for field, value in changes.items()
                    if field not in COMPLETED_EDITABLE_FIELDS
                    and value != getattr(maintenance, field)
                )
                if locked:
                    raise MaintenanceLockedError(maintenance_id, f"change {', '.join(locked)}")

            was_completed = maintenance.is_completed
            for field, value in changes.items():
                setattr(maintenance, field, value)
            maintenance = await self.stores.maintenance.update(maintenance)

            if maintenance.is_completed and not was_completed:
                await self._stamp_last_maintenance(maintenance)

        logger.info(
            "maintenance_updated",
            maintenance_id=maintenance_id,
            fields=sorted(changes),
            status=maintenance.status.value,
        )
        return maintenance


class DeleteMaintenanceUseCase(_MaintenanceUseCase):
    """Delete an open maintenance job and return its parts to stock."""

    async def execute(self, maintenance_id: int) -> None:
        async with self.stores.uow.transaction():
            maintenance = await self._get_maintenance(maintenance_id)
            if maintenance.is_completed:
                raise MaintenanceLockedError(maintenance_id, "delete")

            for part in maintenance.parts:
                await self.inventory.adjust_quantity(
                    part.inventory_item_id,
                    part.quantity_used,
                    reference=f"maintenance:{maintenance_id}",
                    notes="Returned on maintenance deletion",
                )
            await self.stores.maintenance.delete(maintenance_id)

        logger.info(
            "maintenance_deleted",
            maintenance_id=maintenance_id,
            returned_parts=len(maintenance.parts),
        )


@dataclass
class MaintenancePartChange:
    """Maintenance record after a part line was added or removed."""

    maintenance: Maintenance
    part: MaintenancePart


class AddMaintenancePartUseCase(_MaintenanceUseCase):
    """Record inventory consumed by an open job and deduct it from stock."""

    async def execute(
        self,
        maintenance_id: int,
        request: MaintenancePartRequest,
    ) -> MaintenancePartChange:
        async with self.stores.uow.transaction():
            maintenance = await self._get_maintenance(maintenance_id)
            if maintenance.is_completed:
                raise MaintenanceLockedError(maintenance_id, "add parts")

            part = await self._consume(maintenance_id, request)
            maintenance = await self._get_maintenance(maintenance_id)

        logger.info(
            "maintenance_part_added",
            maintenance_id=maintenance_id,
            item_id=part.inventory_item_id,
            quantity=part.quantity_used,
        )
        return MaintenancePartChange(maintenance=maintenance, part=part)


class RemoveMaintenancePartUseCase(_MaintenanceUseCase):
    """Remove a part line from an open job and return its units to stock."""

    async def execute(self, maintenance_id: int, part_id: int) -> MaintenancePartChange:
        async with self.stores.uow.transaction():
            maintenance = await self._get_maintenance(maintenance_id)
            part = await self.stores.maintenance.get_part(part_id)
            if part is None or part.maintenance_id != maintenance_id:
                raise MaintenancePartNotFoundError(part_id)
            if maintenance.is_completed:
                raise MaintenanceLockedError(maintenance_id, "remove parts")

            await self.inventory.adjust_quantity(
                part.inventory_item_id,
                part.quantity_used,
                reference=f"maintenance:{maintenance_id}",
                notes="Returned from maintenance",
            )
            await self.stores.maintenance.delete_part(part_id)
            maintenance = await self._get_maintenance(maintenance_id)

        logger.info(
            "maintenance_part_removed",
            maintenance_id=maintenance_id,
            item_id=part.inventory_item_id,
            quantity=part.quantity_used,
        )
        return MaintenancePartChange(maintenance=maintenance, part=part)
