"""Register Maintenance Reset Use Case: service a part and restart its usage epoch."""

from dataclasses import dataclass
from datetime import date

from labtrack.application.dto.requests import MaintenanceResetRequest
from labtrack.application.dto.responses import (
    MachinePartResponse,
    MaintenanceResetResponse,
    MaintenanceResponse,
    NotificationResponse,
)
from labtrack.application.use_cases.base import StoreUseCase, resolve_responsible
from labtrack.config import get_logger
from labtrack.core.entities.machine import MachinePart
from labtrack.core.entities.maintenance import Maintenance, MaintenancePart, MaintenanceStatus
from labtrack.core.entities.notification import Notification
from labtrack.core.entities.user import Actor
from labtrack.core.exceptions import MachineNotFoundError, MachinePartNotFoundError

logger = get_logger(__name__)


@dataclass
class MaintenanceResetResult:
    """Result of a maintenance reset."""

    part: MachinePart
    maintenance: Maintenance
    notification: Notification
    replaced: bool


class RegisterMaintenanceResetUseCase(StoreUseCase):
    """
    Record maintenance on an installed part.

    Zeroes usage and clears alert state, logs a completed maintenance job,
    stamps the machine's last maintenance date and notifies. When a physical
    replacement happened, one unit is drawn from stock and the part gets a
    fresh installation id. Either everything commits or nothing does.
    """

    async def execute(
        self,
        request: MaintenanceResetRequest,
        actor: Actor | None = None,
    ) -> MaintenanceResetResult:
        logger.info(
            "maintenance_reset_started",
            machine_id=request.machine_id,
            item_id=request.inventory_item_id,
            replaced=request.replaced,
        )
        technician = resolve_responsible(request.technician, actor, field="technician")
        stores = self.stores
        today = date.today()

        async with stores.uow.transaction():
            machine = await stores.machines.get_machine(request.machine_id)
            if machine is None:
                raise MachineNotFoundError(request.machine_id)

            part = await stores.machines.get_part_for_item(
                request.machine_id, request.inventory_item_id
            )
            if part is None:
                raise MachinePartNotFoundError.for_pair(
                    request.machine_id, request.inventory_item_id
                )

            consumed: list[MaintenancePart] = []
            low_stock_item = None
            if request.replaced:
                adjustment = await self.inventory.adjust_quantity(
                    part.inventory_item_id,
                    -1,
                    reference=f"part:{part.id}",
                    notes="Replacement during maintenance",
                )
                consumed.append(
                    MaintenancePart(
                        inventory_item_id=adjustment.item.id,
                        inventory_item_name=adjustment.item.name,
                        quantity_used=1,
                        unit_cost=adjustment.item.unit_price or 0.0,
                    )
                )
                if adjustment.entered_low_stock:
                    low_stock_item = adjustment.item

            previous_usage = part.current_usage
            part.start_new_epoch(new_installation=request.replaced)
            part = await stores.machines.update_part(part)

            action = "replaced" if request.replaced else "reset"
            maintenance = await stores.maintenance.create(
                Maintenance(
                    machine_id=machine.id,
                    machine_name=machine.name,
                    maintenance_type=request.maintenance_type,
                    description=request.description
                    or f"Part {part.name} {action} at {previous_usage:g} {part.usage_type}",
                    start_date=today,
                    end_date=today,
                    status=MaintenanceStatus.COMPLETED,
                    technician=technician,
                    labor_cost=request.labor_cost,
                    observations=request.observations,
                    parts=consumed,
                )
            )

            machine.last_maintenance = today
            await stores.machines.update_machine(machine)

            notification = await self.alerts.emit_maintenance_notice(
                part, machine.name, technician, replaced=request.replaced
            )
            if low_stock_item is not None:
                await self.alerts.emit_low_stock(low_stock_item)

        logger.info(
            "maintenance_reset_complete",
            part_id=part.id,
            maintenance_id=maintenance.id,
            previous_usage=previous_usage,
            replaced=request.replaced,
        )
        return MaintenanceResetResult(
            part=part,
            maintenance=maintenance,
            notification=notification,
            replaced=request.replaced,
        )

    def to_response(self, result: MaintenanceResetResult) -> MaintenanceResetResponse:
        return MaintenanceResetResponse(
            part=MachinePartResponse.model_validate(result.part),
            maintenance=MaintenanceResponse.model_validate(result.maintenance),
            notification=NotificationResponse.model_validate(result.notification),
            replaced=result.replaced,
        )
