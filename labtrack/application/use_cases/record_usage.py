"""Record Usage Use Case: add usage to an installed part and alert on band edges."""

from dataclasses import dataclass

from labtrack.application.dto.requests import RecordUsageRequest
from labtrack.application.dto.responses import (
    MachinePartResponse,
    NotificationResponse,
    RecordUsageResponse,
    UsageLogResponse,
)
from labtrack.application.use_cases.base import StoreUseCase, resolve_responsible
from labtrack.config import get_logger
from labtrack.core.entities.machine import MachinePart
from labtrack.core.entities.notification import Notification
from labtrack.core.entities.usage import UsageLog
from labtrack.core.entities.user import Actor
from labtrack.core.exceptions import MachineNotFoundError, MachinePartNotFoundError
from labtrack.core.services import UsageAccountingService, UsageUpdate
from labtrack.infrastructure.storage import StoreBundle

logger = get_logger(__name__)


@dataclass
class RecordUsageResult:
    """Result of recording usage."""

    log: UsageLog
    part: MachinePart
    update: UsageUpdate
    notification: Notification | None = None


class RecordUsageUseCase(StoreUseCase):
    """
    Record a usage event.

    The usage log, the part's new counter and any alert commit together.
    Usage is never coerced between units and is not capped at max usage.
    """

    def __init__(
        self,
        stores: StoreBundle | None = None,
        accounting: UsageAccountingService | None = None,
    ):
        super().__init__(stores)
        self._accounting = accounting or UsageAccountingService()

    async def execute(
        self,
        request: RecordUsageRequest,
        actor: Actor | None = None,
    ) -> RecordUsageResult:
        logger.info(
            "record_usage_started",
            machine_id=request.machine_id,
            item_id=request.inventory_item_id,
            amount=request.amount,
            unit=request.unit,
        )
        responsible = resolve_responsible(request.responsible, actor)
        stores = self.stores

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

            item = await stores.inventory.get_item(request.inventory_item_id)

            update = self._accounting.apply_usage(part, request.amount, request.unit)
            part = await stores.machines.update_part(part)

            log_kwargs = {}
            if request.usage_date is not None:
                log_kwargs["usage_date"] = request.usage_date
            log = await stores.usage_logs.append(
                UsageLog(
                    machine_id=machine.id,
                    machine_name=machine.name,
                    inventory_item_id=part.inventory_item_id,
                    inventory_item_name=item.name if item else part.name,
                    part_id=part.id,
                    installation_id=part.installation_id,
                    quantity_used=request.amount,
                    unit=part.usage_type,
                    responsible=responsible,
                    notes=request.notes,
                    **log_kwargs,
                )
            )

            notification = None
            if update.crossed is not None:
                notification = await self.alerts.emit_usage_alert(
                    part, machine.name, update.crossed
                )

        logger.info(
            "usage_recorded",
            part_id=part.id,
            log_id=log.id,
            current_usage=part.current_usage,
            percentage=round(update.usage_percentage, 1),
            status=update.status.value,
            alerted=notification is not None,
        )
        return RecordUsageResult(log=log, part=part, update=update, notification=notification)

    def to_response(self, result: RecordUsageResult) -> RecordUsageResponse:
        return RecordUsageResponse(
            log=UsageLogResponse.model_validate(result.log),
            part=MachinePartResponse.model_validate(result.part),
            usage_percentage=result.update.usage_percentage,
            status=result.update.status,
            previous_status=result.update.previous_status,
            alert=(
                NotificationResponse.model_validate(result.notification)
                if result.notification
                else None
            ),
        )
