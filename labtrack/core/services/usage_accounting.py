"""
Usage Accounting Service.

Turns usage events into a consistent percentage and wear band per installed
part, and decides when a band crossing needs an alert.
"""

import math
from dataclasses import dataclass

from labtrack.config import get_logger
from labtrack.core.entities.inventory import InventoryItem
from labtrack.core.entities.machine import Machine, MachinePart, PartStatus, usage_percentage
from labtrack.core.entities.usage import UsageInfo
from labtrack.core.exceptions import UnitMismatchError, ValidationError

logger = get_logger(__name__)


def units_match(expected: str, actual: str) -> bool:
    """Compare usage unit labels ignoring case and surrounding whitespace."""
    return expected.strip().casefold() == actual.strip().casefold()


@dataclass
class UsageUpdate:
    """Outcome of applying one usage event to a part."""

    previous_status: PartStatus
    status: PartStatus
    usage_percentage: float
    crossed: PartStatus | None = None  # band entered for the first time this epoch

    @property
    def status_changed(self) -> bool:
        return self.previous_status != self.status


class UsageAccountingService:
    """
    Layer-pure usage rules.

    Works on entities only; persistence and alert delivery are the caller's job.
    """

    @staticmethod
    def pending_crossing(part: MachinePart) -> PartStatus | None:
        """
        Band the part has entered but not yet been alerted for.

        Edge-triggered: a part that stays in an already-alerted band returns None.
        """
        status = part.status
        if status.rank > part.alerted_status.rank:
            return status
        return None

    def apply_usage(self, part: MachinePart, amount: float, unit: str) -> UsageUpdate:
        """
        Add usage to a part in place.

        Raises:
            ValidationError: amount is not a positive finite number, or the
                new total would overflow
            UnitMismatchError: unit differs from the part's usage unit
        """
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("amount", "usage amount must be a positive finite number", amount)
        if not units_match(part.usage_type, unit):
            raise UnitMismatchError(part.id or 0, part.usage_type, unit)

        total = part.current_usage + amount
        if not math.isfinite(usage_percentage(total, part.max_usage)):
            raise ValidationError("amount", "usage total would overflow", amount)

        previous = part.status
        part.current_usage = total

        crossed = self.pending_crossing(part)
        if crossed is not None:
            part.alerted_status = crossed

        update = UsageUpdate(
            previous_status=previous,
            status=part.status,
            usage_percentage=part.usage_percentage,
            crossed=crossed,
        )
        logger.debug(
            "usage_applied",
            part_id=part.id,
            amount=amount,
            current_usage=part.current_usage,
            status=update.status.value,
            crossed=crossed.value if crossed else None,
        )
        return update

    @staticmethod
    def project(
        parts: list[MachinePart],
        machines: dict[int, Machine],
        items: dict[int, InventoryItem],
    ) -> list[UsageInfo]:
        """Build one usage record per installed part from current state."""
        records: list[UsageInfo] = []
        for part in parts:
            if part.id is None:
                continue
            machine = machines.get(part.machine_id)
            item = items.get(part.inventory_item_id)
            percentage = part.usage_percentage
            records.append(
                UsageInfo(
                    machine_id=part.machine_id,
                    machine_name=machine.name if machine else "",
                    part_id=part.id,
                    part_name=part.name,
                    inventory_item_id=part.inventory_item_id,
                    inventory_item_name=item.name if item else part.name,
                    usage_unit=part.usage_type,
                    accumulated_usage=part.current_usage,
                    max_usage=part.max_usage,
                    usage_percentage=percentage,
                    status=part.status,
                    requires_maintenance=percentage >= 100.0,
                    alert=percentage >= 75.0,
                )
            )
        return records
