"""
Alert Emitter.

Creates, lists and retires notifications, and phrases the alerts raised by
usage accounting, maintenance and stock changes.
"""

from labtrack.config import get_logger
from labtrack.core.entities.inventory import InventoryItem
from labtrack.core.entities.machine import MachinePart, PartStatus
from labtrack.core.entities.notification import (
    Notification,
    NotificationSeverity,
    NotificationType,
)
from labtrack.core.interfaces.notification_store import INotificationStore

logger = get_logger(__name__)


class AlertEmitter:
    """Notification service backed by an injected store."""

    def __init__(self, store: INotificationStore) -> None:
        self._store = store

    async def create(
        self,
        type: NotificationType,
        title: str,
        message: str,
        severity: NotificationSeverity,
        related_id: str | None = None,
    ) -> Notification:
        notification = Notification(
            type=type,
            title=title,
            message=message,
            severity=severity,
            related_id=related_id,
        )
        notification = await self._store.put(notification)
        logger.info(
            "notification_created",
            notification_id=notification.id,
            type=notification.type.value,
            severity=notification.severity.value,
            related_id=related_id,
        )
        return notification

    async def list(self, unread_only: bool = False, limit: int = 100) -> list[Notification]:
        return await self._store.list_notifications(unread_only=unread_only, limit=limit)

    async def mark_read(self, notification_id: str) -> bool:
        """Mark as read. Returns False when the id does not exist."""
        notification = await self._store.get(notification_id)
        if notification is None:
            return False
        if not notification.read:
            notification.read = True
            await self._store.put(notification)
        return True

    async def delete(self, notification_id: str) -> bool:
        """Delete. Returns False when the id does not exist."""
        deleted = await self._store.delete(notification_id)
        if deleted:
            logger.info("notification_deleted", notification_id=notification_id)
        return deleted

    async def emit_usage_alert(
        self,
        part: MachinePart,
        machine_name: str,
        crossed: PartStatus,
    ) -> Notification:
        """Announce that a part entered the warning or critical band."""
        percentage = part.usage_percentage
        if part.current_usage >= part.max_usage:
            severity = NotificationSeverity.HIGH
            title = "Part replacement required"
            message = (
                f"Part {part.name} on {machine_name} has reached {percentage:.1f}% of its "
                f"service life ({part.current_usage:g} of {part.max_usage:g} "
                f"{part.usage_type}). Immediate maintenance is required."
            )
        else:
            severity = NotificationSeverity.MEDIUM
            title = "Wear part alert"
            message = (
                f"Part {part.name} on {machine_name} is at {percentage:.1f}% of its "
                f"service life ({part.current_usage:g} of {part.max_usage:g} "
                f"{part.usage_type}). Consider scheduling a replacement."
            )

        logger.info(
            "usage_threshold_crossed",
            part_id=part.id,
            machine_id=part.machine_id,
            band=crossed.value,
            percentage=round(percentage, 1),
        )
        return await self.create(
            type=NotificationType.USAGE_ALERT,
            title=title,
            message=message,
            severity=severity,
            related_id=f"{part.machine_id}_{part.inventory_item_id}",
        )

    async def emit_maintenance_notice(
        self,
        part: MachinePart,
        machine_name: str,
        responsible: str,
        replaced: bool,
    ) -> Notification:
        action = "replaced" if replaced else "serviced"
        return await self.create(
            type=NotificationType.MAINTENANCE,
            title="Maintenance recorded",
            message=f"Part {part.name} on {machine_name} was {action} by {responsible}.",
            severity=NotificationSeverity.LOW,
            related_id=f"{part.machine_id}_{part.inventory_item_id}",
        )

    async def emit_low_stock(self, item: InventoryItem) -> Notification:
        if item.quantity <= 0:
            severity = NotificationSeverity.HIGH
            title = "Out of stock"
        else:
            severity = NotificationSeverity.MEDIUM
            title = "Low stock"
        return await self.create(
            type=NotificationType.LOW_STOCK,
            title=title,
            message=(
                f"{item.name} has {item.quantity} unit(s) left "
                f"(minimum {item.min_quantity})."
            ),
            severity=severity,
            related_id=str(item.id),
        )
