"""Abstract interface for notification storage."""

from abc import ABC, abstractmethod

from labtrack.core.entities.notification import Notification


class INotificationStore(ABC):
    """Keyed notification storage (get/put/delete plus listing)."""

    @abstractmethod
    async def put(self, notification: Notification) -> Notification:
        """Insert or replace a notification by id."""
        pass

    @abstractmethod
    async def get(self, notification_id: str) -> Notification | None:
        pass

    @abstractmethod
    async def delete(self, notification_id: str) -> bool:
        pass

    @abstractmethod
    async def list_notifications(
        self, unread_only: bool = False, limit: int = 100
    ) -> list[Notification]:
        """List notifications, newest first."""
        pass
