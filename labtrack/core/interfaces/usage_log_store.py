"""Abstract interface for the append-only usage log."""

from abc import ABC, abstractmethod

from labtrack.core.entities.usage import UsageLog


class IUsageLogStore(ABC):
    """Append-only usage log persistence. There is no update or delete."""

    @abstractmethod
    async def append(self, log: UsageLog) -> UsageLog:
        """Append a usage log entry."""
        pass

    @abstractmethod
    async def get(self, log_id: int) -> UsageLog | None:
        pass

    @abstractmethod
    async def list_logs(
        self,
        machine_id: int | None = None,
        inventory_item_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[UsageLog]:
        """List logs, newest first, optionally filtered by machine or item."""
        pass
