"""Abstract interface for maintenance storage."""

from abc import ABC, abstractmethod

from labtrack.core.entities.maintenance import Maintenance, MaintenancePart


class IMaintenanceStore(ABC):
    """Interface for maintenance records and the parts they consumed."""

    @abstractmethod
    async def create(self, maintenance: Maintenance) -> Maintenance:
        """Create a maintenance record together with its parts."""
        pass

    @abstractmethod
    async def get(self, maintenance_id: int) -> Maintenance | None:
        """Get a maintenance record with its parts loaded."""
        pass

    @abstractmethod
    async def update(self, maintenance: Maintenance) -> Maintenance:
        """Update record fields (not parts); raises ConflictError on a stale version."""
        pass

    @abstractmethod
    async def delete(self, maintenance_id: int) -> bool:
        """Delete a record and its parts."""
        pass

    @abstractmethod
    async def list_maintenance(
        self,
        machine_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Maintenance]:
        pass

    @abstractmethod
    async def add_part(self, part: MaintenancePart) -> MaintenancePart:
        pass

    @abstractmethod
    async def get_part(self, part_id: int) -> MaintenancePart | None:
        pass

    @abstractmethod
    async def delete_part(self, part_id: int) -> bool:
        pass

    @abstractmethod
    async def list_parts_for_item(self, inventory_item_id: int) -> list[MaintenancePart]:
        """Every maintenance part entry that consumed a given item."""
        pass
