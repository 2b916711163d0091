"""Abstract interface for machine and installed part storage."""

from abc import ABC, abstractmethod

from labtrack.core.entities.machine import Machine, MachinePart


class IMachineStore(ABC):
    """Interface for the machine/part registry."""

    # Machines

    @abstractmethod
    async def create_machine(self, machine: Machine) -> Machine:
        pass

    @abstractmethod
    async def get_machine(self, machine_id: int) -> Machine | None:
        pass

    @abstractmethod
    async def update_machine(self, machine: Machine) -> Machine:
        """Update a machine; raises ConflictError on a stale version."""
        pass

    @abstractmethod
    async def delete_machine(self, machine_id: int) -> bool:
        """Delete a machine and every part installed on it."""
        pass

    @abstractmethod
    async def list_machines(self, limit: int = 100, offset: int = 0) -> list[Machine]:
        pass

    # Parts

    @abstractmethod
    async def create_part(self, part: MachinePart) -> MachinePart:
        pass

    @abstractmethod
    async def get_part(self, part_id: int) -> MachinePart | None:
        pass

    @abstractmethod
    async def get_part_for_item(
        self, machine_id: int, inventory_item_id: int
    ) -> MachinePart | None:
        """Get the part of a given inventory item installed on a machine."""
        pass

    @abstractmethod
    async def update_part(self, part: MachinePart) -> MachinePart:
        """Update a part; raises ConflictError on a stale version."""
        pass

    @abstractmethod
    async def delete_part(self, part_id: int) -> bool:
        pass

    @abstractmethod
    async def list_parts(self, machine_id: int) -> list[MachinePart]:
        """Parts installed on one machine."""
        pass

    @abstractmethod
    async def list_all_parts(self) -> list[MachinePart]:
        """Every installed part across all machines."""
        pass
