"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod

from labtrack.core.entities.inventory import InventoryItem, ItemType, StockMovement


class IInventoryStore(ABC):
    """Interface for inventory item and stock movement persistence."""

    @abstractmethod
    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        pass

    @abstractmethod
    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """
        Update an inventory item.

        Raises ConflictError if the stored version differs from ``item.version``.
        On success the returned item carries the incremented version.
        """
        pass

    @abstractmethod
    async def delete_item(self, item_id: int) -> bool:
        """Delete an inventory item. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def list_items(
        self,
        limit: int = 100,
        offset: int = 0,
        item_type: ItemType | None = None,
    ) -> list[InventoryItem]:
        """List inventory items with pagination, optionally by type."""
        pass

    @abstractmethod
    async def list_low_stock(self, limit: int = 100) -> list[InventoryItem]:
        """List items whose quantity is at or below their min_quantity."""
        pass

    @abstractmethod
    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Record a stock movement."""
        pass

    @abstractmethod
    async def get_movements(
        self, inventory_item_id: int, limit: int = 100
    ) -> list[StockMovement]:
        """Get movements for an inventory item, newest first."""
        pass
