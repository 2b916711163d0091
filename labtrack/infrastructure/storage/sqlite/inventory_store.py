"""SQLite implementation of inventory storage."""

from datetime import date, datetime

import aiosqlite

from labtrack.config import get_logger
from labtrack.core.entities.inventory import (
    InventoryItem,
    ItemType,
    MovementType,
    StockMovement,
)
from labtrack.core.exceptions import InventoryItemNotFoundError
from labtrack.core.interfaces.inventory_store import IInventoryStore
from labtrack.infrastructure.storage.sqlite.base import (
    iso,
    parse_date,
    parse_datetime,
    raise_update_miss,
)
from labtrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory item and stock movement storage."""

    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        now = datetime.utcnow()
        item.created_at = now
        item.updated_at = now
        item.version = 0
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_items (
                    name, category, quantity, min_quantity, location,
                    description, unit_price, supplier, item_type,
                    usage_unit, max_lifespan, version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.name,
                    item.category,
                    item.quantity,
                    item.min_quantity,
                    item.location,
                    item.description,
                    item.unit_price,
                    item.supplier,
                    item.item_type.value,
                    item.usage_unit,
                    item.max_lifespan,
                    item.version,
                    iso(item.created_at),
                    iso(item.updated_at),
                ),
            )
            item.id = cursor.lastrowid
            logger.info("inventory_item_created", item_id=item.id, name=item.name)
            return item

    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_inventory_item(row)

    async def update_item(self, item: InventoryItem) -> InventoryItem:
        """Update inventory item if nobody else changed it since it was read."""
        item.updated_at = datetime.utcnow()
        new_version = item.version + 1
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_items SET
                    name = ?, category = ?, quantity = ?, min_quantity = ?,
                    location = ?, description = ?, unit_price = ?, supplier = ?,
                    item_type = ?, usage_unit = ?, max_lifespan = ?,
                    version = ?, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    item.name,
                    item.category,
                    item.quantity,
                    item.min_quantity,
                    item.location,
                    item.description,
                    item.unit_price,
                    item.supplier,
                    item.item_type.value,
                    item.usage_unit,
                    item.max_lifespan,
                    new_version,
                    iso(item.updated_at),
                    item.id,
                    item.version,
                ),
            )
            if cursor.rowcount == 0:
                await raise_update_miss(
                    conn,
                    "inventory_items",
                    item.id,
                    "InventoryItem",
                    item.version,
                    InventoryItemNotFoundError,
                )
            item.version = new_version
            logger.info("inventory_item_updated", item_id=item.id, quantity=item.quantity)
            return item

    async def delete_item(self, item_id: int) -> bool:
        """Delete an inventory item."""
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM inventory_items WHERE id = ?", (item_id,))
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("inventory_item_deleted", item_id=item_id)
            return deleted

    async def list_items(
        self,
        limit: int = 100,
        offset: int = 0,
        item_type: ItemType | None = None,
    ) -> list[InventoryItem]:
        """List inventory items with pagination."""
        query = "SELECT * FROM inventory_items"
        params: list = []
        if item_type is not None:
            query += " WHERE item_type = ?"
            params.append(item_type.value)
        query += " ORDER BY name LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_inventory_item(row) for row in rows]

    async def list_low_stock(self, limit: int = 100) -> list[InventoryItem]:
        """List items at or below their reorder floor, emptiest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM inventory_items
                WHERE quantity <= min_quantity
                ORDER BY quantity, name
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_inventory_item(row) for row in rows]

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Record a stock movement."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO stock_movements (
                    inventory_item_id, movement_type, quantity,
                    reference, notes, movement_date, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.inventory_item_id,
                    movement.movement_type.value,
                    movement.quantity,
                    movement.reference,
                    movement.notes,
                    iso(movement.movement_date),
                    iso(movement.created_at),
                ),
            )
            movement.id = cursor.lastrowid
            logger.info(
                "stock_movement_recorded",
                movement_id=movement.id,
                type=movement.movement_type.value,
                qty=movement.quantity,
            )
            return movement

    async def get_movements(
        self, inventory_item_id: int, limit: int = 100
    ) -> list[StockMovement]:
        """Get movements for an inventory item, ordered by date DESC."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                WHERE inventory_item_id = ?
                ORDER BY movement_date DESC, id DESC
                LIMIT ?
                """,
                (inventory_item_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    @staticmethod
    def _row_to_inventory_item(row: aiosqlite.Row) -> InventoryItem:
        """Convert a database row to an InventoryItem entity."""
        return InventoryItem(
            id=row["id"],
            name=row["name"],
            category=row["category"] or "",
            quantity=row["quantity"],
            min_quantity=row["min_quantity"],
            location=row["location"],
            description=row["description"],
            unit_price=row["unit_price"],
            supplier=row["supplier"],
            item_type=ItemType(row["item_type"]),
            usage_unit=row["usage_unit"],
            max_lifespan=row["max_lifespan"],
            version=row["version"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            inventory_item_id=row["inventory_item_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=row["quantity"],
            reference=row["reference"],
            notes=row["notes"],
            movement_date=parse_date(row["movement_date"]) or date.today(),
            created_at=parse_datetime(row["created_at"]),
        )
