"""SQLite implementation of maintenance storage."""

from datetime import date, datetime

import aiosqlite

from labtrack.config import get_logger
from labtrack.core.entities.maintenance import (
    Maintenance,
    MaintenancePart,
    MaintenanceStatus,
    MaintenanceType,
)
from labtrack.core.exceptions import MaintenanceNotFoundError
from labtrack.core.interfaces.maintenance_store import IMaintenanceStore
from labtrack.infrastructure.storage.sqlite.base import (
    iso,
    parse_date,
    parse_datetime,
    raise_update_miss,
)
from labtrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteMaintenanceStore(IMaintenanceStore):
    """SQLite implementation of maintenance records and their consumed parts."""

    async def create(self, maintenance: Maintenance) -> Maintenance:
        """Create a maintenance record together with its parts."""
        now = datetime.utcnow()
        maintenance.created_at = now
        maintenance.updated_at = now
        maintenance.version = 0
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO maintenances (
                    machine_id, machine_name, maintenance_type, description,
                    start_date, end_date, status, technician, labor_cost,
                    observations, resolution, version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    maintenance.machine_id,
                    maintenance.machine_name,
                    maintenance.maintenance_type.value,
                    maintenance.description,
                    iso(maintenance.start_date),
                    iso(maintenance.end_date),
                    maintenance.status.value,
                    maintenance.technician,
                    maintenance.labor_cost,
                    maintenance.observations,
                    maintenance.resolution,
                    maintenance.version,
                    iso(maintenance.created_at),
                    iso(maintenance.updated_at),
                ),
            )
            maintenance.id = cursor.lastrowid

            for part in maintenance.parts:
                part.maintenance_id = maintenance.id
                await self._insert_part(conn, part)

            logger.info(
                "maintenance_created",
                maintenance_id=maintenance.id,
                machine_id=maintenance.machine_id,
                parts=len(maintenance.parts),
            )
            return maintenance

    async def _insert_part(self, conn: aiosqlite.Connection, part: MaintenancePart) -> None:
        cursor = await conn.execute(
            """
            INSERT INTO maintenance_parts (
                maintenance_id, inventory_item_id, inventory_item_name,
                quantity_used, unit_cost, recorded_date
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                part.maintenance_id,
                part.inventory_item_id,
                part.inventory_item_name,
                part.quantity_used,
                part.unit_cost,
                iso(part.recorded_date),
            ),
        )
        part.id = cursor.lastrowid

    async def get(self, maintenance_id: int) -> Maintenance | None:
        """Get maintenance by ID with its parts."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM maintenances WHERE id = ?", (maintenance_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            maintenance = self._row_to_maintenance(row)
            maintenance.parts = await self._load_parts(conn, maintenance_id)
            return maintenance

    async def _load_parts(
        self, conn: aiosqlite.Connection, maintenance_id: int
    ) -> list[MaintenancePart]:
        cursor = await conn.execute(
            "SELECT * FROM maintenance_parts WHERE maintenance_id = ? ORDER BY id",
            (maintenance_id,),
        )
        return [self._row_to_part(r) for r in await cursor.fetchall()]

    async def update(self, maintenance: Maintenance) -> Maintenance:
        """Update the record's own fields; parts are changed through add/delete_part."""
        maintenance.updated_at = datetime.utcnow()
        new_version = maintenance.version + 1
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE maintenances SET
                    maintenance_type = ?, description = ?, start_date = ?,
                    end_date = ?, status = ?, technician = ?, labor_cost = ?,
                    observations = ?, resolution = ?, version = ?, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    maintenance.maintenance_type.value,
                    maintenance.description,
                    iso(maintenance.start_date),
                    iso(maintenance.end_date),
                    maintenance.status.value,
                    maintenance.technician,
                    maintenance.labor_cost,
                    maintenance.observations,
                    maintenance.resolution,
                    new_version,
                    iso(maintenance.updated_at),
                    maintenance.id,
                    maintenance.version,
                ),
            )
            if cursor.rowcount == 0:
                await raise_update_miss(
                    conn,
                    "maintenances",
                    maintenance.id,
                    "Maintenance",
                    maintenance.version,
                    MaintenanceNotFoundError,
                )
            maintenance.version = new_version
            logger.info(
                "maintenance_updated",
                maintenance_id=maintenance.id,
                status=maintenance.status.value,
            )
            return maintenance

    async def delete(self, maintenance_id: int) -> bool:
        """Delete maintenance and its parts."""
        async with get_transaction() as conn:
            await conn.execute(
                "DELETE FROM maintenance_parts WHERE maintenance_id = ?", (maintenance_id,)
            )
            cursor = await conn.execute(
                "DELETE FROM maintenances WHERE id = ?", (maintenance_id,)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("maintenance_deleted", maintenance_id=maintenance_id)
            return deleted

    async def list_maintenance(
        self,
        machine_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Maintenance]:
        """List maintenance records, newest first."""
        async with get_connection() as conn:
            if machine_id is not None:
                cursor = await conn.execute(
                    """
                    SELECT * FROM maintenances
                    WHERE machine_id = ?
                    ORDER BY id DESC
                    LIMIT ? OFFSET ?
                    """,
                    (machine_id, limit, offset),
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM maintenances ORDER BY id DESC LIMIT ? OFFSET ?",
                    (limit, offset),
                )

            records = [self._row_to_maintenance(row) for row in await cursor.fetchall()]
            for record in records:
                record.parts = await self._load_parts(conn, record.id)
            return records

    async def add_part(self, part: MaintenancePart) -> MaintenancePart:
        async with get_transaction() as conn:
            await self._insert_part(conn, part)
            logger.info(
                "maintenance_part_added",
                part_id=part.id,
                maintenance_id=part.maintenance_id,
                item_id=part.inventory_item_id,
            )
            return part

    async def get_part(self, part_id: int) -> MaintenancePart | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM maintenance_parts WHERE id = ?", (part_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_part(row)

    async def delete_part(self, part_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM maintenance_parts WHERE id = ?", (part_id,)
            )
            return cursor.rowcount > 0

    async def list_parts_for_item(self, inventory_item_id: int) -> list[MaintenancePart]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM maintenance_parts WHERE inventory_item_id = ? ORDER BY id",
                (inventory_item_id,),
            )
            return [self._row_to_part(r) for r in await cursor.fetchall()]

    @staticmethod
    def _row_to_maintenance(row: aiosqlite.Row) -> Maintenance:
        return Maintenance(
            id=row["id"],
            machine_id=row["machine_id"],
            machine_name=row["machine_name"],
            maintenance_type=MaintenanceType(row["maintenance_type"]),
            description=row["description"] or "",
            start_date=parse_date(row["start_date"]),
            end_date=parse_date(row["end_date"]),
            status=MaintenanceStatus(row["status"]),
            technician=row["technician"],
            labor_cost=row["labor_cost"] or 0.0,
            observations=row["observations"],
            resolution=row["resolution"],
            version=row["version"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_part(row: aiosqlite.Row) -> MaintenancePart:
        return MaintenancePart(
            id=row["id"],
            maintenance_id=row["maintenance_id"],
            inventory_item_id=row["inventory_item_id"],
            inventory_item_name=row["inventory_item_name"],
            quantity_used=row["quantity_used"],
            unit_cost=row["unit_cost"] or 0.0,
            recorded_date=parse_date(row["recorded_date"]) or date.today(),
        )
