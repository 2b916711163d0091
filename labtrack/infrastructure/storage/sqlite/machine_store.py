"""
SQLite implementation of machine storage.

Machines and their installed wear parts live in one store because parts
are owned by their machine and are removed with it.
"""

from datetime import date, datetime

import aiosqlite

from labtrack.config import get_logger
from labtrack.core.entities.machine import Machine, MachinePart, MachineStatus, PartStatus
from labtrack.core.exceptions import MachineNotFoundError, MachinePartNotFoundError
from labtrack.core.interfaces.machine_store import IMachineStore
from labtrack.infrastructure.storage.sqlite.base import (
    iso,
    parse_date,
    parse_datetime,
    raise_update_miss,
)
from labtrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteMachineStore(IMachineStore):
    """SQLite implementation of machine and machine part storage."""

    # Machines

    async def create_machine(self, machine: Machine) -> Machine:
        now = datetime.utcnow()
        machine.created_at = now
        machine.updated_at = now
        machine.version = 0
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO machines (
                    name, model, serial_number, manufacturer, status, location,
                    description, purchase_date, last_maintenance, next_maintenance,
                    associated_item_id, version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    machine.name,
                    machine.model,
                    machine.serial_number,
                    machine.manufacturer,
                    machine.status.value,
                    machine.location,
                    machine.description,
                    iso(machine.purchase_date),
                    iso(machine.last_maintenance),
                    iso(machine.next_maintenance),
                    machine.associated_item_id,
                    machine.version,
                    iso(machine.created_at),
                    iso(machine.updated_at),
                ),
            )
            machine.id = cursor.lastrowid
            logger.info("machine_created", machine_id=machine.id, name=machine.name)
            return machine

    async def get_machine(self, machine_id: int) -> Machine | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM machines WHERE id = ?", (machine_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_machine(row)

    async def update_machine(self, machine: Machine) -> Machine:
        machine.updated_at = datetime.utcnow()
        new_version = machine.version + 1
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE machines SET
                    name = ?, model = ?, serial_number = ?, manufacturer = ?,
                    status = ?, location = ?, description = ?, purchase_date = ?,
                    last_maintenance = ?, next_maintenance = ?, associated_item_id = ?,
                    version = ?, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    machine.name,
                    machine.model,
                    machine.serial_number,
                    machine.manufacturer,
                    machine.status.value,
                    machine.location,
                    machine.description,
                    iso(machine.purchase_date),
                    iso(machine.last_maintenance),
                    iso(machine.next_maintenance),
                    machine.associated_item_id,
                    new_version,
                    iso(machine.updated_at),
                    machine.id,
                    machine.version,
                ),
            )
            if cursor.rowcount == 0:
                await raise_update_miss(
                    conn, "machines", machine.id, "Machine", machine.version, MachineNotFoundError
                )
            machine.version = new_version
            logger.info("machine_updated", machine_id=machine.id)
            return machine

    async def delete_machine(self, machine_id: int) -> bool:
        async with get_transaction() as conn:
            await conn.execute("DELETE FROM machine_parts WHERE machine_id = ?", (machine_id,))
            cursor = await conn.execute("DELETE FROM machines WHERE id = ?", (machine_id,))
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("machine_deleted", machine_id=machine_id)
            return deleted

    async def list_machines(self, limit: int = 100, offset: int = 0) -> list[Machine]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM machines ORDER BY name LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_machine(row) for row in rows]

    # Installed parts

    async def create_part(self, part: MachinePart) -> MachinePart:
        now = datetime.utcnow()
        part.created_at = now
        part.updated_at = now
        part.version = 0
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO machine_parts (
                    machine_id, inventory_item_id, name, installation_id,
                    installation_date, usage_type, current_usage, max_usage,
                    alerted_status, version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    part.machine_id,
                    part.inventory_item_id,
                    part.name,
                    part.installation_id,
                    iso(part.installation_date),
                    part.usage_type,
                    part.current_usage,
                    part.max_usage,
                    part.alerted_status.value,
                    part.version,
                    iso(part.created_at),
                    iso(part.updated_at),
                ),
            )
            part.id = cursor.lastrowid
            logger.info(
                "machine_part_created",
                part_id=part.id,
                machine_id=part.machine_id,
                item_id=part.inventory_item_id,
            )
            return part

    async def get_part(self, part_id: int) -> MachinePart | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM machine_parts WHERE id = ?", (part_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_part(row)

    async def get_part_for_item(
        self, machine_id: int, inventory_item_id: int
    ) -> MachinePart | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM machine_parts WHERE machine_id = ? AND inventory_item_id = ?",
                (machine_id, inventory_item_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_part(row)

    async def update_part(self, part: MachinePart) -> MachinePart:
        part.updated_at = datetime.utcnow()
        new_version = part.version + 1
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE machine_parts SET
                    inventory_item_id = ?, name = ?, installation_id = ?,
                    installation_date = ?, usage_type = ?, current_usage = ?,
                    max_usage = ?, alerted_status = ?, version = ?, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    part.inventory_item_id,
                    part.name,
                    part.installation_id,
                    iso(part.installation_date),
                    part.usage_type,
                    part.current_usage,
                    part.max_usage,
                    part.alerted_status.value,
                    new_version,
                    iso(part.updated_at),
                    part.id,
                    part.version,
                ),
            )
            if cursor.rowcount == 0:
                await raise_update_miss(
                    conn,
                    "machine_parts",
                    part.id,
                    "MachinePart",
                    part.version,
                    MachinePartNotFoundError,
                )
            part.version = new_version
            logger.debug(
                "machine_part_updated",
                part_id=part.id,
                current_usage=part.current_usage,
                version=part.version,
            )
            return part

    async def delete_part(self, part_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM machine_parts WHERE id = ?", (part_id,))
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("machine_part_deleted", part_id=part_id)
            return deleted

    async def list_parts(self, machine_id: int) -> list[MachinePart]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM machine_parts WHERE machine_id = ? ORDER BY id",
                (machine_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_part(row) for row in rows]

    async def list_all_parts(self) -> list[MachinePart]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM machine_parts ORDER BY id")
            rows = await cursor.fetchall()
            return [self._row_to_part(row) for row in rows]

    @staticmethod
    def _row_to_machine(row: aiosqlite.Row) -> Machine:
        return Machine(
            id=row["id"],
            name=row["name"],
            model=row["model"],
            serial_number=row["serial_number"],
            manufacturer=row["manufacturer"],
            status=MachineStatus(row["status"]),
            location=row["location"],
            description=row["description"],
            purchase_date=parse_date(row["purchase_date"]),
            last_maintenance=parse_date(row["last_maintenance"]),
            next_maintenance=parse_date(row["next_maintenance"]),
            associated_item_id=row["associated_item_id"],
            version=row["version"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_part(row: aiosqlite.Row) -> MachinePart:
        return MachinePart(
            id=row["id"],
            machine_id=row["machine_id"],
            inventory_item_id=row["inventory_item_id"],
            name=row["name"],
            installation_id=row["installation_id"],
            installation_date=parse_date(row["installation_date"]) or date.today(),
            usage_type=row["usage_type"],
            current_usage=row["current_usage"],
            max_usage=row["max_usage"],
            alerted_status=PartStatus(row["alerted_status"]),
            version=row["version"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
