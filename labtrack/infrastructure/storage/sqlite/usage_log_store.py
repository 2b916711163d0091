"""SQLite implementation of the append-only usage log."""

from datetime import date

import aiosqlite

from labtrack.config import get_logger
from labtrack.core.entities.usage import UsageLog
from labtrack.core.interfaces.usage_log_store import IUsageLogStore
from labtrack.infrastructure.storage.sqlite.base import iso, parse_date, parse_datetime
from labtrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteUsageLogStore(IUsageLogStore):
    """Usage logs are inserted once and never updated or deleted."""

    async def append(self, log: UsageLog) -> UsageLog:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO usage_logs (
                    machine_id, machine_name, inventory_item_id, inventory_item_name,
                    part_id, installation_id, usage_date, quantity_used, unit,
                    responsible, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    log.machine_id,
                    log.machine_name,
                    log.inventory_item_id,
                    log.inventory_item_name,
                    log.part_id,
                    log.installation_id,
                    iso(log.usage_date),
                    log.quantity_used,
                    log.unit,
                    log.responsible,
                    log.notes,
                    iso(log.created_at),
                ),
            )
            log.id = cursor.lastrowid
            logger.info(
                "usage_log_appended",
                log_id=log.id,
                machine_id=log.machine_id,
                item_id=log.inventory_item_id,
                quantity=log.quantity_used,
            )
            return log

    async def get(self, log_id: int) -> UsageLog | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM usage_logs WHERE id = ?", (log_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def list_logs(
        self,
        machine_id: int | None = None,
        inventory_item_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[UsageLog]:
        conditions = []
        params: list = []
        if machine_id is not None:
            conditions.append("machine_id = ?")
            params.append(machine_id)
        if inventory_item_id is not None:
            conditions.append("inventory_item_id = ?")
            params.append(inventory_item_id)

        query = "SELECT * FROM usage_logs"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY usage_date DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> UsageLog:
        return UsageLog(
            id=row["id"],
            machine_id=row["machine_id"],
            machine_name=row["machine_name"],
            inventory_item_id=row["inventory_item_id"],
            inventory_item_name=row["inventory_item_name"],
            part_id=row["part_id"],
            installation_id=row["installation_id"],
            usage_date=parse_date(row["usage_date"]) or date.today(),
            quantity_used=row["quantity_used"],
            unit=row["unit"],
            responsible=row["responsible"],
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]),
        )
