"""SQLite implementation of incident report storage."""

from datetime import date, datetime

import aiosqlite

from labtrack.config import get_logger
from labtrack.core.entities.report import (
    IncidentReport,
    ReportPriority,
    ReportStatus,
    ReportType,
)
from labtrack.core.exceptions import IncidentReportNotFoundError
from labtrack.core.interfaces.report_store import IIncidentReportStore
from labtrack.infrastructure.storage.sqlite.base import iso, parse_date, parse_datetime
from labtrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteIncidentReportStore(IIncidentReportStore):
    """SQLite implementation of incident report storage."""

    async def create(self, report: IncidentReport) -> IncidentReport:
        now = datetime.utcnow()
        report.created_at = now
        report.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO incident_reports (
                    machine_id, machine_name, report_type, description, reported_by,
                    report_date, status, priority, assigned_to, completed_date,
                    resolution, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    report.machine_id,
                    report.machine_name,
                    report.report_type.value,
                    report.description,
                    report.reported_by,
                    iso(report.report_date),
                    report.status.value,
                    report.priority.value,
                    report.assigned_to,
                    iso(report.completed_date),
                    report.resolution,
                    iso(report.created_at),
                    iso(report.updated_at),
                ),
            )
            report.id = cursor.lastrowid
            logger.info(
                "incident_report_created",
                report_id=report.id,
                machine_id=report.machine_id,
                priority=report.priority.value,
            )
            return report

    async def get(self, report_id: int) -> IncidentReport | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM incident_reports WHERE id = ?", (report_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, report: IncidentReport) -> IncidentReport:
        report.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE incident_reports SET
                    report_type = ?, description = ?, status = ?, priority = ?,
                    assigned_to = ?, completed_date = ?, resolution = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    report.report_type.value,
                    report.description,
                    report.status.value,
                    report.priority.value,
                    report.assigned_to,
                    iso(report.completed_date),
                    report.resolution,
                    iso(report.updated_at),
                    report.id,
                ),
            )
            if cursor.rowcount == 0:
                raise IncidentReportNotFoundError(report.id)
            logger.info("incident_report_updated", report_id=report.id, status=report.status.value)
            return report

    async def delete(self, report_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM incident_reports WHERE id = ?", (report_id,)
            )
            return cursor.rowcount > 0

    async def list_reports(
        self,
        machine_id: int | None = None,
        status: ReportStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[IncidentReport]:
        conditions = []
        params: list = []
        if machine_id is not None:
            conditions.append("machine_id = ?")
            params.append(machine_id)
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)

        query = "SELECT * FROM incident_reports"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY report_date DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> IncidentReport:
        return IncidentReport(
            id=row["id"],
            machine_id=row["machine_id"],
            machine_name=row["machine_name"],
            report_type=ReportType(row["report_type"]),
            description=row["description"],
            reported_by=row["reported_by"],
            report_date=parse_date(row["report_date"]) or date.today(),
            status=ReportStatus(row["status"]),
            priority=ReportPriority(row["priority"]),
            assigned_to=row["assigned_to"],
            completed_date=parse_date(row["completed_date"]),
            resolution=row["resolution"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
