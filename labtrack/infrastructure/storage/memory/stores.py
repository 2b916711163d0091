"""In-memory store implementations.

Entities are copied on the way in and out so callers never hold references
into the tables; updates go through the same version check as SQLite.
"""

from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel

from labtrack.core.entities.inventory import InventoryItem, ItemType, StockMovement
from labtrack.core.entities.machine import Machine, MachinePart
from labtrack.core.entities.maintenance import Maintenance, MaintenancePart
from labtrack.core.entities.notification import Notification
from labtrack.core.entities.report import IncidentReport, ReportStatus
from labtrack.core.entities.usage import UsageLog
from labtrack.core.exceptions import (
    ConflictError,
    IncidentReportNotFoundError,
    InventoryItemNotFoundError,
    MachineNotFoundError,
    MachinePartNotFoundError,
    MaintenanceNotFoundError,
    NotFoundError,
)
from labtrack.core.interfaces.inventory_store import IInventoryStore
from labtrack.core.interfaces.machine_store import IMachineStore
from labtrack.core.interfaces.maintenance_store import IMaintenanceStore
from labtrack.core.interfaces.notification_store import INotificationStore
from labtrack.core.interfaces.report_store import IIncidentReportStore
from labtrack.core.interfaces.usage_log_store import IUsageLogStore
from labtrack.infrastructure.storage.memory.database import MemoryDatabase

T = TypeVar("T", bound=BaseModel)


def _copy(entity: T) -> T:
    return entity.model_copy(deep=True)


class _MemoryStore:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def _insert(self, table: str, entity: T) -> T:
        entity.id = self._db.next_id(table)  # type: ignore[attr-defined]
        self._db.table(table)[entity.id] = _copy(entity)  # type: ignore[attr-defined]
        return entity

    def _fetch(self, table: str, key: int | str) -> T | None:
        stored = self._db.table(table).get(key)
        return _copy(stored) if stored is not None else None

    def _versioned_update(
        self,
        table: str,
        entity: T,
        entity_name: str,
        not_found: type[NotFoundError],
    ) -> T:
        stored = self._db.table(table).get(entity.id)  # type: ignore[attr-defined]
        if stored is None:
            raise not_found(entity.id)  # type: ignore[attr-defined]
        if stored.version != entity.version:  # type: ignore[attr-defined]
            raise ConflictError(entity_name, entity.id, entity.version)  # type: ignore[attr-defined]
        entity.version += 1  # type: ignore[attr-defined]
        entity.updated_at = datetime.utcnow()  # type: ignore[attr-defined]
        self._db.table(table)[entity.id] = _copy(entity)  # type: ignore[attr-defined]
        return entity

    def _delete(self, table: str, key: int | str) -> bool:
        return self._db.table(table).pop(key, None) is not None


class MemoryInventoryStore(_MemoryStore, IInventoryStore):
    async def create_item(self, item: InventoryItem) -> InventoryItem:
        item.version = 0
        return self._insert("inventory_items", item)

    async def get_item(self, item_id: int) -> InventoryItem | None:
        return self._fetch("inventory_items", item_id)

    async def update_item(self, item: InventoryItem) -> InventoryItem:
        return self._versioned_update(
            "inventory_items", item, "InventoryItem", InventoryItemNotFoundError
        )

    async def delete_item(self, item_id: int) -> bool:
        return self._delete("inventory_items", item_id)

    async def list_items(
        self,
        limit: int = 100,
        offset: int = 0,
        item_type: ItemType | None = None,
    ) -> list[InventoryItem]:
        items = sorted(self._db.table("inventory_items").values(), key=lambda i: i.name)
        if item_type is not None:
            items = [i for i in items if i.item_type == item_type]
        return [_copy(i) for i in items[offset : offset + limit]]

    async def list_low_stock(self, limit: int = 100) -> list[InventoryItem]:
        items = sorted(self._db.table("inventory_items").values(), key=lambda i: i.quantity)
        return [_copy(i) for i in items if i.quantity <= i.min_quantity][:limit]

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        return self._insert("stock_movements", movement)

    async def get_movements(
        self, inventory_item_id: int, limit: int = 100
    ) -> list[StockMovement]:
        movements = [
            m
            for m in self._db.table("stock_movements").values()
            if m.inventory_item_id == inventory_item_id
        ]
        movements.sort(key=lambda m: (m.movement_date, m.id), reverse=True)
        return [_copy(m) for m in movements[:limit]]


class MemoryMachineStore(_MemoryStore, IMachineStore):
    async def create_machine(self, machine: Machine) -> Machine:
        machine.version = 0
        return self._insert("machines", machine)

    async def get_machine(self, machine_id: int) -> Machine | None:
        return self._fetch("machines", machine_id)

    async def update_machine(self, machine: Machine) -> Machine:
        return self._versioned_update("machines", machine, "Machine", MachineNotFoundError)

    async def delete_machine(self, machine_id: int) -> bool:
        parts = self._db.table("machine_parts")
        for part_id in [p.id for p in parts.values() if p.machine_id == machine_id]:
            del parts[part_id]
        return self._delete("machines", machine_id)

    async def list_machines(self, limit: int = 100, offset: int = 0) -> list[Machine]:
        machines = sorted(self._db.table("machines").values(), key=lambda m: m.name)
        return [_copy(m) for m in machines[offset : offset + limit]]

    async def create_part(self, part: MachinePart) -> MachinePart:
        part.version = 0
        return self._insert("machine_parts", part)

    async def get_part(self, part_id: int) -> MachinePart | None:
        return self._fetch("machine_parts", part_id)

    async def get_part_for_item(
        self, machine_id: int, inventory_item_id: int
    ) -> MachinePart | None:
        for part in self._db.table("machine_parts").values():
            if part.machine_id == machine_id and part.inventory_item_id == inventory_item_id:
                return _copy(part)
        return None

    async def update_part(self, part: MachinePart) -> MachinePart:
        return self._versioned_update(
            "machine_parts", part, "MachinePart", MachinePartNotFoundError
        )

    async def delete_part(self, part_id: int) -> bool:
        return self._delete("machine_parts", part_id)

    async def list_parts(self, machine_id: int) -> list[MachinePart]:
        parts = [p for p in self._db.table("machine_parts").values() if p.machine_id == machine_id]
        return [_copy(p) for p in sorted(parts, key=lambda p: p.id)]

    async def list_all_parts(self) -> list[MachinePart]:
        parts = sorted(self._db.table("machine_parts").values(), key=lambda p: p.id)
        return [_copy(p) for p in parts]


class MemoryUsageLogStore(_MemoryStore, IUsageLogStore):
    async def append(self, log: UsageLog) -> UsageLog:
        return self._insert("usage_logs", log)

    async def get(self, log_id: int) -> UsageLog | None:
        return self._fetch("usage_logs", log_id)

    async def list_logs(
        self,
        machine_id: int | None = None,
        inventory_item_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[UsageLog]:
        logs = list(self._db.table("usage_logs").values())
        if machine_id is not None:
            logs = [log for log in logs if log.machine_id == machine_id]
        if inventory_item_id is not None:
            logs = [log for log in logs if log.inventory_item_id == inventory_item_id]
        logs.sort(key=lambda log: (log.usage_date, log.id), reverse=True)
        return [_copy(log) for log in logs[offset : offset + limit]]


class MemoryMaintenanceStore(_MemoryStore, IMaintenanceStore):
    def _with_parts(self, maintenance: Maintenance) -> Maintenance:
        result = _copy(maintenance)
        result.parts = sorted(
            (
                _copy(p)
                for p in self._db.table("maintenance_parts").values()
                if p.maintenance_id == maintenance.id
            ),
            key=lambda p: p.id,
        )
        return result

    async def create(self, maintenance: Maintenance) -> Maintenance:
        maintenance.version = 0
        parts = maintenance.parts
        maintenance.parts = []
        self._insert("maintenances", maintenance)
        for part in parts:
            part.maintenance_id = maintenance.id
            self._insert("maintenance_parts", part)
        maintenance.parts = parts
        return maintenance

    async def get(self, maintenance_id: int) -> Maintenance | None:
        stored = self._db.table("maintenances").get(maintenance_id)
        return self._with_parts(stored) if stored is not None else None

    async def update(self, maintenance: Maintenance) -> Maintenance:
        parts = maintenance.parts
        maintenance.parts = []
        try:
            self._versioned_update(
                "maintenances", maintenance, "Maintenance", MaintenanceNotFoundError
            )
        finally:
            maintenance.parts = parts
        return maintenance

    async def delete(self, maintenance_id: int) -> bool:
        parts = self._db.table("maintenance_parts")
        for part_id in [p.id for p in parts.values() if p.maintenance_id == maintenance_id]:
            del parts[part_id]
        return self._delete("maintenances", maintenance_id)

    async def list_maintenance(
        self,
        machine_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Maintenance]:
        records = list(self._db.table("maintenances").values())
        if machine_id is not None:
            records = [m for m in records if m.machine_id == machine_id]
        records.sort(key=lambda m: m.id, reverse=True)
        return [self._with_parts(m) for m in records[offset : offset + limit]]

    async def add_part(self, part: MaintenancePart) -> MaintenancePart:
        return self._insert("maintenance_parts", part)

    async def get_part(self, part_id: int) -> MaintenancePart | None:
        return self._fetch("maintenance_parts", part_id)

    async def delete_part(self, part_id: int) -> bool:
        return self._delete("maintenance_parts", part_id)

    async def list_parts_for_item(self, inventory_item_id: int) -> list[MaintenancePart]:
        parts = [
            p
            for p in self._db.table("maintenance_parts").values()
            if p.inventory_item_id == inventory_item_id
        ]
        return [_copy(p) for p in sorted(parts, key=lambda p: p.id)]


class MemoryNotificationStore(_MemoryStore, INotificationStore):
    async def put(self, notification: Notification) -> Notification:
        self._db.table("notifications")[notification.id] = _copy(notification)
        return notification

    async def get(self, notification_id: str) -> Notification | None:
        return self._fetch("notifications", notification_id)

    async def delete(self, notification_id: str) -> bool:
        return self._delete("notifications", notification_id)

    async def list_notifications(
        self, unread_only: bool = False, limit: int = 100
    ) -> list[Notification]:
        notifications = list(self._db.table("notifications").values())
        if unread_only:
            notifications = [n for n in notifications if not n.read]
        notifications.sort(key=lambda n: n.created_at, reverse=True)
        return [_copy(n) for n in notifications[:limit]]


class MemoryIncidentReportStore(_MemoryStore, IIncidentReportStore):
    async def create(self, report: IncidentReport) -> IncidentReport:
        return self._insert("incident_reports", report)

    async def get(self, report_id: int) -> IncidentReport | None:
        return self._fetch("incident_reports", report_id)

    async def update(self, report: IncidentReport) -> IncidentReport:
        if report.id not in self._db.table("incident_reports"):
            raise IncidentReportNotFoundError(report.id or 0)
        report.updated_at = datetime.utcnow()
        self._db.table("incident_reports")[report.id] = _copy(report)
        return report

    async def delete(self, report_id: int) -> bool:
        return self._delete("incident_reports", report_id)

    async def list_reports(
        self,
        machine_id: int | None = None,
        status: ReportStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[IncidentReport]:
        reports = list(self._db.table("incident_reports").values())
        if machine_id is not None:
            reports = [r for r in reports if r.machine_id == machine_id]
        if status is not None:
            reports = [r for r in reports if r.status == status]
        reports.sort(key=lambda r: (r.report_date, r.id), reverse=True)
        return [_copy(r) for r in reports[offset : offset + limit]]
