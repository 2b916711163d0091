"""Tests for the SQLite maintenance, usage log, notification and report stores."""

from datetime import date

import pytest

from labtrack.core.entities.maintenance import Maintenance, MaintenancePart, MaintenanceStatus
from labtrack.core.entities.notification import Notification, NotificationSeverity, NotificationType
from labtrack.core.entities.report import IncidentReport, ReportStatus
from labtrack.core.entities.usage import UsageLog
from labtrack.core.exceptions import ConflictError


class TestMaintenanceStore:
    async def test_create_with_parts(self, sqlite_stores, sqlite_machine, sqlite_item):
        job = await sqlite_stores.maintenance.create(
            Maintenance(
                machine_id=sqlite_machine.id,
                machine_name=sqlite_machine.name,
                technician="Ana",
                labor_cost=15.0,
                start_date=date(2024, 6, 1),
                parts=[
                    MaintenancePart(
                        inventory_item_id=sqlite_item.id,
                        inventory_item_name=sqlite_item.name,
                        quantity_used=2,
                        unit_cost=25.0,
                    )
                ],
            )
        )

        stored = await sqlite_stores.maintenance.get(job.id)

        assert stored.start_date == date(2024, 6, 1)
        assert [p.maintenance_id for p in stored.parts] == [job.id]
        assert stored.total_cost == 65.0

    async def test_update_and_stale_version(self, sqlite_stores, sqlite_machine):
        job = await sqlite_stores.maintenance.create(
            Maintenance(
                machine_id=sqlite_machine.id, machine_name=sqlite_machine.name, technician="Ana"
            )
        )
        first = await sqlite_stores.maintenance.get(job.id)
        second = await sqlite_stores.maintenance.get(job.id)

        first.status = MaintenanceStatus.IN_PROGRESS
        await sqlite_stores.maintenance.update(first)

        with pytest.raises(ConflictError):
            await sqlite_stores.maintenance.update(second)
        assert (await sqlite_stores.maintenance.get(job.id)).status == MaintenanceStatus.IN_PROGRESS

    async def test_delete_removes_parts(self, sqlite_stores, sqlite_machine, sqlite_item):
        job = await sqlite_stores.maintenance.create(
            Maintenance(
                machine_id=sqlite_machine.id, machine_name=sqlite_machine.name, technician="Ana"
            )
        )
        line = await sqlite_stores.maintenance.add_part(
            MaintenancePart(
                maintenance_id=job.id,
                inventory_item_id=sqlite_item.id,
                inventory_item_name=sqlite_item.name,
                quantity_used=1,
            )
        )
        assert (await sqlite_stores.maintenance.get_part(line.id)).quantity_used == 1

        assert await sqlite_stores.maintenance.delete(job.id) is True
        assert await sqlite_stores.maintenance.list_parts_for_item(sqlite_item.id) == []


class TestUsageLogStore:
    async def test_append_and_list_newest_first(self, sqlite_stores, sqlite_machine, sqlite_item):
        for day, amount in ((1, 10.0), (3, 30.0), (2, 20.0)):
            await sqlite_stores.usage_logs.append(
                UsageLog(
                    machine_id=sqlite_machine.id,
                    machine_name=sqlite_machine.name,
                    inventory_item_id=sqlite_item.id,
                    inventory_item_name=sqlite_item.name,
                    part_id=1,
                    installation_id="inst-1",
                    usage_date=date(2024, 7, day),
                    quantity_used=amount,
                    unit="cycles",
                    responsible="Ana",
                )
            )

        logs = await sqlite_stores.usage_logs.list_logs(machine_id=sqlite_machine.id)

        assert [log.quantity_used for log in logs] == [30.0, 20.0, 10.0]
        assert await sqlite_stores.usage_logs.list_logs(inventory_item_id=999) == []
        assert (await sqlite_stores.usage_logs.get(logs[0].id)).usage_date == date(2024, 7, 3)


class TestNotificationStore:
    async def test_put_is_upsert(self, sqlite_stores):
        notice = Notification(
            type=NotificationType.USAGE_ALERT,
            title="Part at 80%",
            message="Pump seal on GC-02",
            severity=NotificationSeverity.MEDIUM,
            related_id="1_1",
        )
        await sqlite_stores.notifications.put(notice)

        notice.read = True
        await sqlite_stores.notifications.put(notice)

        assert len(await sqlite_stores.notifications.list_notifications()) == 1
        assert await sqlite_stores.notifications.list_notifications(unread_only=True) == []
        assert (await sqlite_stores.notifications.get(notice.id)).related_id == "1_1"

    async def test_delete(self, sqlite_stores):
        notice = await sqlite_stores.notifications.put(
            Notification(
                type=NotificationType.LOW_STOCK,
                title="Low stock",
                message="Pump seal",
                severity=NotificationSeverity.HIGH,
            )
        )

        assert await sqlite_stores.notifications.delete(notice.id) is True
        assert await sqlite_stores.notifications.delete(notice.id) is False


class TestIncidentReportStore:
    async def test_round_trip_and_filter(self, sqlite_stores, sqlite_machine):
        report = await sqlite_stores.reports.create(
            IncidentReport(
                machine_id=sqlite_machine.id,
                machine_name=sqlite_machine.name,
                description="Baseline drift",
                reported_by="Luis",
            )
        )

        report.mark_status(ReportStatus.COMPLETED)
        report.resolution = "Detector recalibrated"
        await sqlite_stores.reports.update(report)

        stored = await sqlite_stores.reports.get(report.id)
        assert stored.completed_date == date.today()
        assert stored.resolution == "Detector recalibrated"

        pending = await sqlite_stores.reports.list_reports(status=ReportStatus.PENDING)
        assert pending == []
        assert await sqlite_stores.reports.delete(report.id) is True
