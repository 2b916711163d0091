"""Tests for SQLiteUnitOfWork and the use cases running on it."""

import asyncio

import pytest

from labtrack.application.dto.requests import (
    MaintenanceResetRequest,
    RecordUsageRequest,
    ReplacePartRequest,
)
from labtrack.application.use_cases import (
    GetUsageInfoUseCase,
    RecordUsageUseCase,
    RegisterMaintenanceResetUseCase,
    ReplacePartUseCase,
)
from labtrack.core.entities.machine import MachinePart, PartStatus
from labtrack.core.entities.notification import Notification, NotificationSeverity, NotificationType
from labtrack.core.exceptions import InsufficientStockError, StoreTimeoutError
from labtrack.infrastructure.storage import create_sqlite_stores


@pytest.fixture
async def sqlite_part(sqlite_stores, sqlite_machine, sqlite_item) -> MachinePart:
    return await sqlite_stores.machines.create_part(
        MachinePart(
            machine_id=sqlite_machine.id,
            inventory_item_id=sqlite_item.id,
            name="Pump seal",
            usage_type="cycles",
            max_usage=1000,
        )
    )


def _notice(suffix: str) -> Notification:
    return Notification(
        id=f"notification_{suffix}",
        type=NotificationType.LOW_STOCK,
        title="Low stock",
        message="...",
        severity=NotificationSeverity.LOW,
    )


class TestSQLiteUnitOfWork:
    async def test_commit(self, sqlite_stores):
        async with sqlite_stores.uow.transaction():
            await sqlite_stores.notifications.put(_notice("a"))
            await sqlite_stores.notifications.put(_notice("b"))

        assert len(await sqlite_stores.notifications.list_notifications()) == 2

    async def test_rollback(self, sqlite_stores):
        with pytest.raises(RuntimeError):
            async with sqlite_stores.uow.transaction():
                await sqlite_stores.notifications.put(_notice("a"))
                raise RuntimeError("abort")

        assert await sqlite_stores.notifications.list_notifications() == []

    async def test_timeout_rolls_back(self, sqlite_db):
        stores = create_sqlite_stores(timeout=0.05)

        with pytest.raises(StoreTimeoutError):
            async with stores.uow.transaction():
                await stores.notifications.put(_notice("slow"))
                await asyncio.sleep(1)

        assert await stores.notifications.list_notifications() == []


class TestUseCasesOnSQLite:
    async def test_usage_cycle(self, sqlite_stores, sqlite_machine, sqlite_item, sqlite_part, technician):
        record = RecordUsageUseCase(stores=sqlite_stores)
        request = RecordUsageRequest(
            machine_id=sqlite_machine.id,
            inventory_item_id=sqlite_item.id,
            amount=800,
            unit="Cycles",
        )
        first = await record.execute(request, actor=technician)
        assert first.update.crossed == PartStatus.WARNING

        second = await record.execute(request.model_copy(update={"amount": 250}), actor=technician)
        assert second.update.crossed == PartStatus.CRITICAL

        reset = await RegisterMaintenanceResetUseCase(stores=sqlite_stores).execute(
            MaintenanceResetRequest(
                machine_id=sqlite_machine.id, inventory_item_id=sqlite_item.id, replaced=True
            ),
            actor=technician,
        )
        assert reset.part.current_usage == 0
        assert (await sqlite_stores.inventory.get_item(sqlite_item.id)).quantity == 3
        [line] = (await sqlite_stores.maintenance.get(reset.maintenance.id)).parts
        assert line.quantity_used == 1

        [info] = await GetUsageInfoUseCase(stores=sqlite_stores).execute()
        assert info.status == PartStatus.NORMAL
        assert len(await sqlite_stores.usage_logs.list_logs()) == 2

    async def test_failed_replacement_leaves_no_trace(
        self, sqlite_stores, sqlite_item, sqlite_part, technician
    ):
        item = await sqlite_stores.inventory.get_item(sqlite_item.id)
        item.quantity = 0
        await sqlite_stores.inventory.update_item(item)

        with pytest.raises(InsufficientStockError):
            await ReplacePartUseCase(stores=sqlite_stores).execute(
                sqlite_part.id,
                ReplacePartRequest(new_inventory_item_id=sqlite_item.id),
                actor=technician,
            )

        part = await sqlite_stores.machines.get_part(sqlite_part.id)
        assert part.installation_id == sqlite_part.installation_id
        assert await sqlite_stores.inventory.get_movements(sqlite_item.id) == []

    async def test_concurrent_usage_is_serialized(
        self, sqlite_stores, sqlite_machine, sqlite_item, sqlite_part, technician
    ):
        record = RecordUsageUseCase(stores=sqlite_stores)

        def usage(amount: float) -> RecordUsageRequest:
            return RecordUsageRequest(
                machine_id=sqlite_machine.id,
                inventory_item_id=sqlite_item.id,
                amount=amount,
                unit="cycles",
            )

        results = await asyncio.gather(
            record.execute(usage(400), actor=technician),
            record.execute(usage(400), actor=technician),
        )

        part = await sqlite_stores.machines.get_part(sqlite_part.id)
        assert part.current_usage == 800
        assert part.status == PartStatus.WARNING
        assert sorted(r.part.current_usage for r in results) == [400, 800]

        notifications = await sqlite_stores.notifications.list_notifications()
        warnings = [n for n in notifications if n.type == NotificationType.USAGE_ALERT]
        assert len(warnings) == 1
        assert len(await sqlite_stores.usage_logs.list_logs()) == 2
