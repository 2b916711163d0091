"""Tests for the in-memory stores and unit of work."""

import asyncio

import pytest

from labtrack.core.entities.machine import Machine
from labtrack.core.entities.maintenance import Maintenance, MaintenancePart
from labtrack.core.exceptions import ConflictError, MachineNotFoundError, StoreTimeoutError
from labtrack.infrastructure.storage import create_memory_stores, get_stores, reset_stores


class TestMemoryUnitOfWork:
    async def test_rollback_restores_state(self, stores, machine):
        with pytest.raises(RuntimeError):
            async with stores.uow.transaction():
                await stores.machines.create_machine(Machine(name="MS-01", model="QTOF"))
                stored = await stores.machines.get_machine(machine.id)
                stored.name = "renamed"
                await stores.machines.update_machine(stored)
                raise RuntimeError("abort")

        machines = await stores.machines.list_machines()
        assert [m.name for m in machines] == ["HPLC-01"]

    async def test_nested_transaction_joins(self, stores):
        with pytest.raises(RuntimeError):
            async with stores.uow.transaction():
                async with stores.uow.transaction():
                    await stores.machines.create_machine(Machine(name="MS-01", model="QTOF"))
                raise RuntimeError("outer abort")

        assert await stores.machines.list_machines() == []

    async def test_transactions_are_serialized(self, stores):
        order = []

        async def worker(tag: str):
            async with stores.uow.transaction():
                order.append(f"{tag}-start")
                await asyncio.sleep(0.01)
                order.append(f"{tag}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert order in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )

    async def test_timeout(self):
        stores = create_memory_stores(timeout=0.05)

        with pytest.raises(StoreTimeoutError):
            async with stores.uow.transaction():
                await stores.machines.create_machine(Machine(name="MS-01", model="QTOF"))
                await asyncio.sleep(1)

        assert await stores.machines.list_machines() == []


class TestMemoryStores:
    async def test_entities_are_copied(self, stores, machine):
        fetched = await stores.machines.get_machine(machine.id)
        fetched.name = "changed without update"

        assert (await stores.machines.get_machine(machine.id)).name == "HPLC-01"

    async def test_version_conflict(self, stores, machine):
        a = await stores.machines.get_machine(machine.id)
        b = await stores.machines.get_machine(machine.id)
        await stores.machines.update_machine(a)

        with pytest.raises(ConflictError):
            await stores.machines.update_machine(b)

    async def test_update_missing(self, stores):
        with pytest.raises(MachineNotFoundError):
            await stores.machines.update_machine(Machine(id=42, name="x", model="y"))

    async def test_maintenance_parts_follow_job(self, stores, machine, wear_item):
        job = await stores.maintenance.create(
            Maintenance(
                machine_id=machine.id,
                machine_name=machine.name,
                technician="Ana",
                parts=[
                    MaintenancePart(
                        inventory_item_id=wear_item.id,
                        inventory_item_name=wear_item.name,
                        quantity_used=1,
                    )
                ],
            )
        )

        fetched = await stores.maintenance.get(job.id)
        assert [p.maintenance_id for p in fetched.parts] == [job.id]

        await stores.maintenance.delete(job.id)
        assert await stores.maintenance.list_parts_for_item(wear_item.id) == []


def test_get_stores_uses_configured_backend():
    bundle = get_stores()
    assert get_stores() is bundle
    reset_stores()
    assert get_stores() is not bundle
