"""Tests for the maintenance record use cases."""

from datetime import date

import pytest

from labtrack.application.dto.requests import (
    CreateMaintenanceRequest,
    MaintenancePartRequest,
    UpdateMaintenanceRequest,
)
from labtrack.application.use_cases import (
    AddMaintenancePartUseCase,
    CreateMaintenanceUseCase,
    DeleteMaintenanceUseCase,
    RemoveMaintenancePartUseCase,
    UpdateMaintenanceUseCase,
)
from labtrack.core.entities.maintenance import MaintenanceStatus
from labtrack.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    MaintenanceLockedError,
    MaintenanceNotFoundError,
    MaintenancePartNotFoundError,
)


@pytest.fixture
async def job(stores, machine, wear_item, technician):
    """Open job that consumed two filters."""
    return await CreateMaintenanceUseCase(stores=stores).execute(
        CreateMaintenanceRequest(
            machine_id=machine.id,
            description="Quarterly service",
            start_date=date(2024, 5, 2),
            parts=[MaintenancePartRequest(inventory_item_id=wear_item.id, quantity_used=2)],
        ),
        actor=technician,
    )


class TestCreateMaintenance:
    async def test_consumes_stock(self, stores, job, wear_item):
        assert job.technician == "Ana Torres"
        assert job.status == MaintenanceStatus.SCHEDULED
        [line] = job.parts
        assert line.quantity_used == 2
        assert line.unit_cost == 40.0
        assert job.total_cost == 80.0

        item = await stores.inventory.get_item(wear_item.id)
        assert item.quantity == 3
        [movement] = await stores.inventory.get_movements(wear_item.id)
        assert movement.reference == f"maintenance:{job.id}"

    async def test_insufficient_stock_creates_nothing(self, stores, machine, wear_item, technician):
        with pytest.raises(InsufficientStockError):
            await CreateMaintenanceUseCase(stores=stores).execute(
                CreateMaintenanceRequest(
                    machine_id=machine.id,
                    parts=[MaintenancePartRequest(inventory_item_id=wear_item.id, quantity_used=9)],
                ),
                actor=technician,
            )
        assert await stores.maintenance.list_maintenance() == []

    async def test_completed_stamps_machine(self, stores, machine, technician):
        await CreateMaintenanceUseCase(stores=stores).execute(
            CreateMaintenanceRequest(
                machine_id=machine.id,
                status=MaintenanceStatus.COMPLETED,
                start_date=date(2024, 6, 1),
                end_date=date(2024, 6, 3),
            ),
            actor=technician,
        )
        stamped = await stores.machines.get_machine(machine.id)
        assert stamped.last_maintenance == date(2024, 6, 3)


class TestUpdateMaintenance:
    async def test_partial_update(self, stores, job):
        updated = await UpdateMaintenanceUseCase(stores=stores).execute(
            job.id, UpdateMaintenanceRequest(labor_cost=50, version=job.version)
        )
        assert updated.labor_cost == 50
        assert updated.description == "Quarterly service"
        assert updated.version == job.version + 1

    async def test_stale_version(self, stores, job):
        with pytest.raises(ConflictError):
            await UpdateMaintenanceUseCase(stores=stores).execute(
                job.id, UpdateMaintenanceRequest(labor_cost=1, version=job.version + 5)
            )

    async def test_completed_is_locked(self, stores, job):
        use_case = UpdateMaintenanceUseCase(stores=stores)
        await use_case.execute(job.id, UpdateMaintenanceRequest(status=MaintenanceStatus.COMPLETED))

        with pytest.raises(MaintenanceLockedError):
            await use_case.execute(job.id, UpdateMaintenanceRequest(labor_cost=999))

        noted = await use_case.execute(job.id, UpdateMaintenanceRequest(observations="Seal worn"))
        assert noted.observations == "Seal worn"

    async def test_missing(self, stores):
        with pytest.raises(MaintenanceNotFoundError):
            await UpdateMaintenanceUseCase(stores=stores).execute(
                5, UpdateMaintenanceRequest(description="x")
            )


class TestMaintenanceParts:
    async def test_add_and_remove_part(self, stores, job, wear_item):
        added = await AddMaintenancePartUseCase(stores=stores).execute(
            job.id, MaintenancePartRequest(inventory_item_id=wear_item.id, quantity_used=1, unit_cost=10)
        )
        assert len(added.maintenance.parts) == 2
        assert (await stores.inventory.get_item(wear_item.id)).quantity == 2

        removed = await RemoveMaintenancePartUseCase(stores=stores).execute(job.id, added.part.id)
        assert len(removed.maintenance.parts) == 1
        assert (await stores.inventory.get_item(wear_item.id)).quantity == 3

    async def test_remove_foreign_part(self, stores, job):
        with pytest.raises(MaintenancePartNotFoundError):
            await RemoveMaintenancePartUseCase(stores=stores).execute(job.id, 999)

    async def test_completed_job_rejects_parts(self, stores, job, wear_item):
        await UpdateMaintenanceUseCase(stores=stores).execute(
            job.id, UpdateMaintenanceRequest(status=MaintenanceStatus.COMPLETED)
        )
        with pytest.raises(MaintenanceLockedError):
            await AddMaintenancePartUseCase(stores=stores).execute(
                job.id, MaintenancePartRequest(inventory_item_id=wear_item.id, quantity_used=1)
            )


class TestDeleteMaintenance:
    async def test_delete_returns_stock(self, stores, job, wear_item):
        await DeleteMaintenanceUseCase(stores=stores).execute(job.id)

        assert await stores.maintenance.get(job.id) is None
        assert (await stores.inventory.get_item(wear_item.id)).quantity == 5

    async def test_completed_cannot_be_deleted(self, stores, job):
        await UpdateMaintenanceUseCase(stores=stores).execute(
            job.id, UpdateMaintenanceRequest(status=MaintenanceStatus.COMPLETED)
        )
        with pytest.raises(MaintenanceLockedError):
            await DeleteMaintenanceUseCase(stores=stores).execute(job.id)
