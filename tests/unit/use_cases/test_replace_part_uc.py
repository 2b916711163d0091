"""Tests for ReplacePartUseCase."""

import pytest

from labtrack.application.dto.requests import ReplacePartRequest
from labtrack.application.use_cases import ReplacePartUseCase
from labtrack.core.entities.inventory import InventoryItem, ItemType
from labtrack.core.entities.machine import PartStatus
from labtrack.core.exceptions import (
    IncompatiblePartError,
    InsufficientStockError,
    InventoryItemNotFoundError,
    MachinePartNotFoundError,
)


@pytest.fixture
def use_case(stores):
    return ReplacePartUseCase(stores=stores)


async def _item(stores, **overrides) -> InventoryItem:
    fields = {
        "name": "Guard column",
        "quantity": 3,
        "item_type": ItemType.WEAR_PART,
        "usage_unit": "hours",
        "max_lifespan": 250.0,
    }
    fields.update(overrides)
    return await stores.inventory.create_item(InventoryItem(**fields))


class TestReplacePartUseCase:
    async def test_same_item(self, use_case, stores, wear_item, installed_part, technician):
        part = await stores.machines.get_part(installed_part.id)
        part.current_usage = 120
        part.alerted_status = PartStatus.CRITICAL
        await stores.machines.update_part(part)

        result = await use_case.execute(
            installed_part.id,
            ReplacePartRequest(new_inventory_item_id=wear_item.id),
            actor=technician,
        )

        assert result.part.id == installed_part.id
        assert result.part.current_usage == 0
        assert result.part.alerted_status == PartStatus.NORMAL
        assert result.part.installation_id != result.previous_installation_id
        assert result.previous_installation_id == installed_part.installation_id
        assert result.item.quantity == 4

    async def test_other_item_with_same_unit(
        self, use_case, stores, wear_item, installed_part, technician
    ):
        guard = await _item(stores)

        result = await use_case.execute(
            installed_part.id, ReplacePartRequest(new_inventory_item_id=guard.id), actor=technician
        )

        assert result.part.inventory_item_id == guard.id
        assert result.part.max_usage == 250.0
        assert result.item.quantity == 2
        untouched = await stores.inventory.get_item(wear_item.id)
        assert untouched.quantity == 5

    async def test_out_of_stock_changes_nothing(
        self, use_case, stores, wear_item, installed_part, technician
    ):
        item = await stores.inventory.get_item(wear_item.id)
        item.quantity = 0
        await stores.inventory.update_item(item)
        part = await stores.machines.get_part(installed_part.id)
        part.current_usage = 60
        await stores.machines.update_part(part)

        with pytest.raises(InsufficientStockError):
            await use_case.execute(
                installed_part.id,
                ReplacePartRequest(new_inventory_item_id=wear_item.id),
                actor=technician,
            )

        part = await stores.machines.get_part(installed_part.id)
        assert part.current_usage == 60
        assert part.installation_id == installed_part.installation_id
        assert await stores.inventory.get_movements(wear_item.id) == []

    async def test_non_wear_part_is_incompatible(
        self, use_case, stores, installed_part, technician
    ):
        gloves = await stores.inventory.create_item(InventoryItem(name="Gloves", quantity=50))
        with pytest.raises(IncompatiblePartError):
            await use_case.execute(
                installed_part.id, ReplacePartRequest(new_inventory_item_id=gloves.id), technician
            )

    async def test_different_name_and_unit_is_incompatible(
        self, use_case, stores, installed_part, technician
    ):
        lamp = await _item(stores, name="Deuterium lamp", usage_unit="cycles")
        with pytest.raises(IncompatiblePartError):
            await use_case.execute(
                installed_part.id, ReplacePartRequest(new_inventory_item_id=lamp.id), technician
            )

    async def test_missing_part(self, use_case, wear_item, technician):
        with pytest.raises(MachinePartNotFoundError):
            await use_case.execute(
                404, ReplacePartRequest(new_inventory_item_id=wear_item.id), technician
            )

    async def test_missing_item(self, use_case, installed_part, technician):
        with pytest.raises(InventoryItemNotFoundError):
            await use_case.execute(
                installed_part.id, ReplacePartRequest(new_inventory_item_id=404), technician
            )
