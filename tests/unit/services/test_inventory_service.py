"""Tests for InventoryService."""

import pytest

from labtrack.core.entities.inventory import InventoryItem, ItemType, MovementType
from labtrack.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    InventoryItemNotFoundError,
    ValidationError,
)
from labtrack.core.services import InventoryService


@pytest.fixture
def service(stores) -> InventoryService:
    return InventoryService(stores.inventory)


class TestInventoryService:
    async def test_get_item_by_id_missing(self, service):
        with pytest.raises(InventoryItemNotFoundError):
            await service.get_item_by_id(404)

    async def test_get_wear_parts(self, service, stores, wear_item):
        await stores.inventory.create_item(InventoryItem(name="Gloves", quantity=10))
        parts = await service.get_wear_parts()
        assert [p.id for p in parts] == [wear_item.id]
        assert all(p.item_type == ItemType.WEAR_PART for p in parts)

    async def test_decrement(self, service, stores, wear_item):
        adjustment = await service.adjust_quantity(wear_item.id, -1, reference="part:1")

        assert adjustment.item.quantity == 4
        assert adjustment.item.version == wear_item.version + 1
        assert adjustment.movement.movement_type == MovementType.OUT
        assert adjustment.movement.quantity == 1
        movements = await stores.inventory.get_movements(wear_item.id)
        assert movements[0].reference == "part:1"

    async def test_increment(self, service, wear_item):
        adjustment = await service.adjust_quantity(wear_item.id, 3)
        assert adjustment.item.quantity == 8
        assert adjustment.movement.movement_type == MovementType.IN

    async def test_zero_delta_rejected(self, service, wear_item):
        with pytest.raises(ValidationError):
            await service.adjust_quantity(wear_item.id, 0)

    async def test_insufficient_stock_changes_nothing(self, service, stores, wear_item):
        with pytest.raises(InsufficientStockError):
            await service.adjust_quantity(wear_item.id, -6)

        item = await stores.inventory.get_item(wear_item.id)
        assert item.quantity == 5
        assert await stores.inventory.get_movements(wear_item.id) == []

    async def test_entered_low_stock(self, service, wear_item):
        first = await service.adjust_quantity(wear_item.id, -2)
        assert first.item.quantity == 3
        assert first.entered_low_stock is False

        second = await service.adjust_quantity(wear_item.id, -1)
        assert second.entered_low_stock is True

        third = await service.adjust_quantity(wear_item.id, -1)
        assert third.entered_low_stock is False

    async def test_stale_version_conflicts(self, stores, wear_item):
        stale = await stores.inventory.get_item(wear_item.id)
        await InventoryService(stores.inventory).adjust_quantity(wear_item.id, -1)

        stale.quantity = 100
        with pytest.raises(ConflictError):
            await stores.inventory.update_item(stale)
