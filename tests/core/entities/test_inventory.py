"""Tests for inventory entities."""

import pytest
from pydantic import ValidationError

from labtrack.core.entities.inventory import (
    InventoryItem,
    ItemType,
    MovementType,
    StockMovement,
    StockStatus,
    classify_stock,
)


class TestInventoryItem:
    """Tests for InventoryItem entity."""

    def test_defaults(self):
        item = InventoryItem(name="Gloves")
        assert item.id is None
        assert item.quantity == 0
        assert item.item_type == ItemType.GENERAL_SPARE
        assert item.is_wear_part is False
        assert item.status == StockStatus.OUT_OF_STOCK

    @pytest.mark.parametrize(
        ("quantity", "min_quantity", "expected"),
        [
            (0, 0, StockStatus.OUT_OF_STOCK),
            (2, 2, StockStatus.LOW_STOCK),
            (1, 5, StockStatus.LOW_STOCK),
            (3, 2, StockStatus.IN_STOCK),
        ],
    )
    def test_stock_status(self, quantity, min_quantity, expected):
        assert classify_stock(quantity, min_quantity) == expected
        item = InventoryItem(name="Tips", quantity=quantity, min_quantity=min_quantity)
        assert item.status == expected

    def test_wear_part(self):
        item = InventoryItem(
            name="Lamp",
            item_type=ItemType.WEAR_PART,
            usage_unit="hours",
            max_lifespan=2000,
        )
        assert item.is_wear_part is True

    def test_wear_part_requires_usage_unit(self):
        with pytest.raises(ValidationError, match="usage_unit"):
            InventoryItem(name="Lamp", item_type=ItemType.WEAR_PART, max_lifespan=2000)

    @pytest.mark.parametrize("lifespan", [0, float("inf")])
    def test_wear_part_requires_positive_finite_lifespan(self, lifespan):
        with pytest.raises(ValidationError, match="max_lifespan"):
            InventoryItem(
                name="Lamp",
                item_type=ItemType.WEAR_PART,
                usage_unit="hours",
                max_lifespan=lifespan,
            )

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            InventoryItem(name="Tips", quantity=-1)


class TestStockMovement:
    """Tests for StockMovement entity."""

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            StockMovement(inventory_item_id=1, movement_type=MovementType.OUT, quantity=0)

    def test_reference(self):
        movement = StockMovement(
            inventory_item_id=1,
            movement_type=MovementType.OUT,
            quantity=1,
            reference="part:4",
        )
        assert movement.reference == "part:4"
