"""Inventory domain entities."""

import math
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ItemType(str, Enum):
    """Kinds of inventory items."""

    CONSUMABLE = "consumable"
    WEAR_PART = "wear_part"
    GENERAL_SPARE = "general_spare"


class StockStatus(str, Enum):
    """Stock level classification."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class MovementType(str, Enum):
    """Types of stock movements."""

    IN = "in"
    OUT = "out"
    ADJUST = "adjust"


def classify_stock(quantity: int, min_quantity: int) -> StockStatus:
    """Derive stock status from quantity and its reorder floor."""
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= min_quantity:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class InventoryItem(BaseModel):
    """
    A stocked item.

    Wear parts carry a usage unit and a maximum lifespan expressed in that
    unit; installed copies of them are tracked as machine parts.
    """

    id: int | None = None
    name: str
    category: str = ""
    quantity: int = Field(default=0, ge=0)
    min_quantity: int = Field(default=0, ge=0)
    location: str | None = None
    description: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    supplier: str | None = None
    item_type: ItemType = ItemType.GENERAL_SPARE
    usage_unit: str | None = None
    max_lifespan: float | None = None
    version: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def check_wear_part_fields(self) -> "InventoryItem":
        if self.item_type == ItemType.WEAR_PART:
            if not self.usage_unit or not self.usage_unit.strip():
                raise ValueError("wear parts require a usage_unit")
            if (
                self.max_lifespan is None
                or not math.isfinite(self.max_lifespan)
                or self.max_lifespan <= 0
            ):
                raise ValueError("wear parts require a positive, finite max_lifespan")
        return self

    @property
    def is_wear_part(self) -> bool:
        return self.item_type == ItemType.WEAR_PART

    @property
    def status(self) -> StockStatus:
        """Stock status derived from quantity vs min_quantity."""
        return classify_stock(self.quantity, self.min_quantity)


class StockMovement(BaseModel):
    """Records a single stock movement (in, out, or adjustment)."""

    id: int | None = None
    inventory_item_id: int
    movement_type: MovementType
    quantity: int = Field(..., gt=0)  # always positive
    reference: str | None = None  # e.g. "maintenance:12", "part:4"
    notes: str | None = None
    movement_date: date = Field(default_factory=date.today)
    created_at: datetime = Field(default_factory=datetime.utcnow)
