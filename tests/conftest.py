"""Pytest configuration and fixtures."""

import os

# Keep test runs off the on-disk database and the background poller
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("MONITOR_ENABLED", "false")

from collections.abc import Generator

import pytest

from labtrack.application.usage_monitor import reset_usage_monitor
from labtrack.config import reset_settings
from labtrack.core.entities.inventory import InventoryItem, ItemType
from labtrack.core.entities.machine import Machine, MachinePart
from labtrack.core.entities.user import Actor, UserRole
from labtrack.infrastructure.storage import StoreBundle, create_memory_stores, reset_stores


@pytest.fixture(autouse=True)
def _reset_globals() -> Generator[None, None, None]:
    """Drop cached settings, stores and monitor between tests."""
    yield
    reset_settings()
    reset_stores()
    reset_usage_monitor()


@pytest.fixture
def stores() -> StoreBundle:
    """Fresh in-memory store bundle."""
    return create_memory_stores(timeout=5.0)


@pytest.fixture
def technician() -> Actor:
    return Actor(user_id="u-tech", display_name="Ana Torres", role=UserRole.TECHNICIAN.value)


@pytest.fixture
def operator() -> Actor:
    return Actor(user_id="u-op", display_name="Luis Pardo", role=UserRole.OPERATOR.value)


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id="u-admin", role=UserRole.ADMIN.value)


@pytest.fixture
async def wear_item(stores: StoreBundle) -> InventoryItem:
    """Filter cartridge stocked as a wear part: 100 hours of life, 5 in stock."""
    return await stores.inventory.create_item(
        InventoryItem(
            name="HPLC filter cartridge",
            category="filters",
            quantity=5,
            min_quantity=2,
            unit_price=40.0,
            item_type=ItemType.WEAR_PART,
            usage_unit="hours",
            max_lifespan=100.0,
        )
    )


@pytest.fixture
async def machine(stores: StoreBundle) -> Machine:
    return await stores.machines.create_machine(
        Machine(name="HPLC-01", model="Agilent 1260", serial_number="DE-4411")
    )


@pytest.fixture
async def installed_part(
    stores: StoreBundle, machine: Machine, wear_item: InventoryItem
) -> MachinePart:
    """The filter installed on HPLC-01 with zero usage."""
    return await stores.machines.create_part(
        MachinePart(
            machine_id=machine.id,
            inventory_item_id=wear_item.id,
            name=wear_item.name,
            usage_type="hours",
            max_usage=100.0,
        )
    )
