"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from labtrack.config import reset_settings
from labtrack.core.entities.inventory import InventoryItem, ItemType
from labtrack.core.entities.machine import Machine
from labtrack.infrastructure.storage import StoreBundle, create_sqlite_stores
from labtrack.infrastructure.storage.sqlite import close_pool
from labtrack.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "labtrack.db"


@pytest.fixture
async def sqlite_db(temp_db_path: Path, monkeypatch) -> AsyncGenerator[Path, None]:
    """Migrated database in a temp dir, wired into settings and the global pool."""
    monkeypatch.setenv("STORAGE_BACKEND", "sqlite")
    monkeypatch.setenv("STORAGE_DATA_DIR", str(temp_db_path.parent))
    monkeypatch.setenv("STORAGE_DB_NAME", temp_db_path.name)
    monkeypatch.setenv("STORAGE_POOL_SIZE", "2")
    monkeypatch.setenv("STORAGE_BUSY_TIMEOUT", "2000")
    reset_settings()

    await initialize_database(temp_db_path, create_backup_before=False)
    yield temp_db_path
    await close_pool()


@pytest.fixture
def sqlite_stores(sqlite_db: Path) -> StoreBundle:
    return create_sqlite_stores(timeout=5.0)


@pytest.fixture
async def sqlite_item(sqlite_stores: StoreBundle) -> InventoryItem:
    return await sqlite_stores.inventory.create_item(
        InventoryItem(
            name="Pump seal",
            quantity=4,
            min_quantity=1,
            unit_price=25.0,
            item_type=ItemType.WEAR_PART,
            usage_unit="cycles",
            max_lifespan=1000,
        )
    )


@pytest.fixture
async def sqlite_machine(sqlite_stores: StoreBundle) -> Machine:
    return await sqlite_stores.machines.create_machine(Machine(name="GC-02", model="Clarus 590"))
