"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest

from stockyard.config import reset_settings
from stockyard.core.entities import Item, Location, LocationType, TrackingMode
from stockyard.infrastructure.storage.sqlite import (
    ConnectionPool,
    close_pool,
    reset_stores,
    set_pool,
)
from stockyard.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a per-test data directory and drop cached singletons."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("INVENTORY_ENFORCE_STATUS_TRANSITIONS", raising=False)
    reset_settings()
    reset_stores()
    yield
    reset_settings()
    reset_stores()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Install a pool over the migrated database as the global pool."""
    pool = ConnectionPool(
        migrated_db,
        pool_size=4,
        busy_timeout=5000,
        max_retries=3,
        retry_delay=0.01,
    )
    await pool.initialize()
    set_pool(pool)
    yield pool
    await close_pool()


@pytest.fixture
def hard_hat() -> Item:
    """Bulk item."""
    return Item(
        code="HH-001",
        name="Hard Hat",
        tracking_mode=TrackingMode.BULK,
        unit_cost=12.5,
        daily_hire_rate=1.0,
        reorder_point=5,
    )


@pytest.fixture
def laptop() -> Item:
    """Serialized item."""
    return Item(
        code="LAP-100",
        name="Site Laptop",
        tracking_mode=TrackingMode.SERIALIZED,
        unit_cost=900.0,
        daily_hire_rate=25.0,
    )


@pytest.fixture
def warehouse() -> Location:
    return Location(name="Main Warehouse", type=LocationType.WAREHOUSE)


@pytest.fixture
def site() -> Location:
    return Location(name="Riverside Site", type=LocationType.SITE)
