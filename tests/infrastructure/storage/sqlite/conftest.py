"""Pytest fixtures for SQLite storage tests."""

from dataclasses import dataclass

import pytest

from stockyard.core.entities import Item, Location
from stockyard.infrastructure.storage.sqlite import (
    SQLiteBookingStore,
    SQLiteCategoryStore,
    SQLiteItemStore,
    SQLiteLocationStore,
    SQLiteQuantityStore,
    SQLiteSerializedUnitStore,
    SQLiteTransactionStore,
)


@dataclass
class Seeded:
    """Catalog rows most store tests start from."""

    bulk: Item
    serialized: Item
    warehouse: Location
    site: Location


@pytest.fixture
def item_store(pool) -> SQLiteItemStore:
    return SQLiteItemStore()


@pytest.fixture
def location_store(pool) -> SQLiteLocationStore:
    return SQLiteLocationStore()


@pytest.fixture
def category_store(pool) -> SQLiteCategoryStore:
    return SQLiteCategoryStore()


@pytest.fixture
def unit_store(pool) -> SQLiteSerializedUnitStore:
    return SQLiteSerializedUnitStore()


@pytest.fixture
def quantity_store(pool) -> SQLiteQuantityStore:
    return SQLiteQuantityStore()


@pytest.fixture
def transaction_store(pool) -> SQLiteTransactionStore:
    return SQLiteTransactionStore()


@pytest.fixture
def booking_store(pool) -> SQLiteBookingStore:
    return SQLiteBookingStore()


@pytest.fixture
async def seeded(item_store, location_store, hard_hat, laptop, warehouse, site) -> Seeded:
    return Seeded(
        bulk=await item_store.create_item(hard_hat),
        serialized=await item_store.create_item(laptop),
        warehouse=await location_store.create_location(warehouse),
        site=await location_store.create_location(site),
    )
