"""SQLite storage implementations."""

from stockyard.infrastructure.storage.sqlite.booking_store import SQLiteBookingStore
from stockyard.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    get_write_transaction,
    set_pool,
)
from stockyard.infrastructure.storage.sqlite.item_store import (
    SQLiteCategoryStore,
    SQLiteItemStore,
    SQLiteLocationStore,
)
from stockyard.infrastructure.storage.sqlite.quantity_store import SQLiteQuantityStore
from stockyard.infrastructure.storage.sqlite.transaction_store import (
    SQLiteTransactionStore,
)
from stockyard.infrastructure.storage.sqlite.unit_store import SQLiteSerializedUnitStore

# Singleton instances
_item_store: SQLiteItemStore | None = None
_location_store: SQLiteLocationStore | None = None
_category_store: SQLiteCategoryStore | None = None
_unit_store: SQLiteSerializedUnitStore | None = None
_quantity_store: SQLiteQuantityStore | None = None
_transaction_store: SQLiteTransactionStore | None = None
_booking_store: SQLiteBookingStore | None = None


async def get_item_store() -> SQLiteItemStore:
    """Get singleton item store instance."""
    global _item_store
    if _item_store is None:
        _item_store = SQLiteItemStore()
    return _item_store


async def get_location_store() -> SQLiteLocationStore:
    """Get singleton location store instance."""
    global _location_store
    if _location_store is None:
        _location_store = SQLiteLocationStore()
    return _location_store


async def get_category_store() -> SQLiteCategoryStore:
    """Get singleton category store instance."""
    global _category_store
    if _category_store is None:
        _category_store = SQLiteCategoryStore()
    return _category_store


async def get_unit_store() -> SQLiteSerializedUnitStore:
    """Get singleton serialized unit store instance."""
    global _unit_store
    if _unit_store is None:
        _unit_store = SQLiteSerializedUnitStore()
    return _unit_store


async def get_quantity_store() -> SQLiteQuantityStore:
    """Get singleton quantity store instance."""
    global _quantity_store
    if _quantity_store is None:
        _quantity_store = SQLiteQuantityStore()
    return _quantity_store


async def get_transaction_store() -> SQLiteTransactionStore:
    """Get singleton transaction store instance."""
    global _transaction_store
    if _transaction_store is None:
        _transaction_store = SQLiteTransactionStore()
    return _transaction_store


async def get_booking_store() -> SQLiteBookingStore:
    """Get singleton booking store instance."""
    global _booking_store
    if _booking_store is None:
        _booking_store = SQLiteBookingStore()
    return _booking_store


def reset_stores() -> None:
    """Drop the store singletons (used by tests)."""
    global _item_store, _location_store, _category_store, _unit_store
    global _quantity_store, _transaction_store, _booking_store
    _item_store = None
    _location_store = None
    _category_store = None
    _unit_store = None
    _quantity_store = None
    _transaction_store = None
    _booking_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "set_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_write_transaction",
    # Store classes
    "SQLiteItemStore",
    "SQLiteLocationStore",
    "SQLiteCategoryStore",
    "SQLiteSerializedUnitStore",
    "SQLiteQuantityStore",
    "SQLiteTransactionStore",
    "SQLiteBookingStore",
    # Factory functions
    "get_item_store",
    "get_location_store",
    "get_category_store",
    "get_unit_store",
    "get_quantity_store",
    "get_transaction_store",
    "get_booking_store",
    "reset_stores",
]
