"""Storage infrastructure implementations."""

from stockyard.infrastructure.storage.sqlite import (
    SQLiteBookingStore,
    SQLiteItemStore,
    SQLiteLocationStore,
    SQLiteQuantityStore,
    SQLiteSerializedUnitStore,
    SQLiteTransactionStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteItemStore",
    "SQLiteLocationStore",
    "SQLiteSerializedUnitStore",
    "SQLiteQuantityStore",
    "SQLiteTransactionStore",
    "SQLiteBookingStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
