"""Core interfaces (ports) for dependency injection."""

from stockyard.core.interfaces.booking_store import IBookingStore
from stockyard.core.interfaces.item_store import ICategoryStore, IItemStore, ILocationStore
from stockyard.core.interfaces.ledger_store import (
    IQuantityStore,
    ISerializedUnitStore,
    ITransactionStore,
)

__all__ = [
    "IItemStore",
    "ILocationStore",
    "ICategoryStore",
    "ISerializedUnitStore",
    "IQuantityStore",
    "ITransactionStore",
    "IBookingStore",
]
