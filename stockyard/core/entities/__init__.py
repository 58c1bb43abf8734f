"""Core domain entities."""

from stockyard.core.entities.category import Category
from stockyard.core.entities.hire_booking import BookingStatus, HireBooking
from stockyard.core.entities.item import Item, TrackingMode
from stockyard.core.entities.location import Location, LocationType
from stockyard.core.entities.location_quantity import LocationQuantity, StockCount
from stockyard.core.entities.quantities import UnifiedQuantity
from stockyard.core.entities.serialized_unit import (
    ALLOCATED_STATUSES,
    STATUS_TRANSITIONS,
    SerializedUnit,
    UnitCondition,
    UnitStatus,
)
from stockyard.core.entities.transaction import StockTransaction, TransactionType

__all__ = [
    # Catalog
    "Category",
    "Item",
    "TrackingMode",
    "Location",
    "LocationType",
    # Serialized ledger
    "SerializedUnit",
    "UnitCondition",
    "UnitStatus",
    "ALLOCATED_STATUSES",
    "STATUS_TRANSITIONS",
    # Bulk ledger
    "LocationQuantity",
    "StockCount",
    # Derived
    "UnifiedQuantity",
    # Movements
    "StockTransaction",
    "TransactionType",
    "HireBooking",
    "BookingStatus",
]
