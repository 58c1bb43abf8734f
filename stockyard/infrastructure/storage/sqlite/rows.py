"""Row ↔ entity conversion shared by the SQLite stores."""

from datetime import date, datetime

import aiosqlite

from stockyard.core.entities.category import Category
from stockyard.core.entities.hire_booking import BookingStatus, HireBooking
from stockyard.core.entities.item import Item, TrackingMode
from stockyard.core.entities.location import Location, LocationType
from stockyard.core.entities.location_quantity import LocationQuantity
from stockyard.core.entities.serialized_unit import (
    SerializedUnit,
    UnitCondition,
    UnitStatus,
)
from stockyard.core.entities.transaction import StockTransaction, TransactionType


def iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def _timestamps(row: aiosqlite.Row) -> dict[str, datetime]:
    return {
        "created_at": parse_datetime(row["created_at"]) or datetime.utcnow(),
        "updated_at": parse_datetime(row["updated_at"]) or datetime.utcnow(),
    }


def row_to_item(row: aiosqlite.Row) -> Item:
    return Item(
        id=row["id"],
        code=row["item_code"],
        name=row["name"],
        description=row["description"],
        category_id=row["category_id"],
        unit_of_measure=row["unit_of_measure"],
        tracking_mode=TrackingMode(row["tracking_mode"]),
        unit_cost=float(row["unit_cost"]),
        replacement_cost=float(row["replacement_cost"]),
        daily_hire_rate=float(row["daily_hire_rate"]),
        reorder_point=float(row["reorder_point"]),
        reorder_quantity=float(row["reorder_quantity"]),
        is_active=bool(row["is_active"]),
        **_timestamps(row),
    )


def row_to_category(row: aiosqlite.Row) -> Category:
    return Category(
        id=row["id"],
        name=row["name"],
        parent_id=row["parent_id"],
        description=row["description"],
        **_timestamps(row),
    )


def row_to_location(row: aiosqlite.Row) -> Location:
    return Location(
        id=row["id"],
        name=row["name"],
        type=LocationType(row["type"]),
        address=row["address"],
        is_active=bool(row["is_active"]),
        **_timestamps(row),
    )


def row_to_unit(row: aiosqlite.Row) -> SerializedUnit:
    return SerializedUnit(
        id=row["id"],
        item_id=row["item_id"],
        serial_number=row["serial_number"],
        location_id=row["location_id"],
        condition=UnitCondition(row["condition"]),
        status=UnitStatus(row["status"]),
        purchase_date=parse_date(row["purchase_date"]),
        purchase_cost=float(row["purchase_cost"]),
        warranty_expiry=parse_date(row["warranty_expiry"]),
        last_service_date=parse_date(row["last_service_date"]),
        next_service_date=parse_date(row["next_service_date"]),
        notes=row["notes"],
        **_timestamps(row),
    )


def row_to_quantity(row: aiosqlite.Row) -> LocationQuantity:
    return LocationQuantity(
        id=row["id"],
        item_id=row["item_id"],
        location_id=row["location_id"],
        quantity_on_hand=float(row["quantity_on_hand"]),
        quantity_available=float(row["quantity_available"]),
        quantity_allocated=float(row["quantity_allocated"]),
        quantity_on_order=float(row["quantity_on_order"]),
        bin_location=row["bin_location"],
        last_counted_at=parse_datetime(row["last_counted_at"]),
        **_timestamps(row),
    )


def row_to_transaction(row: aiosqlite.Row) -> StockTransaction:
    return StockTransaction(
        id=row["id"],
        transaction_type=TransactionType(row["transaction_type"]),
        item_id=row["item_id"],
        unit_id=row["unit_id"],
        from_location_id=row["from_location_id"],
        to_location_id=row["to_location_id"],
        quantity=float(row["quantity"]),
        unit_cost=float(row["unit_cost"]),
        reference_number=row["reference_number"],
        notes=row["notes"],
        user_id=row["user_id"],
        transaction_date=parse_datetime(row["transaction_date"]) or datetime.utcnow(),
        created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
    )


def row_to_booking(row: aiosqlite.Row) -> HireBooking:
    checkout = row["checkout_condition"]
    returned = row["return_condition"]
    return HireBooking(
        id=row["id"],
        booking_number=row["booking_number"],
        item_id=row["item_id"],
        unit_id=row["unit_id"],
        from_location_id=row["from_location_id"],
        quantity=float(row["quantity"]),
        status=BookingStatus(row["status"]),
        daily_rate=float(row["daily_rate"]),
        booking_date=parse_datetime(row["booking_date"]) or datetime.utcnow(),
        start_date=parse_datetime(row["start_date"]),
        expected_return_date=parse_date(row["expected_return_date"]),
        actual_return_date=parse_datetime(row["actual_return_date"]),
        checkout_condition=UnitCondition(checkout) if checkout else None,
        return_condition=UnitCondition(returned) if returned else None,
        notes=row["notes"],
        created_by=row["created_by"],
        **_timestamps(row),
    )
