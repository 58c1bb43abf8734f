"""
Ledger operations that run on a connection already inside a write transaction.

The stores compose these so that a movement, the unit or booking it
affects and its audit record commit together.
"""

from datetime import datetime

import aiosqlite

from stockyard.config import get_logger
from stockyard.core.entities.item import Item
from stockyard.core.entities.location_quantity import LocationQuantity
from stockyard.core.entities.serialized_unit import SerializedUnit
from stockyard.core.entities.transaction import StockTransaction
from stockyard.core.exceptions import NotFoundError, UnitBookedError
from stockyard.core.services.stock_rules import apply_deltas, ensure_bulk, ensure_serialized
from stockyard.infrastructure.storage.sqlite.rows import (
    iso,
    row_to_item,
    row_to_quantity,
)

logger = get_logger(__name__)


async def fetch_item(conn: aiosqlite.Connection, item_id: int) -> Item:
    cursor = await conn.execute("SELECT * FROM stock_items WHERE id = ?", (item_id,))
    row = await cursor.fetchone()
    if row is None:
        raise NotFoundError("Item", item_id)
    return row_to_item(row)


async def ensure_location(conn: aiosqlite.Connection, location_id: int) -> None:
    cursor = await conn.execute(
        "SELECT 1 FROM stock_locations WHERE id = ?", (location_id,)
    )
    if await cursor.fetchone() is None:
        raise NotFoundError("Location", location_id)


async def ensure_unit_unbooked(conn: aiosqlite.Connection, unit_id: int) -> None:
    """Raise UnitBookedError while a reserved or checked-out booking holds the unit."""
    cursor = await conn.execute(
        """
        SELECT booking_number FROM hire_bookings
        WHERE unit_id = ? AND status IN ('reserved', 'checked_out')
        LIMIT 1
        """,
        (unit_id,),
    )
    row = await cursor.fetchone()
    if row is not None:
        raise UnitBookedError(unit_id, row["booking_number"])


async def fetch_quantity(
    conn: aiosqlite.Connection, item_id: int, location_id: int
) -> LocationQuantity | None:
    cursor = await conn.execute(
        "SELECT * FROM stock_quantities WHERE item_id = ? AND location_id = ?",
        (item_id, location_id),
    )
    row = await cursor.fetchone()
    return row_to_quantity(row) if row is not None else None


async def write_quantity(
    conn: aiosqlite.Connection, quantity: LocationQuantity
) -> LocationQuantity:
    """Insert a new (item, location) row or update the existing one."""
    quantity.updated_at = datetime.utcnow()
    if quantity.id is None:
        cursor = await conn.execute(
            """
            INSERT INTO stock_quantities (
                item_id, location_id, quantity_on_hand, quantity_available,
                quantity_allocated, quantity_on_order, bin_location,
                last_counted_at, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                quantity.item_id,
                quantity.location_id,
                quantity.quantity_on_hand,
                quantity.quantity_available,
                quantity.quantity_allocated,
                quantity.quantity_on_order,
                quantity.bin_location,
                iso(quantity.last_counted_at),
                quantity.created_at.isoformat(),
                quantity.updated_at.isoformat(),
            ),
        )
        quantity.id = cursor.lastrowid
    else:
        await conn.execute(
            """
            UPDATE stock_quantities SET
                quantity_on_hand = ?,
                quantity_available = ?,
                quantity_allocated = ?,
                quantity_on_order = ?,
                bin_location = ?,
                last_counted_at = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                quantity.quantity_on_hand,
                quantity.quantity_available,
                quantity.quantity_allocated,
                quantity.quantity_on_order,
                quantity.bin_location,
                iso(quantity.last_counted_at),
                quantity.updated_at.isoformat(),
                quantity.id,
            ),
        )
    return quantity


async def load_or_new_quantity(
    conn: aiosqlite.Connection, item_id: int, location_id: int
) -> LocationQuantity:
    """Current row for (item, location), or an unsaved zero row for a first movement."""
    existing = await fetch_quantity(conn, item_id, location_id)
    if existing is not None:
        return existing
    await ensure_location(conn, location_id)
    return LocationQuantity(item_id=item_id, location_id=location_id)


async def move_quantity(
    conn: aiosqlite.Connection,
    item_id: int,
    location_id: int,
    delta_on_hand: float,
    delta_allocated: float,
) -> LocationQuantity:
    """Read, validate and write one bulk ledger row."""
    item = await fetch_item(conn, item_id)
    ensure_bulk(item)
    current = await load_or_new_quantity(conn, item_id, location_id)
    updated = apply_deltas(current, delta_on_hand, delta_allocated)
    return await write_quantity(conn, updated)


async def write_unit(conn: aiosqlite.Connection, unit: SerializedUnit) -> SerializedUnit:
    """Update a unit row after checking its item is still serialized."""
    if unit.id is None:
        raise ValueError("unit must be persisted before it can be updated")
    ensure_serialized(await fetch_item(conn, unit.item_id))
    if unit.location_id is not None:
        await ensure_location(conn, unit.location_id)

    unit.updated_at = datetime.utcnow()
    await conn.execute(
        """
        UPDATE stock_serialized_items SET
            item_id = ?,
            location_id = ?,
            condition = ?,
            status = ?,
            purchase_date = ?,
            purchase_cost = ?,
            warranty_expiry = ?,
            last_service_date = ?,
            next_service_date = ?,
            notes = ?,
            updated_at = ?
        WHERE id = ?
        """,
        (
            unit.item_id,
            unit.location_id,
            unit.condition.value,
            unit.status.value,
            iso(unit.purchase_date),
            unit.purchase_cost,
            iso(unit.warranty_expiry),
            iso(unit.last_service_date),
            iso(unit.next_service_date),
            unit.notes,
            unit.updated_at.isoformat(),
            unit.id,
        ),
    )
    return unit


async def insert_transaction(
    conn: aiosqlite.Connection, transaction: StockTransaction
) -> StockTransaction:
    cursor = await conn.execute(
        """
        INSERT INTO stock_transactions (
            transaction_type, item_id, unit_id, from_location_id,
            to_location_id, quantity, unit_cost, total_cost,
            reference_number, notes, user_id, transaction_date, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            transaction.transaction_type.value,
            transaction.item_id,
            transaction.unit_id,
            transaction.from_location_id,
            transaction.to_location_id,
            transaction.quantity,
            transaction.unit_cost,
            transaction.total_cost,
            transaction.reference_number,
            transaction.notes,
            transaction.user_id,
            transaction.transaction_date.isoformat(),
            transaction.created_at.isoformat(),
        ),
    )
    transaction.id = cursor.lastrowid
    logger.info(
        "stock_transaction_recorded",
        transaction_id=transaction.id,
        type=transaction.transaction_type.value,
        item_id=transaction.item_id,
        qty=transaction.quantity,
    )
    return transaction
