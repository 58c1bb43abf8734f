"""SQLite implementation of hire booking storage."""

from datetime import datetime

import aiosqlite

from stockyard.config import get_logger
from stockyard.core.entities.hire_booking import BookingStatus, HireBooking
from stockyard.core.entities.serialized_unit import SerializedUnit, UnitStatus
from stockyard.core.entities.transaction import StockTransaction
from stockyard.core.exceptions import (
    DatabaseError,
    InvalidBookingStatusError,
    InvalidStatusTransitionError,
    NotFoundError,
    UnitBookedError,
)
from stockyard.core.interfaces.booking_store import IBookingStore
from stockyard.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_write_transaction,
)
from stockyard.infrastructure.storage.sqlite.ledger_ops import (
    ensure_location,
    ensure_unit_unbooked,
    fetch_item,
    insert_transaction,
    move_quantity,
    write_unit,
)
from stockyard.infrastructure.storage.sqlite.rows import iso, row_to_booking

logger = get_logger(__name__)


class SQLiteBookingStore(IBookingStore):
    """SQLite implementation of hire booking storage."""

    async def get_booking(self, booking_id: int) -> HireBooking | None:
        """Get booking by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM hire_bookings WHERE id = ?", (booking_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_booking(row)

    async def get_booking_by_number(self, booking_number: str) -> HireBooking | None:
        """Get booking by booking number."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM hire_bookings WHERE booking_number = ?",
                (booking_number,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_booking(row)

    async def list_bookings(
        self,
        item_id: int | None = None,
        status: BookingStatus | None = None,
        limit: int = 100,
    ) -> list[HireBooking]:
        """List bookings, newest first."""
        conditions = []
        params: list = []
        if item_id is not None:
            conditions.append("item_id = ?")
            params.append(item_id)
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM hire_bookings
                {where}
                ORDER BY booking_date DESC, id DESC
                LIMIT ?
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [row_to_booking(row) for row in rows]

    async def save_booking(
        self,
        booking: HireBooking,
        *,
        expected_status: BookingStatus | None = None,
        delta_on_hand: float = 0.0,
        delta_allocated: float = 0.0,
        unit: SerializedUnit | None = None,
        expected_unit_status: UnitStatus | None = None,
        transaction: StockTransaction | None = None,
    ) -> HireBooking:
        """Write a booking and the ledger changes it drives in one commit."""
        booking.updated_at = datetime.utcnow()
        try:
            async with get_write_transaction() as conn:
                if booking.id is not None and expected_status is not None:
                    await self._check_booking_status(conn, booking, expected_status)
                if unit is not None and expected_unit_status is not None:
                    await self._check_unit_status(conn, unit, expected_unit_status)

                if delta_on_hand or delta_allocated:
                    await move_quantity(
                        conn,
                        booking.item_id,
                        booking.from_location_id,
                        delta_on_hand,
                        delta_allocated,
                    )
                if unit is not None:
                    await write_unit(conn, unit)
                if transaction is not None:
                    if transaction.unit_id is None and unit is not None:
                        transaction.unit_id = unit.id
                    transaction.reference_number = (
                        transaction.reference_number or booking.booking_number
                    )
                    await insert_transaction(conn, transaction)

                if booking.id is None:
                    await fetch_item(conn, booking.item_id)
                    await ensure_location(conn, booking.from_location_id)
                    if booking.unit_id is not None:
                        await self._check_unit_reservable(conn, booking.unit_id)
                    await self._insert(conn, booking)
                else:
                    await self._update(conn, booking)
        except aiosqlite.IntegrityError as e:
            # Partial unique index on open bookings per unit
            if "hire_bookings.unit_id" in str(e):
                raise UnitBookedError(booking.unit_id) from e
            raise DatabaseError("save_booking", str(e)) from e

        logger.info(
            "hire_booking_saved",
            booking_id=booking.id,
            booking_number=booking.booking_number,
            status=booking.status.value,
            item_id=booking.item_id,
            unit_id=booking.unit_id,
            quantity=booking.quantity,
        )
        return booking

    @staticmethod
    async def _check_booking_status(
        conn: aiosqlite.Connection, booking: HireBooking, expected: BookingStatus
    ) -> None:
        cursor = await conn.execute(
            "SELECT status FROM hire_bookings WHERE id = ?", (booking.id,)
        )
        row = await cursor.fetchone()
        if row is None:
            raise NotFoundError("HireBooking", booking.id)
        if row["status"] != expected.value:
            raise InvalidBookingStatusError(
                booking.id, row["status"], f"move to '{booking.status.value}'"
            )

    @staticmethod
    async def _check_unit_status(
        conn: aiosqlite.Connection, unit: SerializedUnit, expected: UnitStatus
    ) -> None:
        cursor = await conn.execute(
            "SELECT status FROM stock_serialized_items WHERE id = ?", (unit.id,)
        )
        row = await cursor.fetchone()
        if row is None:
            raise NotFoundError("SerializedUnit", unit.id)
        if row["status"] != expected.value:
            raise InvalidStatusTransitionError(unit.id, row["status"], unit.status.value)

    @staticmethod
    async def _check_unit_reservable(conn: aiosqlite.Connection, unit_id: int) -> None:
        cursor = await conn.execute(
            "SELECT status FROM stock_serialized_items WHERE id = ?", (unit_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            raise NotFoundError("SerializedUnit", unit_id)
        if row["status"] != UnitStatus.AVAILABLE.value:
            raise InvalidStatusTransitionError(
                unit_id, row["status"], UnitStatus.ON_HIRE.value
            )
        await ensure_unit_unbooked(conn, unit_id)

    @staticmethod
    async def _insert(conn: aiosqlite.Connection, booking: HireBooking) -> None:
        booking.created_at = booking.updated_at
        cursor = await conn.execute(
            """
            INSERT INTO hire_bookings (
                booking_number, item_id, unit_id, from_location_id, quantity,
                status, daily_rate, booking_date, start_date,
                expected_return_date, actual_return_date, checkout_condition,
                return_condition, notes, created_by, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                booking.booking_number,
                booking.item_id,
                booking.unit_id,
                booking.from_location_id,
                booking.quantity,
                booking.status.value,
                booking.daily_rate,
                booking.booking_date.isoformat(),
                iso(booking.start_date),
                iso(booking.expected_return_date),
                iso(booking.actual_return_date),
                booking.checkout_condition.value if booking.checkout_condition else None,
                booking.return_condition.value if booking.return_condition else None,
                booking.notes,
                booking.created_by,
                booking.created_at.isoformat(),
                booking.updated_at.isoformat(),
            ),
        )
        booking.id = cursor.lastrowid

    @staticmethod
    async def _update(conn: aiosqlite.Connection, booking: HireBooking) -> None:
        cursor = await conn.execute(
            """
            UPDATE hire_bookings SET
                unit_id = ?,
                status = ?,
                start_date = ?,
                expected_return_date = ?,
                actual_return_date = ?,
                checkout_condition = ?,
                return_condition = ?,
                notes = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                booking.unit_id,
                booking.status.value,
                iso(booking.start_date),
                iso(booking.expected_return_date),
                iso(booking.actual_return_date),
                booking.checkout_condition.value if booking.checkout_condition else None,
                booking.return_condition.value if booking.return_condition else None,
                booking.notes,
                booking.updated_at.isoformat(),
                booking.id,
            ),
        )
        if cursor.rowcount == 0:
            raise NotFoundError("HireBooking", booking.id)
