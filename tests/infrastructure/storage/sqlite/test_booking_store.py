"""Tests for SQLite hire booking store."""

from datetime import datetime

import aiosqlite
import pytest

from stockyard.core.entities import (
    BookingStatus,
    HireBooking,
    SerializedUnit,
    StockTransaction,
    TransactionType,
    UnitStatus,
)
from stockyard.core.exceptions import (
    DatabaseError,
    InvalidBookingStatusError,
    InvalidStatusTransitionError,
    NegativeQuantityError,
    NotFoundError,
    UnitBookedError,
)


def make_booking(item_id: int, location_id: int, number: str = "HIRE-0001", **kwargs) -> HireBooking:
    return HireBooking(
        booking_number=number,
        item_id=item_id,
        from_location_id=location_id,
        **kwargs,
    )


class TestBulkBookings:
    async def test_reserve_allocates(self, booking_store, quantity_store, seeded):
        await quantity_store.apply_movement(seeded.bulk.id, seeded.warehouse.id, 10, 0)

        booking = await booking_store.save_booking(
            make_booking(seeded.bulk.id, seeded.warehouse.id, quantity=4),
            delta_allocated=4,
        )

        assert booking.id is not None
        row = await quantity_store.get_quantity(seeded.bulk.id, seeded.warehouse.id)
        assert row.quantity_allocated == 4
        assert row.quantity_available == 6

        fetched = await booking_store.get_booking_by_number("HIRE-0001")
        assert fetched.id == booking.id
        assert fetched.status == BookingStatus.RESERVED

    async def test_over_reservation_rejected(self, booking_store, quantity_store, seeded):
        await quantity_store.apply_movement(seeded.bulk.id, seeded.warehouse.id, 3, 0)

        with pytest.raises(NegativeQuantityError):
            await booking_store.save_booking(
                make_booking(seeded.bulk.id, seeded.warehouse.id, quantity=5),
                delta_allocated=5,
            )

        assert await booking_store.list_bookings(item_id=seeded.bulk.id) == []

    async def test_checkout_with_transaction(
        self, booking_store, quantity_store, transaction_store, seeded
    ):
        await quantity_store.apply_movement(seeded.bulk.id, seeded.warehouse.id, 10, 0)
        booking = await booking_store.save_booking(
            make_booking(seeded.bulk.id, seeded.warehouse.id, quantity=2),
            delta_allocated=2,
        )

        booking.status = BookingStatus.CHECKED_OUT
        booking.start_date = datetime.utcnow()
        await booking_store.save_booking(
            booking,
            expected_status=BookingStatus.RESERVED,
            delta_on_hand=-2,
            delta_allocated=-2,
            transaction=StockTransaction(
                transaction_type=TransactionType.HIRE,
                item_id=seeded.bulk.id,
                from_location_id=seeded.warehouse.id,
                quantity=2,
            ),
        )

        row = await quantity_store.get_quantity(seeded.bulk.id, seeded.warehouse.id)
        assert (row.quantity_on_hand, row.quantity_allocated) == (8, 0)
        history = await transaction_store.list_transactions(seeded.bulk.id)
        assert history[0].reference_number == "HIRE-0001"

        fetched = await booking_store.get_booking(booking.id)
        assert fetched.status == BookingStatus.CHECKED_OUT
        assert fetched.start_date is not None

    async def test_stale_status_rejected(self, booking_store, quantity_store, seeded):
        await quantity_store.apply_movement(seeded.bulk.id, seeded.warehouse.id, 10, 0)
        booking = await booking_store.save_booking(
            make_booking(seeded.bulk.id, seeded.warehouse.id, quantity=2),
            delta_allocated=2,
        )
        booking.status = BookingStatus.CANCELLED
        await booking_store.save_booking(
            booking, expected_status=BookingStatus.RESERVED, delta_allocated=-2
        )

        # A second writer still holding the reserved copy
        booking.status = BookingStatus.CANCELLED
        with pytest.raises(InvalidBookingStatusError):
            await booking_store.save_booking(
                booking, expected_status=BookingStatus.RESERVED, delta_allocated=-2
            )

        row = await quantity_store.get_quantity(seeded.bulk.id, seeded.warehouse.id)
        assert row.quantity_allocated == 0

    async def test_unknown_booking(self, booking_store, seeded):
        ghost = make_booking(seeded.bulk.id, seeded.warehouse.id, id=77)
        with pytest.raises(NotFoundError):
            await booking_store.save_booking(ghost, expected_status=BookingStatus.RESERVED)

    async def test_duplicate_booking_number(self, booking_store, quantity_store, seeded):
        await quantity_store.apply_movement(seeded.bulk.id, seeded.warehouse.id, 10, 0)
        await booking_store.save_booking(make_booking(seeded.bulk.id, seeded.warehouse.id))

        with pytest.raises(DatabaseError):
            await booking_store.save_booking(make_booking(seeded.bulk.id, seeded.warehouse.id))

    async def test_list_filters(self, booking_store, seeded):
        await booking_store.save_booking(make_booking(seeded.bulk.id, seeded.warehouse.id, "HIRE-A"))
        await booking_store.save_booking(
            make_booking(
                seeded.serialized.id,
                seeded.warehouse.id,
                "HIRE-B",
                status=BookingStatus.CANCELLED,
            )
        )

        assert [b.booking_number for b in await booking_store.list_bookings(item_id=seeded.bulk.id)] == [
            "HIRE-A"
        ]
        cancelled = await booking_store.list_bookings(status=BookingStatus.CANCELLED)
        assert [b.booking_number for b in cancelled] == ["HIRE-B"]
        assert len(await booking_store.list_bookings(limit=1)) == 1


class TestSerializedBookings:
    async def test_checkout_moves_unit(self, booking_store, unit_store, seeded):
        unit = await unit_store.create_unit(
            SerializedUnit(
                item_id=seeded.serialized.id,
                serial_number="LAP-1",
                location_id=seeded.warehouse.id,
            )
        )
        booking = await booking_store.save_booking(
            make_booking(seeded.serialized.id, seeded.warehouse.id, unit_id=unit.id)
        )

        booking.status = BookingStatus.CHECKED_OUT
        unit.status = UnitStatus.ON_HIRE
        await booking_store.save_booking(
            booking,
            expected_status=BookingStatus.RESERVED,
            unit=unit,
            expected_unit_status=UnitStatus.AVAILABLE,
        )

        assert (await unit_store.get_unit(unit.id)).status == UnitStatus.ON_HIRE

    async def test_unit_already_moved(self, pool, booking_store, unit_store, seeded):
        unit = await unit_store.create_unit(
            SerializedUnit(item_id=seeded.serialized.id, serial_number="LAP-2")
        )
        booking = await booking_store.save_booking(
            make_booking(seeded.serialized.id, seeded.warehouse.id, unit_id=unit.id)
        )

        # Edited outside the stores, which refuse it while the booking is open
        async with pool.transaction() as conn:
            await conn.execute(
                "UPDATE stock_serialized_items SET status = 'maintenance' WHERE id = ?",
                (unit.id,),
            )

        booking.status = BookingStatus.CHECKED_OUT
        unit.status = UnitStatus.ON_HIRE
        with pytest.raises(InvalidStatusTransitionError):
            await booking_store.save_booking(
                booking,
                expected_status=BookingStatus.RESERVED,
                unit=unit,
                expected_unit_status=UnitStatus.AVAILABLE,
            )

        assert (await booking_store.get_booking(booking.id)).status == BookingStatus.RESERVED
        assert (await unit_store.get_unit(unit.id)).status == UnitStatus.MAINTENANCE

    async def test_second_open_booking_refused(self, booking_store, unit_store, seeded):
        unit = await unit_store.create_unit(
            SerializedUnit(item_id=seeded.serialized.id, serial_number="LAP-3")
        )
        first = await booking_store.save_booking(
            make_booking(seeded.serialized.id, seeded.warehouse.id, unit_id=unit.id)
        )

        with pytest.raises(UnitBookedError) as exc_info:
            await booking_store.save_booking(
                make_booking(
                    seeded.serialized.id, seeded.warehouse.id, "HIRE-0002", unit_id=unit.id
                )
            )
        assert exc_info.value.details["booking_number"] == first.booking_number
        assert await booking_store.get_booking_by_number("HIRE-0002") is None

    async def test_unavailable_unit_cannot_be_booked(self, pool, booking_store, unit_store, seeded):
        unit = await unit_store.create_unit(
            SerializedUnit(
                item_id=seeded.serialized.id,
                serial_number="LAP-4",
                status=UnitStatus.MAINTENANCE,
            )
        )

        with pytest.raises(InvalidStatusTransitionError):
            await booking_store.save_booking(
                make_booking(seeded.serialized.id, seeded.warehouse.id, unit_id=unit.id)
            )

    async def test_closed_booking_frees_unit(self, booking_store, unit_store, seeded):
        unit = await unit_store.create_unit(
            SerializedUnit(item_id=seeded.serialized.id, serial_number="LAP-5")
        )
        first = await booking_store.save_booking(
            make_booking(seeded.serialized.id, seeded.warehouse.id, unit_id=unit.id)
        )
        first.status = BookingStatus.CANCELLED
        await booking_store.save_booking(first, expected_status=BookingStatus.RESERVED)

        second = await booking_store.save_booking(
            make_booking(seeded.serialized.id, seeded.warehouse.id, "HIRE-0002", unit_id=unit.id)
        )
        assert second.id is not None

    async def test_open_booking_index_backstop(self, pool, booking_store, unit_store, seeded):
        unit = await unit_store.create_unit(
            SerializedUnit(item_id=seeded.serialized.id, serial_number="LAP-6")
        )
        await booking_store.save_booking(
            make_booking(seeded.serialized.id, seeded.warehouse.id, unit_id=unit.id)
        )

        with pytest.raises(aiosqlite.IntegrityError, match="hire_bookings.unit_id"):
            async with pool.transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO hire_bookings (
                        booking_number, item_id, unit_id, from_location_id,
                        status, booking_date
                    ) VALUES ('RAW-1', ?, ?, ?, 'checked_out', '2026-01-01T00:00:00')
                    """,
                    (seeded.serialized.id, unit.id, seeded.warehouse.id),
                )
