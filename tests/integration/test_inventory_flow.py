"""Integration tests: stock flows through the use cases against a real database."""

import asyncio

import pytest

from stockyard.application.dto.requests import (
    ApplyMovementRequest,
    CancelHireRequest,
    ChangeTrackingModeRequest,
    CheckInHireRequest,
    CheckOutHireRequest,
    CountStockRequest,
    CreateItemRequest,
    CreateLocationRequest,
    IssueStockRequest,
    ReceiveStockRequest,
    RegisterUnitRequest,
    RelocateUnitRequest,
    ReserveHireRequest,
    TransferStockRequest,
    TransitionStatusRequest,
    UpdateConditionRequest,
)
from stockyard.application.use_cases import (
    ApplyMovementUseCase,
    CancelHireUseCase,
    ChangeTrackingModeUseCase,
    CheckInHireUseCase,
    CheckOutHireUseCase,
    CountStockUseCase,
    CreateItemUseCase,
    CreateLocationUseCase,
    GetQuantitiesUseCase,
    IssueStockUseCase,
    ReceiveStockUseCase,
    RegisterUnitUseCase,
    RelocateUnitUseCase,
    ReserveHireUseCase,
    TransferStockUseCase,
    TransitionUnitStatusUseCase,
    UpdateUnitConditionUseCase,
)
from stockyard.core.entities import BookingStatus, LocationType, UnitCondition, UnitStatus
from stockyard.core.exceptions import (
    DuplicateSerialError,
    InvalidBookingStatusError,
    InvalidStatusTransitionError,
    NegativeQuantityError,
    NotBulkItemError,
    NotSerializedItemError,
    TrackingModeLockedError,
    UnitBookedError,
)
from stockyard.infrastructure.storage.sqlite import get_booking_store
from stockyard.infrastructure.storage.sqlite.migrations import verify_schema_integrity


async def create_item(code: str, mode: str, **kwargs):
    result = await CreateItemUseCase().execute(
        CreateItemRequest(code=code, name=code.title(), tracking_mode=mode, **kwargs)
    )
    return result.item


async def create_location(name: str, type: LocationType | None = None):
    return await CreateLocationUseCase().execute(CreateLocationRequest(name=name, type=type))


async def quantities(item_id: int) -> tuple[float, float, float]:
    return (await GetQuantitiesUseCase().execute(item_id)).as_triple()


class TestBulkFlow:
    async def test_receive_reserve_issue_count(self, pool):
        hats = await create_item("HH-001", "bulk", daily_hire_rate=1.0, reorder_point=5)
        store = await create_location("Main Warehouse")
        site = await create_location("Riverside Site", LocationType.SITE)

        await ReceiveStockUseCase().execute(
            ReceiveStockRequest(item_id=hats.id, location_id=store.id, quantity=100)
        )
        assert await quantities(hats.id) == (100, 100, 0)

        reserved = await ReserveHireUseCase().execute(
            ReserveHireRequest(item_id=hats.id, from_location_id=store.id, quantity=30)
        )
        assert await quantities(hats.id) == (100, 70, 30)

        # Allocated stock cannot be issued
        with pytest.raises(NegativeQuantityError):
            await IssueStockUseCase().execute(
                IssueStockRequest(item_id=hats.id, location_id=store.id, quantity=71)
            )
        assert await quantities(hats.id) == (100, 70, 30)

        await IssueStockUseCase().execute(
            IssueStockRequest(item_id=hats.id, location_id=store.id, quantity=20)
        )
        assert await quantities(hats.id) == (80, 50, 30)

        await TransferStockUseCase().execute(
            TransferStockRequest(
                item_id=hats.id, from_location_id=store.id, to_location_id=site.id, quantity=10
            )
        )
        assert await quantities(hats.id) == (80, 50, 30)

        await CheckOutHireUseCase().execute(CheckOutHireRequest(booking_id=reserved.booking.id))
        assert await quantities(hats.id) == (50, 50, 0)

        await CheckInHireUseCase().execute(CheckInHireRequest(booking_id=reserved.booking.id))
        assert await quantities(hats.id) == (80, 80, 0)

        counted = await CountStockUseCase().execute(
            CountStockRequest(item_id=hats.id, location_id=site.id, counted_quantity=8)
        )
        assert counted.variance == -2
        assert await quantities(hats.id) == (78, 78, 0)

        checks = await verify_schema_integrity(pool.db_path)
        assert all(c["status"] == "PASS" for c in checks)

    async def test_cancel_releases_allocation(self, pool):
        hats = await create_item("HH-002", "bulk")
        store = await create_location("Main Warehouse")
        await ReceiveStockUseCase().execute(
            ReceiveStockRequest(item_id=hats.id, location_id=store.id, quantity=10)
        )
        reserved = await ReserveHireUseCase().execute(
            ReserveHireRequest(item_id=hats.id, from_location_id=store.id, quantity=10)
        )

        with pytest.raises(NegativeQuantityError):
            await ReserveHireUseCase().execute(
                ReserveHireRequest(item_id=hats.id, from_location_id=store.id, quantity=1)
            )

        cancelled = await CancelHireUseCase().execute(
            CancelHireRequest(booking_id=reserved.booking.id)
        )
        assert cancelled.status == BookingStatus.CANCELLED
        assert await quantities(hats.id) == (10, 10, 0)

        with pytest.raises(InvalidBookingStatusError):
            await CheckOutHireUseCase().execute(
                CheckOutHireRequest(booking_id=reserved.booking.id)
            )

    async def test_bulk_item_takes_no_serials(self, pool):
        hats = await create_item("HH-003", "bulk")
        with pytest.raises(NotSerializedItemError):
            await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=hats.id, serial_number="SN-X")
            )


class TestSerializedFlow:
    async def test_register_hire_and_retire(self, pool):
        laptops = await create_item("LAP-100", "serialized", daily_hire_rate=25)
        store = await create_location("Main Warehouse")

        units = []
        for serial in ("LAP-SN-1", "LAP-SN-2", "LAP-SN-3"):
            result = await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=laptops.id, serial_number=serial, location_id=store.id)
            )
            units.append(result.unit)
        assert await quantities(laptops.id) == (3, 3, 0)

        # Stock movements are bulk-only
        with pytest.raises(NotBulkItemError):
            await ReceiveStockUseCase().execute(
                ReceiveStockRequest(item_id=laptops.id, location_id=store.id, quantity=1)
            )

        reserved = await ReserveHireUseCase().execute(
            ReserveHireRequest(item_id=laptops.id, from_location_id=store.id, unit_id=units[0].id)
        )
        assert await quantities(laptops.id) == (3, 3, 0)

        await CheckOutHireUseCase().execute(CheckOutHireRequest(booking_id=reserved.booking.id))
        assert await quantities(laptops.id) == (3, 2, 1)

        returned = await CheckInHireUseCase().execute(
            CheckInHireRequest(booking_id=reserved.booking.id, return_condition=UnitCondition.FAIR)
        )
        assert returned.unit.status == UnitStatus.AVAILABLE
        assert returned.hire_cost == 25.0
        assert await quantities(laptops.id) == (3, 3, 0)

        await TransitionUnitStatusUseCase().execute(
            TransitionStatusRequest(serial_number="LAP-SN-3", status=UnitStatus.RETIRED)
        )
        assert await quantities(laptops.id) == (3, 2, 0)

    async def test_serials_unique_across_items(self, pool):
        laptops = await create_item("LAP-200", "serialized")
        drills = await create_item("DRL-1", "serialized")
        await RegisterUnitUseCase().execute(
            RegisterUnitRequest(item_id=laptops.id, serial_number="SN-SHARED")
        )

        with pytest.raises(DuplicateSerialError):
            await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=drills.id, serial_number="SN-SHARED")
            )
        assert await quantities(drills.id) == (0, 0, 0)

    async def test_concurrent_checkouts_of_one_unit(self, pool):
        laptops = await create_item("LAP-300", "serialized")
        store = await create_location("Main Warehouse")
        unit = (
            await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=laptops.id, serial_number="SN-RACE", location_id=store.id)
            )
        ).unit
        booking = (
            await ReserveHireUseCase().execute(
                ReserveHireRequest(item_id=laptops.id, from_location_id=store.id, unit_id=unit.id)
            )
        ).booking

        results = await asyncio.gather(
            *(
                CheckOutHireUseCase().execute(CheckOutHireRequest(booking_id=booking.id))
                for _ in range(5)
            ),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        assert len(failures) == 4
        assert all(
            isinstance(r, (InvalidBookingStatusError, InvalidStatusTransitionError))
            for r in failures
        )
        assert await quantities(laptops.id) == (1, 0, 1)


    async def test_concurrent_reservations_of_one_unit(self, pool):
        laptops = await create_item("LAP-400", "serialized")
        store = await create_location("Main Warehouse")
        unit = (
            await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=laptops.id, serial_number="SN-PAIR", location_id=store.id)
            )
        ).unit
        request = ReserveHireRequest(item_id=laptops.id, from_location_id=store.id, unit_id=unit.id)

        results = await asyncio.gather(
            *(ReserveHireUseCase().execute(request) for _ in range(2)),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        assert len(failures) == 1
        assert isinstance(failures[0], UnitBookedError)
        open_bookings = await (await get_booking_store()).list_bookings(
            item_id=laptops.id, status=BookingStatus.RESERVED
        )
        assert [b.unit_id for b in open_bookings] == [unit.id]


class TestReservedUnitIsHeld:
    async def _reserved_unit(self):
        laptops = await create_item("LAP-500", "serialized")
        store = await create_location("Main Warehouse")
        site = await create_location("Riverside Site", LocationType.SITE)
        unit = (
            await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=laptops.id, serial_number="SN-HELD", location_id=store.id)
            )
        ).unit
        booking = (
            await ReserveHireUseCase().execute(
                ReserveHireRequest(item_id=laptops.id, from_location_id=store.id, unit_id=unit.id)
            )
        ).booking
        return unit, booking, site

    async def test_status_change_refused_while_reserved(self, pool):
        unit, booking, _ = await self._reserved_unit()

        with pytest.raises(UnitBookedError):
            await TransitionUnitStatusUseCase().execute(
                TransitionStatusRequest(unit_id=unit.id, status=UnitStatus.RETIRED)
            )

        checked_out = await CheckOutHireUseCase().execute(
            CheckOutHireRequest(booking_id=booking.id)
        )
        assert checked_out.booking.status == BookingStatus.CHECKED_OUT

    async def test_relocation_refused_while_reserved(self, pool):
        unit, _, site = await self._reserved_unit()

        with pytest.raises(UnitBookedError):
            await RelocateUnitUseCase().execute(
                RelocateUnitRequest(unit_id=unit.id, location_id=site.id)
            )

    async def test_condition_update_allowed_while_reserved(self, pool):
        unit, _, _ = await self._reserved_unit()

        updated = await UpdateUnitConditionUseCase().execute(
            UpdateConditionRequest(unit_id=unit.id, condition=UnitCondition.FAIR)
        )
        assert updated.condition == UnitCondition.FAIR

    async def test_cancelled_booking_releases_unit(self, pool):
        unit, booking, _ = await self._reserved_unit()
        await CancelHireUseCase().execute(CancelHireRequest(booking_id=booking.id))

        result = await TransitionUnitStatusUseCase().execute(
            TransitionStatusRequest(unit_id=unit.id, status=UnitStatus.MAINTENANCE)
        )
        assert result.unit.status == UnitStatus.MAINTENANCE

class TestTrackingModeLock:
    async def test_mode_free_until_first_reference(self, pool):
        item = await create_item("GEN-1", "bulk")
        store = await create_location("Main Warehouse")

        changed = await ChangeTrackingModeUseCase().execute(
            ChangeTrackingModeRequest(item_id=item.id, tracking_mode="serialized")
        )
        assert changed.changed is True

        await RegisterUnitUseCase().execute(
            RegisterUnitRequest(item_id=item.id, serial_number="GEN-SN-1", location_id=store.id)
        )
        with pytest.raises(TrackingModeLockedError):
            await ChangeTrackingModeUseCase().execute(
                ChangeTrackingModeRequest(item_id=item.id, tracking_mode="bulk")
            )


class TestReads:
    async def test_reads_are_idempotent(self, pool):
        hats = await create_item("HH-010", "bulk")
        store = await create_location("Main Warehouse")
        await ReceiveStockUseCase().execute(
            ReceiveStockRequest(item_id=hats.id, location_id=store.id, quantity=12)
        )

        use_case = GetQuantitiesUseCase()
        first = await use_case.execute(hats.id)
        second = await use_case.execute(hats.id)
        assert first == second
        assert first.as_triple() == (12, 12, 0)


class TestEndToEndScenarios:
    async def test_hard_hat_allocation_limit(self, pool):
        hats = await create_item("HARD-HAT", "bulk")
        location_a = await create_location("Location A")
        assert await quantities(hats.id) == (0, 0, 0)

        movements = ApplyMovementUseCase()
        await movements.execute(
            ApplyMovementRequest(item_id=hats.id, location_id=location_a.id, delta_on_hand=50)
        )
        assert await quantities(hats.id) == (50, 50, 0)

        await movements.execute(
            ApplyMovementRequest(item_id=hats.id, location_id=location_a.id, delta_allocated=5)
        )
        assert await quantities(hats.id) == (50, 45, 5)

        with pytest.raises(NegativeQuantityError):
            await movements.execute(
                ApplyMovementRequest(
                    item_id=hats.id, location_id=location_a.id, delta_allocated=46
                )
            )
        assert await quantities(hats.id) == (50, 45, 5)

    async def test_laptop_hire_by_serial(self, pool):
        laptops = await create_item("LAPTOP", "serialized")
        for serial in ("SN-001", "SN-002"):
            await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=laptops.id, serial_number=serial)
            )
        assert await quantities(laptops.id) == (2, 2, 0)

        await TransitionUnitStatusUseCase().execute(
            TransitionStatusRequest(serial_number="SN-001", status=UnitStatus.ON_HIRE)
        )
        assert await quantities(laptops.id) == (2, 1, 1)

        with pytest.raises(DuplicateSerialError):
            await RegisterUnitUseCase().execute(
                RegisterUnitRequest(item_id=laptops.id, serial_number="SN-001")
            )
        assert await quantities(laptops.id) == (2, 1, 1)
