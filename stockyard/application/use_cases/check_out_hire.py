"""Check Out Hire Use Case."""

from dataclasses import dataclass
from datetime import datetime

from stockyard.application.dto.requests import CheckOutHireRequest
from stockyard.config import get_logger, get_settings
from stockyard.core.entities.hire_booking import BookingStatus, HireBooking
from stockyard.core.entities.serialized_unit import SerializedUnit, UnitStatus
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.exceptions import (
    InvalidBookingStatusError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from stockyard.core.interfaces.booking_store import IBookingStore
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore
from stockyard.core.services.stock_rules import transition_unit

logger = get_logger(__name__)


@dataclass
class CheckOutHireResult:
    booking: HireBooking
    transaction: StockTransaction
    unit: SerializedUnit | None = None


class CheckOutHireUseCase:
    """
    Check out a reserved booking.

    Bulk: the allocation is consumed (on_hand and allocated both drop by
    the booked quantity). Serialized: the unit moves to on_hire.
    """

    def __init__(
        self,
        unit_store: ISerializedUnitStore | None = None,
        booking_store: IBookingStore | None = None,
    ):
        self._unit_store = unit_store
        self._booking_store = booking_store

    async def _get_unit_store(self) -> ISerializedUnitStore:
        if self._unit_store is None:
            from stockyard.infrastructure.storage.sqlite import get_unit_store

            self._unit_store = await get_unit_store()
        return self._unit_store

    async def _get_booking_store(self) -> IBookingStore:
        if self._booking_store is None:
            from stockyard.infrastructure.storage.sqlite import get_booking_store

            self._booking_store = await get_booking_store()
        return self._booking_store

    async def execute(self, request: CheckOutHireRequest) -> CheckOutHireResult:
        booking_store = await self._get_booking_store()
        booking = await booking_store.get_booking(request.booking_id)
        if booking is None:
            raise NotFoundError("HireBooking", request.booking_id)
        if booking.status != BookingStatus.RESERVED:
            raise InvalidBookingStatusError(booking.id, booking.status.value, "check out")

        booking.status = BookingStatus.CHECKED_OUT
        booking.start_date = datetime.utcnow()
        transaction = StockTransaction(
            transaction_type=TransactionType.HIRE,
            item_id=booking.item_id,
            unit_id=booking.unit_id,
            from_location_id=booking.from_location_id,
            quantity=booking.quantity,
            unit_cost=booking.daily_rate,
            reference_number=booking.booking_number,
            user_id=request.user_id,
        )

        unit = None
        if booking.unit_id is not None:
            unit = await (await self._get_unit_store()).get_unit(booking.unit_id)
            if unit is None:
                raise NotFoundError("SerializedUnit", booking.unit_id)
            if unit.status != UnitStatus.AVAILABLE:
                raise InvalidStatusTransitionError(
                    unit.id, unit.status.value, UnitStatus.ON_HIRE.value
                )
            unit = transition_unit(
                unit,
                UnitStatus.ON_HIRE,
                get_settings().inventory.enforce_status_transitions,
            )
            booking.checkout_condition = unit.condition
            booking = await booking_store.save_booking(
                booking,
                expected_status=BookingStatus.RESERVED,
                unit=unit,
                expected_unit_status=UnitStatus.AVAILABLE,
                transaction=transaction,
            )
        else:
            booking = await booking_store.save_booking(
                booking,
                expected_status=BookingStatus.RESERVED,
                delta_on_hand=-booking.quantity,
                delta_allocated=-booking.quantity,
                transaction=transaction,
            )

        logger.info(
            "hire_checked_out",
            booking_id=booking.id,
            booking_number=booking.booking_number,
            unit_id=booking.unit_id,
            quantity=booking.quantity,
        )
        return CheckOutHireResult(booking=booking, transaction=transaction, unit=unit)
