"""Take hired stock back."""

from dataclasses import dataclass
from datetime import datetime

from stockyard.application.dto.requests import CheckInHireRequest
from stockyard.config import get_logger, get_settings
from stockyard.core.entities.hire_booking import BookingStatus, HireBooking
from stockyard.core.entities.serialized_unit import SerializedUnit, UnitStatus
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.exceptions import InvalidBookingStatusError, NotFoundError
from stockyard.core.interfaces.booking_store import IBookingStore
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore
from stockyard.core.services.stock_rules import transition_unit

logger = get_logger(__name__)


@dataclass
class CheckInHireResult:
    booking: HireBooking
    transaction: StockTransaction
    unit: SerializedUnit | None = None

    @property
    def hire_cost(self) -> float:
        return self.booking.hire_cost


class CheckInHireUseCase:
    """
    Check in a checked-out booking.

    Bulk stock returns to the from-location's on-hand quantity.
    A serialized unit returns to available with its condition updated.
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

    async def execute(self, request: CheckInHireRequest) -> CheckInHireResult:
        booking_store = await self._get_booking_store()
        booking = await booking_store.get_booking(request.booking_id)
        if booking is None:
            raise NotFoundError("HireBooking", request.booking_id)
        if booking.status != BookingStatus.CHECKED_OUT:
            raise InvalidBookingStatusError(booking.id, booking.status.value, "check in")

        booking.status = BookingStatus.CHECKED_IN
        booking.actual_return_date = datetime.utcnow()
        if request.notes:
            booking.notes = request.notes
        transaction = StockTransaction(
            transaction_type=TransactionType.RETURN,
            item_id=booking.item_id,
            unit_id=booking.unit_id,
            to_location_id=booking.from_location_id,
            quantity=booking.quantity,
            reference_number=booking.booking_number,
            notes=request.notes,
            user_id=request.user_id,
        )

        unit = None
        if booking.unit_id is not None:
            unit = await (await self._get_unit_store()).get_unit(booking.unit_id)
            if unit is None:
                raise NotFoundError("SerializedUnit", booking.unit_id)
            unit = transition_unit(
                unit,
                UnitStatus.AVAILABLE,
                get_settings().inventory.enforce_status_transitions,
            )
            if request.return_condition is not None:
                unit.condition = request.return_condition
            booking.return_condition = unit.condition
            booking = await booking_store.save_booking(
                booking,
                expected_status=BookingStatus.CHECKED_OUT,
                unit=unit,
                expected_unit_status=UnitStatus.ON_HIRE,
                transaction=transaction,
            )
            if booking.checkout_condition and unit.condition.is_worse_than(
                booking.checkout_condition
            ):
                logger.warning(
                    "hire_returned_in_worse_condition",
                    booking_id=booking.id,
                    unit_id=unit.id,
                    checkout_condition=booking.checkout_condition.value,
                    return_condition=unit.condition.value,
                )
        else:
            booking.return_condition = request.return_condition
            booking = await booking_store.save_booking(
                booking,
                expected_status=BookingStatus.CHECKED_OUT,
                delta_on_hand=booking.quantity,
                transaction=transaction,
            )

        logger.info(
            "hire_checked_in",
            booking_id=booking.id,
            booking_number=booking.booking_number,
            hire_days=booking.hire_days,
            hire_cost=booking.hire_cost,
        )
        return CheckInHireResult(booking=booking, transaction=transaction, unit=unit)
