"""Cancel Hire Use Case."""

from stockyard.application.dto.requests import CancelHireRequest
from stockyard.config import get_logger
from stockyard.core.entities.hire_booking import BookingStatus, HireBooking
from stockyard.core.exceptions import InvalidBookingStatusError, NotFoundError
from stockyard.core.interfaces.booking_store import IBookingStore

logger = get_logger(__name__)


class CancelHireUseCase:
    """Cancel a reserved booking, releasing any bulk allocation."""

    def __init__(self, booking_store: IBookingStore | None = None):
        self._booking_store = booking_store

    async def _get_booking_store(self) -> IBookingStore:
        if self._booking_store is None:
            from stockyard.infrastructure.storage.sqlite import get_booking_store

            self._booking_store = await get_booking_store()
        return self._booking_store

    async def execute(self, request: CancelHireRequest) -> HireBooking:
        store = await self._get_booking_store()
        booking = await store.get_booking(request.booking_id)
        if booking is None:
            raise NotFoundError("HireBooking", request.booking_id)
        if booking.status != BookingStatus.RESERVED:
            raise InvalidBookingStatusError(booking.id, booking.status.value, "cancel")

        booking.status = BookingStatus.CANCELLED
        if request.notes:
            booking.notes = request.notes
        release = 0.0 if booking.unit_id is not None else -booking.quantity
        booking = await store.save_booking(
            booking,
            expected_status=BookingStatus.RESERVED,
            delta_allocated=release,
        )

        logger.info(
            "hire_cancelled",
            booking_id=booking.id,
            booking_number=booking.booking_number,
            released=-release,
        )
        return booking
