"""Abstract interface for hire booking storage."""

from abc import ABC, abstractmethod

from stockyard.core.entities.hire_booking import BookingStatus, HireBooking
from stockyard.core.entities.serialized_unit import SerializedUnit, UnitStatus
from stockyard.core.entities.transaction import StockTransaction


class IBookingStore(ABC):
    """Interface for hire bookings and the ledger changes they drive."""

    @abstractmethod
    async def get_booking(self, booking_id: int) -> HireBooking | None:
        """Get booking by ID."""

    @abstractmethod
    async def get_booking_by_number(self, booking_number: str) -> HireBooking | None:
        """Get booking by booking number."""

    @abstractmethod
    async def list_bookings(
        self,
        item_id: int | None = None,
        status: BookingStatus | None = None,
        limit: int = 100,
    ) -> list[HireBooking]:
        """List bookings, newest first."""

    @abstractmethod
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
        """
        Insert or update a booking together with its ledger effects.

        expected_status and expected_unit_status are compared with the
        stored rows under the write lock, so two callers acting on the
        same booking or unit cannot both succeed. Bulk deltas apply at
        booking.from_location_id; a given unit is persisted as-is.
        A new booking naming a unit requires that unit to be available and
        free of other open bookings (UnitBookedError otherwise).
        Everything commits or nothing does.
        """
