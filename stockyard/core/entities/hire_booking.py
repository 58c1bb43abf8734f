"""Hire booking entity."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from stockyard.core.entities.serialized_unit import UnitCondition


class BookingStatus(str, Enum):
    RESERVED = "reserved"
    CHECKED_OUT = "checked_out"
    CHECKED_IN = "checked_in"
    CANCELLED = "cancelled"


class HireBooking(BaseModel):
    """
    Reservation of stock for a hire.

    Bulk bookings hold an allocation at from_location_id while reserved.
    Serialized bookings name the unit being hired.
    """

    id: int | None = None
    booking_number: str
    item_id: int
    unit_id: int | None = None
    from_location_id: int
    quantity: float = 1.0
    status: BookingStatus = BookingStatus.RESERVED
    daily_rate: float = 0.0
    booking_date: datetime = Field(default_factory=datetime.utcnow)
    start_date: datetime | None = None
    expected_return_date: date | None = None
    actual_return_date: datetime | None = None
    checkout_condition: UnitCondition | None = None
    return_condition: UnitCondition | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def hire_days(self) -> int:
        """Days charged so far, at least one once checked out."""
        if self.start_date is None:
            return 0
        end = self.actual_return_date or datetime.utcnow()
        return max(1, (end.date() - self.start_date.date()).days)

    @property
    def hire_cost(self) -> float:
        return self.hire_days * self.daily_rate * self.quantity
