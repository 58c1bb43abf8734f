"""Reserve stock for a hire booking."""

from dataclasses import dataclass
from uuid import uuid4

from stockyard.application.dto.requests import ReserveHireRequest
from stockyard.config import get_logger, get_settings
from stockyard.core.entities.hire_booking import HireBooking
from stockyard.core.entities.serialized_unit import UnitStatus
from stockyard.core.exceptions import (
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from stockyard.core.interfaces.booking_store import IBookingStore
from stockyard.core.interfaces.item_store import IItemStore
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore

logger = get_logger(__name__)


@dataclass
class ReserveHireResult:
    """Result of reserving a hire."""

    booking: HireBooking


class ReserveHireUseCase:
    """
    Reserve stock for a hire.

    Bulk items allocate the quantity at the from-location, so it stops
    counting as available. Serialized items name one available unit,
    which stays available until the booking is checked out.
    """

    def __init__(
        self,
        item_store: IItemStore | None = None,
        unit_store: ISerializedUnitStore | None = None,
        booking_store: IBookingStore | None = None,
    ):
        self._item_store = item_store
        self._unit_store = unit_store
        self._booking_store = booking_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from stockyard.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

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

    @staticmethod
    def _booking_number() -> str:
        prefix = get_settings().inventory.booking_number_prefix
        return f"{prefix}-{uuid4().hex[:8].upper()}"

    async def execute(self, request: ReserveHireRequest) -> ReserveHireResult:
        """Execute reserve hire use case."""
        logger.info(
            "reserve_hire_started",
            item_id=request.item_id,
            unit_id=request.unit_id,
            quantity=request.quantity,
        )

        # 1. Item must exist and be active
        item = await (await self._get_item_store()).get_item(request.item_id)
        if item is None:
            raise NotFoundError("Item", request.item_id)
        if not item.is_active:
            raise ValidationError("item_id", "item is inactive", request.item_id)

        booking_store = await self._get_booking_store()
        booking = HireBooking(
            booking_number=self._booking_number(),
            item_id=item.id,  # type: ignore[arg-type]
            from_location_id=request.from_location_id,
            quantity=request.quantity,
            daily_rate=(
                request.daily_rate
                if request.daily_rate is not None
                else item.daily_hire_rate
            ),
            expected_return_date=request.expected_return_date,
            notes=request.notes,
            created_by=request.created_by,
        )

        if item.is_serialized:
            # 2a. One named, available unit; the store refuses it under the
            # write lock if another open booking already holds it
            if request.unit_id is None:
                raise ValidationError(
                    "unit_id", "required for serialized items", request.unit_id
                )
            unit = await (await self._get_unit_store()).get_unit(request.unit_id)
            if unit is None or unit.item_id != item.id:
                raise NotFoundError("SerializedUnit", request.unit_id)
            if unit.status != UnitStatus.AVAILABLE:
                raise InvalidStatusTransitionError(
                    unit.id, unit.status.value, UnitStatus.ON_HIRE.value
                )
            booking.unit_id = unit.id
            booking.quantity = 1.0
            booking = await booking_store.save_booking(booking)
        else:
            # 2b. Allocate bulk stock at the from-location
            if request.unit_id is not None:
                raise ValidationError(
                    "unit_id", "bulk items are reserved by quantity", request.unit_id
                )
            booking = await booking_store.save_booking(
                booking, delta_allocated=request.quantity
            )

        logger.info(
            "reserve_hire_complete",
            booking_id=booking.id,
            booking_number=booking.booking_number,
        )
        return ReserveHireResult(booking=booking)
