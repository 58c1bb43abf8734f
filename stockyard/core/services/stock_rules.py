"""
Invariant guards for the stock ledgers.

Pure functions with no storage access. Use cases call them before writing
and the SQLite stores call them again inside their write transactions, so
a rule is checked against the row that is actually being replaced.
"""

from datetime import date, datetime
from typing import Any

from stockyard.core.entities.item import Item, TrackingMode
from stockyard.core.entities.location_quantity import LocationQuantity, StockCount
from stockyard.core.entities.serialized_unit import (
    STATUS_TRANSITIONS,
    SerializedUnit,
    UnitStatus,
)
from stockyard.core.exceptions import (
    InvalidStatusTransitionError,
    InvalidTrackingModeError,
    NegativeQuantityError,
    NotBulkItemError,
    NotSerializedItemError,
    ValidationError,
)


def parse_tracking_mode(value: Any) -> TrackingMode:
    """Coerce a raw value to TrackingMode or raise InvalidTrackingModeError."""
    if isinstance(value, TrackingMode):
        return value
    try:
        return TrackingMode(value)
    except ValueError:
        raise InvalidTrackingModeError(value, TrackingMode.values()) from None


def ensure_serialized(item: Item) -> None:
    if item.tracking_mode != TrackingMode.SERIALIZED:
        raise NotSerializedItemError(item.id or 0, item.code)


def ensure_bulk(item: Item) -> None:
    if item.tracking_mode != TrackingMode.BULK:
        raise NotBulkItemError(item.id or 0, item.code)


def can_transition(
    current: UnitStatus, requested: UnitStatus, enforce_graph: bool = True
) -> bool:
    """
    Whether a unit may move from current to requested status.

    Disposed is terminal regardless of enforce_graph. A no-op move is
    never allowed so every accepted call changes something.
    """
    if current == requested or current == UnitStatus.DISPOSED:
        return False
    if not enforce_graph:
        return True
    return requested in STATUS_TRANSITIONS[current]


def transition_unit(
    unit: SerializedUnit,
    requested: UnitStatus,
    enforce_graph: bool = True,
    today: date | None = None,
) -> SerializedUnit:
    """Return a copy of unit moved to the requested status."""
    if not can_transition(unit.status, requested, enforce_graph):
        raise InvalidStatusTransitionError(unit.id, unit.status.value, requested.value)

    update: dict[str, Any] = {"status": requested, "updated_at": datetime.utcnow()}
    if requested == UnitStatus.MAINTENANCE:
        update["last_service_date"] = today or date.today()
    return unit.model_copy(update=update)


def apply_deltas(
    row: LocationQuantity,
    delta_on_hand: float,
    delta_allocated: float,
) -> LocationQuantity:
    """
    Compute the ledger row after a movement.

    The input row is not modified. Raises NegativeQuantityError when
    on_hand, allocated or available would go below zero.
    """
    on_hand = row.quantity_on_hand + delta_on_hand
    allocated = row.quantity_allocated + delta_allocated
    available = on_hand - allocated
    attempted = {"delta_on_hand": delta_on_hand, "delta_allocated": delta_allocated}

    for field, value in (
        ("quantity_on_hand", on_hand),
        ("quantity_allocated", allocated),
        ("quantity_available", available),
    ):
        if value < 0:
            raise NegativeQuantityError(
                row.item_id, row.location_id, field, value, attempted
            )

    return row.model_copy(
        update={
            "quantity_on_hand": on_hand,
            "quantity_allocated": allocated,
            "quantity_available": available,
            "updated_at": datetime.utcnow(),
        }
    )


def recount(
    row: LocationQuantity,
    counted_quantity: float,
    counted_by: str | None = None,
    notes: str | None = None,
) -> tuple[LocationQuantity, StockCount]:
    """
    Reset on_hand to a physically counted figure.

    Allocations are kept, so the count may not fall below what is allocated.
    A negative count fails the same on_hand check as any other movement.
    """
    now = datetime.utcnow()
    count = StockCount(
        item_id=row.item_id,
        location_id=row.location_id,
        expected_quantity=row.quantity_on_hand,
        counted_quantity=counted_quantity,
        counted_at=now,
        counted_by=counted_by,
        notes=notes,
    )
    updated = apply_deltas(row, count.variance, 0.0)
    return updated.model_copy(update={"last_counted_at": now}), count


def check_positive(field: str, value: float) -> None:
    if value <= 0:
        raise ValidationError(field, "must be greater than zero", value)
