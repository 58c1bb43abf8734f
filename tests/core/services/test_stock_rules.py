"""Tests for the stock ledger rule functions."""

from datetime import date

import pytest

from stockyard.core.entities import (
    Item,
    LocationQuantity,
    SerializedUnit,
    TrackingMode,
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
from stockyard.core.services.stock_rules import (
    apply_deltas,
    can_transition,
    check_positive,
    ensure_bulk,
    ensure_serialized,
    parse_tracking_mode,
    recount,
    transition_unit,
)


def _row(on_hand: float = 10.0, allocated: float = 0.0) -> LocationQuantity:
    return LocationQuantity(
        id=1,
        item_id=1,
        location_id=1,
        quantity_on_hand=on_hand,
        quantity_allocated=allocated,
        quantity_available=on_hand - allocated,
    )


class TestTrackingMode:
    def test_parse_valid(self):
        assert parse_tracking_mode("bulk") == TrackingMode.BULK
        assert parse_tracking_mode(TrackingMode.SERIALIZED) == TrackingMode.SERIALIZED

    def test_parse_invalid(self):
        with pytest.raises(InvalidTrackingModeError) as exc_info:
            parse_tracking_mode("batch")
        assert exc_info.value.details["allowed"] == ["serialized", "bulk"]

    def test_ensure_guards(self):
        bulk = Item(id=1, code="HH", name="Hard Hat", tracking_mode="bulk")
        serial = Item(id=2, code="LAP", name="Laptop", tracking_mode="serialized")

        ensure_bulk(bulk)
        ensure_serialized(serial)
        with pytest.raises(NotSerializedItemError):
            ensure_serialized(bulk)
        with pytest.raises(NotBulkItemError):
            ensure_bulk(serial)


class TestStatusTransitions:
    @pytest.mark.parametrize(
        "current,requested",
        [
            (UnitStatus.AVAILABLE, UnitStatus.ON_HIRE),
            (UnitStatus.AVAILABLE, UnitStatus.RETIRED),
            (UnitStatus.ON_HIRE, UnitStatus.AVAILABLE),
            (UnitStatus.IN_USE, UnitStatus.MAINTENANCE),
            (UnitStatus.MAINTENANCE, UnitStatus.AVAILABLE),
            (UnitStatus.RETIRED, UnitStatus.DISPOSED),
        ],
    )
    def test_allowed(self, current, requested):
        assert can_transition(current, requested)

    @pytest.mark.parametrize(
        "current,requested",
        [
            (UnitStatus.AVAILABLE, UnitStatus.DISPOSED),
            (UnitStatus.ON_HIRE, UnitStatus.IN_USE),
            (UnitStatus.RETIRED, UnitStatus.AVAILABLE),
            (UnitStatus.DISPOSED, UnitStatus.AVAILABLE),
            (UnitStatus.AVAILABLE, UnitStatus.AVAILABLE),
        ],
    )
    def test_rejected(self, current, requested):
        assert not can_transition(current, requested)

    def test_loose_mode_allows_any_move(self):
        assert can_transition(UnitStatus.RETIRED, UnitStatus.AVAILABLE, enforce_graph=False)

    def test_disposed_terminal_even_when_loose(self):
        assert not can_transition(UnitStatus.DISPOSED, UnitStatus.AVAILABLE, enforce_graph=False)

    def test_transition_returns_copy(self):
        unit = SerializedUnit(id=3, item_id=1, serial_number="SN-1")
        moved = transition_unit(unit, UnitStatus.ON_HIRE)
        assert moved.status == UnitStatus.ON_HIRE
        assert unit.status == UnitStatus.AVAILABLE

    def test_maintenance_records_service_date(self):
        unit = SerializedUnit(id=3, item_id=1, serial_number="SN-1")
        moved = transition_unit(unit, UnitStatus.MAINTENANCE, today=date(2026, 5, 4))
        assert moved.last_service_date == date(2026, 5, 4)

    def test_illegal_transition_raises(self):
        unit = SerializedUnit(id=3, item_id=1, serial_number="SN-1", status=UnitStatus.RETIRED)
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            transition_unit(unit, UnitStatus.AVAILABLE)
        assert exc_info.value.details == {
            "unit_id": 3,
            "current": "retired",
            "requested": "available",
        }


class TestApplyDeltas:
    def test_receive(self):
        updated = apply_deltas(_row(10), 5, 0)
        assert updated.quantity_on_hand == 15
        assert updated.quantity_available == 15

    def test_allocate(self):
        updated = apply_deltas(_row(10), 0, 4)
        assert updated.quantity_allocated == 4
        assert updated.quantity_available == 6
        assert updated.is_balanced

    def test_input_row_untouched(self):
        row = _row(10)
        apply_deltas(row, -3, 0)
        assert row.quantity_on_hand == 10

    def test_on_hand_below_zero(self):
        with pytest.raises(NegativeQuantityError) as exc_info:
            apply_deltas(_row(2), -3, 0)
        assert exc_info.value.details["field"] == "quantity_on_hand"

    def test_issue_cannot_take_allocated_stock(self):
        with pytest.raises(NegativeQuantityError) as exc_info:
            apply_deltas(_row(10, allocated=8), -5, 0)
        assert exc_info.value.details["field"] == "quantity_available"
        assert exc_info.value.details["resulting"] == -3

    def test_release_more_than_allocated(self):
        with pytest.raises(NegativeQuantityError) as exc_info:
            apply_deltas(_row(10, allocated=1), 0, -2)
        assert exc_info.value.details["field"] == "quantity_allocated"


class TestRecount:
    def test_variance_and_timestamp(self):
        updated, count = recount(_row(10, allocated=2), 7, counted_by="sam")
        assert count.expected_quantity == 10
        assert count.variance == -3
        assert updated.quantity_on_hand == 7
        assert updated.quantity_available == 5
        assert updated.last_counted_at == count.counted_at

    def test_count_below_allocated(self):
        with pytest.raises(NegativeQuantityError):
            recount(_row(10, allocated=6), 4)

    def test_negative_count(self):
        with pytest.raises(NegativeQuantityError):
            recount(_row(10), -1)


class TestCheckPositive:
    def test_zero_rejected(self):
        with pytest.raises(ValidationError):
            check_positive("quantity", 0)

    def test_positive_ok(self):
        check_positive("quantity", 0.5)
