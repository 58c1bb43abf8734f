"""
Core business logic services.

Layer-pure services that depend only on:
- stockyard/core/entities/*
- stockyard/core/interfaces/*
- stockyard/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from stockyard.core.services.quantity_view import (
    BulkQuantitySource,
    QuantitySource,
    QuantityViewService,
    SerializedQuantitySource,
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

__all__ = [
    # Quantity view
    "QuantityViewService",
    "QuantitySource",
    "SerializedQuantitySource",
    "BulkQuantitySource",
    # Rules
    "parse_tracking_mode",
    "ensure_serialized",
    "ensure_bulk",
    "can_transition",
    "transition_unit",
    "apply_deltas",
    "recount",
    "check_positive",
]
