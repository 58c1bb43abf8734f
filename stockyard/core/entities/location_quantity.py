"""Bulk quantity ledger entities."""

from datetime import datetime

from pydantic import BaseModel, Field


class LocationQuantity(BaseModel):
    """
    Aggregate stock of one bulk item at one location.

    There is exactly one row per (item_id, location_id). Every mutation
    keeps quantity_available == quantity_on_hand - quantity_allocated.
    """

    id: int | None = None
    item_id: int  # FK → stock_items.id
    location_id: int  # FK → stock_locations.id
    quantity_on_hand: float = 0.0
    quantity_available: float = 0.0
    quantity_allocated: float = 0.0
    quantity_on_order: float = 0.0
    bin_location: str | None = None
    last_counted_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_balanced(self) -> bool:
        """True when the stored available figure matches on_hand - allocated."""
        return self.quantity_available == self.quantity_on_hand - self.quantity_allocated


class StockCount(BaseModel):
    """Outcome of counting one item at one location."""

    item_id: int
    location_id: int
    expected_quantity: float
    counted_quantity: float
    counted_at: datetime = Field(default_factory=datetime.utcnow)
    counted_by: str | None = None
    notes: str | None = None

    @property
    def variance(self) -> float:
        return self.counted_quantity - self.expected_quantity
