"""Unified quantity projection."""

from pydantic import BaseModel, ConfigDict

from stockyard.core.entities.item import TrackingMode


class UnifiedQuantity(BaseModel):
    """
    Total / available / allocated for one item, whatever its tracking mode.

    Derived on every read from the serialized or bulk ledger; never stored.
    """

    model_config = ConfigDict(frozen=True)

    item_id: int
    tracking_mode: TrackingMode
    total: float = 0.0
    available: float = 0.0
    allocated: float = 0.0

    def as_triple(self) -> tuple[float, float, float]:
        return (self.total, self.available, self.allocated)
