"""Item catalog entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TrackingMode(str, Enum):
    """How stock of an item is counted."""

    SERIALIZED = "serialized"  # one SerializedUnit row per physical unit
    BULK = "bulk"  # LocationQuantity rows per location

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]


class Item(BaseModel):
    """
    Master catalog record for a product or asset type.

    tracking_mode is chosen at creation and is locked as soon as any
    unit, location quantity or transaction references the item.
    """

    id: int | None = None
    code: str
    name: str
    description: str | None = None
    category_id: int | None = None
    unit_of_measure: str = "ea"
    tracking_mode: TrackingMode
    unit_cost: float = 0.0
    replacement_cost: float = 0.0
    daily_hire_rate: float = 0.0
    reorder_point: float = 0.0
    reorder_quantity: float = 0.0
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_serialized(self) -> bool:
        return self.tracking_mode == TrackingMode.SERIALIZED
