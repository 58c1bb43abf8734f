"""Serialized unit ledger entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class UnitCondition(str, Enum):
    """Physical condition, best first."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    DAMAGED = "damaged"

    @property
    def rank(self) -> int:
        """0 for excellent up to 4 for damaged."""
        return list(UnitCondition).index(self)

    def is_worse_than(self, other: "UnitCondition") -> bool:
        return self.rank > other.rank


class UnitStatus(str, Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    ON_HIRE = "on_hire"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"
    DISPOSED = "disposed"


# Statuses counted as allocated in the unified quantity view
ALLOCATED_STATUSES = frozenset({UnitStatus.ON_HIRE, UnitStatus.IN_USE})

STATUS_TRANSITIONS: dict[UnitStatus, frozenset[UnitStatus]] = {
    UnitStatus.AVAILABLE: frozenset(
        {
            UnitStatus.IN_USE,
            UnitStatus.ON_HIRE,
            UnitStatus.MAINTENANCE,
            UnitStatus.RETIRED,
        }
    ),
    UnitStatus.IN_USE: frozenset({UnitStatus.AVAILABLE, UnitStatus.MAINTENANCE}),
    UnitStatus.ON_HIRE: frozenset({UnitStatus.AVAILABLE, UnitStatus.MAINTENANCE}),
    UnitStatus.MAINTENANCE: frozenset({UnitStatus.AVAILABLE, UnitStatus.RETIRED}),
    UnitStatus.RETIRED: frozenset({UnitStatus.DISPOSED}),
    UnitStatus.DISPOSED: frozenset(),
}


class SerializedUnit(BaseModel):
    """One physical, individually identified instance of a serialized item."""

    id: int | None = None
    item_id: int  # FK → stock_items.id
    serial_number: str
    location_id: int | None = None  # FK → stock_locations.id
    condition: UnitCondition = UnitCondition.GOOD
    status: UnitStatus = UnitStatus.AVAILABLE
    purchase_date: date | None = None
    purchase_cost: float = 0.0
    warranty_expiry: date | None = None
    last_service_date: date | None = None
    next_service_date: date | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status == UnitStatus.DISPOSED

    @property
    def under_warranty(self) -> bool:
        if self.warranty_expiry is None:
            return False
        return self.warranty_expiry >= date.today()

    @property
    def service_due(self) -> bool:
        if self.next_service_date is None:
            return False
        return self.next_service_date <= date.today()
