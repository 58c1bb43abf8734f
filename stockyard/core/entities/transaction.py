"""Stock transaction (movement log) entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    """Kinds of stock movement."""

    ISSUE = "issue"
    HIRE = "hire"
    RETURN = "return"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"
    RECEIPT = "receipt"
    PURCHASE = "purchase"


class StockTransaction(BaseModel):
    """
    Append-only audit record of a stock movement.

    Quantity computation never reads this table; it justifies ledger
    changes after the fact.
    """

    id: int | None = None
    transaction_type: TransactionType
    item_id: int  # FK → stock_items.id
    unit_id: int | None = None  # FK → stock_serialized_items.id
    from_location_id: int | None = None
    to_location_id: int | None = None
    quantity: float
    unit_cost: float = 0.0
    reference_number: str | None = None
    notes: str | None = None
    user_id: str | None = None  # opaque caller identity
    transaction_date: datetime = Field(default_factory=datetime.utcnow)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def total_cost(self) -> float:
        return self.quantity * self.unit_cost
