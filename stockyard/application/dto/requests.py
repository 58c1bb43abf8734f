"""Request DTOs for the stock use cases.

Pydantic v2 models validated before any store is touched.
"""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from stockyard.core.entities.location import LocationType
from stockyard.core.entities.serialized_unit import UnitCondition, UnitStatus

# ---- Catalog ----


class CreateItemRequest(BaseModel):
    """Request to add an item to the catalog."""

    code: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Unique item code",
        examples=["HH-001", "LAP-100"],
    )
    name: str = Field(..., min_length=1, description="Display name")
    tracking_mode: str = Field(
        ...,
        description="How stock is recorded: 'serialized' or 'bulk'",
        examples=["serialized", "bulk"],
    )
    description: str | None = Field(default=None, description="Free text description")
    category_id: int | None = Field(default=None, description="Category ID")
    unit_of_measure: str = Field(default="ea", description="Unit of measure")
    unit_cost: float = Field(default=0.0, ge=0, description="Standard unit cost")
    replacement_cost: float = Field(default=0.0, ge=0)
    daily_hire_rate: float = Field(default=0.0, ge=0)
    reorder_point: float = Field(
        default=0.0, ge=0, description="Available level at or below which to reorder"
    )
    reorder_quantity: float = Field(default=0.0, ge=0)


class ChangeTrackingModeRequest(BaseModel):
    """Request to switch an item between serialized and bulk tracking."""

    item_id: int = Field(..., description="Item ID")
    tracking_mode: str = Field(..., description="New tracking mode")


class CreateCategoryRequest(BaseModel):
    """Request to add a stock category."""

    name: str = Field(..., min_length=1, max_length=100, examples=["PPE", "IT"])
    parent_id: int | None = Field(default=None, description="Parent category ID")
    description: str | None = Field(default=None)


class CreateLocationRequest(BaseModel):
    """Request to add a stock location."""

    name: str = Field(..., min_length=1, description="Location name")
    type: LocationType | None = Field(
        default=None,
        description="Location type (configured default when omitted)",
    )
    address: str | None = Field(default=None)


# ---- Serialized ledger ----


class RegisterUnitRequest(BaseModel):
    """Request to register a serialized unit."""

    item_id: int = Field(..., description="Serialized item ID")
    serial_number: str = Field(
        ..., min_length=1, description="Serial number, unique across all items"
    )
    location_id: int | None = Field(default=None, description="Initial location")
    condition: UnitCondition = Field(default=UnitCondition.GOOD)
    purchase_date: date | None = Field(default=None)
    purchase_cost: float = Field(default=0.0, ge=0)
    warranty_expiry: date | None = Field(default=None)
    next_service_date: date | None = Field(default=None)
    notes: str | None = Field(default=None)
    user_id: str | None = Field(default=None, description="Who registered the unit")


class TransitionStatusRequest(BaseModel):
    """Request to change a unit's status, addressed by ID or serial number."""

    unit_id: int | None = Field(default=None, description="Unit ID")
    serial_number: str | None = Field(default=None, description="Unit serial number")
    status: UnitStatus = Field(..., description="Requested status")
    notes: str | None = Field(default=None)

    @model_validator(mode="after")
    def require_unit_reference(self) -> "TransitionStatusRequest":
        if self.unit_id is None and not self.serial_number:
            raise ValueError("either unit_id or serial_number is required")
        return self


class RelocateUnitRequest(BaseModel):
    """Request to move a unit to another location."""

    unit_id: int = Field(..., description="Unit ID")
    location_id: int = Field(..., description="Destination location ID")
    notes: str | None = Field(default=None)
    user_id: str | None = Field(default=None)


class UpdateConditionRequest(BaseModel):
    """Request to record a unit's physical condition."""

    unit_id: int = Field(..., description="Unit ID")
    condition: UnitCondition = Field(..., description="New condition")
    notes: str | None = Field(default=None)


# ---- Bulk ledger ----


class ApplyMovementRequest(BaseModel):
    """Raw movement against one (item, location) row."""

    item_id: int = Field(..., description="Bulk item ID")
    location_id: int = Field(..., description="Location ID")
    delta_on_hand: float = Field(default=0.0, description="Change to on-hand quantity")
    delta_allocated: float = Field(
        default=0.0, description="Change to allocated quantity"
    )
    transaction_type: str | None = Field(
        default=None,
        description="Record a transaction of this type in the same commit",
        examples=["adjustment", "receipt"],
    )
    reference_number: str | None = Field(default=None)
    notes: str | None = Field(default=None)
    user_id: str | None = Field(default=None)


class ReceiveStockRequest(BaseModel):
    """Request to receive bulk stock into a location."""

    item_id: int = Field(..., description="Bulk item ID")
    location_id: int = Field(..., description="Receiving location ID")
    quantity: float = Field(..., gt=0, description="Quantity to receive")
    unit_cost: float = Field(default=0.0, ge=0, description="Cost per unit")
    reference_number: str | None = Field(
        default=None, description="PO number, GRN, etc."
    )
    notes: str | None = Field(default=None)
    user_id: str | None = Field(default=None)


class IssueStockRequest(BaseModel):
    """Request to issue bulk stock out of a location."""

    item_id: int = Field(..., description="Bulk item ID")
    location_id: int = Field(..., description="Issuing location ID")
    quantity: float = Field(..., gt=0, description="Quantity to issue")
    reference_number: str | None = Field(
        default=None, description="Job number, work order, etc."
    )
    notes: str | None = Field(default=None)
    user_id: str | None = Field(default=None)


class TransferStockRequest(BaseModel):
    """Request to move bulk stock between locations."""

    item_id: int = Field(..., description="Bulk item ID")
    from_location_id: int = Field(..., description="Source location ID")
    to_location_id: int = Field(..., description="Destination location ID")
    quantity: float = Field(..., gt=0, description="Quantity to transfer")
    reference_number: str | None = Field(default=None)
    notes: str | None = Field(default=None)
    user_id: str | None = Field(default=None)


class CountStockRequest(BaseModel):
    """Physical count of a bulk item at one location."""

    item_id: int = Field(..., description="Bulk item ID")
    location_id: int = Field(..., description="Counted location ID")
    counted_quantity: float = Field(..., description="Quantity physically observed")
    counted_by: str | None = Field(default=None)
    notes: str | None = Field(default=None)


# ---- Hire bookings ----


class ReserveHireRequest(BaseModel):
    """Request to reserve stock for a hire."""

    item_id: int = Field(..., description="Item ID")
    from_location_id: int = Field(..., description="Location the hire ships from")
    quantity: float = Field(default=1.0, gt=0, description="Bulk quantity to reserve")
    unit_id: int | None = Field(
        default=None, description="Unit to reserve (serialized items only)"
    )
    daily_rate: float | None = Field(
        default=None, ge=0, description="Overrides the item's daily hire rate"
    )
    expected_return_date: date | None = Field(default=None)
    notes: str | None = Field(default=None)
    created_by: str | None = Field(default=None)


class CheckOutHireRequest(BaseModel):
    """Request to hand reserved stock to the hirer."""

    booking_id: int = Field(..., description="Booking ID")
    user_id: str | None = Field(default=None)


class CheckInHireRequest(BaseModel):
    """Request to take hired stock back."""

    booking_id: int = Field(..., description="Booking ID")
    return_condition: UnitCondition | None = Field(
        default=None, description="Condition of a returned unit"
    )
    notes: str | None = Field(default=None)
    user_id: str | None = Field(default=None)


class CancelHireRequest(BaseModel):
    """Request to cancel a reservation."""

    booking_id: int = Field(..., description="Booking ID")
    notes: str | None = Field(default=None)
