"""
Domain exceptions for the Stockyard application.

Business rule violations derive from InventoryError and are never retried.
Storage faults derive from StorageError.
"""

from typing import Any


class StockyardError(Exception):
    """Base exception for all Stockyard errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for callers rendering user-facing messages."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(StockyardError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class StorageUnavailableError(StorageError):
    """Database stayed locked or unreachable after retries."""

    def __init__(self, operation: str, attempts: int, error: str):
        super().__init__(
            f"Storage unavailable during {operation} after {attempts} attempts: {error}",
            code="STORAGE_UNAVAILABLE",
            details={"operation": operation, "attempts": attempts, "error": error},
        )


# Inventory Exceptions
class InventoryError(StockyardError):
    """Base exception for stock business rule violations."""

    pass


class NotFoundError(InventoryError):
    """Referenced record does not exist."""

    def __init__(self, entity: str, key: Any):
        super().__init__(
            f"{entity} not found: {key}",
            code="NOT_FOUND",
            details={"entity": entity, "key": key},
        )


class DuplicateCodeError(InventoryError):
    """Item code is already used by another catalog item."""

    def __init__(self, code: str, existing_id: int | None = None):
        super().__init__(
            f"Item code already exists: {code}",
            code="DUPLICATE_CODE",
            details={"item_code": code, "existing_id": existing_id},
        )


class DuplicateSerialError(InventoryError):
    """Serial number is already registered (serials are unique across all items)."""

    def __init__(self, serial_number: str, existing_item_id: int | None = None):
        super().__init__(
            f"Serial number already registered: {serial_number}",
            code="DUPLICATE_SERIAL",
            details={
                "serial_number": serial_number,
                "existing_item_id": existing_item_id,
            },
        )


class InvalidTrackingModeError(InventoryError):
    """Tracking mode is not one of the supported values."""

    def __init__(self, value: Any, allowed: list[str]):
        super().__init__(
            f"Invalid tracking mode '{value}'. Allowed: {', '.join(allowed)}",
            code="INVALID_TRACKING_MODE",
            details={"value": str(value), "allowed": allowed},
        )


class NotSerializedItemError(InventoryError):
    """Serial numbers can only be registered against serialized items."""

    def __init__(self, item_id: int, item_code: str | None = None):
        super().__init__(
            f"Item {item_code or item_id} is bulk-tracked; cannot register a serial number",
            code="NOT_SERIALIZED_ITEM",
            details={"item_id": item_id, "item_code": item_code},
        )


class NotBulkItemError(InventoryError):
    """Quantity movements can only be applied to bulk items."""

    def __init__(self, item_id: int, item_code: str | None = None):
        super().__init__(
            f"Item {item_code or item_id} is serialized; "
            "quantities change by registering or retiring units",
            code="NOT_BULK_ITEM",
            details={"item_id": item_id, "item_code": item_code},
        )


class TrackingModeLockedError(InventoryError):
    """Tracking mode cannot change once ledger history exists."""

    def __init__(self, item_id: int, current_mode: str, requested_mode: str):
        super().__init__(
            f"Tracking mode of item {item_id} is locked at '{current_mode}': "
            "units, quantities or transactions already reference it",
            code="TRACKING_MODE_LOCKED",
            details={
                "item_id": item_id,
                "current_mode": current_mode,
                "requested_mode": requested_mode,
            },
        )


class NegativeQuantityError(InventoryError):
    """A movement would drive a ledger quantity below zero."""

    def __init__(
        self,
        item_id: int,
        location_id: int,
        field: str,
        resulting: float,
        attempted: dict[str, float] | None = None,
    ):
        super().__init__(
            f"Movement rejected for item {item_id} at location {location_id}: "
            f"{field} would become {resulting:g}",
            code="NEGATIVE_QUANTITY",
            details={
                "item_id": item_id,
                "location_id": location_id,
                "field": field,
                "resulting": resulting,
                "attempted": attempted or {},
            },
        )


class InvalidStatusTransitionError(InventoryError):
    """Serialized unit status change is not allowed."""

    def __init__(self, unit_id: int | None, current: str, requested: str):
        super().__init__(
            f"Unit {unit_id} cannot move from '{current}' to '{requested}'",
            code="INVALID_STATUS_TRANSITION",
            details={"unit_id": unit_id, "current": current, "requested": requested},
        )


class InvalidBookingStatusError(InventoryError):
    """Hire booking is not in a state that allows the requested action."""

    def __init__(self, booking_id: int | None, current: str, action: str):
        super().__init__(
            f"Booking {booking_id} is '{current}'; cannot {action}",
            code="INVALID_BOOKING_STATUS",
            details={"booking_id": booking_id, "current": current, "action": action},
        )


class UnitBookedError(InventoryError):
    """Serialized unit is held by an open hire booking."""

    def __init__(self, unit_id: int | None, booking_number: str | None = None):
        super().__init__(
            f"Unit {unit_id} is held by open booking {booking_number or '(unknown)'}",
            code="UNIT_BOOKED",
            details={"unit_id": unit_id, "booking_number": booking_number},
        )


# Validation Exceptions
class ValidationError(StockyardError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )
