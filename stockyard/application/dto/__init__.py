"""Data Transfer Objects for the stock use cases.

Request DTOs validate and parse caller input before a use case runs.
"""

from stockyard.application.dto.requests import (
    ApplyMovementRequest,
    CancelHireRequest,
    ChangeTrackingModeRequest,
    CheckInHireRequest,
    CheckOutHireRequest,
    CountStockRequest,
    CreateCategoryRequest,
    CreateItemRequest,
    CreateLocationRequest,
    IssueStockRequest,
    ReceiveStockRequest,
    RegisterUnitRequest,
    RelocateUnitRequest,
    ReserveHireRequest,
    TransferStockRequest,
    TransitionStatusRequest,
    UpdateConditionRequest,
)

__all__ = [
    "CreateCategoryRequest",
    "CreateItemRequest",
    "ChangeTrackingModeRequest",
    "CreateLocationRequest",
    "RegisterUnitRequest",
    "TransitionStatusRequest",
    "RelocateUnitRequest",
    "UpdateConditionRequest",
    "ApplyMovementRequest",
    "ReceiveStockRequest",
    "IssueStockRequest",
    "TransferStockRequest",
    "CountStockRequest",
    "ReserveHireRequest",
    "CheckOutHireRequest",
    "CheckInHireRequest",
    "CancelHireRequest",
]
