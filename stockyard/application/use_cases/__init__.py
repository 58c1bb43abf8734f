"""Application use cases."""

from stockyard.application.use_cases.apply_movement import (
    ApplyMovementResult,
    ApplyMovementUseCase,
)
from stockyard.application.use_cases.cancel_hire import CancelHireUseCase
from stockyard.application.use_cases.change_tracking_mode import (
    ChangeTrackingModeResult,
    ChangeTrackingModeUseCase,
)
from stockyard.application.use_cases.check_in_hire import (
    CheckInHireResult,
    CheckInHireUseCase,
)
from stockyard.application.use_cases.check_out_hire import (
    CheckOutHireResult,
    CheckOutHireUseCase,
)
from stockyard.application.use_cases.count_stock import CountStockResult, CountStockUseCase
from stockyard.application.use_cases.create_item import CreateItemResult, CreateItemUseCase
from stockyard.application.use_cases.create_location import CreateLocationUseCase
from stockyard.application.use_cases.deactivate_item import DeactivateItemUseCase
from stockyard.application.use_cases.get_quantities import GetQuantitiesUseCase
from stockyard.application.use_cases.issue_stock import IssueStockResult, IssueStockUseCase
from stockyard.application.use_cases.manage_categories import (
    CreateCategoryUseCase,
    ListCategoriesUseCase,
)
from stockyard.application.use_cases.receive_stock import (
    ReceiveStockResult,
    ReceiveStockUseCase,
)
from stockyard.application.use_cases.register_unit import (
    RegisterUnitResult,
    RegisterUnitUseCase,
)
from stockyard.application.use_cases.relocate_unit import RelocateUnitUseCase
from stockyard.application.use_cases.reserve_hire import (
    ReserveHireResult,
    ReserveHireUseCase,
)
from stockyard.application.use_cases.transfer_stock import (
    TransferStockResult,
    TransferStockUseCase,
)
from stockyard.application.use_cases.transition_unit_status import (
    TransitionStatusResult,
    TransitionUnitStatusUseCase,
)
from stockyard.application.use_cases.update_unit_condition import (
    UpdateUnitConditionUseCase,
)

__all__ = [
    # Catalog
    "CreateItemUseCase",
    "CreateItemResult",
    "ChangeTrackingModeUseCase",
    "ChangeTrackingModeResult",
    "DeactivateItemUseCase",
    "CreateLocationUseCase",
    "CreateCategoryUseCase",
    "ListCategoriesUseCase",
    # Serialized ledger
    "RegisterUnitUseCase",
    "RegisterUnitResult",
    "TransitionUnitStatusUseCase",
    "TransitionStatusResult",
    "RelocateUnitUseCase",
    "UpdateUnitConditionUseCase",
    # Bulk ledger
    "ApplyMovementUseCase",
    "ApplyMovementResult",
    "ReceiveStockUseCase",
    "ReceiveStockResult",
    "IssueStockUseCase",
    "IssueStockResult",
    "TransferStockUseCase",
    "TransferStockResult",
    "CountStockUseCase",
    "CountStockResult",
    # Quantity view
    "GetQuantitiesUseCase",
    # Hire bookings
    "ReserveHireUseCase",
    "ReserveHireResult",
    "CheckOutHireUseCase",
    "CheckOutHireResult",
    "CheckInHireUseCase",
    "CheckInHireResult",
    "CancelHireUseCase",
]
