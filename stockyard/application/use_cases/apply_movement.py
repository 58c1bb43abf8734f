"""Apply Movement Use Case."""

from dataclasses import dataclass

from stockyard.application.dto.requests import ApplyMovementRequest
from stockyard.config import get_logger
from stockyard.core.entities.location_quantity import LocationQuantity
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.exceptions import ValidationError
from stockyard.core.interfaces.ledger_store import IQuantityStore

logger = get_logger(__name__)


@dataclass
class ApplyMovementResult:
    """Result of a movement."""

    quantity: LocationQuantity
    transaction: StockTransaction | None = None


class ApplyMovementUseCase:
    """
    Apply deltas to the bulk ledger.

    The store validates against the row it replaces, so concurrent
    movements never lose an update or drive a quantity negative.
    """

    def __init__(self, quantity_store: IQuantityStore | None = None):
        self._quantity_store = quantity_store

    async def _get_quantity_store(self) -> IQuantityStore:
        if self._quantity_store is None:
            from stockyard.infrastructure.storage.sqlite import get_quantity_store

            self._quantity_store = await get_quantity_store()
        return self._quantity_store

    async def execute(self, request: ApplyMovementRequest) -> ApplyMovementResult:
        transaction = None
        if request.transaction_type is not None:
            try:
                tx_type = TransactionType(request.transaction_type)
            except ValueError:
                raise ValidationError(
                    "transaction_type", "unknown transaction type", request.transaction_type
                ) from None
            transaction = StockTransaction(
                transaction_type=tx_type,
                item_id=request.item_id,
                from_location_id=request.location_id if request.delta_on_hand < 0 else None,
                to_location_id=request.location_id if request.delta_on_hand >= 0 else None,
                quantity=abs(request.delta_on_hand) or abs(request.delta_allocated),
                reference_number=request.reference_number,
                notes=request.notes,
                user_id=request.user_id,
            )

        store = await self._get_quantity_store()
        row = await store.apply_movement(
            request.item_id,
            request.location_id,
            request.delta_on_hand,
            request.delta_allocated,
            transaction,
        )
        logger.debug(
            "apply_movement_complete",
            item_id=request.item_id,
            location_id=request.location_id,
            recorded=transaction is not None,
        )
        return ApplyMovementResult(quantity=row, transaction=transaction)
