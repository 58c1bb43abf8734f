"""Issue Stock Use Case (OUT movement, unallocated stock only)."""

from dataclasses import dataclass

from stockyard.application.dto.requests import IssueStockRequest
from stockyard.config import get_logger
from stockyard.core.entities.location_quantity import LocationQuantity
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.interfaces.ledger_store import IQuantityStore

logger = get_logger(__name__)


@dataclass
class IssueStockResult:
    """Result of issuing stock."""

    quantity: LocationQuantity
    transaction: StockTransaction


class IssueStockUseCase:
    """
    Issue bulk stock (on_hand -= quantity).

    Only unallocated stock can be issued; the store raises
    NegativeQuantityError otherwise and leaves the row unchanged.
    """

    def __init__(self, quantity_store: IQuantityStore | None = None):
        self._quantity_store = quantity_store

    async def _get_quantity_store(self) -> IQuantityStore:
        if self._quantity_store is None:
            from stockyard.infrastructure.storage.sqlite import get_quantity_store

            self._quantity_store = await get_quantity_store()
        return self._quantity_store

    async def execute(self, request: IssueStockRequest) -> IssueStockResult:
        """Execute issue stock use case."""
        logger.info(
            "issue_stock_started",
            item_id=request.item_id,
            location_id=request.location_id,
            quantity=request.quantity,
        )

        store = await self._get_quantity_store()
        transaction = StockTransaction(
            transaction_type=TransactionType.ISSUE,
            item_id=request.item_id,
            from_location_id=request.location_id,
            quantity=request.quantity,
            reference_number=request.reference_number,
            notes=request.notes,
            user_id=request.user_id,
        )
        row = await store.apply_movement(
            request.item_id, request.location_id, -request.quantity, 0.0, transaction
        )

        logger.info(
            "issue_stock_complete",
            item_id=request.item_id,
            remaining_qty=row.quantity_on_hand,
        )
        return IssueStockResult(quantity=row, transaction=transaction)
