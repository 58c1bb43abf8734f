"""Receive Stock Use Case (IN movement into one location)."""

from dataclasses import dataclass

from stockyard.application.dto.requests import ReceiveStockRequest
from stockyard.config import get_logger
from stockyard.core.entities.location_quantity import LocationQuantity
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.interfaces.ledger_store import IQuantityStore

logger = get_logger(__name__)


@dataclass
class ReceiveStockResult:
    """Result of receiving stock."""

    quantity: LocationQuantity
    transaction: StockTransaction
    created: bool = False  # True if this was the first stock at the location


class ReceiveStockUseCase:
    """Receive bulk stock (on_hand += quantity) and log a receipt."""

    def __init__(self, quantity_store: IQuantityStore | None = None):
        self._quantity_store = quantity_store

    async def _get_quantity_store(self) -> IQuantityStore:
        if self._quantity_store is None:
            from stockyard.infrastructure.storage.sqlite import get_quantity_store

            self._quantity_store = await get_quantity_store()
        return self._quantity_store

    async def execute(self, request: ReceiveStockRequest) -> ReceiveStockResult:
        """Execute receive stock use case."""
        logger.info(
            "receive_stock_started",
            item_id=request.item_id,
            location_id=request.location_id,
            quantity=request.quantity,
        )

        store = await self._get_quantity_store()
        created = await store.get_quantity(request.item_id, request.location_id) is None

        transaction = StockTransaction(
            transaction_type=TransactionType.RECEIPT,
            item_id=request.item_id,
            to_location_id=request.location_id,
            quantity=request.quantity,
            unit_cost=request.unit_cost,
            reference_number=request.reference_number,
            notes=request.notes,
            user_id=request.user_id,
        )
        row = await store.apply_movement(
            request.item_id, request.location_id, request.quantity, 0.0, transaction
        )

        logger.info(
            "receive_stock_complete",
            item_id=request.item_id,
            location_id=request.location_id,
            on_hand=row.quantity_on_hand,
        )
        return ReceiveStockResult(quantity=row, transaction=transaction, created=created)
