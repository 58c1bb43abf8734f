"""Transfer Stock Use Case."""

from dataclasses import dataclass

from stockyard.application.dto.requests import TransferStockRequest
from stockyard.core.entities.location_quantity import LocationQuantity
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.interfaces.ledger_store import IQuantityStore


@dataclass
class TransferStockResult:
    source: LocationQuantity
    destination: LocationQuantity
    transaction: StockTransaction


class TransferStockUseCase:
    """Move bulk stock between two locations; both legs commit together."""

    def __init__(self, quantity_store: IQuantityStore | None = None):
        self._quantity_store = quantity_store

    async def _get_quantity_store(self) -> IQuantityStore:
        if self._quantity_store is None:
            from stockyard.infrastructure.storage.sqlite import get_quantity_store

            self._quantity_store = await get_quantity_store()
        return self._quantity_store

    async def execute(self, request: TransferStockRequest) -> TransferStockResult:
        store = await self._get_quantity_store()
        transaction = StockTransaction(
            transaction_type=TransactionType.TRANSFER,
            item_id=request.item_id,
            from_location_id=request.from_location_id,
            to_location_id=request.to_location_id,
            quantity=request.quantity,
            reference_number=request.reference_number,
            notes=request.notes,
            user_id=request.user_id,
        )
        source, destination = await store.transfer(
            request.item_id,
            request.from_location_id,
            request.to_location_id,
            request.quantity,
            transaction,
        )
        return TransferStockResult(
            source=source, destination=destination, transaction=transaction
        )
