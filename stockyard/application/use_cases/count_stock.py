"""Reconcile the bulk ledger with a physical count."""

from dataclasses import dataclass

from stockyard.application.dto.requests import CountStockRequest
from stockyard.config import get_logger
from stockyard.core.entities.location_quantity import LocationQuantity, StockCount
from stockyard.core.interfaces.ledger_store import IQuantityStore

logger = get_logger(__name__)


@dataclass
class CountStockResult:
    quantity: LocationQuantity
    count: StockCount

    @property
    def variance(self) -> float:
        return self.count.variance


class CountStockUseCase:
    """
    Set on_hand to the counted figure.

    The variance is recorded as an adjustment transaction when non-zero.
    Allocations are kept, so a count below the allocated quantity is
    rejected with NegativeQuantityError.
    """

    def __init__(self, quantity_store: IQuantityStore | None = None):
        self._quantity_store = quantity_store

    async def _get_quantity_store(self) -> IQuantityStore:
        if self._quantity_store is None:
            from stockyard.infrastructure.storage.sqlite import get_quantity_store

            self._quantity_store = await get_quantity_store()
        return self._quantity_store

    async def execute(self, request: CountStockRequest) -> CountStockResult:
        store = await self._get_quantity_store()
        row, count = await store.count_stock(
            request.item_id,
            request.location_id,
            request.counted_quantity,
            counted_by=request.counted_by,
            notes=request.notes,
        )
        if count.variance:
            logger.warning(
                "stock_count_variance",
                item_id=request.item_id,
                location_id=request.location_id,
                variance=count.variance,
            )
        return CountStockResult(quantity=row, count=count)
