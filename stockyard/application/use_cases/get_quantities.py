"""Get Quantities Use Case: unified total, available and allocated per item."""

from stockyard.config import get_logger
from stockyard.core.entities.item import Item
from stockyard.core.entities.quantities import UnifiedQuantity
from stockyard.core.exceptions import NotFoundError
from stockyard.core.interfaces.item_store import IItemStore
from stockyard.core.interfaces.ledger_store import IQuantityStore, ISerializedUnitStore
from stockyard.core.services.quantity_view import QuantityViewService

logger = get_logger(__name__)


class GetQuantitiesUseCase:
    """Read quantities through the quantity view, whatever the tracking mode."""

    def __init__(
        self,
        item_store: IItemStore | None = None,
        unit_store: ISerializedUnitStore | None = None,
        quantity_store: IQuantityStore | None = None,
    ):
        self._item_store = item_store
        self._unit_store = unit_store
        self._quantity_store = quantity_store
        self._service: QuantityViewService | None = None

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from stockyard.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def _get_service(self) -> QuantityViewService:
        if self._service is None:
            from stockyard.infrastructure.storage.sqlite import (
                get_quantity_store,
                get_unit_store,
            )

            if self._unit_store is None:
                self._unit_store = await get_unit_store()
            if self._quantity_store is None:
                self._quantity_store = await get_quantity_store()
            self._service = QuantityViewService(
                item_store=await self._get_item_store(),
                unit_store=self._unit_store,
                quantity_store=self._quantity_store,
            )
        return self._service

    async def execute(self, item_id: int) -> UnifiedQuantity:
        """Quantities of one item by ID."""
        item = await (await self._get_item_store()).get_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        service = await self._get_service()
        return await service.quantities_for(item)

    async def by_code(self, code: str) -> tuple[Item, UnifiedQuantity]:
        item = await (await self._get_item_store()).get_item_by_code(code)
        if item is None:
            raise NotFoundError("Item", code)
        service = await self._get_service()
        return item, await service.quantities_for(item)

    async def list_all(self, active_only: bool = True) -> list[tuple[Item, UnifiedQuantity]]:
        service = await self._get_service()
        return await service.list_quantities(active_only=active_only)

    async def reorder_candidates(self) -> list[tuple[Item, UnifiedQuantity]]:
        service = await self._get_service()
        candidates = await service.reorder_candidates()
        if candidates:
            logger.info("reorder_candidates_found", count=len(candidates))
        return candidates
