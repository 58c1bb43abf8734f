"""Deactivate Item Use Case."""

from stockyard.config import get_logger
from stockyard.core.entities.item import Item
from stockyard.core.exceptions import NotFoundError
from stockyard.core.interfaces.item_store import IItemStore

logger = get_logger(__name__)


class DeactivateItemUseCase:
    """Mark an item inactive. Units, quantities and history are left as they are."""

    def __init__(self, item_store: IItemStore | None = None):
        self._item_store = item_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from stockyard.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def execute(self, item_id: int) -> Item:
        store = await self._get_item_store()
        item = await store.get_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        if not item.is_active:
            return item

        item = await store.set_active(item_id, False)
        logger.info("item_deactivated", item_id=item_id, code=item.code)
        return item
