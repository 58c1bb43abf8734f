"""Change Tracking Mode Use Case."""

from dataclasses import dataclass

from stockyard.application.dto.requests import ChangeTrackingModeRequest
from stockyard.config import get_logger
from stockyard.core.entities.item import Item, TrackingMode
from stockyard.core.exceptions import NotFoundError
from stockyard.core.interfaces.item_store import IItemStore
from stockyard.core.services.stock_rules import parse_tracking_mode

logger = get_logger(__name__)


@dataclass
class ChangeTrackingModeResult:
    """Result of a tracking mode change."""

    item: Item
    previous_mode: TrackingMode
    changed: bool


class ChangeTrackingModeUseCase:
    """
    Switch an item between serialized and bulk tracking.

    Only allowed while no unit, quantity row or transaction references
    the item. The store re-checks under the write lock.
    """

    def __init__(self, item_store: IItemStore | None = None):
        self._item_store = item_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from stockyard.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def execute(self, request: ChangeTrackingModeRequest) -> ChangeTrackingModeResult:
        mode = parse_tracking_mode(request.tracking_mode)
        store = await self._get_item_store()

        item = await store.get_item(request.item_id)
        if item is None:
            raise NotFoundError("Item", request.item_id)

        previous = item.tracking_mode
        if previous == mode:
            return ChangeTrackingModeResult(item=item, previous_mode=previous, changed=False)

        item = await store.set_tracking_mode(request.item_id, mode)
        logger.info(
            "change_tracking_mode_complete",
            item_id=item.id,
            previous=previous.value,
            tracking_mode=mode.value,
        )
        return ChangeTrackingModeResult(item=item, previous_mode=previous, changed=True)
