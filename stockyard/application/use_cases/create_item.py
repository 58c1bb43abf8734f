"""Create Item Use Case."""

from dataclasses import dataclass

from stockyard.application.dto.requests import CreateItemRequest
from stockyard.config import get_logger
from stockyard.core.entities.item import Item
from stockyard.core.exceptions import DuplicateCodeError, NotFoundError
from stockyard.core.interfaces.item_store import ICategoryStore, IItemStore
from stockyard.core.services.stock_rules import parse_tracking_mode

logger = get_logger(__name__)


@dataclass
class CreateItemResult:
    """Result of creating a catalog item."""

    item: Item


class CreateItemUseCase:
    """Create a catalog item with a fixed tracking mode."""

    def __init__(
        self,
        item_store: IItemStore | None = None,
        category_store: ICategoryStore | None = None,
    ):
        self._item_store = item_store
        self._category_store = category_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from stockyard.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def _get_category_store(self) -> ICategoryStore:
        if self._category_store is None:
            from stockyard.infrastructure.storage.sqlite import get_category_store

            self._category_store = await get_category_store()
        return self._category_store

    async def execute(self, request: CreateItemRequest) -> CreateItemResult:
        """Execute create item use case."""
        logger.info(
            "create_item_started",
            code=request.code,
            tracking_mode=request.tracking_mode,
        )

        mode = parse_tracking_mode(request.tracking_mode)
        store = await self._get_item_store()

        # Pre-check; the UNIQUE constraint catches any race
        existing = await store.get_item_by_code(request.code)
        if existing is not None:
            raise DuplicateCodeError(request.code, existing.id)

        if request.category_id is not None:
            category_store = await self._get_category_store()
            if await category_store.get_category(request.category_id) is None:
                raise NotFoundError("Category", request.category_id)

        item = Item(
            code=request.code,
            name=request.name,
            description=request.description,
            category_id=request.category_id,
            unit_of_measure=request.unit_of_measure,
            tracking_mode=mode,
            unit_cost=request.unit_cost,
            replacement_cost=request.replacement_cost,
            daily_hire_rate=request.daily_hire_rate,
            reorder_point=request.reorder_point,
            reorder_quantity=request.reorder_quantity,
        )
        item = await store.create_item(item)

        logger.info("create_item_complete", item_id=item.id, code=item.code)
        return CreateItemResult(item=item)
