"""Category use cases."""

from stockyard.application.dto.requests import CreateCategoryRequest
from stockyard.config import get_logger
from stockyard.core.entities.category import Category
from stockyard.core.interfaces.item_store import ICategoryStore

logger = get_logger(__name__)


class _CategoryUseCase:
    def __init__(self, category_store: ICategoryStore | None = None):
        self._category_store = category_store

    async def _get_category_store(self) -> ICategoryStore:
        if self._category_store is None:
            from stockyard.infrastructure.storage.sqlite import get_category_store

            self._category_store = await get_category_store()
        return self._category_store


class CreateCategoryUseCase(_CategoryUseCase):
    """Create a category, nested under parent_id when given."""

    async def execute(self, request: CreateCategoryRequest) -> Category:
        store = await self._get_category_store()
        category = await store.create_category(
            Category(
                name=request.name.strip(),
                parent_id=request.parent_id,
                description=request.description,
            )
        )
        logger.info("create_category_complete", category_id=category.id)
        return category


class ListCategoriesUseCase(_CategoryUseCase):
    """List categories, or the direct children of one parent."""

    async def execute(self, parent_id: int | None = None) -> list[Category]:
        return await (await self._get_category_store()).list_categories(parent_id)
