"""Create Location Use Case."""

from stockyard.application.dto.requests import CreateLocationRequest
from stockyard.config import get_logger, get_settings
from stockyard.core.entities.location import Location, LocationType
from stockyard.core.interfaces.item_store import ILocationStore

logger = get_logger(__name__)


class CreateLocationUseCase:
    """Create a stock location; the type falls back to the configured default."""

    def __init__(self, location_store: ILocationStore | None = None):
        self._location_store = location_store

    async def _get_location_store(self) -> ILocationStore:
        if self._location_store is None:
            from stockyard.infrastructure.storage.sqlite import get_location_store

            self._location_store = await get_location_store()
        return self._location_store

    async def execute(self, request: CreateLocationRequest) -> Location:
        location_type = request.type or LocationType(
            get_settings().inventory.default_location_type
        )
        store = await self._get_location_store()
        location = await store.create_location(
            Location(name=request.name, type=location_type, address=request.address)
        )
        logger.info(
            "create_location_complete",
            location_id=location.id,
            type=location.type.value,
        )
        return location
