"""
Abstract interface for the item catalog and stock locations.

Implementations enforce code uniqueness and the tracking-mode lock at the
storage layer; the lock check and the mode update must share one write
transaction.
"""

from abc import ABC, abstractmethod

from stockyard.core.entities.category import Category
from stockyard.core.entities.item import Item, TrackingMode
from stockyard.core.entities.location import Location


class IItemStore(ABC):
    """Interface for catalog item persistence."""

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        """Create a catalog item. Raises DuplicateCodeError on a used code."""

    @abstractmethod
    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""

    @abstractmethod
    async def get_item_by_code(self, code: str) -> Item | None:
        """Get item by its human code."""

    @abstractmethod
    async def list_items(
        self, active_only: bool = False, limit: int = 100, offset: int = 0
    ) -> list[Item]:
        """List items ordered by code."""

    @abstractmethod
    async def update_item(self, item: Item) -> Item:
        """Update descriptive fields. Never changes tracking_mode."""

    @abstractmethod
    async def set_active(self, item_id: int, is_active: bool) -> Item:
        """Activate or deactivate an item without touching its ledger rows."""

    @abstractmethod
    async def count_references(self, item_id: int) -> dict[str, int]:
        """Count units, location quantities and transactions pointing at the item."""

    @abstractmethod
    async def set_tracking_mode(self, item_id: int, mode: TrackingMode) -> Item:
        """
        Change tracking mode atomically.

        Raises TrackingModeLockedError if any ledger row or transaction
        references the item, NotFoundError if it does not exist.
        """


class ILocationStore(ABC):
    """Interface for stock location persistence."""

    @abstractmethod
    async def create_location(self, location: Location) -> Location:
        """Create a location."""

    @abstractmethod
    async def get_location(self, location_id: int) -> Location | None:
        """Get location by ID."""

    @abstractmethod
    async def list_locations(self, active_only: bool = True) -> list[Location]:
        """List locations ordered by name."""


class ICategoryStore(ABC):
    """Interface for stock category persistence."""

    @abstractmethod
    async def create_category(self, category: Category) -> Category:
        """
        Create a category.

        Raises ValidationError on a name already in use and NotFoundError
        when parent_id names no category.
        """

    @abstractmethod
    async def get_category(self, category_id: int) -> Category | None:
        """Get category by ID."""

    @abstractmethod
    async def list_categories(self, parent_id: int | None = None) -> list[Category]:
        """List categories ordered by name, optionally only children of a parent."""
