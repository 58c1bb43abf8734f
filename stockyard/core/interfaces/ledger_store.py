"""Abstract interfaces for the serialized and bulk stock ledgers."""

from abc import ABC, abstractmethod

from stockyard.core.entities.location_quantity import LocationQuantity, StockCount
from stockyard.core.entities.serialized_unit import SerializedUnit, UnitStatus
from stockyard.core.entities.transaction import StockTransaction


class ISerializedUnitStore(ABC):
    """
    Interface for serialized unit persistence.

    Writes re-check that the owning item is serialized inside the write
    transaction. Serial numbers are unique across all items.
    """

    @abstractmethod
    async def create_unit(
        self,
        unit: SerializedUnit,
        transaction: StockTransaction | None = None,
    ) -> SerializedUnit:
        """
        Register a unit, optionally logging a transaction in the same commit.

        Raises NotSerializedItemError or DuplicateSerialError.
        """

    @abstractmethod
    async def get_unit(self, unit_id: int) -> SerializedUnit | None:
        """Get unit by ID."""

    @abstractmethod
    async def get_unit_by_serial(self, serial_number: str) -> SerializedUnit | None:
        """Get unit by serial number."""

    @abstractmethod
    async def list_units(
        self,
        item_id: int,
        status: UnitStatus | None = None,
        location_id: int | None = None,
    ) -> list[SerializedUnit]:
        """List units of an item, optionally filtered."""

    @abstractmethod
    async def update_unit(
        self,
        unit: SerializedUnit,
        transaction: StockTransaction | None = None,
        expected_status: UnitStatus | None = None,
    ) -> SerializedUnit:
        """
        Persist status, location, condition and service dates of a unit.

        When expected_status is given the stored status is compared under
        the write lock and InvalidStatusTransitionError is raised if another
        writer moved the unit first. A status or location change raises
        UnitBookedError while a reserved or checked-out booking holds the unit.
        """

    @abstractmethod
    async def count_by_status(self, item_id: int) -> dict[UnitStatus, int]:
        """Count units of an item per status. Missing statuses count zero."""


class IQuantityStore(ABC):
    """
    Interface for the bulk (item, location) quantity ledger.

    Every mutating method runs read-validate-write inside a single write
    transaction so concurrent movements cannot lose updates.
    """

    @abstractmethod
    async def get_quantity(
        self, item_id: int, location_id: int
    ) -> LocationQuantity | None:
        """Get the ledger row for one item at one location."""

    @abstractmethod
    async def list_quantities(self, item_id: int) -> list[LocationQuantity]:
        """List ledger rows of an item across all locations."""

    @abstractmethod
    async def apply_movement(
        self,
        item_id: int,
        location_id: int,
        delta_on_hand: float,
        delta_allocated: float,
        transaction: StockTransaction | None = None,
    ) -> LocationQuantity:
        """
        Upsert the (item, location) row with the given deltas.

        Raises NotBulkItemError for serialized items and
        NegativeQuantityError when any quantity would drop below zero,
        leaving the row unchanged.
        """

    @abstractmethod
    async def transfer(
        self,
        item_id: int,
        from_location_id: int,
        to_location_id: int,
        quantity: float,
        transaction: StockTransaction | None = None,
    ) -> tuple[LocationQuantity, LocationQuantity]:
        """Move on-hand stock between locations in one commit."""

    @abstractmethod
    async def count_stock(
        self,
        item_id: int,
        location_id: int,
        counted_quantity: float,
        counted_by: str | None = None,
        notes: str | None = None,
    ) -> tuple[LocationQuantity, StockCount]:
        """Set on_hand to the counted figure and record the variance."""


class ITransactionStore(ABC):
    """Interface for the append-only movement log."""

    @abstractmethod
    async def add_transaction(self, transaction: StockTransaction) -> StockTransaction:
        """Append a transaction record."""

    @abstractmethod
    async def list_transactions(
        self, item_id: int, limit: int = 100, offset: int = 0
    ) -> list[StockTransaction]:
        """Transactions of an item, newest first."""
