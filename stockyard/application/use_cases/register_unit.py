"""Register Unit Use Case."""

from dataclasses import dataclass

from stockyard.application.dto.requests import RegisterUnitRequest
from stockyard.config import get_logger
from stockyard.core.entities.serialized_unit import SerializedUnit
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.exceptions import DuplicateSerialError, NotFoundError
from stockyard.core.interfaces.item_store import IItemStore, ILocationStore
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore
from stockyard.core.services.stock_rules import ensure_serialized

logger = get_logger(__name__)


@dataclass
class RegisterUnitResult:
    """Result of registering a unit."""

    unit: SerializedUnit
    transaction: StockTransaction


class RegisterUnitUseCase:
    """Register a unit against a serialized item and log its receipt."""

    def __init__(
        self,
        item_store: IItemStore | None = None,
        location_store: ILocationStore | None = None,
        unit_store: ISerializedUnitStore | None = None,
    ):
        self._item_store = item_store
        self._location_store = location_store
        self._unit_store = unit_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from stockyard.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def _get_location_store(self) -> ILocationStore:
        if self._location_store is None:
            from stockyard.infrastructure.storage.sqlite import get_location_store

            self._location_store = await get_location_store()
        return self._location_store

    async def _get_unit_store(self) -> ISerializedUnitStore:
        if self._unit_store is None:
            from stockyard.infrastructure.storage.sqlite import get_unit_store

            self._unit_store = await get_unit_store()
        return self._unit_store

    async def execute(self, request: RegisterUnitRequest) -> RegisterUnitResult:
        """Execute register unit use case."""
        logger.info(
            "register_unit_started",
            item_id=request.item_id,
            serial_number=request.serial_number,
        )

        # 1. Item must exist and be serialized
        item_store = await self._get_item_store()
        item = await item_store.get_item(request.item_id)
        if item is None:
            raise NotFoundError("Item", request.item_id)
        ensure_serialized(item)

        # 2. Location must exist when given
        if request.location_id is not None:
            location_store = await self._get_location_store()
            if await location_store.get_location(request.location_id) is None:
                raise NotFoundError("Location", request.location_id)

        # 3. Serial numbers are unique across every item
        unit_store = await self._get_unit_store()
        existing = await unit_store.get_unit_by_serial(request.serial_number)
        if existing is not None:
            raise DuplicateSerialError(request.serial_number, existing.item_id)

        # 4. Insert unit and receipt together
        unit = SerializedUnit(
            item_id=request.item_id,
            serial_number=request.serial_number,
            location_id=request.location_id,
            condition=request.condition,
            purchase_date=request.purchase_date,
            purchase_cost=request.purchase_cost,
            warranty_expiry=request.warranty_expiry,
            next_service_date=request.next_service_date,
            notes=request.notes,
        )
        transaction = StockTransaction(
            transaction_type=TransactionType.RECEIPT,
            item_id=request.item_id,
            to_location_id=request.location_id,
            quantity=1.0,
            unit_cost=request.purchase_cost or item.unit_cost,
            reference_number=request.serial_number,
            user_id=request.user_id,
        )
        unit = await unit_store.create_unit(unit, transaction)

        logger.info(
            "register_unit_complete",
            unit_id=unit.id,
            item_id=unit.item_id,
            serial_number=unit.serial_number,
        )
        return RegisterUnitResult(unit=unit, transaction=transaction)
