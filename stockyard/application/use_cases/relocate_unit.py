"""Relocate Unit Use Case."""

from stockyard.application.dto.requests import RelocateUnitRequest
from stockyard.config import get_logger
from stockyard.core.entities.serialized_unit import SerializedUnit
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.exceptions import NotFoundError
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore

logger = get_logger(__name__)


class RelocateUnitUseCase:
    """Move a unit to another location, logging a transfer. Bulk rows are untouched."""

    def __init__(self, unit_store: ISerializedUnitStore | None = None):
        self._unit_store = unit_store

    async def _get_unit_store(self) -> ISerializedUnitStore:
        if self._unit_store is None:
            from stockyard.infrastructure.storage.sqlite import get_unit_store

            self._unit_store = await get_unit_store()
        return self._unit_store

    async def execute(self, request: RelocateUnitRequest) -> SerializedUnit:
        store = await self._get_unit_store()
        unit = await store.get_unit(request.unit_id)
        if unit is None:
            raise NotFoundError("SerializedUnit", request.unit_id)
        if unit.location_id == request.location_id:
            return unit

        previous_location = unit.location_id
        moved = unit.model_copy(update={"location_id": request.location_id})
        transaction = StockTransaction(
            transaction_type=TransactionType.TRANSFER,
            item_id=unit.item_id,
            unit_id=unit.id,
            from_location_id=previous_location,
            to_location_id=request.location_id,
            quantity=1.0,
            reference_number=unit.serial_number,
            notes=request.notes,
            user_id=request.user_id,
        )
        moved = await store.update_unit(moved, transaction, expected_status=unit.status)

        logger.info(
            "unit_relocated",
            unit_id=moved.id,
            from_location_id=previous_location,
            to_location_id=moved.location_id,
        )
        return moved
