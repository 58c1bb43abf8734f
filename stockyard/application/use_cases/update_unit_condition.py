"""Update Unit Condition Use Case."""

from stockyard.application.dto.requests import UpdateConditionRequest
from stockyard.config import get_logger
from stockyard.core.entities.serialized_unit import SerializedUnit
from stockyard.core.exceptions import NotFoundError
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore

logger = get_logger(__name__)


class UpdateUnitConditionUseCase:
    def __init__(self, unit_store: ISerializedUnitStore | None = None):
        self._unit_store = unit_store

    async def _get_unit_store(self) -> ISerializedUnitStore:
        if self._unit_store is None:
            from stockyard.infrastructure.storage.sqlite import get_unit_store

            self._unit_store = await get_unit_store()
        return self._unit_store

    async def execute(self, request: UpdateConditionRequest) -> SerializedUnit:
        store = await self._get_unit_store()
        unit = await store.get_unit(request.unit_id)
        if unit is None:
            raise NotFoundError("SerializedUnit", request.unit_id)

        previous = unit.condition
        update: dict = {"condition": request.condition}
        if request.notes:
            update["notes"] = request.notes
        unit = await store.update_unit(
            unit.model_copy(update=update), expected_status=unit.status
        )

        if request.condition.is_worse_than(previous):
            logger.warning(
                "unit_condition_degraded",
                unit_id=unit.id,
                previous=previous.value,
                condition=unit.condition.value,
            )
        else:
            logger.info("unit_condition_updated", unit_id=unit.id, condition=unit.condition.value)
        return unit
