"""Transition Unit Status Use Case."""

from dataclasses import dataclass

from stockyard.application.dto.requests import TransitionStatusRequest
from stockyard.config import get_logger, get_settings
from stockyard.core.entities.serialized_unit import SerializedUnit, UnitStatus
from stockyard.core.exceptions import NotFoundError
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore
from stockyard.core.services.stock_rules import transition_unit

logger = get_logger(__name__)


@dataclass
class TransitionStatusResult:
    unit: SerializedUnit
    previous_status: UnitStatus


class TransitionUnitStatusUseCase:
    """
    Move a unit along the status graph.

    The unit may be addressed by ID or by serial number. Whether the
    graph is enforced comes from settings unless given explicitly.
    """

    def __init__(
        self,
        unit_store: ISerializedUnitStore | None = None,
        enforce_transitions: bool | None = None,
    ):
        self._unit_store = unit_store
        self._enforce_transitions = enforce_transitions

    async def _get_unit_store(self) -> ISerializedUnitStore:
        if self._unit_store is None:
            from stockyard.infrastructure.storage.sqlite import get_unit_store

            self._unit_store = await get_unit_store()
        return self._unit_store

    @property
    def enforce_transitions(self) -> bool:
        if self._enforce_transitions is None:
            return get_settings().inventory.enforce_status_transitions
        return self._enforce_transitions

    async def execute(self, request: TransitionStatusRequest) -> TransitionStatusResult:
        store = await self._get_unit_store()
        if request.unit_id is not None:
            unit = await store.get_unit(request.unit_id)
            key: int | str = request.unit_id
        else:
            unit = await store.get_unit_by_serial(request.serial_number or "")
            key = request.serial_number or ""
        if unit is None:
            raise NotFoundError("SerializedUnit", key)

        previous = unit.status
        updated = transition_unit(unit, request.status, self.enforce_transitions)
        if request.notes:
            updated.notes = request.notes
        updated = await store.update_unit(updated, expected_status=previous)

        logger.info(
            "unit_status_changed",
            unit_id=updated.id,
            serial_number=updated.serial_number,
            previous=previous.value,
            status=updated.status.value,
        )
        return TransitionStatusResult(unit=updated, previous_status=previous)
