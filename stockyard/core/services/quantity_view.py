"""
Unified quantity view.

Reconciles the serialized and bulk ledgers into one total / available /
allocated figure per item. The item's tracking mode picks exactly one
QuantitySource variant; each variant knows how to aggregate its own
ledger. Nothing is cached, every call reads the source rows.
"""

from dataclasses import dataclass

from stockyard.config import get_logger
from stockyard.core.entities.item import Item, TrackingMode
from stockyard.core.entities.quantities import UnifiedQuantity
from stockyard.core.entities.serialized_unit import ALLOCATED_STATUSES, UnitStatus
from stockyard.core.interfaces.item_store import IItemStore
from stockyard.core.interfaces.ledger_store import IQuantityStore, ISerializedUnitStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class SerializedQuantitySource:
    """Counts units: every unit is one, status decides available or allocated."""

    item_id: int
    units: ISerializedUnitStore

    async def aggregate(self) -> UnifiedQuantity:
        counts = await self.units.count_by_status(self.item_id)
        return UnifiedQuantity(
            item_id=self.item_id,
            tracking_mode=TrackingMode.SERIALIZED,
            total=float(sum(counts.values())),
            available=float(counts.get(UnitStatus.AVAILABLE, 0)),
            allocated=float(sum(counts.get(s, 0) for s in ALLOCATED_STATUSES)),
        )


@dataclass(frozen=True)
class BulkQuantitySource:
    """Sums location rows; available is derived from the summed columns."""

    item_id: int
    quantities: IQuantityStore

    async def aggregate(self) -> UnifiedQuantity:
        rows = await self.quantities.list_quantities(self.item_id)
        on_hand = sum(r.quantity_on_hand for r in rows)
        allocated = sum(r.quantity_allocated for r in rows)
        return UnifiedQuantity(
            item_id=self.item_id,
            tracking_mode=TrackingMode.BULK,
            total=on_hand,
            available=on_hand - allocated,
            allocated=allocated,
        )


QuantitySource = SerializedQuantitySource | BulkQuantitySource


class QuantityViewService:
    """
    Read-only projection over both ledgers.

    Pure service -- stores are injected via constructor.
    """

    def __init__(
        self,
        item_store: IItemStore,
        unit_store: ISerializedUnitStore,
        quantity_store: IQuantityStore,
    ) -> None:
        self._item_store = item_store
        self._unit_store = unit_store
        self._quantity_store = quantity_store

    def source_for(self, item: Item) -> QuantitySource:
        """Select the ledger variant for an item. The only place mode is inspected."""
        if item.id is None:
            raise ValueError("item must be persisted before its quantities can be read")
        if item.tracking_mode == TrackingMode.SERIALIZED:
            return SerializedQuantitySource(item_id=item.id, units=self._unit_store)
        return BulkQuantitySource(item_id=item.id, quantities=self._quantity_store)

    async def quantities_for(self, item: Item) -> UnifiedQuantity:
        return await self.source_for(item).aggregate()

    async def list_quantities(
        self, active_only: bool = True, limit: int = 1000
    ) -> list[tuple[Item, UnifiedQuantity]]:
        """Quantities for every catalog item, ordered by item code."""
        items = await self._item_store.list_items(active_only=active_only, limit=limit)
        result = []
        for item in items:
            result.append((item, await self.quantities_for(item)))
        logger.debug("quantities_listed", count=len(result))
        return result

    async def reorder_candidates(self) -> list[tuple[Item, UnifiedQuantity]]:
        """Active items with a reorder point whose available stock has reached it."""
        return [
            (item, qty)
            for item, qty in await self.list_quantities(active_only=True)
            if item.reorder_point > 0 and qty.available <= item.reorder_point
        ]
