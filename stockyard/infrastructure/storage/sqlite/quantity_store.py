"""SQLite implementation of the bulk quantity ledger."""

from stockyard.config import get_logger
from stockyard.core.entities.location_quantity import LocationQuantity, StockCount
from stockyard.core.entities.transaction import StockTransaction, TransactionType
from stockyard.core.exceptions import ValidationError
from stockyard.core.interfaces.ledger_store import IQuantityStore
from stockyard.core.services.stock_rules import check_positive, ensure_bulk, recount
from stockyard.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_write_transaction,
)
from stockyard.infrastructure.storage.sqlite.ledger_ops import (
    fetch_item,
    insert_transaction,
    load_or_new_quantity,
    move_quantity,
    write_quantity,
)
from stockyard.infrastructure.storage.sqlite.rows import row_to_quantity

logger = get_logger(__name__)


class SQLiteQuantityStore(IQuantityStore):
    """
    SQLite implementation of the (item, location) quantity ledger.

    Each mutation holds the database write lock from the read of the
    current row until the commit of the new one.
    """

    async def get_quantity(
        self, item_id: int, location_id: int
    ) -> LocationQuantity | None:
        """Get the ledger row for an item at a location."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_quantities WHERE item_id = ? AND location_id = ?",
                (item_id, location_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_quantity(row)

    async def list_quantities(self, item_id: int) -> list[LocationQuantity]:
        """List ledger rows of an item across locations."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_quantities
                WHERE item_id = ?
                ORDER BY location_id
                """,
                (item_id,),
            )
            rows = await cursor.fetchall()
            return [row_to_quantity(row) for row in rows]

    async def apply_movement(
        self,
        item_id: int,
        location_id: int,
        delta_on_hand: float,
        delta_allocated: float,
        transaction: StockTransaction | None = None,
    ) -> LocationQuantity:
        """Apply on-hand and allocated deltas to one row."""
        async with get_write_transaction() as conn:
            row = await move_quantity(
                conn, item_id, location_id, delta_on_hand, delta_allocated
            )
            if transaction is not None:
                await insert_transaction(conn, transaction)

        logger.info(
            "stock_movement_applied",
            item_id=item_id,
            location_id=location_id,
            delta_on_hand=delta_on_hand,
            delta_allocated=delta_allocated,
            on_hand=row.quantity_on_hand,
            available=row.quantity_available,
        )
        return row

    async def transfer(
        self,
        item_id: int,
        from_location_id: int,
        to_location_id: int,
        quantity: float,
        transaction: StockTransaction | None = None,
    ) -> tuple[LocationQuantity, LocationQuantity]:
        """Move on-hand stock out of one location and into another."""
        check_positive("quantity", quantity)
        if from_location_id == to_location_id:
            raise ValidationError(
                "to_location_id", "must differ from from_location_id", to_location_id
            )

        async with get_write_transaction() as conn:
            source = await move_quantity(conn, item_id, from_location_id, -quantity, 0.0)
            target = await move_quantity(conn, item_id, to_location_id, quantity, 0.0)
            if transaction is not None:
                await insert_transaction(conn, transaction)

        logger.info(
            "stock_transferred",
            item_id=item_id,
            from_location_id=from_location_id,
            to_location_id=to_location_id,
            quantity=quantity,
        )
        return source, target

    async def count_stock(
        self,
        item_id: int,
        location_id: int,
        counted_quantity: float,
        counted_by: str | None = None,
        notes: str | None = None,
    ) -> tuple[LocationQuantity, StockCount]:
        """Record a physical count; a non-zero variance is logged as an adjustment."""
        async with get_write_transaction() as conn:
            ensure_bulk(await fetch_item(conn, item_id))
            current = await load_or_new_quantity(conn, item_id, location_id)
            updated, count = recount(current, counted_quantity, counted_by, notes)
            row = await write_quantity(conn, updated)

            await conn.execute(
                """
                INSERT INTO stock_counts (
                    item_id, location_id, expected_quantity, counted_quantity,
                    variance, counted_by, notes, counted_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    count.item_id,
                    count.location_id,
                    count.expected_quantity,
                    count.counted_quantity,
                    count.variance,
                    count.counted_by,
                    count.notes,
                    count.counted_at.isoformat(),
                ),
            )

            if count.variance != 0:
                await insert_transaction(
                    conn,
                    StockTransaction(
                        transaction_type=TransactionType.ADJUSTMENT,
                        item_id=item_id,
                        to_location_id=location_id,
                        quantity=count.variance,
                        notes=notes or "stock count",
                        user_id=counted_by,
                    ),
                )

        logger.info(
            "stock_counted",
            item_id=item_id,
            location_id=location_id,
            expected=count.expected_quantity,
            counted=count.counted_quantity,
            variance=count.variance,
        )
        return row, count
