"""SQLite implementation of the serialized unit ledger."""

from datetime import datetime

import aiosqlite

from stockyard.config import get_logger
from stockyard.core.entities.serialized_unit import SerializedUnit, UnitStatus
from stockyard.core.entities.transaction import StockTransaction
from stockyard.core.exceptions import (
    DatabaseError,
    DuplicateSerialError,
    InvalidStatusTransitionError,
    NotFoundError,
    NotSerializedItemError,
)
from stockyard.core.interfaces.ledger_store import ISerializedUnitStore
from stockyard.core.services.stock_rules import ensure_serialized
from stockyard.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_write_transaction,
)
from stockyard.infrastructure.storage.sqlite.ledger_ops import (
    ensure_location,
    ensure_unit_unbooked,
    fetch_item,
    insert_transaction,
    write_unit,
)
from stockyard.infrastructure.storage.sqlite.rows import iso, row_to_unit

logger = get_logger(__name__)


class SQLiteSerializedUnitStore(ISerializedUnitStore):
    """SQLite implementation of serialized unit storage."""

    async def create_unit(
        self,
        unit: SerializedUnit,
        transaction: StockTransaction | None = None,
    ) -> SerializedUnit:
        """Register a unit against a serialized item."""
        now = datetime.utcnow()
        unit.created_at = now
        unit.updated_at = now
        try:
            async with get_write_transaction() as conn:
                ensure_serialized(await fetch_item(conn, unit.item_id))
                if unit.location_id is not None:
                    await ensure_location(conn, unit.location_id)

                cursor = await conn.execute(
                    """
                    INSERT INTO stock_serialized_items (
                        item_id, serial_number, location_id, condition, status,
                        purchase_date, purchase_cost, warranty_expiry,
                        last_service_date, next_service_date, notes,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        unit.item_id,
                        unit.serial_number,
                        unit.location_id,
                        unit.condition.value,
                        unit.status.value,
                        iso(unit.purchase_date),
                        unit.purchase_cost,
                        iso(unit.warranty_expiry),
                        iso(unit.last_service_date),
                        iso(unit.next_service_date),
                        unit.notes,
                        unit.created_at.isoformat(),
                        unit.updated_at.isoformat(),
                    ),
                )
                unit.id = cursor.lastrowid

                if transaction is not None:
                    transaction.unit_id = unit.id
                    await insert_transaction(conn, transaction)
        except aiosqlite.IntegrityError as e:
            message = str(e)
            if "serial_number" in message:
                existing = await self.get_unit_by_serial(unit.serial_number)
                raise DuplicateSerialError(
                    unit.serial_number, existing.item_id if existing else None
                ) from e
            if "NOT_SERIALIZED_ITEM" in message:
                raise NotSerializedItemError(unit.item_id) from e
            raise DatabaseError("create_unit", message) from e

        logger.info(
            "serialized_unit_registered",
            unit_id=unit.id,
            item_id=unit.item_id,
            serial_number=unit.serial_number,
        )
        return unit

    async def get_unit(self, unit_id: int) -> SerializedUnit | None:
        """Get unit by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_serialized_items WHERE id = ?", (unit_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_unit(row)

    async def get_unit_by_serial(self, serial_number: str) -> SerializedUnit | None:
        """Get unit by serial number."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_serialized_items WHERE serial_number = ?",
                (serial_number,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_unit(row)

    async def list_units(
        self,
        item_id: int,
        status: UnitStatus | None = None,
        location_id: int | None = None,
    ) -> list[SerializedUnit]:
        """List units of an item, optionally by status and location."""
        conditions = ["item_id = ?"]
        params: list = [item_id]
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        if location_id is not None:
            conditions.append("location_id = ?")
            params.append(location_id)

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_serialized_items
                WHERE {" AND ".join(conditions)}
                ORDER BY serial_number
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [row_to_unit(row) for row in rows]

    async def update_unit(
        self,
        unit: SerializedUnit,
        transaction: StockTransaction | None = None,
        expected_status: UnitStatus | None = None,
    ) -> SerializedUnit:
        """Persist a unit and its optional audit transaction together."""
        async with get_write_transaction() as conn:
            cursor = await conn.execute(
                "SELECT status, location_id FROM stock_serialized_items WHERE id = ?",
                (unit.id,),
            )
            row = await cursor.fetchone()
            if row is None:
                raise NotFoundError("SerializedUnit", unit.id)
            if expected_status is not None and row["status"] != expected_status.value:
                raise InvalidStatusTransitionError(
                    unit.id, row["status"], unit.status.value
                )
            if (
                row["status"] != unit.status.value
                or row["location_id"] != unit.location_id
            ):
                # Hire bookings own status and location while open
                await ensure_unit_unbooked(conn, unit.id)
            await write_unit(conn, unit)
            if transaction is not None:
                transaction.unit_id = unit.id
                await insert_transaction(conn, transaction)

        logger.info(
            "serialized_unit_updated",
            unit_id=unit.id,
            status=unit.status.value,
            location_id=unit.location_id,
        )
        return unit

    async def count_by_status(self, item_id: int) -> dict[UnitStatus, int]:
        """Count units of an item per status."""
        counts = {status: 0 for status in UnitStatus}
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT status, COUNT(*) AS cnt
                FROM stock_serialized_items
                WHERE item_id = ?
                GROUP BY status
                """,
                (item_id,),
            )
            rows = await cursor.fetchall()
        for row in rows:
            counts[UnitStatus(row["status"])] = int(row["cnt"])
        return counts
