"""SQLite implementation of the item catalog, categories and locations."""

from datetime import datetime

import aiosqlite

from stockyard.config import get_logger
from stockyard.core.entities.category import Category
from stockyard.core.entities.item import Item, TrackingMode
from stockyard.core.entities.location import Location
from stockyard.core.exceptions import (
    DatabaseError,
    DuplicateCodeError,
    NotFoundError,
    TrackingModeLockedError,
    ValidationError,
)
from stockyard.core.interfaces.item_store import ICategoryStore, IItemStore, ILocationStore
from stockyard.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
    get_write_transaction,
)
from stockyard.infrastructure.storage.sqlite.ledger_ops import fetch_item
from stockyard.infrastructure.storage.sqlite.rows import (
    row_to_category,
    row_to_item,
    row_to_location,
)

logger = get_logger(__name__)


class SQLiteItemStore(IItemStore):
    """SQLite implementation of catalog item storage."""

    async def create_item(self, item: Item) -> Item:
        """Create a new catalog item."""
        now = datetime.utcnow()
        item.created_at = now
        item.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO stock_items (
                        item_code, name, description, category_id, unit_of_measure,
                        tracking_mode, unit_cost, replacement_cost, daily_hire_rate,
                        reorder_point, reorder_quantity, is_active,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.code,
                        item.name,
                        item.description,
                        item.category_id,
                        item.unit_of_measure,
                        item.tracking_mode.value,
                        item.unit_cost,
                        item.replacement_cost,
                        item.daily_hire_rate,
                        item.reorder_point,
                        item.reorder_quantity,
                        int(item.is_active),
                        item.created_at.isoformat(),
                        item.updated_at.isoformat(),
                    ),
                )
                item.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            if "item_code" in str(e):
                existing = await self.get_item_by_code(item.code)
                raise DuplicateCodeError(item.code, existing.id if existing else None) from e
            if "FOREIGN KEY" in str(e) and item.category_id is not None:
                raise NotFoundError("Category", item.category_id) from e
            raise DatabaseError("create_item", str(e)) from e

        logger.info(
            "stock_item_created",
            item_id=item.id,
            code=item.code,
            tracking_mode=item.tracking_mode.value,
        )
        return item

    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_item(row)

    async def get_item_by_code(self, code: str) -> Item | None:
        """Get item by code."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_items WHERE item_code = ?", (code,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_item(row)

    async def list_items(
        self, active_only: bool = False, limit: int = 100, offset: int = 0
    ) -> list[Item]:
        """List items with pagination."""
        where = "WHERE is_active = 1" if active_only else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_items
                {where}
                ORDER BY item_code
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [row_to_item(row) for row in rows]

    async def update_item(self, item: Item) -> Item:
        """Update descriptive and costing fields."""
        item.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE stock_items SET
                    name = ?,
                    description = ?,
                    category_id = ?,
                    unit_of_measure = ?,
                    unit_cost = ?,
                    replacement_cost = ?,
                    daily_hire_rate = ?,
                    reorder_point = ?,
                    reorder_quantity = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    item.name,
                    item.description,
                    item.category_id,
                    item.unit_of_measure,
                    item.unit_cost,
                    item.replacement_cost,
                    item.daily_hire_rate,
                    item.reorder_point,
                    item.reorder_quantity,
                    item.updated_at.isoformat(),
                    item.id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Item", item.id)
        logger.info("stock_item_updated", item_id=item.id)
        return item

    async def set_active(self, item_id: int, is_active: bool) -> Item:
        """Toggle the active flag."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE stock_items SET is_active = ?, updated_at = ? WHERE id = ?",
                (int(is_active), datetime.utcnow().isoformat(), item_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Item", item_id)
            item = await fetch_item(conn, item_id)
        logger.info("stock_item_active_changed", item_id=item_id, is_active=is_active)
        return item

    async def count_references(self, item_id: int) -> dict[str, int]:
        """Count ledger rows and transactions referencing the item."""
        async with get_connection() as conn:
            return await self._count_references(conn, item_id)

    async def set_tracking_mode(self, item_id: int, mode: TrackingMode) -> Item:
        """Change tracking mode if nothing references the item yet."""
        async with get_write_transaction() as conn:
            item = await fetch_item(conn, item_id)
            if item.tracking_mode == mode:
                return item

            refs = await self._count_references(conn, item_id)
            if any(refs.values()):
                logger.warning(
                    "tracking_mode_change_rejected",
                    item_id=item_id,
                    requested=mode.value,
                    **refs,
                )
                raise TrackingModeLockedError(
                    item_id, item.tracking_mode.value, mode.value
                )

            now = datetime.utcnow()
            await conn.execute(
                "UPDATE stock_items SET tracking_mode = ?, updated_at = ? WHERE id = ?",
                (mode.value, now.isoformat(), item_id),
            )
            item.tracking_mode = mode
            item.updated_at = now

        logger.info("tracking_mode_changed", item_id=item_id, tracking_mode=mode.value)
        return item

    @staticmethod
    async def _count_references(
        conn: aiosqlite.Connection, item_id: int
    ) -> dict[str, int]:
        counts = {}
        for key, table in (
            ("units", "stock_serialized_items"),
            ("quantities", "stock_quantities"),
            ("transactions", "stock_transactions"),
        ):
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM {table} WHERE item_id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            counts[key] = int(row[0])
        return counts


class SQLiteLocationStore(ILocationStore):
    """SQLite implementation of stock location storage."""

    async def create_location(self, location: Location) -> Location:
        """Create a new location."""
        now = datetime.utcnow()
        location.created_at = now
        location.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO stock_locations (
                    name, type, address, is_active, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    location.name,
                    location.type.value,
                    location.address,
                    int(location.is_active),
                    location.created_at.isoformat(),
                    location.updated_at.isoformat(),
                ),
            )
            location.id = cursor.lastrowid
        logger.info("stock_location_created", location_id=location.id, name=location.name)
        return location

    async def get_location(self, location_id: int) -> Location | None:
        """Get location by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_locations WHERE id = ?", (location_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_location(row)

    async def list_locations(self, active_only: bool = True) -> list[Location]:
        """List locations ordered by name."""
        where = "WHERE is_active = 1" if active_only else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM stock_locations {where} ORDER BY name"
            )
            rows = await cursor.fetchall()
            return [row_to_location(row) for row in rows]


class SQLiteCategoryStore(ICategoryStore):
    """SQLite implementation of stock category storage."""

    async def create_category(self, category: Category) -> Category:
        """Create a category, optionally under a parent."""
        now = datetime.utcnow()
        category.created_at = now
        category.updated_at = now
        try:
            async with get_transaction() as conn:
                if category.parent_id is not None:
                    cursor = await conn.execute(
                        "SELECT 1 FROM stock_categories WHERE id = ?",
                        (category.parent_id,),
                    )
                    if await cursor.fetchone() is None:
                        raise NotFoundError("Category", category.parent_id)
                cursor = await conn.execute(
                    """
                    INSERT INTO stock_categories (
                        name, parent_id, description, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        category.name,
                        category.parent_id,
                        category.description,
                        category.created_at.isoformat(),
                        category.updated_at.isoformat(),
                    ),
                )
                category.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            if "stock_categories.name" in str(e):
                raise ValidationError(
                    "name", "category name already exists", category.name
                ) from e
            raise DatabaseError("create_category", str(e)) from e

        logger.info(
            "stock_category_created",
            category_id=category.id,
            name=category.name,
            parent_id=category.parent_id,
        )
        return category

    async def get_category(self, category_id: int) -> Category | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            return row_to_category(row) if row is not None else None

    async def list_categories(self, parent_id: int | None = None) -> list[Category]:
        """List categories by name; with parent_id, only its direct children."""
        where, params = ("WHERE parent_id = ?", (parent_id,)) if parent_id is not None else ("", ())
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM stock_categories {where} ORDER BY name", params
            )
            rows = await cursor.fetchall()
            return [row_to_category(row) for row in rows]
