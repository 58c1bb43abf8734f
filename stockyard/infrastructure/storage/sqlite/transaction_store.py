"""SQLite implementation of the stock movement log."""

from stockyard.core.entities.transaction import StockTransaction
from stockyard.core.interfaces.ledger_store import ITransactionStore
from stockyard.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from stockyard.infrastructure.storage.sqlite.ledger_ops import (
    fetch_item,
    insert_transaction,
)
from stockyard.infrastructure.storage.sqlite.rows import row_to_transaction


class SQLiteTransactionStore(ITransactionStore):
    """Append-only; the schema rejects updates and deletes."""

    async def add_transaction(self, transaction: StockTransaction) -> StockTransaction:
        async with get_transaction() as conn:
            await fetch_item(conn, transaction.item_id)
            return await insert_transaction(conn, transaction)

    async def list_transactions(
        self, item_id: int, limit: int = 100, offset: int = 0
    ) -> list[StockTransaction]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_transactions
                WHERE item_id = ?
                ORDER BY transaction_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (item_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [row_to_transaction(row) for row in rows]
