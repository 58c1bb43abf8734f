"""Unit tests for SQLite connection pool."""

import asyncio
from pathlib import Path

import aiosqlite
import pytest

from stockyard.core.exceptions import StorageUnavailableError
from stockyard.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_write_transaction,
    set_pool,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool.max_retries == 3
        assert pool._initialized is False

    async def test_initialize_creates_directory(self, tmp_path: Path):
        """Initialize creates database directory if not exists."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_initialize_idempotent(self, temp_db_path: Path):
        """Multiple initialize calls are safe."""
        pool = ConnectionPool(temp_db_path, pool_size=2)

        await pool.initialize()
        await pool.initialize()

        assert len(pool._connections) == 2
        assert pool._pool.qsize() == 2
        await pool.close()

    async def test_close_allows_reinitialize(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.close()
        assert pool._initialized is False

        await pool.initialize()
        assert pool._pool.qsize() == 2
        await pool.close()


class TestConnectionSettings:
    async def test_pragmas(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, busy_timeout=1234)
        conn = await pool._create_connection()
        try:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0].lower() == "wal"
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234
            assert conn.row_factory == aiosqlite.Row
        finally:
            await conn.close()


class TestTransactions:
    async def test_transaction_commits(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
            await conn.execute("INSERT INTO t VALUES (1)")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 1
        await pool.close()

    async def test_write_transaction_rolls_back_on_error(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        with pytest.raises(RuntimeError):
            async with pool.write_transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("rule violated")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
        await pool.close()

    async def test_write_transaction_holds_write_lock(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        async with pool.write_transaction() as conn:
            assert conn.in_transaction
        await pool.close()

    async def test_concurrent_writers_serialize(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=4, busy_timeout=5000)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE counter (v INTEGER)")
            await conn.execute("INSERT INTO counter VALUES (0)")

        async def increment():
            async with pool.write_transaction() as conn:
                cursor = await conn.execute("SELECT v FROM counter")
                value = (await cursor.fetchone())[0]
                await asyncio.sleep(0)
                await conn.execute("UPDATE counter SET v = ?", (value + 1,))

        await asyncio.gather(*(increment() for _ in range(12)))

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT v FROM counter")
            assert (await cursor.fetchone())[0] == 12
        await pool.close()


class TestLockRetry:
    async def test_locked_database_raises_storage_unavailable(self, temp_db_path: Path):
        pool = ConnectionPool(
            temp_db_path, pool_size=1, busy_timeout=0, max_retries=2, retry_delay=0.001
        )
        await pool.initialize()

        async with aiosqlite.connect(temp_db_path) as blocker:
            await blocker.execute("BEGIN IMMEDIATE")
            with pytest.raises(StorageUnavailableError) as exc_info:
                async with pool.write_transaction():
                    pass
            await blocker.rollback()

        assert exc_info.value.details["attempts"] == 2
        assert "locked" in exc_info.value.details["error"]
        await pool.close()

    async def test_lock_released_before_retries_run_out(self, temp_db_path: Path):
        pool = ConnectionPool(
            temp_db_path, pool_size=1, busy_timeout=0, max_retries=5, retry_delay=0.05
        )
        await pool.initialize()

        blocker = await aiosqlite.connect(temp_db_path)
        await blocker.execute("BEGIN IMMEDIATE")

        async def release():
            await asyncio.sleep(0.06)
            await blocker.rollback()

        releaser = asyncio.create_task(release())
        async with pool.write_transaction() as conn:
            assert conn.in_transaction
        await releaser
        await blocker.close()
        await pool.close()


class TestGlobalPool:
    async def test_set_pool_is_used(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        set_pool(pool)
        try:
            assert await get_pool() is pool
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT 1")
                assert (await cursor.fetchone())[0] == 1
        finally:
            await close_pool()

    async def test_get_pool_uses_settings(self):
        pool = await get_pool()
        try:
            assert pool.db_path.name == "stockyard.db"
            assert pool._initialized
        finally:
            await close_pool()

    async def test_write_transaction_helper(self, temp_db_path: Path):
        set_pool(ConnectionPool(temp_db_path, pool_size=1))
        try:
            async with get_write_transaction() as conn:
                await conn.execute("CREATE TABLE t (v INTEGER)")
        finally:
            await close_pool()
