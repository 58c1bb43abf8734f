"""
Pooled aiosqlite connections to the stock ledger database.

Every connection runs in WAL mode with foreign keys on and rows returned as
``aiosqlite.Row``. Ledger writes go through write_transaction(), which takes the database
write lock up front (BEGIN IMMEDIATE) so read-modify-write sequences
cannot interleave.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from stockyard.config import get_logger, get_settings
from stockyard.core.exceptions import StorageUnavailableError

logger = get_logger(__name__)


def _is_locked(exc: BaseException) -> bool:
    """SQLITE_BUSY surfaces as OperationalError('database is locked')."""
    return isinstance(exc, aiosqlite.OperationalError) and "locked" in str(exc).lower()


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "sqlite_write_lock_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


class ConnectionPool:
    """Fixed set of ledger connections handed out through an asyncio queue."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        max_retries: int = 3,
        retry_delay: float = 0.05,
        retry_multiplier: float = 2.0,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.retry_multiplier = retry_multiplier

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open ``pool_size`` connections; later calls are no-ops."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Open one connection with the ledger pragmas applied."""
        conn = await aiosqlite.connect(self.db_path)

        # WAL lets readers proceed while a ledger write holds the lock
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row

        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection for reads; it goes back to the queue on exit."""
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Deferred transaction for writes that need no read-validate step.

        Catalog edits and single inserts use this; quantity and unit changes
        go through ``write_transaction``.
        """
        async with self.acquire() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def _begin_immediate(self, conn: aiosqlite.Connection) -> None:
        """Take the write lock, retrying with backoff while another writer holds it."""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(
                    multiplier=self.retry_delay,
                    min=self.retry_delay,
                    max=self.retry_delay * (self.retry_multiplier**3),
                ),
                retry=retry_if_exception(_is_locked),
                before_sleep=_log_retry,
            ):
                with attempt:
                    await conn.execute("BEGIN IMMEDIATE")
        except RetryError as e:
            last = e.last_attempt.exception()
            raise StorageUnavailableError(
                "begin_immediate", self.max_retries, str(last)
            ) from last

    @asynccontextmanager
    async def write_transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection holding the database write lock.

        Commits on success, rolls back on any exception, including the
        business rule errors raised by ledger validation.
        """
        async with self.acquire() as conn:
            await self._begin_immediate(conn)
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def close(self) -> None:
        """Close every connection and reset the pool so it can be reopened."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed")


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool built from storage settings on first use."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
            max_retries=settings.storage.max_retries,
            retry_delay=settings.storage.retry_delay,
            retry_multiplier=settings.storage.retry_multiplier,
        )
        await _pool.initialize()
    return _pool


def set_pool(pool: ConnectionPool | None) -> None:
    """Install a pool as the global one (used by tests and the CLI)."""
    global _pool
    _pool = pool


async def close_pool() -> None:
    """Close and forget the process-wide pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Read connection from the process-wide pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Deferred transaction on the process-wide pool."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn


@asynccontextmanager
async def get_write_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Get a connection holding the write lock for a read-modify-write."""
    pool = await get_pool()
    async with pool.write_transaction() as conn:
        yield conn
