"""
Async SQLite connection pool with aiosqlite.

Provides connection management with proper async context handling.
A transaction opened through ``get_transaction`` is bound to the current
task; store calls made inside it reuse the same connection.
"""

import asyncio
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path

import aiosqlite

from labtrack.config import get_logger, get_settings
from labtrack.core.exceptions import StoreTimeoutError, TransientStoreError

logger = get_logger(__name__)

# Connection of the transaction running in the current task, if any
_current_transaction: ContextVar[aiosqlite.Connection | None] = ContextVar(
    "labtrack_sqlite_transaction", default=None
)


def is_locked_error(error: BaseException) -> bool:
    """True for SQLite busy/locked errors, which are worth retrying."""
    if not isinstance(error, sqlite3.OperationalError):
        return False
    message = str(error).lower()
    return "locked" in message or "busy" in message


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        acquire_timeout: float = 5.0,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.acquire_timeout = acquire_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the connection pool."""
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
        """Create a new database connection with optimized settings."""
        conn = await aiosqlite.connect(self.db_path)

        # Enable WAL mode for better concurrency
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row

        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Raises StoreTimeoutError if no connection frees up within
        ``acquire_timeout`` and TransientStoreError when SQLite reports
        the database as locked.
        """
        if not self._initialized:
            await self.initialize()

        try:
            conn = await asyncio.wait_for(self._pool.get(), timeout=self.acquire_timeout)
        except TimeoutError as e:
            logger.warning("connection_acquire_timeout", timeout=self.acquire_timeout)
            raise StoreTimeoutError("acquire_connection", self.acquire_timeout) from e

        try:
            yield conn
        except sqlite3.OperationalError as e:
            if is_locked_error(e):
                logger.warning("database_locked", error=str(e))
                raise TransientStoreError("sqlite", str(e)) from e
            raise
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection with transaction context.

        Takes the write lock up front, commits on success and rolls back
        on any exception, cancellation included.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed")


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
            acquire_timeout=settings.storage.acquire_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection for reads.

    Inside a transaction this is the transaction's own connection, so reads
    see the uncommitted writes made earlier in the same block.
    """
    current = _current_transaction.get()
    if current is not None:
        yield current
        return

    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection with transaction context.

    Joins the enclosing transaction when one is active in this task;
    otherwise opens a new one that commits when the block exits.
    """
    current = _current_transaction.get()
    if current is not None:
        yield current
        return

    pool = await get_pool()
    async with pool.transaction() as conn:
        token = _current_transaction.set(conn)
        try:
            yield conn
        finally:
            _current_transaction.reset(token)
