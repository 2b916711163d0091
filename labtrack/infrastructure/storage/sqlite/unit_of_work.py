"""SQLite unit of work."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from labtrack.config import get_logger
from labtrack.core.exceptions import StoreTimeoutError
from labtrack.core.interfaces.transaction import IUnitOfWork
from labtrack.infrastructure.storage.sqlite.connection import get_transaction

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    Runs a block of store calls on one SQLite transaction.

    The whole block is bounded by ``timeout`` seconds; on expiry the
    transaction rolls back and StoreTimeoutError is raised.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            async with asyncio.timeout(self._timeout):
                async with get_transaction():
                    yield
        except TimeoutError as e:
            logger.warning("transaction_timeout", timeout=self._timeout)
            raise StoreTimeoutError("transaction", self._timeout or 0.0) from e
