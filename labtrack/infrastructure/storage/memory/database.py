"""
In-memory database shared by the memory stores.

Holds one dict per table plus id sequences. Transactions snapshot the whole
state and restore it if the block raises. Contents vanish with the process.
"""

import asyncio
import copy
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

from labtrack.config import get_logger
from labtrack.core.exceptions import StoreTimeoutError
from labtrack.core.interfaces.transaction import IUnitOfWork

logger = get_logger(__name__)


class MemoryDatabase:
    """Tables of entities keyed by id."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[Any, Any]] = defaultdict(dict)
        self.sequences: dict[str, int] = defaultdict(int)

    def table(self, name: str) -> dict[Any, Any]:
        return self.tables[name]

    def next_id(self, table: str) -> int:
        self.sequences[table] += 1
        return self.sequences[table]

    def snapshot(self) -> tuple[dict[str, dict[Any, Any]], dict[str, int]]:
        return copy.deepcopy(dict(self.tables)), dict(self.sequences)

    def restore(self, snapshot: tuple[dict[str, dict[Any, Any]], dict[str, int]]) -> None:
        tables, sequences = snapshot
        self.tables = defaultdict(dict, tables)
        self.sequences = defaultdict(int, sequences)

    def clear(self) -> None:
        self.tables = defaultdict(dict)
        self.sequences = defaultdict(int)


class MemoryUnitOfWork(IUnitOfWork):
    """Serialized snapshot/restore transactions over a MemoryDatabase."""

    def __init__(self, db: MemoryDatabase, timeout: float | None = None) -> None:
        self._db = db
        self._timeout = timeout
        self._lock = asyncio.Lock()
        self._active: ContextVar[bool] = ContextVar(f"memory_uow_{id(self)}", default=False)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._active.get():
            # Join the enclosing transaction
            yield
            return

        try:
            async with asyncio.timeout(self._timeout):
                async with self._lock:
                    snapshot = self._db.snapshot()
                    token = self._active.set(True)
                    try:
                        yield
                    except BaseException:
                        self._db.restore(snapshot)
                        logger.debug("memory_transaction_rolled_back")
                        raise
                    finally:
                        self._active.reset(token)
        except TimeoutError as e:
            raise StoreTimeoutError("transaction", self._timeout or 0.0) from e
