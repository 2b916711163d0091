"""Unit-of-work interface spanning every store of one backend."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class IUnitOfWork(ABC):
    """
    Groups store writes into one atomic transaction.

    Usage:
        async with uow.transaction():
            await part_store.update_part(part)
            await log_store.append(log)

    Nested ``transaction()`` calls in the same task join the outer one.
    Any exception rolls back every write made inside the block.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        pass
