"""Abstract contract for per-parent mutual exclusion."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from aws_lambda_powertools import Logger

from core.models.errors import PersistenceError

logger = Logger(UTC=True)


class ParentLock(ABC):
    """Advisory lock serializing count/primary check-then-act sequences.

    Every operation that reads the sibling count or primary flag and then
    writes based on it must hold the lock for the parent's key.
    """

    @abstractmethod
    def acquire(self, key: str) -> str:
        """Block until the lock for ``key`` is held and return an owner token.

        Raises:
            LockTimeoutError: If the lock could not be acquired in time
        """

    @abstractmethod
    def release(self, key: str, token: str) -> None:
        """Release a lock previously acquired with ``token``."""

    @contextmanager
    def hold(self, key: str) -> Iterator[str]:
        """Hold the lock for the duration of the block.

        A failed release is logged and never replaces the block's outcome;
        an unreleased lease lapses on its own.
        """
        token = self.acquire(key)
        try:
            yield token
        finally:
            try:
                self.release(key, token)
            except PersistenceError:
                logger.warning("Lock release failed", extra={"lock_key": key}, exc_info=True)
