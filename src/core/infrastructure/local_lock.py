"""In-process per-parent lock for single-process deployments and tests."""

import threading
import uuid

from core.models.errors import LockTimeoutError
from core.repositories.lock_repository import ParentLock
from core.utils.constants import DEFAULT_LOCK_WAIT_SECONDS


class InProcessParentLock(ParentLock):
    """Keyed registry of ``threading.Lock`` objects."""

    def __init__(self, *, wait_seconds: float = DEFAULT_LOCK_WAIT_SECONDS) -> None:
        self._wait_seconds = wait_seconds
        self._registry_guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._owners: dict[str, str] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_guard:
            return self._locks.setdefault(key, threading.Lock())

    def acquire(self, key: str) -> str:
        if not self._lock_for(key).acquire(timeout=self._wait_seconds):
            raise LockTimeoutError(
                message="Another change to these images is in progress, retry shortly",
                details={"lock_key": key},
            )

        token = uuid.uuid4().hex
        self._owners[key] = token
        return token

    def release(self, key: str, token: str) -> None:
        if self._owners.get(key) != token:
            return

        del self._owners[key]
        self._lock_for(key).release()
