"""
Per-key lock registry.

Every mutation of a table runs as read-modify-write while holding that
table's lock, so two staff members acting on the same table cannot lose
each other's updates. Different tables never contend. Locks are
re-entrant so a payment can close the table it already holds.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

logger = logging.getLogger(__name__)


class KeyedLockRegistry:
    """Thread-safe registry handing out one lock per key."""

    def __init__(self, timeout_seconds: float = 5.0):
        self.timeout_seconds = timeout_seconds
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for ``key``; raises TimeoutError instead of blocking forever."""
        lock = self._lock_for(key)
        if not lock.acquire(timeout=self.timeout_seconds):
            logger.error(f"Timed out waiting for lock on {key}")
            raise TimeoutError(f"Could not acquire lock for {key}")
        try:
            yield
        finally:
            lock.release()

    def discard(self, key: str) -> None:
        """Forget the lock for a key that no longer exists (e.g. deleted table)."""
        with self._registry_lock:
            self._locks.pop(key, None)

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)
