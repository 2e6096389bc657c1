"""
Per-zone locking

Ledger read-modify-write sequences for one zone id are a critical section;
different zone ids proceed in parallel.
"""

import threading
from contextlib import contextmanager


class KeyedLocks:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def _lock_for(self, key):
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, key):
        lock = self._lock_for(key)
        with lock:
            yield
