"""In-process store, for tests and single-process embedding."""

from __future__ import annotations

import logging
import threading

from scopeid.stores.base import DEFAULT_INITIAL_VALUE, ReadTracker

logger = logging.getLogger(__name__)


class MemoryDataStore:
    """Thread-safe dict-backed implementation of the store contract.

    Unknown scopes start at *initial_value*. Raw values can be planted with
    :meth:`put` to simulate other writers or corrupt records.
    """

    def __init__(self, initial_value: int = DEFAULT_INITIAL_VALUE) -> None:
        self._initial_value = str(initial_value)
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()
        self._reads = ReadTracker()

    def get_data(self, scope_name: str) -> str:
        with self._lock:
            if scope_name not in self._data:
                logger.debug("Initializing scope %s at %s", scope_name, self._initial_value)
                self._data[scope_name] = self._initial_value
            data = self._data[scope_name]
        self._reads.remember(scope_name, data)
        return data

    def try_optimistic_write(self, scope_name: str, data: str) -> bool:
        expected = self._reads.last_read(scope_name)
        with self._lock:
            if expected is None or self._data.get(scope_name) != expected:
                return False
            self._data[scope_name] = data
        self._reads.remember(scope_name, data)
        return True

    def put(self, scope_name: str, data: str) -> None:
        """Overwrite *scope_name* unconditionally."""
        with self._lock:
            self._data[scope_name] = data

    def peek(self, scope_name: str) -> str | None:
        """Return the stored value without counting as a read."""
        with self._lock:
            return self._data.get(scope_name)
