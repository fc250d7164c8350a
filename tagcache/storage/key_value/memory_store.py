"""In-memory key/value store.

By default every MemoryStore in the process shares one dictionary, the
same way a process-wide user cache behaves. Pass ``shared=False`` for a
private dictionary.
"""

import logging
import threading
from typing import Any

from tagcache.storage.key_value.base import KeyValueStore

logger = logging.getLogger(__name__)

_SHARED_DATA: dict[str, Any] = {}
_SHARED_LOCK = threading.Lock()


class MemoryStore(KeyValueStore):
    """Dictionary-backed store. Values are held by reference."""

    def __init__(self, shared: bool = True):
        """Initialize MemoryStore.

        Args:
            shared: Use the process-wide dictionary. False gives this
                instance its own storage.
        """
        if shared:
            self._data = _SHARED_DATA
            self._lock = _SHARED_LOCK
        else:
            self._data = {}
            self._lock = threading.Lock()

    def store(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[str(key)] = value

    def retrieve(self, key: str) -> Any | None:
        with self._lock:
            return self._data.get(str(key))

    def exists(self, key: str) -> bool:
        with self._lock:
            return str(key) in self._data

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(str(key), None)

    def clear(self) -> int:
        """Remove every value from the store.

        Returns:
            Number of entries cleared.
        """
        with self._lock:
            count = len(self._data)
            self._data.clear()
        logger.info(f"Cleared {count} entries from memory store")
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
