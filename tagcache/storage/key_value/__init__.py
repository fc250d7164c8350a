"""Key/value backing stores."""

from tagcache.storage.key_value.base import KeyValueStore
from tagcache.storage.key_value.file_store import FileStore
from tagcache.storage.key_value.memory_store import MemoryStore

__all__ = [
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
]
