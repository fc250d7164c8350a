"""Storage backends for the tagged cache.

This module provides:
- KeyValueStore: Abstract base class for backing stores
- MemoryStore: Process-wide in-memory store
- FileStore: File-based store, one JSON file per key
"""

from tagcache.storage.key_value.base import KeyValueStore
from tagcache.storage.key_value.file_store import FileStore
from tagcache.storage.key_value.memory_store import MemoryStore

__all__ = [
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
]
