"""Tag-indexed, expiring cache over plain key/value stores."""

from tagcache.models.model_cache import CacheEntry
from tagcache.storage.key_value.base import KeyValueStore
from tagcache.storage.key_value.file_store import FileStore
from tagcache.storage.key_value.memory_store import MemoryStore
from tagcache.tagged_cache import TaggedCache, is_expired

__all__ = [
    "CacheEntry",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "TaggedCache",
    "is_expired",
]
