"""Tag-indexed, expiring cache layered over a plain key/value store.

Layout inside the backing store:

    {prefix}key:{key}  -> CacheEntry {value, expires_at, tags}
    {prefix}tag:{tag}  -> [key1, key2, ...]

where prefix is "{BASE_NAMESPACE}:{namespace}:". Every stored key is also
listed under the reserved ALL_KEYS_TAG, which is what remove_all() walks.

The backing store has no transactions, so the tag lists are maintained by
hand with read-modify-write cycles. Within one process each tag list is
updated under the lock its name hashes to, taken from a fixed pool; races
between processes sharing a store are not prevented. A lost update can leave a dangling key in a tag list (a
later remove through that tag is a no-op) or miss a key (remove_by_tag
will not reach it).
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import ValidationError

from tagcache.consts import (
    ALL_KEYS_TAG,
    BASE_NAMESPACE,
    KEY_SEGMENT,
    MAX_EXPIRES,
    TAG_SEGMENT,
)
from tagcache.models.model_cache import CacheEntry
from tagcache.storage.key_value.base import KeyValueStore

logger = logging.getLogger(__name__)

# Fixed pool of locks; a tag list's read-modify-write holds the stripe its name hashes to
TAG_LOCK_STRIPES = 64
_TAG_LOCKS = tuple(threading.Lock() for _ in range(TAG_LOCK_STRIPES))


def _tag_lock(namespaced_tag: str) -> threading.Lock:
    return _TAG_LOCKS[hash(namespaced_tag) % TAG_LOCK_STRIPES]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def is_expired(entry: CacheEntry | None, now: datetime) -> bool:
    """Check if a cache entry is expired at ``now``.

    A missing entry counts as expired, an entry without ``expires_at``
    never expires, and an entry expires exactly at its timestamp.
    """
    if entry is None:
        return True
    if entry.expires_at is None:
        return False
    return entry.expires_at <= now


class TaggedCache:
    """Namespaced cache with per-entry expiry and tag-based invalidation."""

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str | None = None,
        default_ttl: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize TaggedCache. Performs no I/O.

        Args:
            store: Backing key/value store.
            namespace: Partition name. Instances with different namespaces
                never see each other's entries, even over the same store.
            default_ttl: TTL in seconds for entries stored without one.
                None or 0 falls back to MAX_EXPIRES.
            clock: Callable returning the current datetime. Naive results
                are taken as UTC.
        """
        self._store = store
        self._prefix = f"{BASE_NAMESPACE}:{'' if namespace is None else namespace}:"
        self.default_ttl = int(default_ttl or 0)
        self._clock = clock or _utc_now

    @property
    def namespace_prefix(self) -> str:
        return self._prefix

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=UTC)
        return now.astimezone(UTC)

    def _namespace_key(self, key: str) -> str:
        return f"{self._prefix}{KEY_SEGMENT}:{key}"

    def _namespace_tag(self, tag: str) -> str:
        return f"{self._prefix}{TAG_SEGMENT}:{tag}"

    # === ENTRY OPERATIONS ===

    def store(
        self,
        key: str,
        value: Any,
        tags: Iterable[str] | None = None,
        ttl: int | None = None,
    ) -> None:
        """Store a value, replacing any existing entry at the key.

        The previous entry is removed once the new one has been built, so
        its tags are dropped rather than merged with the new ones. Values
        are handed to the backing store unchanged; a FileStore needs them
        to be JSON-serializable.

        Args:
            key: Cache key.
            value: Value to cache.
            tags: Tags to associate with the key.
            ttl: Time-to-live in seconds. None or 0 uses the default TTL,
                then MAX_EXPIRES. A negative TTL stores an already expired
                entry.
        """
        key = str(key)
        if isinstance(tags, str):
            tags = [tags]

        expires_in = int(ttl or 0)
        if expires_in == 0:
            expires_in = self.default_ttl
        if expires_in == 0:
            expires_in = MAX_EXPIRES

        entry = CacheEntry(
            value=value,
            expires_at=self._now() + timedelta(seconds=expires_in),
            tags=[str(tag) for tag in tags or ()],
        )
        body = {"value": entry.value, **entry.model_dump(exclude={"value"})}

        self.remove(key)
        self._store.store(self._namespace_key(key), body)

        for tag in entry.tags:
            self._add_key_to_tag(key, tag)
        self._add_key_to_tag(key, ALL_KEYS_TAG)

        logger.debug(f"Stored key={key} tags={entry.tags} (ttl={expires_in}s)")

    def retrieve(self, key: str) -> Any | None:
        """Get a value if present and not expired.

        An expired entry is removed as a side effect.

        Args:
            key: Cache key.

        Returns:
            Cached value, or None if absent or expired. A stored None is
            returned as None too; use exists() to tell it apart from a miss.
        """
        entry = self._live_entry(str(key))
        if entry is None:
            return None
        return entry.value

    def exists(self, key: str) -> bool:
        """Check if a key is present and not expired.

        Agrees with retrieve(): an expired entry is removed and reported
        absent.
        """
        return self._live_entry(str(key)) is not None

    def remove(self, key: str) -> None:
        """Remove a key and its tag index memberships. No-op if absent."""
        key = str(key)
        entry = self._load_entry(key)

        if entry is not None:
            for tag in entry.tags:
                self._remove_key_from_tag(key, tag)
        self._remove_key_from_tag(key, ALL_KEYS_TAG)

        self._store.remove(self._namespace_key(key))
        logger.debug(f"Removed key={key}")

    # === TAG OPERATIONS ===

    def remove_by_tag(self, tag: str) -> int:
        """Remove every key tagged with ``tag``.

        Each key is removed through remove(), so it also leaves its other
        tags' lists.

        Returns:
            Number of keys the tag index pointed at.
        """
        tag = str(tag)
        keys = self._read_tag(tag)
        if not keys:
            return 0

        for key in keys:
            self.remove(key)

        self._store.remove(self._namespace_tag(tag))
        logger.info(f"Removed {len(keys)} keys tagged {tag!r} from {self._prefix}")
        return len(keys)

    def remove_all(self) -> int:
        """Remove every key stored through this namespace.

        Other namespaces sharing the backing store are untouched.

        Returns:
            Number of keys removed.
        """
        return self.remove_by_tag(ALL_KEYS_TAG)

    def keys_for_tag(self, tag: str) -> list[str]:
        """List the keys currently indexed under ``tag``.

        No expiration check is made; expired keys stay listed until a read
        or removal purges them.
        """
        return self._read_tag(str(tag))

    # === INTERNALS ===

    def _load_entry(self, key: str) -> CacheEntry | None:
        raw = self._store.retrieve(self._namespace_key(key))
        if raw is None:
            return None
        try:
            return CacheEntry.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Unreadable cache entry for key={key}: {e}")
            return None

    def _live_entry(self, key: str) -> CacheEntry | None:
        """Load an entry, purging it if expired."""
        entry = self._load_entry(key)
        if entry is None:
            return None
        if is_expired(entry, self._now()):
            logger.debug(f"Cache expired for key={key}")
            self.remove(key)
            return None
        return entry

    def _read_tag(self, tag: str) -> list[str]:
        raw = self._store.retrieve(self._namespace_tag(tag))
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"Ignoring malformed tag index for tag={tag}")
            return []
        return [str(key) for key in raw]

    def _add_key_to_tag(self, key: str, tag: str) -> None:
        namespaced_tag = self._namespace_tag(tag)
        with _tag_lock(namespaced_tag):
            keys = self._read_tag(tag)
            if key not in keys:
                keys.append(key)
            self._store.store(namespaced_tag, keys)

    def _remove_key_from_tag(self, key: str, tag: str) -> None:
        namespaced_tag = self._namespace_tag(tag)
        with _tag_lock(namespaced_tag):
            keys = self._read_tag(tag)
            if key not in keys:
                return
            keys = [k for k in keys if k != key]
            if keys:
                self._store.store(namespaced_tag, keys)
            else:
                self._store.remove(namespaced_tag)


def main() -> None:
    """Example usage of TaggedCache."""
    logging.basicConfig(level=logging.DEBUG)

    from tagcache.storage.key_value.memory_store import MemoryStore

    cache = TaggedCache(MemoryStore(shared=False), namespace="example")

    print("=== TaggedCache Example ===\n")

    print("1. Storing tagged values...")
    cache.store("user:1", {"name": "Alice"}, tags=["users", "team:a"])
    cache.store("user:2", {"name": "Bob"}, tags=["users", "team:b"])
    cache.store("config", {"debug": True})

    print("\n2. Retrieving values...")
    print(f"   user:1 = {cache.retrieve('user:1')}")
    print(f"   keys tagged 'users': {cache.keys_for_tag('users')}")

    print("\n3. Removing by tag 'team:a'...")
    cache.remove_by_tag("team:a")
    print(f"   user:1 exists: {cache.exists('user:1')}")
    print(f"   user:2 exists: {cache.exists('user:2')}")

    print("\n4. Storing an already expired value...")
    cache.store("stale", "old", ttl=-100)
    print(f"   stale = {cache.retrieve('stale')}")

    print(f"\n5. remove_all() removed {cache.remove_all()} keys")
    print(f"   config exists: {cache.exists('config')}")


if __name__ == "__main__":
    main()
