"""File-based key/value store.

Stores each value as a JSON file named after a hash of its key.
Expiration is not handled here; a FileStore keeps values until they are
removed or the directory is cleared.
"""

import hashlib
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from tagcache.consts import DEFAULT_DATA_DIR
from tagcache.storage.key_value.base import KeyValueStore

logger = logging.getLogger(__name__)


class FileStore(KeyValueStore):
    """File-based store implementation.

    Each file holds metadata (original key, stored_at) alongside the value,
    so keys can be listed back without reversing the hash.

    Directory structure:
        {cache_dir}/
        ├── {hash}.json
        └── {hash}.json
    """

    def __init__(self, cache_dir: Path | str | None = None):
        """Initialize FileStore.

        Args:
            cache_dir: Directory for store files. Defaults to {DEFAULT_DATA_DIR}/cache.
        """
        if cache_dir is None:
            cache_dir = DEFAULT_DATA_DIR / "cache"
        self.cache_dir = Path(cache_dir)

    def _hash_key(self, key: str) -> str:
        """Generate a safe filename from a key using SHA-256 hash."""
        return hashlib.sha256(key.encode()).hexdigest()[:16]

    def _path(self, key: str) -> Path:
        """Get the file path for a stored key."""
        return self.cache_dir / f"{self._hash_key(str(key))}.json"

    def _read(self, path: Path) -> dict[str, Any] | None:
        """Read a store file, returning None if it is unreadable."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to read store entry {path.name}: {e}")
            return None
        if not isinstance(data, dict) or "value" not in data:
            logger.warning(f"Malformed store entry {path.name}")
            return None
        return data

    def store(self, key: str, value: Any) -> None:
        """Store a value as JSON. Objects json cannot encode are written as str().

        Args:
            key: Unique identifier for the value.
            value: Value to store.
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        entry = {
            "key": str(key),
            "stored_at": datetime.now(UTC).isoformat(),
            "value": value,
        }
        self._path(key).write_text(json.dumps(entry, indent=2, default=str), encoding="utf-8")
        logger.debug(f"Stored key={key}")

    def retrieve(self, key: str) -> Any | None:
        data = self._read(self._path(key))
        if data is None:
            return None
        return data["value"]

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def remove(self, key: str) -> None:
        path = self._path(key)
        # missing_ok: removal of an absent key is a no-op
        path.unlink(missing_ok=True)
        logger.debug(f"Removed key={key}")

    def clear(self) -> int:
        """Remove every file from the store directory.

        Returns:
            Number of entries cleared.
        """
        count = 0
        if self.cache_dir.exists():
            for path in self.cache_dir.glob("*.json"):
                path.unlink()
                count += 1
        logger.info(f"Cleared {count} entries from {self.cache_dir}")
        return count

    def keys(self) -> list[str]:
        """List the original keys of all readable entries.

        Returns:
            List of original keys (not hashed).
        """
        keys: list[str] = []
        if not self.cache_dir.exists():
            return keys

        for path in self.cache_dir.glob("*.json"):
            data = self._read(path)
            if data is not None:
                keys.append(data.get("key", path.stem))

        return keys


def main() -> None:
    """Example usage of FileStore."""
    import tempfile

    logging.basicConfig(level=logging.DEBUG)

    with tempfile.TemporaryDirectory() as tmpdir:
        store = FileStore(cache_dir=tmpdir)

        print("=== FileStore Example ===\n")

        print("1. Storing values...")
        store.store("user:123", {"name": "Alice"})
        store.store("user:456", {"name": "Bob"})

        print("\n2. Retrieving values...")
        print(f"   user:123 = {store.retrieve('user:123')}")
        print(f"   user:999 = {store.retrieve('user:999')}")

        print("\n3. Listing keys...")
        print(f"   Keys: {store.keys()}")

        print("\n4. Removing user:123...")
        store.remove("user:123")
        print(f"   user:123 exists after remove: {store.exists('user:123')}")

        print(f"\n5. Cleared {store.clear()} entries")


if __name__ == "__main__":
    main()
