"""Pytest configuration and fixtures."""

import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from tagcache.storage.key_value.file_store import FileStore
from tagcache.storage.key_value.memory_store import MemoryStore
from tagcache.tagged_cache import TaggedCache


class FrozenClock:
    """Controllable clock for expiry tests."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def memory_store() -> MemoryStore:
    """Create a private MemoryStore."""
    return MemoryStore(shared=False)


@pytest.fixture
def shared_memory_store():
    """Process-wide MemoryStore, emptied before and after each test."""
    store = MemoryStore()
    store.clear()
    yield store
    store.clear()


@pytest.fixture
def file_store(temp_dir: Path) -> FileStore:
    """Create a FileStore in a temporary directory."""
    return FileStore(cache_dir=temp_dir)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def cache(memory_store: MemoryStore, clock: FrozenClock) -> TaggedCache:
    """Create a TaggedCache over a private MemoryStore with a frozen clock."""
    return TaggedCache(memory_store, namespace="test", clock=clock)
