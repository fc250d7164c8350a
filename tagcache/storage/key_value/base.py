"""Abstract base class for key/value backing stores.

A backing store is a dumb key/value surface: it knows nothing about tags,
namespaces or expiration. TaggedCache layers all of that on top of the
four verbs defined here.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Abstract base class for key/value store implementations.

    Implementations give no ordering, iteration or transaction guarantees.
    Failures of the underlying medium (I/O errors, lost connections) must
    propagate to the caller.
    """

    @abstractmethod
    def store(self, key: str, value: Any) -> None:
        """Store a value, overwriting any existing value at the key.

        Args:
            key: Unique identifier for the value.
            value: Value to store.
        """
        ...

    @abstractmethod
    def retrieve(self, key: str) -> Any | None:
        """Retrieve a value from the store.

        Args:
            key: Unique identifier for the value.

        Returns:
            Stored value if present, None otherwise. Never raises for a
            missing key.
        """
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if a key is present in the store.

        Args:
            key: Unique identifier for the value.

        Returns:
            True if a value is stored at the key, False otherwise.
        """
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a value from the store. Missing keys are a no-op.

        Args:
            key: Unique identifier for the value.
        """
        ...
