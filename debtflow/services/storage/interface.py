"""
Abstract Storage Interface

DESIGN DECISION: The debt collection lives in a single named slot of a
simple key-value store (the same model as a browser's local storage).
Defining the store as an interface allows us to:
1. Keep the data on disk for normal use
2. Use in-memory storage for testing
3. Keep the persistence gateway independent of the medium

The interface is intentionally tiny - get, set, remove, clear.
Everything else (ids, records, mutations) is the repository's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a string key-value store.

    Each call is expected to be atomic on its own: a reader never sees a
    half-written value.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Returns:
            The stored text, or None if the slot is unset
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Replace a slot's content entirely.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a slot. Removing an unset slot is a no-op."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every slot."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """The stored slot could not be parsed as a debt collection."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
