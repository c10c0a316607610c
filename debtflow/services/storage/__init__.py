"""
Storage Services Package

Provides the key-value store interface, its local implementations and
the debt persistence gateway built on top of them.
"""

from debtflow.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    StorageError,
    StorageWriteError,
)
from debtflow.services.storage.local_store import (
    InMemoryStore,
    LocalDirectoryStore,
)
from debtflow.services.storage.debt_repository import (
    STORAGE_KEY,
    DebtRepository,
    deserialize_debts,
    serialize_debts,
)

__all__ = [
    # Interfaces
    "KeyValueStore",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageWriteError",
    # Stores
    "InMemoryStore",
    "LocalDirectoryStore",
    # Gateway
    "STORAGE_KEY",
    "DebtRepository",
    "deserialize_debts",
    "serialize_debts",
]
