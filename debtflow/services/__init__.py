"""Services package."""

from debtflow.services.calendar import (
    build_calendar_event_url,
    build_installment_reminder_url,
)
from debtflow.services.storage import (
    STORAGE_KEY,
    CorruptDataError,
    DebtRepository,
    InMemoryStore,
    KeyValueStore,
    LocalDirectoryStore,
    StorageError,
    StorageWriteError,
)

__all__ = [
    # Calendar
    "build_calendar_event_url",
    "build_installment_reminder_url",
    # Storage
    "STORAGE_KEY",
    "CorruptDataError",
    "DebtRepository",
    "InMemoryStore",
    "KeyValueStore",
    "LocalDirectoryStore",
    "StorageError",
    "StorageWriteError",
]
