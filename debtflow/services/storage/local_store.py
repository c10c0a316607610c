"""
Local Key-Value Stores

DESIGN DECISION: Each slot is one JSON file inside a data directory.
This keeps the data human-readable and easy to back up, with no database
setup required.

TRADEOFFS:
- No transactions: a slot is rewritten whole on every save
- Single user, single process: there is no locking
- Writes go through a temp file + os.replace so a crash mid-write
  leaves the previous content intact
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from debtflow.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    StorageError,
    StorageWriteError,
)

SLOT_SUFFIX = ".json"


class LocalDirectoryStore(KeyValueStore):
    """Key-value store keeping one file per key in a directory."""

    def __init__(self, root: Union[str, Path]):
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def _slot_path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}{SLOT_SUFFIX}"

    def ensure_writable(self) -> None:
        """Create the data directory, failing early if that is impossible."""
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Cannot create data directory {self._root}: {e}")
        if not os.access(self._root, os.W_OK):
            raise StorageWriteError(f"Data directory is not writable: {self._root}")

    def get_item(self, key: str) -> Optional[str]:
        path = self._slot_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptDataError(f"{path} is not valid UTF-8 text: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def set_item(self, key: str, value: str) -> None:
        path = self._slot_path(key)
        self.ensure_writable()

        fd, tmp_name = tempfile.mkstemp(
            dir=self._root, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(value)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageWriteError(f"Failed to write {path}: {e}")

    def remove_item(self, key: str) -> None:
        path = self._slot_path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {path}: {e}")

    def clear(self) -> None:
        if not self._root.exists():
            return
        for path in self._root.glob(f"*{SLOT_SUFFIX}"):
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StorageWriteError(f"Failed to remove {path}: {e}")


class InMemoryStore(KeyValueStore):
    """Dict-backed store for tests and storage-less runs."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()
