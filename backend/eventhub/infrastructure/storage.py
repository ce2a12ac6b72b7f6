"""
Key/value storage handles for the persisted event container.

The interface mirrors browser local storage: string keys, string values,
whole-value reads and writes. Backends raise StorageUnavailableError on any
failure; callers above the store never see backend exceptions.
"""

import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional

from eventhub.core.exceptions import StorageUnavailableError


class StorageBackend(ABC):
    """
    Interface for key/value storage.

    Implementations:
    - MemoryStorage: process-local dict, optional byte quota
    - FileStorage: one file per key under a root directory
    - RedisStorage: shared Redis keyspace
    """

    def __init__(self) -> None:
        # In-process single-writer point for read-modify-write cycles
        self.lock = threading.RLock()

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key if it exists."""


class MemoryStorage(StorageBackend):
    """
    Dict-backed storage. With `quota_bytes` set, writes that would push the
    total size of keys and values past the quota are rejected, the way a
    browser rejects local storage writes with a quota error.
    """

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        super().__init__()
        self._items: dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        items = {**self._items, key: value}
        return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
            raise StorageUnavailableError(f"quota exceeded writing {key!r}")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage(StorageBackend):
    """
    One file per key under `root`. Writes go to a temp file in the same
    directory and are moved into place, so readers never see a partial value.
    Cross-process writers are not coordinated.
    """

    def __init__(self, root: Path) -> None:
        super().__init__()
        self._root = Path(root).resolve()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"cannot create storage root {self._root}: {e}") from e

    def _normalize_key(self, key: str) -> str:
        normalized = key.strip()
        path_key = PurePosixPath(normalized)
        if not normalized or len(path_key.parts) != 1 or normalized in {".", ".."} or "\\" in normalized:
            raise StorageUnavailableError(f"invalid storage key: {key!r}")
        return normalized

    def _path_for_key(self, key: str) -> Path:
        return self._root / f"{self._normalize_key(key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for_key(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageUnavailableError(f"cannot read {key!r}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for_key(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as out:
                    out.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageUnavailableError(f"cannot write {key!r}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self._path_for_key(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"cannot remove {key!r}: {e}") from e
