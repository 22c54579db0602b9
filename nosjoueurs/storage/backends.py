"""Key/value backends holding raw JSON strings.

They play the part of the browser's local storage: string keys, string
values, and no knowledge of what the values mean.
"""

from __future__ import annotations

import os
import tempfile
from typing import Protocol
from urllib.parse import quote

from nosjoueurs.errors import StorageError


class StorageBackend(Protocol):
    """Minimal string key/value interface."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryBackend:
    """Backend kept in a dict, for tests and short-lived processes."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize the backend."""
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileBackend:
    """Backend storing one file per key in a directory."""

    def __init__(self, directory: str) -> None:
        """Initialize the backend, creating ``directory`` if needed."""
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        # Keys contain ':' which is not portable in file names
        return os.path.join(self.directory, quote(key, safe="") + ".json")

    def get_item(self, key: str) -> str | None:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """Write atomically so a failed write never truncates existing data."""
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, self._path(key))
        except OSError as e:
            raise StorageError() from e

    def remove_item(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
