"""Keyed blob storage for client state.

The storefront keeps a handful of string blobs (the cart, today) under fixed
keys, the way a browser keeps them in local storage.
"""

import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyedStore(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the blob stored under ``key``, or None."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryStore(KeyedStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self.blobs[key] = value

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)


class FileStore(KeyedStore):
    """One file per key under ``directory``. Writes go through a temp file and a rename."""

    def __init__(self, directory: str | os.PathLike) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
