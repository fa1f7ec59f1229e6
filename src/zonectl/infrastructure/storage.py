"""Snapshot storage clients.

A storage client maps a key (``commit-targets/full-<sha>.json``) to the
raw bytes of a cached snapshot, or None when nothing is stored there.
Object stores (S3, GCS) implement the same protocol; the filesystem
client serves a local cache directory or a synced bucket mount.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


class StorageKeyError(ValueError):
    """A storage key that does not resolve inside the store."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Storage key escapes storage root: {key}")


@dataclass(frozen=True)
class StoredObject:
    """Raw payload of a stored snapshot."""

    data: bytes | str

    def text(self) -> str:
        if isinstance(self.data, bytes):
            return self.data.decode("utf-8")
        return self.data


class StorageClient(Protocol):
    """Minimal read interface for a snapshot store."""

    async def get_object_or_null(self, key: str) -> StoredObject | None: ...


@runtime_checkable
class WritableStorageClient(StorageClient, Protocol):
    """Storage client that can also persist snapshots."""

    def put_object(self, key: str, data: bytes | str) -> object: ...


class FilesystemStorageClient:
    """Storage client reading keys as paths under a root directory."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        """Resolve *key* under the root.

        Raises:
            StorageKeyError: If *key* resolves outside the root.
        """
        root = self._root.resolve()
        path = (root / key).resolve()
        if not path.is_relative_to(root):
            raise StorageKeyError(key)
        return path

    async def get_object_or_null(self, key: str) -> StoredObject | None:
        path = self.path_for(key)
        if not path.is_file():
            return None
        data = await asyncio.to_thread(path.read_bytes)
        return StoredObject(data=data)

    def put_object(self, key: str, data: bytes | str) -> Path:
        """Write *data* under *key*, creating parent directories."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_bytes(data)
        return path


class MemoryStorageClient:
    """Dict-backed storage client. A None value behaves like a missing key."""

    def __init__(self, objects: dict[str, bytes | str | None] | None = None) -> None:
        self._objects: dict[str, bytes | str | None] = dict(objects or {})
        self.requested_keys: list[str] = []

    async def get_object_or_null(self, key: str) -> StoredObject | None:
        self.requested_keys.append(key)
        data = self._objects.get(key)
        if data is None:
            return None
        return StoredObject(data=data)

    def put_object(self, key: str, data: bytes | str) -> None:
        self._objects[key] = data
