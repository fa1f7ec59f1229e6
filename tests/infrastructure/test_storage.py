"""Tests for the filesystem and in-memory storage clients."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from zonectl.infrastructure.storage import (
    FilesystemStorageClient,
    MemoryStorageClient,
    StoredObject,
    WritableStorageClient,
)


class TestStoredObject:
    def test_text_from_bytes(self) -> None:
        assert StoredObject(data=b"{}").text() == "{}"

    def test_text_from_str(self) -> None:
        assert StoredObject(data="{}").text() == "{}"


class TestFilesystemStorageClient:
    def test_missing_key_returns_none(self, tmp_path: Path) -> None:
        client = FilesystemStorageClient(tmp_path)
        assert asyncio.run(client.get_object_or_null("commit-targets/full-abc.json")) is None

    def test_put_then_get(self, tmp_path: Path) -> None:
        client = FilesystemStorageClient(tmp_path)
        path = client.put_object("commit-targets/full-abc.json", '{"x": 1}')
        assert path == (tmp_path / "commit-targets" / "full-abc.json").resolve()
        stored = asyncio.run(client.get_object_or_null("commit-targets/full-abc.json"))
        assert stored is not None
        assert stored.text() == '{"x": 1}'

    def test_put_bytes(self, tmp_path: Path) -> None:
        client = FilesystemStorageClient(tmp_path)
        client.put_object("k.json", b"[]")
        assert (tmp_path / "k.json").read_bytes() == b"[]"

    def test_directory_key_returns_none(self, tmp_path: Path) -> None:
        (tmp_path / "commit-targets").mkdir()
        client = FilesystemStorageClient(tmp_path)
        assert asyncio.run(client.get_object_or_null("commit-targets")) is None

    def test_key_escaping_root_rejected(self, tmp_path: Path) -> None:
        client = FilesystemStorageClient(tmp_path / "cache")
        with pytest.raises(ValueError, match="escapes"):
            client.path_for("../secrets.json")

    def test_root_property(self, tmp_path: Path) -> None:
        assert FilesystemStorageClient(tmp_path).root == tmp_path

    def test_is_writable(self, tmp_path: Path) -> None:
        assert isinstance(FilesystemStorageClient(tmp_path), WritableStorageClient)


class TestMemoryStorageClient:
    def test_records_requested_keys(self) -> None:
        client = MemoryStorageClient({"a": "1"})
        asyncio.run(client.get_object_or_null("a"))
        asyncio.run(client.get_object_or_null("b"))
        assert client.requested_keys == ["a", "b"]

    def test_none_value_is_missing(self) -> None:
        client = MemoryStorageClient({"a": None})
        assert asyncio.run(client.get_object_or_null("a")) is None

    def test_put_object(self) -> None:
        client = MemoryStorageClient()
        client.put_object("a", "payload")
        stored = asyncio.run(client.get_object_or_null("a"))
        assert stored is not None
        assert stored.text() == "payload"
