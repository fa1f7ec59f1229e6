"""SnapshotStore — the single entry point services use for cached snapshots.

Bundles a storage client with the configured key layout and batch size,
and drives the async batched fetch from synchronous service code.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from typing import TYPE_CHECKING

from zonectl.domain.targets import Snapshot, dump_snapshot
from zonectl.domain.types import SnapshotKind, SnapshotMode
from zonectl.infrastructure.snapshots import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_KEY_PREFIX,
    InvalidStorageKeyError,
    KeyGenerator,
    get_cached_targets_for_commit,
    get_cached_targets_for_commits,
    get_storage_key,
    prefixed_key_generator,
)
from zonectl.infrastructure.storage import (
    FilesystemStorageClient,
    StorageClient,
    StorageKeyError,
    WritableStorageClient,
)

if TYPE_CHECKING:
    from zonectl.config.settings import ZoneSettings


class SnapshotStore:
    """Read access to cached snapshots with the project's key layout."""

    def __init__(
        self,
        client: StorageClient,
        *,
        key_generator: KeyGenerator = get_storage_key,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self.client = client
        self.key_generator = key_generator
        self.batch_size = batch_size

    @classmethod
    def from_settings(cls, settings: ZoneSettings) -> SnapshotStore:
        """Filesystem-backed store rooted at the configured storage directory."""
        prefix = settings.storage.prefix
        key_generator = (
            get_storage_key if prefix == DEFAULT_KEY_PREFIX else prefixed_key_generator(prefix)
        )
        return cls(
            FilesystemStorageClient(settings.resolved_storage_root()),
            key_generator=key_generator,
            batch_size=settings.storage.batch_size,
        )

    def key_for(self, commit_sha: str, kind: SnapshotKind) -> str:
        return self.key_generator(commit_sha, kind)

    def fetch(self, commit_sha: str, kind: SnapshotKind) -> Snapshot:
        """Fetch one snapshot (raises the snapshot-store errors)."""
        return asyncio.run(
            get_cached_targets_for_commit(
                commit_sha, kind, self.client, key_generator=self.key_generator
            )
        )

    def fetch_many(self, commit_shas: Sequence[str], kind: SnapshotKind) -> dict[str, Snapshot]:
        """Fetch many snapshots in batches (raises FailedToFetchCachedTargetsError)."""
        return asyncio.run(
            get_cached_targets_for_commits(
                commit_shas,
                kind,
                self.client,
                batch_size=self.batch_size,
                key_generator=self.key_generator,
            )
        )

    def fetch_graph_inputs(
        self,
        baseline_sha: str,
        head_shas: Sequence[str],
    ) -> tuple[Snapshot, list[Snapshot]]:
        """Fetch the baseline full snapshot and the partial snapshot of each head.

        The baseline is returned as stored; hydration rejects it if it is
        not a full-dag snapshot. Partial snapshots keep *head_shas* order.
        """
        baseline = self.fetch(baseline_sha, SnapshotKind.FULL)
        if not head_shas:
            return baseline, []
        partials = self.fetch_many(head_shas, SnapshotKind.PARTIAL)
        return baseline, [partials[sha] for sha in head_shas]

    def save(self, snapshot: Snapshot) -> str:
        """Persist *snapshot* under its head commit's key and return the key.

        Raises:
            TypeError: If the storage client is read-only.
            InvalidStorageKeyError: If the head commit yields a key outside the store.
        """
        if not isinstance(self.client, WritableStorageClient):
            msg = f"{type(self.client).__name__} does not support writes"
            raise TypeError(msg)
        kind = SnapshotKind.FULL if snapshot.mode == SnapshotMode.FULL_DAG else SnapshotKind.PARTIAL
        key = self.key_for(snapshot.head_sha, kind)
        payload = json.dumps(dump_snapshot(snapshot), indent=2, sort_keys=True)
        try:
            self.client.put_object(key, payload)
        except StorageKeyError as exc:
            raise InvalidStorageKeyError(snapshot.head_sha, key) from exc
        return key
