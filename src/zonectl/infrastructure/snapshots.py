"""Cached snapshot retrieval — key layout, validation, batched fetch.

Fetches for many commits run in fixed-size batches: every fetch of a
batch is issued concurrently and the batch is awaited before the next
one starts. Individual failures never short-circuit a batch; they are
collected and reported together once every fetch has completed.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from zonectl.domain.targets import Snapshot, parse_snapshot_json
from zonectl.domain.types import SnapshotKind
from zonectl.infrastructure.storage import StorageClient, StorageKeyError

DEFAULT_BATCH_SIZE = 50
DEFAULT_KEY_PREFIX = "commit-targets"

KeyGenerator = Callable[[str, SnapshotKind], str]

log = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def error_details(error: Exception) -> list[dict[str, Any]]:
    """Validation errors as JSON-safe dicts (one entry for decode errors)."""
    if isinstance(error, ValidationError):
        return [
            {"loc": ".".join(str(p) for p in e["loc"]), "msg": e["msg"]} for e in error.errors()
        ]
    return [{"loc": "", "msg": str(error)}]


class SnapshotStoreError(Exception):
    """Base class for snapshot retrieval failures."""


class CachedTargetsNotFoundError(SnapshotStoreError):
    """No snapshot is stored for the commit."""

    def __init__(self, commit_sha: str) -> None:
        self.commit_sha = commit_sha
        super().__init__(f"Cached build targets not found for commit {commit_sha}")


class InvalidCachedTargetsError(SnapshotStoreError):
    """The stored payload is not JSON or does not match the snapshot schema."""

    def __init__(self, commit_sha: str, error: Exception) -> None:
        self.commit_sha = commit_sha
        self.error = error
        super().__init__(f"Invalid cached build targets for commit {commit_sha}")

    def details(self) -> list[dict[str, Any]]:
        return error_details(self.error)


class InvalidStorageKeyError(SnapshotStoreError):
    """The commit SHA yields a key the storage client refuses."""

    def __init__(self, commit_sha: str, key: str) -> None:
        self.commit_sha = commit_sha
        self.key = key
        super().__init__(f"Invalid storage key for commit {commit_sha}: {key}")


class FailedToFetchCachedTargetsError(SnapshotStoreError):
    """One or more snapshots of a batched fetch could not be retrieved."""

    def __init__(
        self,
        failed_shas: Sequence[str],
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self.failed_shas = list(failed_shas)
        self.errors = dict(errors or {})
        short = ", ".join(sha[:7] for sha in self.failed_shas)
        super().__init__(f"Failed to fetch cached build targets for commits {short}")


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def get_storage_key(commit_sha: str, kind: SnapshotKind | str) -> str:
    """Default storage key: ``commit-targets/{kind}-{commit_sha}.json``."""
    return f"{DEFAULT_KEY_PREFIX}/{SnapshotKind(kind)}-{commit_sha}.json"


def prefixed_key_generator(prefix: str) -> KeyGenerator:
    """Key generator using the default layout under a different prefix."""
    cleaned = prefix.strip("/")

    def generate(commit_sha: str, kind: SnapshotKind) -> str:
        name = f"{SnapshotKind(kind)}-{commit_sha}.json"
        return f"{cleaned}/{name}" if cleaned else name

    return generate


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------


async def get_cached_targets_for_commit(
    commit_sha: str,
    kind: SnapshotKind | str,
    storage_client: StorageClient,
    *,
    key_generator: KeyGenerator = get_storage_key,
) -> Snapshot:
    """Fetch and validate the snapshot stored for one commit.

    Raises:
        CachedTargetsNotFoundError: Nothing is stored under the commit's key.
        InvalidCachedTargetsError: The payload is not a valid snapshot.
        InvalidStorageKeyError: The key resolves outside the store.
    """
    key = key_generator(commit_sha, SnapshotKind(kind))
    try:
        stored = await storage_client.get_object_or_null(key)
    except StorageKeyError as exc:
        raise InvalidStorageKeyError(commit_sha, key) from exc
    if stored is None:
        raise CachedTargetsNotFoundError(commit_sha)

    try:
        return parse_snapshot_json(stored.text())
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        raise InvalidCachedTargetsError(commit_sha, exc) from exc


def _chunk(items: Sequence[str], size: int) -> list[Sequence[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


async def get_cached_targets_for_commits(
    commit_shas: Sequence[str],
    kind: SnapshotKind | str,
    storage_client: StorageClient,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    key_generator: KeyGenerator = get_storage_key,
) -> dict[str, Snapshot]:
    """Fetch snapshots for many commits in concurrent batches.

    Returns a mapping of commit SHA to snapshot in input order.

    Raises:
        ValueError: If *commit_shas* is empty or *batch_size* is below 1.
        FailedToFetchCachedTargetsError: If any fetch failed, naming every
            failed commit.
    """
    if not commit_shas:
        msg = "commit_shas must not be empty"
        raise ValueError(msg)
    if batch_size < 1:
        msg = f"batch_size must be at least 1, got {batch_size}"
        raise ValueError(msg)

    results: list[Snapshot | BaseException] = []
    for batch in _chunk(commit_shas, batch_size):
        log.debug("snapshots.fetch_batch", kind=str(kind), size=len(batch))
        results.extend(
            await asyncio.gather(
                *(
                    get_cached_targets_for_commit(
                        sha, kind, storage_client, key_generator=key_generator
                    )
                    for sha in batch
                ),
                return_exceptions=True,
            )
        )

    snapshots: dict[str, Snapshot] = {}
    errors: dict[str, Exception] = {}
    for sha, result in zip(commit_shas, results, strict=True):
        if isinstance(result, Exception):
            errors[sha] = result
        elif isinstance(result, BaseException):
            raise result
        else:
            snapshots[sha] = result

    if errors:
        for sha, exc in errors.items():
            log.warning("snapshots.fetch_failed", commit=sha, kind=str(kind), error=str(exc))
        raise FailedToFetchCachedTargetsError(list(errors), errors)

    return snapshots
