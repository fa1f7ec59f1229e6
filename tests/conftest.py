"""Shared pytest fixtures and test helpers for zonectl tests."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner

from zonectl.domain.targets import (
    SNAPSHOT_VERSION,
    FilteredSnapshot,
    FullDagSnapshot,
    Snapshot,
    Target,
    TargetInfo,
    dump_snapshot,
)
from zonectl.domain.types import SnapshotKind
from zonectl.infrastructure.snapshots import get_storage_key
from zonectl.infrastructure.storage import MemoryStorageClient
from zonectl.infrastructure.store import SnapshotStore

BASE_SHA = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"
PR1_SHA = "1111111aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
PR2_SHA = "2222222bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
PR3_SHA = "3333333ccccccccccccccccccccccccccccccccc"


# ---------------------------------------------------------------------------
# Snapshot builders
# ---------------------------------------------------------------------------


def target(
    target_id: str,
    name: str | None = None,
    *,
    dependencies: Sequence[str] = (),
    dependents: Sequence[str] = (),
) -> Target:
    """Build a snapshot node."""
    return Target(
        target=TargetInfo(target_id=target_id, target_name=name),
        dependencies=list(dependencies),
        dependents=list(dependents),
    )


def full_snapshot(
    graph: Sequence[Target],
    *,
    head_sha: str = BASE_SHA,
    target_ids: Sequence[str] = (),
) -> FullDagSnapshot:
    return FullDagSnapshot(
        version=SNAPSHOT_VERSION,
        head_sha=head_sha,
        target_ids=list(target_ids),
        graph=list(graph),
    )


def filtered_snapshot(
    graph: Sequence[Target],
    *,
    head_sha: str,
    base_sha: str = BASE_SHA,
    target_ids: Sequence[str] = (),
) -> FilteredSnapshot:
    return FilteredSnapshot(
        version=SNAPSHOT_VERSION,
        base_sha=base_sha,
        head_sha=head_sha,
        target_ids=list(target_ids),
        graph=list(graph),
    )


def chain_baseline() -> FullDagSnapshot:
    """utils <- frontend <- backend, plus an unrelated docs package.

    frontend depends on utils and backend depends on frontend, so a change
    to utils affects all three.
    """
    return full_snapshot(
        [
            target("utils#build", "utils", dependents=["frontend#build"]),
            target("frontend#build", "frontend", dependencies=["utils#build"]),
            target("backend#build", "backend", dependencies=["frontend#build"]),
            target("docs#build", "docs"),
        ],
        target_ids=["backend", "docs", "frontend", "utils"],
    )


def snapshot_key(snapshot: Snapshot) -> str:
    kind = SnapshotKind.FULL if snapshot.mode == "full-dag" else SnapshotKind.PARTIAL
    return get_storage_key(snapshot.head_sha, kind)


def snapshot_json(snapshot: Snapshot) -> str:
    return json.dumps(dump_snapshot(snapshot))


def store_with(*snapshots: Snapshot, batch_size: int = 50) -> SnapshotStore:
    """SnapshotStore over an in-memory client holding *snapshots*."""
    client = MemoryStorageClient({snapshot_key(s): snapshot_json(s) for s in snapshots})
    return SnapshotStore(client, batch_size=batch_size)


def write_snapshot(storage_root: Path, snapshot: Snapshot) -> Path:
    """Write *snapshot* under its default key below *storage_root*."""
    path = storage_root / snapshot_key(snapshot)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot_json(snapshot), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary project with an empty zonectl.toml, used as CWD.

    Snapshots live under the default ``.zonectl/cache`` directory.
    """
    for var in ("ZONECTL_CONFIG", "ZONECTL_STORAGE_ROOT", "ZONECTL_JSON_OUTPUT"):
        monkeypatch.delenv(var, raising=False)
    (tmp_path / "zonectl.toml").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def storage_root(project_root: Path) -> Path:
    root = project_root / ".zonectl" / "cache"
    root.mkdir(parents=True)
    return root
