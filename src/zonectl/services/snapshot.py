"""SnapshotService — validate, convert, and show cached snapshots."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from zonectl.domain.adapters import snapshot_from_turbo_dry_run
from zonectl.domain.targets import Snapshot, dump_snapshot, parse_snapshot_json
from zonectl.domain.types import SnapshotKind
from zonectl.infrastructure.snapshots import error_details
from zonectl.services.base import HANDLED_ERRORS, BaseService
from zonectl.services.result import ServiceResult
from zonectl.services.telemetry import traced


def _summary(snapshot: Snapshot) -> dict[str, Any]:
    return {
        "mode": snapshot.mode,
        "version": snapshot.version,
        "head_sha": snapshot.head_sha,
        "base_sha": getattr(snapshot, "base_sha", None),
        "target_ids": list(snapshot.target_ids),
        "targets": len(snapshot.graph),
    }


def _read_input(op: str, path: Path) -> str | ServiceResult:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ServiceResult.failure(
            op, "INVALID_INPUT", f"Cannot read {path}: {exc}", path=str(path)
        )


class SnapshotService(BaseService):
    """Snapshot file utilities backed by the project's snapshot store."""

    @traced
    def validate(self, path: Path) -> ServiceResult:
        """Check that *path* holds a valid version-2 snapshot."""
        op = "snapshot_validate"
        raw = _read_input(op, path)
        if isinstance(raw, ServiceResult):
            return raw

        try:
            snapshot = parse_snapshot_json(raw)
        except (json.JSONDecodeError, ValidationError) as exc:
            return ServiceResult.failure(
                op,
                "INVALID_SNAPSHOT",
                f"Invalid snapshot file {path}",
                path=str(path),
                errors=error_details(exc),
            )

        return ServiceResult(ok=True, op=op, data={"path": str(path), **_summary(snapshot)})

    @traced
    def convert(
        self,
        dry_run_path: Path,
        *,
        head_sha: str,
        base_sha: str | None = None,
        output: Path | None = None,
    ) -> ServiceResult:
        """Build a snapshot from a ``turbo run --dry=json`` document.

        Writes the snapshot to *output* when given, otherwise into the
        snapshot store under the head commit's key (``full`` without
        *base_sha*, ``partial`` with it).
        """
        op = "snapshot_convert"
        raw = _read_input(op, dry_run_path)
        if isinstance(raw, ServiceResult):
            return raw

        try:
            snapshot = snapshot_from_turbo_dry_run(
                json.loads(raw), head_sha=head_sha, base_sha=base_sha
            )
        except (json.JSONDecodeError, ValidationError) as exc:
            return ServiceResult.failure(
                op,
                "INVALID_INPUT",
                f"Not a Turbo dry-run document: {dry_run_path}",
                path=str(dry_run_path),
                reason=str(exc),
            )

        data = _summary(snapshot)
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(
                json.dumps(dump_snapshot(snapshot), indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
            data["path"] = str(output)
        else:
            try:
                data["key"] = self._store.save(snapshot)
            except TypeError as exc:
                return ServiceResult.failure(op, "READ_ONLY_STORE", str(exc))
            except HANDLED_ERRORS as exc:
                return self._error_result(op, exc)

        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def show(self, commit_sha: str, *, kind: SnapshotKind = SnapshotKind.FULL) -> ServiceResult:
        """Fetch the snapshot stored for *commit_sha* and return it whole."""
        op = "snapshot_show"
        try:
            snapshot = self._store.fetch(commit_sha, kind)
        except HANDLED_ERRORS as exc:
            return self._error_result(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "key": self._store.key_for(commit_sha, kind),
                **_summary(snapshot),
                "snapshot": dump_snapshot(snapshot),
            },
        )
