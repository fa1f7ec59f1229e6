"""Command group: snapshot file utilities."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from zonectl.commands._base import ZoneGroup
from zonectl.domain.types import SnapshotKind
from zonectl.services.snapshot import SnapshotService

if TYPE_CHECKING:
    from zonectl.commands._context import AppContext

_SNAPSHOT_EXAMPLES = """\
  zonectl snapshot validate build/targets.json
  zonectl snapshot convert turbo-dry.json --head 3f2a9c1
  zonectl snapshot convert turbo-dry.json --head 9be04d7 --base 3f2a9c1
  zonectl snapshot show 3f2a9c1
  zonectl snapshot show 9be04d7 --kind partial"""


@click.group(cls=ZoneGroup, examples=_SNAPSHOT_EXAMPLES)
@click.pass_obj
def snapshot(app: AppContext) -> None:
    """Validate, convert, and show cached build-target snapshots."""


@snapshot.command(
    examples="""\
  zonectl snapshot validate build/targets.json
  zonectl --json snapshot validate build/targets.json"""
)
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def validate(app: AppContext, path: Path) -> None:
    """Check that PATH holds a valid snapshot document."""
    app.emit(SnapshotService(app.store).validate(path))


@snapshot.command(
    examples="""\
  turbo run build --dry=json > turbo-dry.json
  zonectl snapshot convert turbo-dry.json --head 3f2a9c1
  zonectl snapshot convert turbo-dry.json --head 9be04d7 --base 3f2a9c1
  zonectl snapshot convert turbo-dry.json --head 3f2a9c1 -o out/full.json"""
)
@click.argument("dry_run", type=click.Path(path_type=Path))
@click.option("--head", "head_sha", required=True, help="Commit the dry run was taken at.")
@click.option(
    "--base",
    "base_sha",
    default=None,
    help="Merge-base commit; produces a filtered (partial) snapshot.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write to a file instead of the snapshot store.",
)
@click.pass_obj
def convert(
    app: AppContext,
    dry_run: Path,
    head_sha: str,
    base_sha: str | None,
    output: Path | None,
) -> None:
    """Build a snapshot from a ``turbo run --dry=json`` document."""
    result = SnapshotService(app.store).convert(
        dry_run, head_sha=head_sha, base_sha=base_sha, output=output
    )
    app.emit(result)


@snapshot.command(
    examples="""\
  zonectl snapshot show 3f2a9c1
  zonectl --json snapshot show 9be04d7 --kind partial"""
)
@click.argument("commit_sha")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in SnapshotKind]),
    default=SnapshotKind.FULL.value,
    help="Which stored snapshot to read.",
)
@click.pass_obj
def show(app: AppContext, commit_sha: str, kind: str) -> None:
    """Show the snapshot stored for COMMIT_SHA."""
    app.emit(SnapshotService(app.store).show(commit_sha, kind=SnapshotKind(kind)))
