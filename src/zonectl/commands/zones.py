"""Command: partition queued PRs into merge-queue zones."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zonectl.commands._base import ZoneCommand

if TYPE_CHECKING:
    from zonectl.commands._context import AppContext


@click.command(
    cls=ZoneCommand,
    examples="""\
  zonectl zones 3f2a9c1 9be04d7 a71c2e0 d04f5b3
  zonectl zones 3f2a9c1 9be04d7 a71c2e0 --no-new-packages
  zonectl -q zones 3f2a9c1 9be04d7 a71c2e0
  zonectl -v zones 3f2a9c1 9be04d7 a71c2e0""",
)
@click.argument("baseline_sha")
@click.argument("head_shas", nargs=-1, required=True)
@click.option(
    "--new-packages/--no-new-packages",
    "include_new_packages",
    default=None,
    help="Count packages no snapshot knows about as affected. "
    "Defaults to [zones] include_new_packages.",
)
@click.pass_obj
def zones(
    app: AppContext,
    baseline_sha: str,
    head_shas: tuple[str, ...],
    include_new_packages: bool | None,
) -> None:
    """Group HEAD_SHAS into zones of PRs whose affected sets overlap."""
    from zonectl.services.zones import ZoneService

    if include_new_packages is None:
        include_new_packages = app.settings.zones.include_new_packages
    result = ZoneService(app.store).zones(
        baseline_sha, head_shas, include_new_packages=include_new_packages
    )
    app.emit(result)
