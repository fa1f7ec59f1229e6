"""Command: compute the transitive affected set for changed packages."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zonectl.commands._base import ZoneCommand

if TYPE_CHECKING:
    from zonectl.commands._context import AppContext


@click.command(
    cls=ZoneCommand,
    examples="""\
  zonectl affected 3f2a9c1 --package utils
  zonectl affected 3f2a9c1 9be04d7
  zonectl affected 3f2a9c1 9be04d7 -p utils -p frontend
  zonectl -q affected 3f2a9c1 9be04d7
  zonectl --json affected 3f2a9c1 9be04d7""",
)
@click.argument("baseline_sha")
@click.argument("head_shas", nargs=-1)
@click.option(
    "-p",
    "--package",
    "packages",
    multiple=True,
    help="Directly changed package name (repeatable). "
    "Defaults to the packages recorded by the head snapshots.",
)
@click.pass_obj
def affected(
    app: AppContext,
    baseline_sha: str,
    head_shas: tuple[str, ...],
    packages: tuple[str, ...],
) -> None:
    """List every target affected by changes on top of BASELINE_SHA."""
    from zonectl.services.affected import AffectedService

    result = AffectedService(app.store).affected(baseline_sha, head_shas, packages=packages)
    app.emit(result)
