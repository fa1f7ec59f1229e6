"""Command group: hydrated DAG diagnostics."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from zonectl.commands._base import ZoneGroup
from zonectl.services.dag import DagService

if TYPE_CHECKING:
    from zonectl.commands._context import AppContext

_DAG_EXAMPLES = """\
  zonectl dag inspect 3f2a9c1
  zonectl dag inspect 3f2a9c1 9be04d7 a71c2e0
  zonectl -v dag inspect 3f2a9c1 9be04d7"""


@click.group(cls=ZoneGroup, examples=_DAG_EXAMPLES)
@click.pass_obj
def dag(app: AppContext) -> None:
    """Inspect the DAG hydrated from cached snapshots."""


@dag.command(
    examples="""\
  zonectl dag inspect 3f2a9c1
  zonectl --json dag inspect 3f2a9c1 9be04d7"""
)
@click.argument("baseline_sha")
@click.argument("head_shas", nargs=-1)
@click.pass_obj
def inspect(app: AppContext, baseline_sha: str, head_shas: tuple[str, ...]) -> None:
    """Report targets, edges, unnamed ids, aliases, and cycles."""
    app.emit(DagService(app.store).inspect(baseline_sha, head_shas))
