"""Subcommand modules for zonectl.

Provides register_commands(), which imports command modules lazily so
``zonectl --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root group."""
    # --- Groups ---
    from zonectl.commands.dag import dag
    from zonectl.commands.snapshot import snapshot

    cli.add_command(dag)
    cli.add_command(snapshot)

    # --- Standalone commands ---
    from zonectl.commands.affected import affected
    from zonectl.commands.zones import zones

    cli.add_command(affected)
    cli.add_command(zones)
