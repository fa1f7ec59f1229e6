"""Rich Console factory and theme for zonectl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ZONE_THEME = Theme(
    {
        "zone.ok": "bold green",
        "zone.error": "bold red",
        "zone.warning": "bold yellow",
        "zone.op": "bold cyan",
        "zone.key": "dim",
        "zone.id": "bold blue",
        "zone.sha": "magenta",
        "zone.name": "bold",
        "zone.new": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=ZONE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def short_sha(sha: str) -> str:
    """Abbreviate a commit SHA the way git log --oneline does."""
    return sha[:7]
