"""Rich Console factory and theme for skillswap output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SKILLSWAP_THEME = Theme(
    {
        "ss.ok": "bold green",
        "ss.error": "bold red",
        "ss.op": "bold cyan",
        "ss.key": "dim",
        "ss.id": "bold blue",
        "ss.name": "bold",
        "ss.score": "magenta",
        "ss.status.pending": "yellow",
        "ss.status.active": "cyan",
        "ss.status.completed": "green",
        "ss.status.rejected": "red",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "pending": "ss.status.pending",
    "active": "ss.status.active",
    "completed": "ss.status.completed",
    "rejected": "ss.status.rejected",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SKILLSWAP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the theme style name for a swap status."""
    return _STATUS_STYLES.get(status, "")
