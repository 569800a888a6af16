"""Rich Console factory and theme for buildenvctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BENV_THEME = Theme(
    {
        "benv.ok": "bold green",
        "benv.error": "bold red",
        "benv.warning": "bold yellow",
        "benv.op": "bold cyan",
        "benv.key": "dim",
        "benv.path": "dim",
        "benv.version": "bold blue",
        "benv.mode.dev": "yellow",
        "benv.mode.prod": "bold magenta",
        "benv.secret": "dim italic",
    }
)

_MODE_STYLES: dict[str, str] = {
    "dev": "benv.mode.dev",
    "prod": "benv.mode.prod",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=BENV_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    if not isinstance(console.file, StringIO):
        msg = "Console is not backed by a StringIO buffer"
        raise TypeError(msg)
    return console.file.getvalue()


def style_for_mode(mode: str) -> str:
    """Return the Rich style name for a build mode."""
    return _MODE_STYLES.get(mode, "")
