"""Rich Console factory and theme for weir output.

Consoles render into a StringIO buffer so the formatters can keep their
``ServiceResult -> str`` contract.  Rich drops color codes automatically
when it is not writing to a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WEIR_THEME = Theme(
    {
        "weir.ok": "bold green",
        "weir.error": "bold red",
        "weir.warning": "bold yellow",
        "weir.op": "bold cyan",
        "weir.key": "dim",
        "weir.id": "bold blue",
        "weir.path": "dim",
        "weir.num": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=WEIR_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
