"""Rich Console factory and theme for mqtopo output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MQ_THEME = Theme(
    {
        "mq.ok": "bold green",
        "mq.error": "bold red",
        "mq.warning": "bold yellow",
        "mq.op": "bold cyan",
        "mq.key": "dim",
        "mq.id": "bold blue",
        "mq.name": "bold",
        "mq.layer": "magenta",
        "mq.repos.full": "green",
        "mq.repos.partial": "cyan",
        "mq.repos.normal": "white",
        "mq.repos.unknown": "yellow",
    }
)

_REPOS_STYLES: dict[int, str] = {
    0: "mq.repos.full",
    1: "mq.repos.partial",
    2: "mq.repos.normal",
    3: "mq.repos.unknown",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=MQ_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_repos(repos: int) -> str:
    """Return the Rich style name for a repository role code."""
    return _REPOS_STYLES.get(repos, "")
