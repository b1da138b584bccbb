"""Console output helpers for the non-TUI commands."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.text import Text

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

BANNER_STYLE = "bold #6366f1"


def success(msg: str) -> None:
    console.print(Text.assemble("  ", ("✓", "bold green"), " ", msg))


def info(msg: str) -> None:
    console.print(Text.assemble("  ", ("ℹ", "bold blue"), " ", msg))


def warning(msg: str) -> None:
    err_console.print(Text.assemble("  ", ("⚠", "bold yellow"), " ", msg))


def error(msg: str) -> None:
    err_console.print(Text.assemble("  ", ("✗", "bold red"), " ", msg))


def banner() -> None:
    console.print(
        Panel(
            Text.assemble(
                ("⚡ FlexPrice CLI\n", BANNER_STYLE),
                ("Usage-based billing, made simple.", "dim"),
            ),
            border_style="cyan",
            expand=False,
            padding=(1, 3),
        )
    )


def detail(data: Any) -> None:
    """Pretty-print a decoded JSON payload."""
    console.print(JSON.from_data(data, indent=2))


@contextmanager
def spinner(message: str) -> Iterator[None]:
    with console.status(message, spinner="dots"):
        yield
