"""
Console helpers shared by the CLI commands.

Status lines go to stdout through one rich console. Logging goes to stderr
so JSON output stays pipeable.
"""

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()


def configure_logging(level: str = "WARNING") -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _status(marker: str, style: str, message: str) -> None:
    # messages often embed paths or pydantic errors containing [brackets]
    console.print(f"[{style}]{marker}[/{style}] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    _status("✓", "green", message)


def print_error(message: str) -> None:
    """Print an error message."""
    _status("✗", "red", message)


def print_warning(message: str) -> None:
    """Print a warning message."""
    _status("!", "yellow", message)


def print_info(message: str) -> None:
    """Print an info line. Unlike the other helpers, markup is honoured."""
    console.print(f"[blue]i[/blue] {message}")


def print_panel(content: str, title: str | None = None) -> None:
    console.print(Panel(content, title=title, border_style="cyan", expand=False))


def print_json(data: Any) -> None:
    """Print data as plain JSON (no markup, safe to pipe)."""
    console.print_json(json.dumps(data, default=str))


def print_table(
    headers: list[str],
    rows: list[list[Any]],
    title: str | None = None,
) -> None:
    """Print rows under the given headers; the first column is the key column."""
    table = Table(title=title)
    for position, header in enumerate(headers):
        table.add_column(header, style="cyan" if position == 0 else None)
    for row in rows:
        table.add_row(*(escape(str(cell)) for cell in row))
    console.print(table)


def truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text
