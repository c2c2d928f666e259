"""Rich rendering of record instances and stored sections."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console()
    return _console


def build_entries_table(title: str, entries: Iterable[Tuple[str, str]]) -> Table:
    """Key/Value table for a record type or a stored section."""
    table = Table(title=escape(f"<{title}>"), title_justify="left")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in entries:
        table.add_row(escape(key), escape(value))
    return table


def print_entries(
    title: str,
    entries: Iterable[Tuple[str, str]],
    console: Optional[Console] = None,
) -> None:
    (console or get_console()).print(build_entries_table(title, entries))
