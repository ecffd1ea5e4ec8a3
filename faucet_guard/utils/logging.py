from __future__ import annotations

from typing import Iterable, Sequence

from rich.console import Console
from rich.table import Table

console = Console()

# Rich styles keyed by parameter status / alert severity / grade value
_STATUS_STYLES = {
    "normal": "green",
    "warning": "yellow",
    "critical": "bold red",
    "low": "dim",
    "medium": "yellow",
    "high": "red",
    "excellent": "bold green",
    "good": "cyan",
    "acceptable": "yellow",
    "poor": "red",
    "unacceptable": "bold red",
}


def info(msg: str) -> None:
    console.print(f"[bold cyan]INFO[/bold cyan] {msg}")


def warn(msg: str) -> None:
    console.print(f"[bold yellow]WARN[/bold yellow] {msg}")


def error(msg: str) -> None:
    console.print(f"[bold red]ERROR[/bold red] {msg}")


def styled(value: str) -> str:
    style = _STATUS_STYLES.get(str(value))
    return f"[{style}]{value}[/{style}]" if style else str(value)


def print_table(title: str, columns: Sequence[str], rows: Iterable[Sequence[object]]) -> None:
    table = Table(title=title, show_lines=False)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*["" if v is None else str(v) for v in row])
    console.print(table)
