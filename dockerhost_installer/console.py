from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

THEME = Theme(
    {
        "banner": "bold blue",
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "bold red",
        "muted": "dim",
    }
)

console = Console(theme=THEME, highlight=False)


def show_banner(title: str, plan: Sequence[str]) -> None:
    body = Text()
    body.append("This installer will:\n", style="warning")
    for i, item in enumerate(plan, start=1):
        body.append(f"  {i}. {item}\n")
    console.print(Panel(body, title=Text(title, style="banner"), box=box.DOUBLE, expand=False))


def show_disks(rows: Iterable[Tuple[str, str, str]]) -> None:
    table = Table(title="Available drives", box=box.SIMPLE)
    table.add_column("NAME", style="info")
    table.add_column("SIZE")
    table.add_column("MOUNTED", style="muted")
    for name, size, mounted in rows:
        table.add_row(name, size, mounted)
    console.print(table)


def show_section(title: str, lines: Sequence[str], *, style: str = "info", extra: Optional[str] = None) -> None:
    body = Text("\n".join(lines))
    if extra:
        body.append("\n" + extra, style="muted")
    console.print(Panel(body, title=Text(title, style=style), box=box.ROUNDED, expand=False))
