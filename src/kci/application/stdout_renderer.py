"""Render insight responses to stdout using rich."""

import json
from collections.abc import Iterable
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

_MAX_PREVIEW_ROWS = 20


def _format_cell(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.2f}"
    if value is None:
        return "-"
    return str(value)


def _is_numeric_column(values: Iterable[Any]) -> bool:
    seen = False
    for value in values:
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int | float):
            return False
        seen = True
    return seen


def _build_figures_table(figures: dict[str, Any]) -> Table:
    table = Table(show_header=False, box=box.SIMPLE_HEAVY)
    table.add_column("field", style="bold")
    table.add_column("value", justify="right")
    for key, value in figures.items():
        table.add_row(key, _format_cell(value))
    return table


def _build_records_table(name: str, rows: list[dict[str, Any]]) -> Table:
    table = Table(title=name, show_lines=False, expand=True, box=box.SIMPLE_HEAVY)
    headers = list(rows[0])
    for header in headers:
        justify = (
            "right" if _is_numeric_column(row.get(header) for row in rows) else "left"
        )
        table.add_column(header, overflow="fold", no_wrap=False, justify=justify)
    for row in rows[:_MAX_PREVIEW_ROWS]:
        table.add_row(*(_format_cell(row.get(header)) for header in headers))
    return table


def render_stdout_report(
    *,
    title: str,
    explanation: str,
    figures: dict[str, Any],
    records: dict[str, list[dict[str, Any]]],
    console: Console | None = None,
) -> None:
    """Render figures, record tables and explanation of one response."""
    console = console or Console()
    console.print(f"[bold cyan]{title}[/bold cyan]")

    if figures:
        console.print(_build_figures_table(figures))

    for name, rows in records.items():
        if not rows:
            console.print(f"[yellow]{name}: no records[/yellow]")
            continue
        console.print(_build_records_table(name, rows))
        if len(rows) > _MAX_PREVIEW_ROWS:
            console.print(
                f"[dim]Showing first {_MAX_PREVIEW_ROWS} of {len(rows)} rows.[/dim]"
            )

    console.print(Panel(Text(explanation), title="Explanation", border_style="blue"))


def render_stdout_json(
    payload: dict[str, Any], *, console: Console | None = None
) -> None:
    """Print a response payload as pretty JSON."""
    console = console or Console()
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    console.print(text, markup=False, highlight=False, soft_wrap=True)
