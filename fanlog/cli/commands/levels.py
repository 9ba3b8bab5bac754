"""``fanlog levels`` — show the severity levels and what a threshold admits."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from fanlog.models.levels import ALL_LEVELS, Level

console = Console()


def levels_cmd(
    threshold: str = typer.Option(
        "DEBUG",
        "--threshold",
        "-t",
        help="Threshold to evaluate admission against.",
    ),
) -> None:
    """List every level with its ordinal, code and admission status."""
    try:
        limit = Level.parse(threshold)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)

    table = Table(title=f"Levels (threshold {limit.name})")
    table.add_column("Level", style="cyan")
    table.add_column("Ordinal", justify="right")
    table.add_column("Code", style="bold")
    table.add_column("Admitted", justify="center")

    for level in ALL_LEVELS:
        admitted = "[green]Yes[/green]" if limit.admits(level) else "[dim]No[/dim]"
        table.add_row(level.name, str(int(level)), level.code, admitted)

    console.print(table)
