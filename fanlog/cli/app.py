"""Main Typer application — imports and registers all CLI commands.

Entry point: ``fanlog`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer

from fanlog.cli.commands.emit import emit_cmd
from fanlog.cli.commands.levels import levels_cmd
from fanlog.cli.commands.telegram_test import telegram_test_cmd

app = typer.Typer(
    name="fanlog",
    help="fanlog: level-gated logging dispatcher with console, email and Telegram sinks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="emit", help="Emit one record through the configured sinks.")(emit_cmd)
app.command(name="levels", help="List severity levels and their codes.")(levels_cmd)
app.command(name="telegram-test", help="Send a test message to Telegram.")(telegram_test_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show fanlog's own diagnostics on stderr."
    ),
) -> None:
    """fanlog command-line interface."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
