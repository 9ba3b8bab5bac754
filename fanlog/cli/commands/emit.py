"""``fanlog emit`` — send one record through the configured sinks.

Builds a logger from ``FANLOG_*`` settings, emits a single record and closes
the logger, which gives batching sinks a final synchronous flush.  Emitting
at FATAL exits with status 1 after delivery.
"""

from __future__ import annotations

import typer
from rich.console import Console

from fanlog.config import LoggerSettings
from fanlog.models.levels import Level
from fanlog.routing.factory import build_logger

console = Console(stderr=True)


def emit_cmd(
    level: str = typer.Argument(..., help="Level name or code (e.g. error, WRN)."),
    words: list[str] = typer.Argument(..., help="Message words, space-joined."),
    formatted: bool = typer.Option(
        False,
        "--format",
        "-f",
        help="Treat the first word as a printf-style format for the rest.",
    ),
    threshold: str = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Override FANLOG_LEVEL for this call.",
    ),
    prefix: str = typer.Option(
        None,
        "--prefix",
        "-p",
        help="Override the record prefix (default: executable name).",
    ),
) -> None:
    """Emit a single record at LEVEL."""
    try:
        parsed = Level.parse(level)
        overrides = {"level": Level.parse(threshold)} if threshold else {}
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)

    settings = LoggerSettings(**overrides)
    profile = settings.to_profile()
    if prefix is not None:
        profile = profile.model_copy(update={"prefix": prefix})

    with build_logger(profile) as log:
        if formatted:
            log.emitf(parsed, words[0], *words[1:])
        else:
            log.emit(parsed, *words)
