"""fanlog CLI — Typer-based command-line interface.

Provides the ``fanlog`` command with subcommands for emitting a record
through the configured sinks, listing severity levels and checking the
Telegram sink's connectivity.

All output uses Rich for formatted terminal display.
"""
