"""Subcommand implementations, registered in ``fanlog.cli.app``."""
