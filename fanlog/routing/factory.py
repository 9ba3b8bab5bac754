"""Build a ready-to-use ``Logger`` from a ``RoutingProfile``."""

from __future__ import annotations

import logging
from typing import Any, Callable

from fanlog.models.routing import RoutingProfile, RoutingSink
from fanlog.routing.dispatcher import Logger
from fanlog.routing.sinks import BaseSink
from fanlog.routing.sinks.console import ConsoleSink
from fanlog.routing.sinks.email import EmailSink, SmtpSettings
from fanlog.routing.sinks.telegram import TelegramSink

logger = logging.getLogger(__name__)


def _build_console(config: dict[str, Any]) -> BaseSink:
    return ConsoleSink(**config)


def _build_telegram(config: dict[str, Any]) -> BaseSink:
    return TelegramSink(**config)


def _build_email(config: dict[str, Any]) -> BaseSink:
    options = dict(config)
    smtp = options.pop("smtp", None)
    if isinstance(smtp, dict):
        smtp = SmtpSettings(**smtp)
    return EmailSink(smtp=smtp, **options)


SINK_BUILDERS: dict[str, Callable[[dict[str, Any]], BaseSink]] = {
    "console": _build_console,
    "telegram": _build_telegram,
    "email": _build_email,
}


def build_sink(entry: RoutingSink) -> BaseSink:
    """Construct the sink described by *entry*.

    Raises
    ------
    ValueError
        If ``entry.sink_type`` is not a known sink type.
    """
    try:
        builder = SINK_BUILDERS[entry.sink_type]
    except KeyError:
        raise ValueError(f"Unknown sink type: {entry.sink_type!r}") from None
    return builder(dict(entry.config))


def build_logger(profile: RoutingProfile | None = None, **logger_kwargs: Any) -> Logger:
    """Build a ``Logger`` and register every enabled sink of *profile*.

    Extra keyword arguments are passed to the ``Logger`` constructor.
    Sinks that fail to build raise; sinks already built are closed first
    so no flush thread is left behind.
    """
    profile = profile or RoutingProfile()
    log = Logger(profile.threshold, prefix=profile.prefix, **logger_kwargs)
    try:
        for entry in profile.sinks:
            if not entry.enabled:
                logger.debug("Skipping disabled sink: %s", entry.sink_type)
                continue
            log.register_sink(build_sink(entry), *entry.levels)
    except Exception:
        log.close()
        raise
    return log
