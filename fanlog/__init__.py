"""fanlog: a level-gated logging dispatcher with pluggable output sinks.

Callers emit severity-tagged messages through a ``Logger``; each record is
formatted with timestamp, host and caller metadata and written to every sink
subscribed to its level:
  - ``ConsoleSink`` — one line per record on stdout
  - ``EmailSink`` — one SMTP message per record
  - ``TelegramSink`` — buffered, flushed to the Bot API once a second
"""

__version__ = "0.1.0"
__description__ = "Level-gated logging dispatcher with console, email and Telegram sinks"

from fanlog.models.levels import Level
from fanlog.routing.dispatcher import Logger
from fanlog.routing.factory import build_logger
from fanlog.routing.sinks import BaseSink
from fanlog.routing.sinks.console import ConsoleSink
from fanlog.routing.sinks.email import EmailSink, SmtpSettings
from fanlog.routing.sinks.telegram import TelegramSink

__all__ = [
    "BaseSink",
    "ConsoleSink",
    "EmailSink",
    "Level",
    "Logger",
    "SmtpSettings",
    "TelegramSink",
    "build_logger",
    "__version__",
]
