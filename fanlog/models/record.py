"""Log record — the ephemeral value built for every admitted emit."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from fanlog.models.levels import Level
from fanlog.routing.sinks._formatting import format_timestamp


class LogRecord(BaseModel):
    """One formatted log line.

    Constructed per emit call, written synchronously to every sink
    subscribed to ``level`` and then discarded.
    """

    model_config = ConfigDict(frozen=True)

    level: Level
    timestamp: datetime
    hostname: str
    prefix: str = ""
    filename: str
    lineno: int
    message: str

    @property
    def origin(self) -> str:
        """``<hostname>`` or ``<hostname>-<prefix>`` when a prefix is set."""
        if self.prefix:
            return f"{self.hostname}-{self.prefix}"
        return self.hostname

    def render(self) -> str:
        """Render the record as a single newline-terminated line."""
        return (
            f"{self.level.code}: {format_timestamp(self.timestamp)} {self.origin} "
            f"{self.filename}:{self.lineno}: {self.message}\n"
        )

    def to_bytes(self) -> bytes:
        return self.render().encode("utf-8")
