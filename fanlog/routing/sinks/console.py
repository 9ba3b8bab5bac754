"""Console sink — writes records to standard output, one line each."""

from __future__ import annotations

import sys
from typing import BinaryIO

from fanlog.routing.sinks._formatting import flatten_newlines


class ConsoleSink:
    """Writes records to a binary stream, folding embedded newlines.

    Parameters
    ----------
    stream:
        Binary stream to write to.  Defaults to ``sys.stdout.buffer``,
        looked up on every write so redirected stdout is honoured.
    """

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream = stream

    @property
    def sink_id(self) -> str:
        return "console"

    def write(self, data: bytes) -> int:
        stream = self._stream if self._stream is not None else sys.stdout.buffer
        written = stream.write(flatten_newlines(data))
        stream.flush()
        return written
