"""Logger — the level-gated dispatch core.

Every admitted emit is formatted into a ``LogRecord`` and written to each
sink subscribed to the record's level, in subscription order.  Composition
and delivery happen under a single lock: concurrent emits never interleave
their bytes at a sink, and a slow sink write holds up every other emit
until it returns.

Emits above the configured threshold return immediately without touching
the clock, the call stack or any sink.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

from fanlog.models.levels import Level
from fanlog.models.record import LogRecord
from fanlog.routing.registry import ProviderRegistry, UnknownSinkError
from fanlog.routing.sinks._formatting import (
    default_prefix,
    hostname as resolve_hostname,
    interpolate,
    join_values,
    local_now,
)

if TYPE_CHECKING:
    from fanlog.routing.sinks import BaseSink

logger = logging.getLogger(__name__)

# Frames between ``_output`` and the external caller: every public emit
# method calls ``_output`` directly, so the caller is always two up.
_CALLER_DEPTH = 2


class Logger:
    """Formats records and fans them out to per-level sink subscriptions.

    Parameters
    ----------
    threshold:
        The most verbose level admitted.  Anything ``Level.parse`` accepts.
    prefix:
        Text appended to the hostname as ``<hostname>-<prefix>``.  Defaults
        to the executable's base name; pass ``""`` to omit it.
    hostname:
        Overrides the cached process hostname.
    clock:
        Returns the record timestamp.  Defaults to local wall-clock time.
    exit_func:
        Called with status ``1`` after a FATAL record has been delivered
        and when subscribing an unknown sink id.  Defaults to ``sys.exit``.

    Usage
    -----
    >>> log = Logger(Level.DEBUG)
    >>> log.register_sink(ConsoleSink(), Level.ERROR, Level.INFO)
    >>> log.info("listening on", 8080)
    """

    def __init__(
        self,
        threshold: Level | str | int = Level.INFO,
        *,
        prefix: str | None = None,
        hostname: str | None = None,
        clock: Callable[[], datetime] | None = None,
        exit_func: Callable[[int], Any] = sys.exit,
    ) -> None:
        self._threshold = Level.parse(threshold)
        self._prefix = default_prefix() if prefix is None else prefix
        self._hostname = hostname if hostname is not None else resolve_hostname()
        self._clock = clock or local_now
        self._exit = exit_func
        self._registry = ProviderRegistry()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def threshold(self) -> Level:
        return self._threshold

    def set_threshold(self, level: Level | str | int) -> None:
        """Overwrite the threshold for subsequent emits."""
        self._threshold = Level.parse(level)

    @property
    def prefix(self) -> str:
        return self._prefix

    def set_prefix(self, prefix: str) -> None:
        with self._lock:
            self._prefix = prefix

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Sink management
    # ------------------------------------------------------------------

    def register_sink(self, sink: BaseSink, *levels: Level | str | int) -> None:
        """Register *sink*, optionally subscribing it to *levels* at once.

        Registering an id that is already known is a no-op.
        """
        with self._lock:
            self._registry.register(sink)
        if levels:
            self.subscribe(sink.sink_id, *levels)

    def subscribe(self, sink_id: str, *levels: Level | str | int) -> None:
        """Subscribe a registered sink to each of *levels*.

        An unknown *sink_id* is a configuration mistake: it is reported at
        critical severity and the process is terminated.
        """
        parsed = [Level.parse(level) for level in levels]
        try:
            with self._lock:
                self._registry.subscribe(sink_id, *parsed)
        except UnknownSinkError:
            logger.critical(
                "Cannot subscribe sink %r: it was never registered", sink_id
            )
            self._exit(1)

    def unsubscribe(self, sink_id: str, *levels: Level | str | int) -> None:
        parsed = [Level.parse(level) for level in levels]
        with self._lock:
            self._registry.unsubscribe(sink_id, *parsed)

    # ------------------------------------------------------------------
    # Emit
    # ------------------------------------------------------------------

    def emit(self, level: Level | str | int, *values: Any) -> None:
        """Emit *values*, space-joined, at *level*."""
        self._output(Level.parse(level), None, values)

    def emitf(self, level: Level | str | int, fmt: str, *values: Any) -> None:
        """Emit ``fmt % values`` at *level*."""
        self._output(Level.parse(level), fmt, values)

    def fatal(self, *values: Any) -> None:
        """Emit at FATAL, then terminate the process."""
        self._output(Level.FATAL, None, values)

    def fatalf(self, fmt: str, *values: Any) -> None:
        self._output(Level.FATAL, fmt, values)

    def error(self, *values: Any) -> None:
        self._output(Level.ERROR, None, values)

    def errorf(self, fmt: str, *values: Any) -> None:
        self._output(Level.ERROR, fmt, values)

    def warning(self, *values: Any) -> None:
        self._output(Level.WARNING, None, values)

    def warningf(self, fmt: str, *values: Any) -> None:
        self._output(Level.WARNING, fmt, values)

    def info(self, *values: Any) -> None:
        self._output(Level.INFO, None, values)

    def infof(self, fmt: str, *values: Any) -> None:
        self._output(Level.INFO, fmt, values)

    # ``log``/``logf`` are INFO under their historical names.
    def log(self, *values: Any) -> None:
        self._output(Level.INFO, None, values)

    def logf(self, fmt: str, *values: Any) -> None:
        self._output(Level.INFO, fmt, values)

    def debug(self, *values: Any) -> None:
        self._output(Level.DEBUG, None, values)

    def debugf(self, fmt: str, *values: Any) -> None:
        self._output(Level.DEBUG, fmt, values)

    def _output(self, level: Level, fmt: str | None, values: tuple[Any, ...]) -> None:
        if level > self._threshold:
            return

        frame = sys._getframe(_CALLER_DEPTH)
        filename = os.path.basename(frame.f_code.co_filename)
        lineno = frame.f_lineno
        del frame

        try:
            with self._lock:
                self._deliver(level, fmt, values, filename, lineno)
        finally:
            # FATAL terminates even when the record could not be composed.
            if level is Level.FATAL:
                self._terminate()

    def _deliver(
        self,
        level: Level,
        fmt: str | None,
        values: tuple[Any, ...],
        filename: str,
        lineno: int,
    ) -> None:
        message = join_values(values) if fmt is None else interpolate(fmt, values)
        record = LogRecord(
            level=level,
            timestamp=self._clock(),
            hostname=self._hostname,
            prefix=self._prefix,
            filename=filename,
            lineno=lineno,
            message=message,
        )
        data = record.to_bytes()
        for sink in self._registry.sinks_for(level):
            try:
                sink.write(data)
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Sink %s failed to write %s record", sink.sink_id, level.name
                )

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close every registered sink that exposes ``close()``.

        Batching sinks use this to stop their flush thread and make one
        final delivery attempt.
        """
        with self._lock:
            sinks = self._registry.sinks
        for sink in sinks:
            close = getattr(sink, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception:  # noqa: BLE001
                logger.exception("Sink %s failed to close", sink.sink_id)

    def _terminate(self) -> None:
        self.close()
        self._exit(1)

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
