"""Shared formatting helpers for fanlog records and sinks.

Timestamp layout, host/prefix resolution and message rendering live here so
the dispatcher, the record model and the sinks agree on one format.
"""

from __future__ import annotations

import functools
import os
import socket
import sys
from datetime import datetime, timezone
from typing import Any

# Carriage returns and line feeds, as raw bytes.  Neither byte can appear
# inside a multi-byte UTF-8 sequence, so replacing them is encoding-safe.
_CR = b"\r"
_LF = b"\n"


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as ``YYYY-MM-DD HH:MM:SS.fffffff +HH:MM``.

    Seven fractional digits are emitted (microseconds plus a trailing
    zero) and the UTC offset always carries a colon.  Naive datetimes
    are treated as UTC.

    Examples
    --------
    >>> from datetime import datetime, timedelta, timezone
    >>> tz = timezone(timedelta(hours=3))
    >>> format_timestamp(datetime(2017, 5, 31, 22, 29, 11, 748931, tzinfo=tz))
    '2017-05-31 22:29:11.7489310 +03:00'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    offset = moment.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return (
        f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond:06d}0 "
        f"{sign}{hours:02d}:{minutes:02d}"
    )


def local_now() -> datetime:
    """Return the current local wall-clock time with its UTC offset."""
    return datetime.now().astimezone()


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


@functools.lru_cache(maxsize=1)
def hostname() -> str:
    """Return this machine's hostname, resolved once per process."""
    try:
        return socket.gethostname()
    except OSError:
        return "unknown"


def default_prefix() -> str:
    """Return the base name of the running executable (``sys.argv[0]``)."""
    argv0 = sys.argv[0] if sys.argv else ""
    return os.path.basename(argv0)


def join_values(values: tuple[Any, ...]) -> str:
    """Render *values* the way ``print`` does: ``str`` of each, space-joined."""
    return " ".join(str(value) for value in values)


def interpolate(fmt: str, values: tuple[Any, ...]) -> str:
    """Apply printf-style ``%`` substitution.

    With no *values* the format string is returned untouched, so a
    literal ``%`` in a plain message never trips the formatter.  When the
    values do not fit the format, the format is kept verbatim and the
    values are appended after a ``%!`` marker instead of raising.

    Examples
    --------
    >>> interpolate("port %d", ("http",))
    'port %d %!(http)'
    """
    if not values:
        return fmt
    try:
        return fmt % values
    except (TypeError, ValueError):
        return f"{fmt} %!({join_values(values)})"


def flatten_newlines(data: bytes) -> bytes:
    """Replace every CR/LF except the final byte with a space.

    The final byte is kept so a record's terminating newline survives.

    Examples
    --------
    >>> flatten_newlines(b"a\\r\\nb\\n")
    b'a  b\\n'
    """
    if len(data) < 2:
        return data
    body = data[:-1].replace(_CR, b" ").replace(_LF, b" ")
    return body + data[-1:]
