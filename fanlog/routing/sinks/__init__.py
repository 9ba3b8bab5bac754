"""Sink protocol for fanlog output destinations.

Every sink implements the ``BaseSink`` protocol: a ``sink_id`` property and
a ``write(data)`` method.  The logger calls ``write`` on every sink
subscribed to a record's level, in subscription order.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every fanlog sink must implement.

    Attributes
    ----------
    sink_id : str
        A stable identifier, unique within one logger's registry
        (e.g. ``"console"``, ``"telegram"``).
    """

    @property
    def sink_id(self) -> str:
        """Return the unique id of this sink."""
        ...

    def write(self, data: bytes) -> int:
        """Write one rendered record.

        Returns the number of bytes accepted.  Failures are raised; the
        logger reports them and moves on to the next sink.

        Parameters
        ----------
        data:
            The UTF-8 encoded record, newline-terminated.
        """
        ...
