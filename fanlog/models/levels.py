"""Severity levels, ordered from most to least severe.

A threshold ``T`` admits a record at level ``L`` iff ``L <= T``: a ``DEBUG``
threshold admits everything, a ``FATAL`` threshold admits only ``FATAL``.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class Level(IntEnum):
    """The five severity levels."""

    FATAL = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4

    @property
    def code(self) -> str:
        """Fixed three-letter tag rendered at the start of every record."""
        return _CODES[self]

    def admits(self, level: Level) -> bool:
        """Return ``True`` if this threshold lets *level* through."""
        return level <= self

    @classmethod
    def parse(cls, value: Any) -> Level:
        """Coerce *value* into a ``Level``.

        Accepts a ``Level``, an integer ordinal, a level name in any case
        (``"warning"``, plus the ``"warn"`` alias) or a three-letter code
        (``"WRN"``).

        Raises
        ------
        ValueError
            If *value* names no level.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Unknown log level ordinal: {value}") from None
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key in _ALIASES:
                return _ALIASES[key]
            if key.isdigit():
                return cls.parse(int(key))
        raise ValueError(f"Unknown log level: {value!r}")


_CODES: dict[Level, str] = {
    Level.FATAL: "FTL",
    Level.ERROR: "ERR",
    Level.WARNING: "WRN",
    Level.INFO: "INF",
    Level.DEBUG: "DBG",
}

_ALIASES: dict[str, Level] = {code: level for level, code in _CODES.items()}
_ALIASES["WARN"] = Level.WARNING

ALL_LEVELS: tuple[Level, ...] = tuple(Level)
