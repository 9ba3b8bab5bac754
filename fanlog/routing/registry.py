"""ProviderRegistry — every known sink, plus per-level subscription lists.

A sink must be registered before it can be subscribed to a level.  Each
level keeps its subscribers in insertion order with duplicates suppressed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fanlog.models.levels import ALL_LEVELS, Level

if TYPE_CHECKING:
    from fanlog.routing.sinks import BaseSink

logger = logging.getLogger(__name__)


class UnknownSinkError(KeyError):
    """Raised when subscribing a sink id that was never registered."""


class ProviderRegistry:
    """Holds registered sinks keyed by id and per-level subscriber lists.

    The registry does no locking of its own; the owning ``Logger``
    serializes access to it.
    """

    def __init__(self) -> None:
        self._sinks: dict[str, BaseSink] = {}
        self._subscriptions: dict[Level, list[str]] = {
            level: [] for level in ALL_LEVELS
        }

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, sink: BaseSink) -> bool:
        """Register *sink* under its ``sink_id``.

        Re-registering an id that is already known is a no-op.  Returns
        ``True`` when the sink was newly added.
        """
        sink_id = sink.sink_id
        if sink_id in self._sinks:
            return False
        self._sinks[sink_id] = sink
        logger.info("Registered sink: %s", sink_id)
        return True

    def subscribe(self, sink_id: str, *levels: Level) -> None:
        """Append *sink_id* to the subscriber list of each of *levels*.

        Raises
        ------
        UnknownSinkError
            If *sink_id* was never registered.
        """
        if sink_id not in self._sinks:
            raise UnknownSinkError(sink_id)
        for level in levels:
            ids = self._subscriptions[Level.parse(level)]
            if sink_id not in ids:
                ids.append(sink_id)

    def unsubscribe(self, sink_id: str, *levels: Level) -> None:
        """Remove *sink_id* from the given levels (all levels if none given)."""
        targets = [Level.parse(level) for level in levels] or list(ALL_LEVELS)
        for level in targets:
            ids = self._subscriptions[level]
            if sink_id in ids:
                ids.remove(sink_id)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, sink_id: str) -> BaseSink | None:
        return self._sinks.get(sink_id)

    def sink_ids(self, level: Level) -> list[str]:
        """Return a copy of the subscriber ids for *level*, in order."""
        return list(self._subscriptions[Level.parse(level)])

    def sinks_for(self, level: Level) -> list[BaseSink]:
        """Return the subscribed sinks for *level*, in subscription order."""
        return [self._sinks[sink_id] for sink_id in self._subscriptions[level]]

    @property
    def sinks(self) -> list[BaseSink]:
        """All registered sinks, in registration order."""
        return list(self._sinks.values())

    def __contains__(self, sink_id: object) -> bool:
        return sink_id in self._sinks

    def __len__(self) -> int:
        return len(self._sinks)
