"""Routing models — which sinks exist and which levels each one receives."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from fanlog.models.levels import ALL_LEVELS, Level


class RoutingSink(BaseModel):
    """A single sink configuration.

    ``config`` carries the constructor arguments for the sink type, e.g.
    ``{"conn": "...", "chat_ids": ["1"]}`` for ``"telegram"``.
    """

    model_config = ConfigDict(frozen=True)

    sink_type: str  # "console", "telegram", "email"
    levels: tuple[Level, ...] = ALL_LEVELS
    config: dict[str, Any] = {}
    enabled: bool = True

    @field_validator("levels", mode="before")
    @classmethod
    def _parse_levels(cls, value: Any) -> tuple[Level, ...]:
        if isinstance(value, (str, int)):
            value = [value]
        return tuple(Level.parse(item) for item in value)


class RoutingProfile(BaseModel):
    """Logger-wide routing: threshold, prefix and the sinks to build."""

    model_config = ConfigDict(frozen=True)

    threshold: Level = Level.INFO
    prefix: str | None = None  # None -> executable base name
    sinks: list[RoutingSink] = [RoutingSink(sink_type="console")]

    @field_validator("threshold", mode="before")
    @classmethod
    def _parse_threshold(cls, value: Any) -> Level:
        return Level.parse(value)
