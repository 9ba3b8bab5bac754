"""fanlog data models — Pydantic v2, frozen where they are values."""

from fanlog.models.levels import ALL_LEVELS, Level
from fanlog.models.record import LogRecord
from fanlog.models.routing import RoutingProfile, RoutingSink

__all__ = ["ALL_LEVELS", "Level", "LogRecord", "RoutingProfile", "RoutingSink"]
