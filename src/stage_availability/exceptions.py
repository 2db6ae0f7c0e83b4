"""Custom exceptions for the availability engine."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TimeRange


class AvailabilityError(Exception):
    """Base exception for engine errors."""

    pass


class InvalidRangeError(AvailabilityError):
    """Time range does not end after it starts."""

    def __init__(self, time_range: TimeRange, index: int | None = None):
        self.time_range = time_range
        self.index = index
        location = f" at position {index}" if index is not None else ""
        super().__init__(
            f"Invalid time range{location}: start {time_range.start.isoformat()} "
            f"is not before end {time_range.end.isoformat()}"
        )


class CombinationLimitExceeded(AvailabilityError):
    """Combination enumeration ran past its result or time budget."""

    def __init__(self, limit: float, kind: str = "results", produced: int = 0):
        self.limit = limit
        self.kind = kind
        self.produced = produced
        if kind == "time":
            message = (
                f"Combination search exceeded time budget of {limit}s "
                f"after {produced} combinations"
            )
        else:
            message = f"Combination search exceeded limit of {limit} results"
        super().__init__(message)


class ConfigError(AvailabilityError):
    """Engine configuration file is malformed."""

    def __init__(self, message: str, path: str | Path | None = None):
        self.message = message
        self.path = path
        location = f" in '{path}'" if path else ""
        super().__init__(f"Invalid configuration{location}: {message}")
