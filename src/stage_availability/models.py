"""Data models for availability and castability search."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# character id -> actor id
Assignment = dict[str, str]


def _parse_instant(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class UserAvailabilityStatus(str, Enum):
    """Overall availability of a user over a checked period."""

    FREE = "FREE"  # Nothing blocks the period
    TENTATIVE = "TENTATIVE"  # Only tentative events block it
    BUSY = "BUSY"  # Confirmed events leave no free time
    PARTIAL = "PARTIAL"  # Some free time remains


@dataclass(frozen=True)
class TimeRange:
    """A period between two instants.

    The range is not validated on construction; ranges with
    ``start >= end`` are degenerate and count as zero duration.
    """

    start: datetime
    end: datetime

    @property
    def is_degenerate(self) -> bool:
        return self.start >= self.end

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeRange":
        """Create a TimeRange from a dictionary with ISO-8601 strings."""
        return cls(start=_parse_instant(data["start"]), end=_parse_instant(data["end"]))

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass
class CharacterCandidates:
    """A character together with the actors who could play it."""

    character_id: str
    actors: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CharacterCandidates":
        """Create CharacterCandidates from a dictionary."""
        return cls(
            character_id=data["character_id"],
            actors=list(data.get("actors", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"character_id": self.character_id, "actors": list(self.actors)}


@dataclass(frozen=True)
class ActorAssignment:
    """One character cast with one actor."""

    character_id: str
    actor_id: str

    def to_dict(self) -> dict[str, str]:
        return {"character_id": self.character_id, "actor_id": self.actor_id}


@dataclass
class CastabilityVerdict:
    """Whether every character has at least one candidate actor."""

    valid: bool
    uncastable_character_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "uncastable_character_ids": self.uncastable_character_ids,
        }


@dataclass
class AvailabilitySlot:
    """A time window in which one cast combination is available."""

    start: datetime
    end: datetime
    duration_minutes: int
    assignments: list[ActorAssignment] = field(default_factory=list)

    @property
    def actor_ids(self) -> list[str]:
        return [a.actor_id for a in self.assignments]

    def to_dict(self) -> dict[str, Any]:
        """Convert slot to dictionary."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_minutes": self.duration_minutes,
            "assignments": [a.to_dict() for a in self.assignments],
        }


@dataclass
class AvailabilityResult:
    """Result of searching availability for a play or scene."""

    entity_id: str
    entity_type: str
    slots: list[AvailabilitySlot] = field(default_factory=list)
    uncastable_characters: list[str] = field(default_factory=list)
    combination_count: int = 0
    combinations_evaluated: int = 0
    search_time_ms: float = 0.0
    search_date: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def total_slots(self) -> int:
        """Total number of available slots."""
        return len(self.slots)

    @property
    def is_castable(self) -> bool:
        return not self.uncastable_characters

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "search_date": self.search_date,
            "entity_id": self.entity_id,
            "entity_type": self.entity_type,
            "slots": [s.to_dict() for s in self.slots],
            "uncastable_characters": self.uncastable_characters,
            "combination_count": self.combination_count,
            "metrics": {
                "search_time_ms": self.search_time_ms,
                "combinations_evaluated": self.combinations_evaluated,
            },
        }


@dataclass
class UserAvailabilityResult:
    """Availability of a single user over a period."""

    user_id: str
    period: TimeRange
    status: UserAvailabilityStatus
    free_blocks: list[TimeRange] = field(default_factory=list)
    tentative_blocks: list[TimeRange] = field(default_factory=list)
    busy_blocks: list[TimeRange] = field(default_factory=list)
    total_free_minutes: int = 0
    total_tentative_minutes: int = 0
    total_busy_minutes: int = 0
    # Any tentative event in the period, including ones hidden by busy time
    has_tentative_events: bool = False

    @property
    def is_fully_available(self) -> bool:
        """True if nothing blocks the whole period."""
        return self.status == UserAvailabilityStatus.FREE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "user_id": self.user_id,
            "period_start": self.period.start.isoformat(),
            "period_end": self.period.end.isoformat(),
            "status": self.status.value,
            "is_fully_available": self.is_fully_available,
            "has_tentative_events": self.has_tentative_events,
            "free_blocks": [b.to_dict() for b in self.free_blocks],
            "tentative_blocks": [b.to_dict() for b in self.tentative_blocks],
            "busy_blocks": [b.to_dict() for b in self.busy_blocks],
            "total_free_minutes": self.total_free_minutes,
            "total_tentative_minutes": self.total_tentative_minutes,
            "total_busy_minutes": self.total_busy_minutes,
        }


@dataclass
class BulkUserAvailabilityResult:
    """Availability of several users over the same period."""

    period: TimeRange
    results: list[UserAvailabilityResult] = field(default_factory=list)

    def _ids_with_status(self, status: UserAvailabilityStatus) -> list[str]:
        return [r.user_id for r in self.results if r.status == status]

    @property
    def fully_available_user_ids(self) -> list[str]:
        return self._ids_with_status(UserAvailabilityStatus.FREE)

    @property
    def partially_available_user_ids(self) -> list[str]:
        return self._ids_with_status(UserAvailabilityStatus.PARTIAL)

    @property
    def tentative_user_ids(self) -> list[str]:
        return self._ids_with_status(UserAvailabilityStatus.TENTATIVE)

    @property
    def unavailable_user_ids(self) -> list[str]:
        return self._ids_with_status(UserAvailabilityStatus.BUSY)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "period_start": self.period.start.isoformat(),
            "period_end": self.period.end.isoformat(),
            "results": [r.to_dict() for r in self.results],
            "fully_available_user_ids": self.fully_available_user_ids,
            "partially_available_user_ids": self.partially_available_user_ids,
            "tentative_user_ids": self.tentative_user_ids,
            "unavailable_user_ids": self.unavailable_user_ids,
        }
