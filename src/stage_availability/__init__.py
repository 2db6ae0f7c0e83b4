"""Stage Availability - availability and castability engine for theater scheduling.

This package derives free time windows from actors' busy schedules and
enumerates valid actor-to-character casting combinations within them.

Example usage:
    from stage_availability import CharacterCandidates, TimeRange, find_availability_slots

    result = find_availability_slots(
        entity_id="hamlet",
        entity_type="play",
        window=TimeRange(start, end),
        characters=[CharacterCandidates("hamlet", ["alice", "bob"])],
        actor_busy={"alice": [TimeRange(lunch_start, lunch_end)]},
    )

    for slot in result.slots:
        print(slot.start, slot.end, [a.actor_id for a in slot.assignments])
"""

from .availability import check_bulk_availability, check_user_availability
from .combinations import (
    enumerate_combinations,
    enumerate_exclusive,
    enumerate_multi_role,
    estimate_count,
    to_assignment_list,
    unique_actors,
    validate_castability,
)
from .config import ConfigLoader, EngineConfig
from .exceptions import (
    AvailabilityError,
    CombinationLimitExceeded,
    ConfigError,
    InvalidRangeError,
)
from .exporters import CSVExporter, ExcelExporter, JSONExporter, get_exporter
from .intervals import (
    duration_minutes,
    ensure_valid,
    filter_by_min_duration,
    intersect,
    intersect_all,
    merge,
    overlaps,
    subtract,
    subtract_one,
    total_minutes,
)
from .models import (
    ActorAssignment,
    Assignment,
    AvailabilityResult,
    AvailabilitySlot,
    BulkUserAvailabilityResult,
    CastabilityVerdict,
    CharacterCandidates,
    TimeRange,
    UserAvailabilityResult,
    UserAvailabilityStatus,
)
from .search import find_availability_slots, find_group_overlap, free_ranges

__version__ = "0.1.0"

__all__ = [
    # Interval algebra
    "merge",
    "subtract",
    "subtract_one",
    "intersect",
    "intersect_all",
    "overlaps",
    "duration_minutes",
    "total_minutes",
    "filter_by_min_duration",
    "ensure_valid",
    # Combinations
    "enumerate_exclusive",
    "enumerate_multi_role",
    "enumerate_combinations",
    "estimate_count",
    "validate_castability",
    "to_assignment_list",
    "unique_actors",
    # Search
    "find_availability_slots",
    "find_group_overlap",
    "free_ranges",
    "check_user_availability",
    "check_bulk_availability",
    # Models
    "TimeRange",
    "CharacterCandidates",
    "Assignment",
    "ActorAssignment",
    "CastabilityVerdict",
    "AvailabilitySlot",
    "AvailabilityResult",
    "UserAvailabilityStatus",
    "UserAvailabilityResult",
    "BulkUserAvailabilityResult",
    # Configuration
    "ConfigLoader",
    "EngineConfig",
    # Exporters
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "get_exporter",
    # Exceptions
    "AvailabilityError",
    "InvalidRangeError",
    "CombinationLimitExceeded",
    "ConfigError",
]
