"""Play and scene availability search.

Combines the interval algebra with combination enumeration: finds the time
windows inside a search window in which every character of a play or scene
can be cast with actors who are free for the whole window.
"""

import logging
import time
from collections.abc import Iterable, Mapping, Sequence

from .combinations import enumerate_combinations, to_assignment_list, validate_castability
from .constants import DEFAULT_MAX_COMBINATIONS, DEFAULT_MIN_DURATION, ENTITY_TYPES
from .intervals import duration_minutes, filter_by_min_duration, intersect_all, merge, subtract
from .models import (
    AvailabilityResult,
    AvailabilitySlot,
    CharacterCandidates,
    TimeRange,
)

logger = logging.getLogger(__name__)


def free_ranges(window: TimeRange, busy: Iterable[TimeRange]) -> list[TimeRange]:
    """Get the parts of ``window`` not covered by any busy range."""
    return subtract(window, merge(busy))


def find_group_overlap(free_by_actor: Mapping[str, Sequence[TimeRange]]) -> list[TimeRange]:
    """Get the periods in which every actor of a group is free.

    Args:
        free_by_actor: Free ranges per actor

    Returns:
        Common free periods; empty if the group is empty
    """
    return intersect_all(free_by_actor.values())


def _elementary_segments(
    window: TimeRange, free_by_actor: Mapping[str, list[TimeRange]]
) -> list[TimeRange]:
    """Split ``window`` at every free-range boundary.

    Within each returned segment every actor is either free throughout or
    not free at any point.
    """
    points = {window.start, window.end}
    for ranges in free_by_actor.values():
        for r in ranges:
            points.add(r.start)
            points.add(r.end)

    ordered = sorted(p for p in points if window.start <= p <= window.end)
    return [TimeRange(a, b) for a, b in zip(ordered, ordered[1:]) if a < b]


def _free_throughout(ranges: list[TimeRange], segment: TimeRange) -> bool:
    return any(r.start <= segment.start and r.end >= segment.end for r in ranges)


def _restrict_candidates(
    characters: Sequence[CharacterCandidates], free_actors: set[str]
) -> list[CharacterCandidates]:
    return [
        CharacterCandidates(c.character_id, [a for a in c.actors if a in free_actors])
        for c in characters
    ]


def find_availability_slots(
    entity_id: str,
    entity_type: str,
    window: TimeRange,
    characters: Sequence[CharacterCandidates],
    actor_busy: Mapping[str, Iterable[TimeRange]],
    min_duration: int = DEFAULT_MIN_DURATION,
    allow_multiple_roles: bool = False,
    exclude_user_ids: Iterable[str] = (),
    max_combinations: int | None = DEFAULT_MAX_COMBINATIONS,
    time_budget: float | None = None,
) -> AvailabilityResult:
    """Find windows in which a play or scene can be fully cast.

    The search window is split into segments in which the set of free
    candidate actors is constant. Combinations are enumerated per segment,
    then the segments of each combination are merged and windows shorter
    than ``min_duration`` are dropped.

    Args:
        entity_id: Play or scene identifier
        entity_type: "play" or "scene"
        window: Search window
        characters: Characters with their candidate actors
        actor_busy: Busy ranges per actor; actors missing here are free
        min_duration: Minimum slot length in minutes
        allow_multiple_roles: Allow one actor to play several characters
        exclude_user_ids: Actors to leave out of the search
        max_combinations: Enumeration result budget per segment
        time_budget: Total search time budget in seconds

    Returns:
        AvailabilityResult with one slot per (window, combination), ordered
        by start time

    Raises:
        ValueError: If entity_type is not "play" or "scene"
        CombinationLimitExceeded: If the enumeration budget is exceeded
    """
    if entity_type not in ENTITY_TYPES:
        raise ValueError(
            f"Unsupported entity type: {entity_type}. Supported: {', '.join(ENTITY_TYPES)}"
        )

    started = time.perf_counter()
    excluded = set(exclude_user_ids)
    candidates = [
        CharacterCandidates(c.character_id, [a for a in c.actors if a not in excluded])
        for c in characters
    ]
    result = AvailabilityResult(entity_id=entity_id, entity_type=entity_type)

    verdict = validate_castability(candidates)
    if not verdict.valid:
        logger.warning(
            f"{entity_type} {entity_id}: no candidates for "
            f"{', '.join(verdict.uncastable_character_ids)}"
        )
        result.uncastable_characters = verdict.uncastable_character_ids
        return result
    if not candidates:
        logger.warning(f"{entity_type} {entity_id}: no characters to cast")
        return result

    actor_ids = {a for c in candidates for a in c.actors}
    free_by_actor = {
        actor_id: free_ranges(window, actor_busy.get(actor_id, ())) for actor_id in actor_ids
    }
    segments = _elementary_segments(window, free_by_actor)
    logger.info(
        f"Searching {entity_type} {entity_id}: {len(candidates)} characters, "
        f"{len(actor_ids)} actors, {len(segments)} segments"
    )

    # combination key -> segments in which it is castable
    windows: dict[tuple[tuple[str, str], ...], list[TimeRange]] = {}
    for segment in segments:
        free_actors = {
            actor_id
            for actor_id, ranges in free_by_actor.items()
            if _free_throughout(ranges, segment)
        }
        restricted = _restrict_candidates(candidates, free_actors)
        if not validate_castability(restricted).valid:
            continue

        remaining = None
        if time_budget is not None:
            remaining = max(0.0, time_budget - (time.perf_counter() - started))
        combinations = enumerate_combinations(
            restricted,
            allow_multiple_roles=allow_multiple_roles,
            max_results=max_combinations,
            time_budget=remaining,
        )
        result.combinations_evaluated += len(combinations)
        logger.debug(
            f"Segment {segment.start.isoformat()}-{segment.end.isoformat()}: "
            f"{len(free_actors)} free actors, {len(combinations)} combinations"
        )
        for combination in combinations:
            windows.setdefault(tuple(combination.items()), []).append(segment)

    slots: list[AvailabilitySlot] = []
    castable_keys = set()
    for key, ranges in windows.items():
        for slot_range in filter_by_min_duration(merge(ranges), min_duration):
            castable_keys.add(key)
            slots.append(
                AvailabilitySlot(
                    start=slot_range.start,
                    end=slot_range.end,
                    duration_minutes=duration_minutes(slot_range),
                    assignments=to_assignment_list(dict(key)),
                )
            )

    # Stable sort keeps combination discovery order within equal starts
    slots.sort(key=lambda s: (s.start, s.end))
    result.slots = slots
    result.combination_count = len(castable_keys)
    result.search_time_ms = (time.perf_counter() - started) * 1000

    logger.info(
        f"Found {len(slots)} slots with {result.combination_count} combinations "
        f"in {result.search_time_ms:.1f}ms"
    )
    return result
