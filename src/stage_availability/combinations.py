"""Casting combination enumeration.

Finds every way to assign one candidate actor to each character. In
exclusive mode an actor may play at most one character per combination; in
multi-role mode the same actor may be cast several times.

Enumeration output grows exponentially with the number of characters that
share candidates, so both enumerators run under an explicit budget and raise
``CombinationLimitExceeded`` instead of returning a truncated list.
"""

import logging
import time
from collections.abc import Sequence
from math import prod

from .constants import DEFAULT_MAX_COMBINATIONS
from .exceptions import CombinationLimitExceeded
from .models import ActorAssignment, Assignment, CastabilityVerdict, CharacterCandidates

logger = logging.getLogger(__name__)


class _Budget:
    """Result-count and elapsed-time limits for one enumeration call."""

    def __init__(self, max_results: int | None, time_budget: float | None) -> None:
        self.max_results = max_results
        self.time_budget = time_budget
        self.deadline = (
            time.perf_counter() + time_budget if time_budget is not None else None
        )

    def check_time(self, produced: int) -> None:
        if self.deadline is not None and time.perf_counter() > self.deadline:
            raise CombinationLimitExceeded(self.time_budget, kind="time", produced=produced)

    def check_results(self, produced: int) -> None:
        if self.max_results is not None and produced > self.max_results:
            raise CombinationLimitExceeded(self.max_results, kind="results", produced=produced)


def _enumerate(
    characters: Sequence[CharacterCandidates],
    exclusive: bool,
    max_results: int | None,
    time_budget: float | None,
) -> list[Assignment]:
    """Depth-first search shared by both modes.

    Uses an explicit stack of candidate iterators, one per character on the
    current path, so depth is bounded only by the number of characters.
    """
    if not characters:
        return []

    budget = _Budget(max_results, time_budget)
    results: list[Assignment] = []
    # Actor chosen for each character on the current partial path
    path: list[str] = []
    # Actors on the current partial path only; rolled back on backtrack
    used: set[str] = set()
    pending = [iter(characters[0].actors)]

    while pending:
        budget.check_time(len(results))

        # Undo the previous choice at this depth before trying the next one
        if len(path) == len(pending):
            previous = path.pop()
            if exclusive:
                used.discard(previous)

        actor_id = next((a for a in pending[-1] if not (exclusive and a in used)), None)
        if actor_id is None:
            pending.pop()
            continue

        path.append(actor_id)
        if exclusive:
            used.add(actor_id)

        if len(path) == len(characters):
            results.append({c.character_id: a for c, a in zip(characters, path)})
            budget.check_results(len(results))
        else:
            pending.append(iter(characters[len(path)].actors))

    logger.debug(
        f"Enumerated {len(results)} combinations for {len(characters)} characters "
        f"({'exclusive' if exclusive else 'multi-role'})"
    )
    return results


def enumerate_exclusive(
    characters: Sequence[CharacterCandidates],
    max_results: int | None = DEFAULT_MAX_COMBINATIONS,
    time_budget: float | None = None,
) -> list[Assignment]:
    """Enumerate combinations where no actor plays two characters.

    Characters are processed in input order and candidates in list order,
    which fixes the order of the returned combinations.

    Args:
        characters: Characters with their candidate actors
        max_results: Maximum number of combinations to materialize,
                     None for no limit
        time_budget: Maximum search time in seconds, None for no limit

    Returns:
        List of character -> actor mappings. Empty if there are no
        characters or any character has no candidates.

    Raises:
        CombinationLimitExceeded: If either budget is exceeded

    Example:
        [hamlet: (alice, bob), ophelia: (alice, bob)]
        -> [{hamlet: alice, ophelia: bob}, {hamlet: bob, ophelia: alice}]
    """
    return _enumerate(characters, True, max_results, time_budget)


def enumerate_multi_role(
    characters: Sequence[CharacterCandidates],
    max_results: int | None = DEFAULT_MAX_COMBINATIONS,
    time_budget: float | None = None,
) -> list[Assignment]:
    """Enumerate combinations allowing one actor to play several characters.

    Equivalent to the Cartesian product of the candidate lists. Arguments,
    edge cases and errors are the same as for ``enumerate_exclusive``.
    """
    return _enumerate(characters, False, max_results, time_budget)


def enumerate_combinations(
    characters: Sequence[CharacterCandidates],
    allow_multiple_roles: bool = False,
    max_results: int | None = DEFAULT_MAX_COMBINATIONS,
    time_budget: float | None = None,
) -> list[Assignment]:
    """Enumerate combinations in the requested casting mode."""
    if allow_multiple_roles:
        return enumerate_multi_role(characters, max_results, time_budget)
    return enumerate_exclusive(characters, max_results, time_budget)


def estimate_count(characters: Sequence[CharacterCandidates], exclusive: bool) -> int:
    """Estimate the number of combinations without generating them.

    Multi-role mode gives the exact count. Exclusive mode gives an upper
    bound meant for performance planning: it can overestimate when
    candidate sets overlap unevenly.

    Args:
        characters: Characters with their candidate actors
        exclusive: True for exclusive mode, False for multi-role mode

    Returns:
        Number of combinations (exact or upper bound), 0 for empty input
    """
    if not characters:
        return 0

    counts = [len(c.actors) for c in characters]
    if not exclusive:
        return prod(counts)

    distinct_actors = {actor for c in characters for actor in c.actors}
    if len(characters) > len(distinct_actors):
        return 0

    return prod(max(0, count - i) for i, count in enumerate(counts))


def validate_castability(characters: Sequence[CharacterCandidates]) -> CastabilityVerdict:
    """Check that every character has at least one candidate actor.

    Args:
        characters: Characters with their candidate actors

    Returns:
        Verdict listing characters without candidates, in input order
    """
    uncastable = [c.character_id for c in characters if not c.actors]
    return CastabilityVerdict(valid=not uncastable, uncastable_character_ids=uncastable)


def to_assignment_list(assignment: Assignment) -> list[ActorAssignment]:
    """Flatten a combination into (character, actor) pairs."""
    return [
        ActorAssignment(character_id=character_id, actor_id=actor_id)
        for character_id, actor_id in assignment.items()
    ]


def unique_actors(assignment: Assignment) -> list[str]:
    """Get the distinct actors used by a combination, in first-use order."""
    return list(dict.fromkeys(assignment.values()))
