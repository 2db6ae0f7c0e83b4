"""User availability over a period.

Classifies a user's time within a period as free, tentative or busy from
the user's confirmed and tentative event blocks.
"""

import logging
from collections.abc import Iterable, Mapping

from .constants import DEFAULT_MIN_BLOCK_MINUTES
from .intervals import duration_minutes, filter_by_min_duration, intersect, merge, subtract, total_minutes
from .models import (
    BulkUserAvailabilityResult,
    TimeRange,
    UserAvailabilityResult,
    UserAvailabilityStatus,
)

logger = logging.getLogger(__name__)


def clip_to_period(period: TimeRange, ranges: Iterable[TimeRange]) -> list[TimeRange]:
    """Restrict ranges to a period and merge them.

    Ranges that only touch the period boundary are dropped.
    """
    return merge(intersect([period], list(ranges)))


def _determine_status(
    free_minutes: int,
    busy_blocks: list[TimeRange],
    tentative_blocks: list[TimeRange],
) -> UserAvailabilityStatus:
    if not busy_blocks and not tentative_blocks:
        return UserAvailabilityStatus.FREE
    if free_minutes > 0:
        return UserAvailabilityStatus.PARTIAL
    if busy_blocks:
        return UserAvailabilityStatus.BUSY
    return UserAvailabilityStatus.TENTATIVE


def check_user_availability(
    user_id: str,
    period: TimeRange,
    busy: Iterable[TimeRange] = (),
    tentative: Iterable[TimeRange] = (),
    min_block_minutes: int = DEFAULT_MIN_BLOCK_MINUTES,
) -> UserAvailabilityResult:
    """Compute free, tentative and busy blocks for one user.

    Busy time takes precedence over tentative time, so the tentative blocks
    never overlap the busy ones. Free blocks shorter than
    ``min_block_minutes`` are discarded.

    The status describes what blocks the period, not what survives the
    minimum-length filter: a period with no events is FREE even when it is
    itself shorter than ``min_block_minutes`` and so reports no free blocks.
    ``has_tentative_events`` is set for any tentative event in the period,
    including one that lies entirely inside busy time.

    Args:
        user_id: User identifier
        period: Period to check
        busy: Confirmed event blocks
        tentative: Tentative event blocks
        min_block_minutes: Minimum length of a reported free block

    Returns:
        UserAvailabilityResult for the period
    """
    busy_blocks = clip_to_period(period, busy)
    tentative_in_period = clip_to_period(period, tentative)
    tentative_blocks = [
        fragment
        for block in tentative_in_period
        for fragment in subtract(block, busy_blocks)
    ]

    blocked = merge(busy_blocks + tentative_blocks)
    free_blocks = filter_by_min_duration(subtract(period, blocked), min_block_minutes)
    free_minutes = total_minutes(free_blocks)

    status = _determine_status(free_minutes, busy_blocks, tentative_blocks)
    logger.debug(
        f"User {user_id}: {status.value}, free={free_minutes}m of {duration_minutes(period)}m"
    )

    return UserAvailabilityResult(
        user_id=user_id,
        period=period,
        status=status,
        free_blocks=free_blocks,
        tentative_blocks=tentative_blocks,
        busy_blocks=busy_blocks,
        total_free_minutes=free_minutes,
        total_tentative_minutes=total_minutes(tentative_blocks),
        total_busy_minutes=total_minutes(busy_blocks),
        has_tentative_events=bool(tentative_in_period),
    )


def check_bulk_availability(
    period: TimeRange,
    users: Mapping[str, Mapping[str, Iterable[TimeRange]]],
    min_block_minutes: int = DEFAULT_MIN_BLOCK_MINUTES,
) -> BulkUserAvailabilityResult:
    """Compute availability for several users over the same period.

    Args:
        period: Period to check
        users: Mapping of user id to {"busy": [...], "tentative": [...]}
        min_block_minutes: Minimum length of a reported free block

    Returns:
        BulkUserAvailabilityResult with per-user results in input order
    """
    results = [
        check_user_availability(
            user_id,
            period,
            busy=blocks.get("busy", ()),
            tentative=blocks.get("tentative", ()),
            min_block_minutes=min_block_minutes,
        )
        for user_id, blocks in users.items()
    ]
    bulk = BulkUserAvailabilityResult(period=period, results=results)
    logger.info(
        f"Checked {len(results)} users: {len(bulk.fully_available_user_ids)} free, "
        f"{len(bulk.partially_available_user_ids)} partial, "
        f"{len(bulk.unavailable_user_ids)} unavailable"
    )
    return bulk
