"""Interval algebra over time ranges.

All functions are pure and accept ranges in any order; sorting happens
internally. Two boundary rules coexist and downstream code relies on both:

- ``merge`` treats touching ranges (``a.end == b.start``) as contiguous and
  coalesces them.
- ``intersect`` and ``overlaps`` treat touching ranges as disjoint, so a
  shared boundary never yields a usable window.
"""

from collections.abc import Iterable, Sequence

from .exceptions import InvalidRangeError
from .models import TimeRange


def _by_start(ranges: Iterable[TimeRange]) -> list[TimeRange]:
    return sorted(ranges, key=lambda r: r.start)


def ensure_valid(ranges: Iterable[TimeRange]) -> None:
    """Check that every range ends after it starts.

    The algebra itself tolerates degenerate ranges; call this where a
    stricter guarantee is wanted.

    Args:
        ranges: Ranges to check

    Raises:
        InvalidRangeError: On the first range with ``start >= end``
    """
    for index, time_range in enumerate(ranges):
        if time_range.is_degenerate:
            raise InvalidRangeError(time_range, index)


def merge(ranges: Iterable[TimeRange]) -> list[TimeRange]:
    """Merge overlapping or touching ranges.

    Args:
        ranges: Ranges in any order

    Returns:
        Sorted, disjoint ranges covering the same time

    Example:
        09:00-11:00 and 10:00-12:00 -> 09:00-12:00
        09:00-10:00 and 10:00-11:00 -> 09:00-11:00
    """
    merged: list[TimeRange] = []
    for current in _by_start(ranges):
        if merged and current.start <= merged[-1].end:
            last = merged[-1]
            if current.end > last.end:
                merged[-1] = TimeRange(last.start, current.end)
        else:
            merged.append(current)
    return merged


def subtract_one(base: TimeRange, cut: TimeRange) -> list[TimeRange]:
    """Remove a single range from ``base``.

    Args:
        base: Range to subtract from
        cut: Range to remove

    Returns:
        Zero, one or two surviving fragments of ``base``
    """
    # Empty cuts and cuts touching the boundary remove nothing
    if cut.is_degenerate or cut.end <= base.start or cut.start >= base.end:
        return [base]

    fragments: list[TimeRange] = []
    if cut.start > base.start:
        fragments.append(TimeRange(base.start, cut.start))
    if cut.end < base.end:
        fragments.append(TimeRange(cut.end, base.end))
    return fragments


def subtract(base: TimeRange, cuts: Iterable[TimeRange]) -> list[TimeRange]:
    """Remove every range in ``cuts`` from ``base``.

    Cuts are applied in order, each to the fragments left by the previous
    ones.

    Args:
        base: Range to subtract from (typically a search window)
        cuts: Ranges to remove (typically busy events)

    Returns:
        Remaining fragments of ``base``

    Example:
        09:00-17:00 minus 12:00-13:00 -> [09:00-12:00, 13:00-17:00]
    """
    remaining = [base]
    for cut in cuts:
        remaining = [fragment for piece in remaining for fragment in subtract_one(piece, cut)]
        if not remaining:
            break
    return remaining


def intersect(a: Sequence[TimeRange], b: Sequence[TimeRange]) -> list[TimeRange]:
    """Find the periods covered by both collections.

    Uses a two-pointer sweep over both collections sorted by start. Pairs
    that only share a boundary produce no range.

    Args:
        a: First collection, e.g. one actor's free time
        b: Second collection, e.g. another actor's free time

    Returns:
        Overlapping periods with positive duration

    Example:
        [09:00-14:00] and [12:00-17:00] -> [12:00-14:00]
    """
    if not a or not b:
        return []

    sorted_a = _by_start(a)
    sorted_b = _by_start(b)
    result: list[TimeRange] = []
    i = j = 0

    while i < len(sorted_a) and j < len(sorted_b):
        range_a = sorted_a[i]
        range_b = sorted_b[j]

        start = max(range_a.start, range_b.start)
        end = min(range_a.end, range_b.end)
        if start < end:
            result.append(TimeRange(start, end))

        # Advance whichever range finishes first
        if range_a.end <= range_b.end:
            i += 1
        else:
            j += 1

    return result


def intersect_all(collections: Iterable[Sequence[TimeRange]]) -> list[TimeRange]:
    """Intersect any number of collections.

    Args:
        collections: Range collections, e.g. free time per actor

    Returns:
        Periods covered by every collection; empty if none are given
    """
    result: list[TimeRange] | None = None
    for ranges in collections:
        result = list(ranges) if result is None else intersect(result, ranges)
        if not result:
            return []
    return merge(result) if result else []


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    """Check whether two ranges overlap. Touching ranges do not."""
    return a.start < b.end and a.end > b.start


def duration_minutes(time_range: TimeRange) -> int:
    """Get the length of a range in whole minutes.

    Partial minutes are truncated. Degenerate ranges have zero duration.
    """
    if time_range.is_degenerate:
        return 0
    return int((time_range.end - time_range.start).total_seconds() // 60)


def total_minutes(ranges: Iterable[TimeRange]) -> int:
    """Sum the durations of ``ranges`` in minutes."""
    return sum(duration_minutes(r) for r in ranges)


def filter_by_min_duration(ranges: Iterable[TimeRange], min_minutes: int) -> list[TimeRange]:
    """Keep only ranges lasting at least ``min_minutes``.

    Args:
        ranges: Ranges to filter
        min_minutes: Minimum duration in minutes (inclusive)

    Returns:
        Ranges meeting the threshold, in input order
    """
    return [r for r in ranges if duration_minutes(r) >= min_minutes]
