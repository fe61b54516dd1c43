# File: daypilot/processors/gap_finder.py
"""
Free-time gaps between merged busy intervals inside a bound.
"""

from typing import List, Sequence

from daypilot.models.intervals import TimeInterval


def find_gaps(merged: Sequence[TimeInterval], bound: TimeInterval) -> List[TimeInterval]:
    """
    Return the free gaps of `bound` not covered by `merged`.

    `merged` must be sorted and non-overlapping (the output of interval_merger.merge).
    Gaps before the first and after the last busy interval are included.
    Zero- or negative-length gaps are omitted.
    """
    if not merged:
        return [bound]

    gaps: List[TimeInterval] = []
    cursor = bound.start
    for busy in merged:
        if busy.start > cursor:
            gap_end = min(busy.start, bound.end)
            if gap_end > cursor:
                gaps.append(TimeInterval(cursor, gap_end))
        if busy.end > cursor:
            cursor = busy.end
        if cursor >= bound.end:
            break

    if cursor < bound.end:
        gaps.append(TimeInterval(cursor, bound.end))

    return gaps


def total_gap_minutes(gaps: Sequence[TimeInterval]) -> float:
    return sum(g.duration_minutes() for g in gaps)


def average_gap_minutes(gaps: Sequence[TimeInterval]) -> float:
    """Arithmetic mean gap length; 0 when there are no gaps."""
    if not gaps:
        return 0.0
    return total_gap_minutes(gaps) / len(gaps)
