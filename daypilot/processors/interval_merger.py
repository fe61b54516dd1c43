# File: daypilot/processors/interval_merger.py
"""
Interval merging: collapses busy intervals into the minimal sorted,
non-overlapping set that covers them.
"""

from datetime import timedelta
from typing import Iterable, List, Optional, Tuple

from daypilot.models.intervals import TimeInterval


def merge(intervals: Iterable[TimeInterval], clip_to: Optional[TimeInterval] = None) -> List[TimeInterval]:
    """
    Merge overlapping and touching intervals.

    Args:
        intervals: Intervals in any order.
        clip_to: Optional bound; each interval is clipped to it first and pieces
            that fall outside or shrink to zero length are dropped.

    Returns:
        Sorted, non-overlapping intervals. Intervals where next.start == current.end
        are joined, so no zero-length gap is ever reported between them.
    """
    candidates: List[TimeInterval] = []
    for interval in intervals:
        if clip_to is not None:
            clipped = interval.clip(clip_to)
            if clipped is None:
                continue
            candidates.append(clipped)
        else:
            candidates.append(interval)

    if not candidates:
        return []

    candidates.sort(key=lambda i: (i.start, i.end))

    merged: List[TimeInterval] = []
    current_start, current_end = candidates[0].start, candidates[0].end
    for interval in candidates[1:]:
        if interval.start <= current_end:
            if interval.end > current_end:
                current_end = interval.end
        else:
            merged.append(TimeInterval(current_start, current_end))
            current_start, current_end = interval.start, interval.end
    merged.append(TimeInterval(current_start, current_end))

    return merged


def merged_duration(merged: Iterable[TimeInterval]) -> timedelta:
    """Total covered time of already-merged intervals."""
    return sum((i.duration for i in merged), timedelta())


def merge_with_duration(intervals: Iterable[TimeInterval],
                        clip_to: Optional[TimeInterval] = None) -> Tuple[List[TimeInterval], timedelta]:
    merged = merge(intervals, clip_to)
    return merged, merged_duration(merged)
