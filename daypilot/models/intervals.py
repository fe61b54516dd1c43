# File: daypilot/models/intervals.py

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


class InvalidIntervalError(ValueError):
    """Raised when an interval ends before it starts or carries naive datetimes."""


def _is_aware(moment: datetime) -> bool:
    return moment.tzinfo is not None and moment.tzinfo.utcoffset(moment) is not None


@dataclass(frozen=True)
class TimeInterval:
    """A span between two absolute instants. Zero-length spans are valid."""
    start: datetime
    end: datetime

    def __post_init__(self):
        """Validate bounds."""
        if not (_is_aware(self.start) and _is_aware(self.end)):
            raise InvalidIntervalError(
                f"Interval bounds must be timezone-aware: {self.start} - {self.end}"
            )
        if self.end < self.start:
            raise InvalidIntervalError(
                f"Interval end {self.end.isoformat()} is before start {self.start.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_minutes(self) -> float:
        """Length in (possibly fractional) minutes."""
        return self.duration.total_seconds() / 60

    def overlaps(self, other: 'TimeInterval') -> bool:
        """Strict overlap; intervals that only touch do not overlap."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: 'TimeInterval') -> bool:
        return self.start <= other.start and other.end <= self.end

    def clip(self, bound: 'TimeInterval') -> Optional['TimeInterval']:
        """
        Restrict this interval to `bound`.

        Returns None when nothing of positive length remains.
        """
        start = max(self.start, bound.start)
        end = min(self.end, bound.end)
        if end <= start:
            return None
        return TimeInterval(start, end)

    def expanded(self, before_minutes: float = 0, after_minutes: float = 0) -> 'TimeInterval':
        """Widen the interval by a buffer on each side."""
        return TimeInterval(
            self.start - timedelta(minutes=before_minutes),
            self.end + timedelta(minutes=after_minutes),
        )

    def to_dict(self) -> dict:
        return {'start': self.start.isoformat(), 'end': self.end.isoformat()}
