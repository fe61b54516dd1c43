# File: daypilot/models/recurrence.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .intervals import TimeInterval


class RecurrenceParseError(ValueError):
    """Raised when an RRULE string cannot be parsed or is not supported."""


@dataclass(frozen=True)
class RecurrenceSpec:
    """A recurring event definition: RRULE text plus its seed occurrence."""
    rule: str
    first_occurrence: TimeInterval
    until: Optional[datetime] = None

    @property
    def dtstart(self) -> datetime:
        return self.first_occurrence.start


@dataclass(frozen=True)
class RecurrenceExpansion:
    """
    Outcome of expanding a recurrence.

    Either `ok` with the expanded intervals, or a parse failure carrying the
    error message and no intervals.
    """
    ok: bool
    intervals: List[TimeInterval] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def success(cls, intervals: List[TimeInterval]) -> 'RecurrenceExpansion':
        return cls(ok=True, intervals=list(intervals))

    @classmethod
    def parse_failed(cls, error: str) -> 'RecurrenceExpansion':
        return cls(ok=False, intervals=[], error=error)
