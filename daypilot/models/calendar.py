# File: daypilot/models/calendar.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .common import parse_iso_datetime
from .intervals import TimeInterval, InvalidIntervalError


@dataclass
class CalendarEvent:
    """
    A timed calendar item.

    `is_meeting` and `is_focus_time` are resolved by a classifier before the
    event reaches the analysis processors; the processors only read them.
    """
    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    category_id: Optional[str] = None
    is_meeting: bool = False
    is_focus_time: bool = False
    recurrence_rule: Optional[str] = None
    recurrence_end_date: Optional[datetime] = None
    description: Optional[str] = None
    status: str = "scheduled"
    parent_event_id: Optional[str] = None

    def __post_init__(self):
        """Validate event data."""
        if self.start is None or self.end is None:
            raise InvalidIntervalError(f"Event is missing start or end: {self.title}")
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidIntervalError(f"Event times must be timezone-aware: {self.title}")
        if self.end < self.start:
            raise InvalidIntervalError(f"Event end time must not be before start time: {self.title}")

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)

    @property
    def is_recurring(self) -> bool:
        return bool(self.recurrence_rule)

    def duration_minutes(self) -> int:
        """Calculate event duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps_with(self, other: 'CalendarEvent') -> bool:
        """Check if this event overlaps with another."""
        return self.start < other.end and self.end > other.start

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'all_day': self.all_day,
            'category_id': self.category_id,
            'is_meeting': self.is_meeting,
            'is_focus_time': self.is_focus_time,
            'recurrence_rule': self.recurrence_rule,
            'recurrence_end_date': self.recurrence_end_date.isoformat() if self.recurrence_end_date else None,
            'status': self.status,
        }


def event_from_dict(data: dict) -> CalendarEvent:
    """Create CalendarEvent from a store record (ISO-8601 timestamps)."""
    return CalendarEvent(
        id=str(data.get('id', '')),
        title=str(data.get('title') or 'Untitled Event'),
        start=parse_iso_datetime(data.get('start')),
        end=parse_iso_datetime(data.get('end')),
        all_day=bool(data.get('all_day', False)),
        category_id=data.get('category_id'),
        is_meeting=bool(data.get('is_meeting', False)),
        is_focus_time=bool(data.get('is_focus_time', False)),
        recurrence_rule=data.get('recurrence_rule') or None,
        recurrence_end_date=parse_iso_datetime(data.get('recurrence_end_date')),
        description=data.get('description'),
        status=str(data.get('status') or 'scheduled'),
        parent_event_id=data.get('parent_event_id'),
    )
