# File: daypilot/models/booking.py

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Iterable, Optional

from .common import parse_iso_datetime, parse_iso_date, parse_hhmm
from .config import WorkingWindow
from .intervals import TimeInterval, InvalidIntervalError


@dataclass(frozen=True)
class AvailabilityRule:
    """Bookable hours for one weekday. `day_of_week` is 0 = Sunday .. 6 = Saturday."""
    day_of_week: int
    window: WorkingWindow
    is_available: bool = True

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be 0..6 (0 = Sunday): {self.day_of_week}")


@dataclass(frozen=True)
class BookingConstraint:
    """Business constraints of a booking link."""
    slot_duration_minutes: int
    buffer_before_minutes: int = 0
    buffer_after_minutes: int = 0
    min_notice_minutes: int = 0
    max_bookings_per_day: Optional[int] = None
    excluded_dates: FrozenSet[date] = field(default_factory=frozenset)
    timezone: str = "UTC"

    def __post_init__(self):
        """Validate numeric constraints."""
        if self.slot_duration_minutes <= 0:
            raise ValueError(f"Slot duration must be positive: {self.slot_duration_minutes}")
        for name in ('buffer_before_minutes', 'buffer_after_minutes', 'min_notice_minutes'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")
        if self.max_bookings_per_day is not None and self.max_bookings_per_day < 0:
            raise ValueError("max_bookings_per_day cannot be negative")
        if not isinstance(self.excluded_dates, frozenset):
            object.__setattr__(self, 'excluded_dates', frozenset(self.excluded_dates))


@dataclass(frozen=True)
class Booking:
    """A booking made through a booking link."""
    id: str
    start: datetime
    end: datetime
    status: str = "confirmed"

    def __post_init__(self):
        if self.start is None or self.end is None:
            raise InvalidIntervalError(f"Booking {self.id} is missing start or end")
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidIntervalError(f"Booking {self.id} times must be timezone-aware")
        if self.end < self.start:
            raise InvalidIntervalError(f"Booking {self.id} has invalid times: {self.start} - {self.end}")

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)

    @property
    def is_confirmed(self) -> bool:
        return self.status == "confirmed"


def availability_rule_from_dict(data: dict) -> AvailabilityRule:
    """Create AvailabilityRule from a store record with 'HH:MM[:SS]' times."""
    return AvailabilityRule(
        day_of_week=int(data['day_of_week']),
        window=WorkingWindow(parse_hhmm(data['start_time']), parse_hhmm(data['end_time'])),
        is_available=bool(data.get('is_available', True)),
    )


def booking_constraint_from_dict(data: dict, excluded: Iterable = ()) -> BookingConstraint:
    """Create BookingConstraint from a booking-link record and its excluded dates."""
    excluded_dates = set()
    for item in excluded:
        raw = item.get('excluded_date') if isinstance(item, dict) else item
        parsed = parse_iso_date(raw)
        if parsed:
            excluded_dates.add(parsed)

    max_per_day = data.get('max_per_day')
    return BookingConstraint(
        slot_duration_minutes=int(data.get('duration', 30)),
        buffer_before_minutes=int(data.get('buffer_before') or 0),
        buffer_after_minutes=int(data.get('buffer_after') or 0),
        min_notice_minutes=int(data.get('min_notice') or 0),
        max_bookings_per_day=int(max_per_day) if max_per_day else None,
        excluded_dates=frozenset(excluded_dates),
        timezone=str(data.get('timezone') or 'UTC'),
    )


def booking_from_dict(data: dict) -> Booking:
    return Booking(
        id=str(data.get('id', '')),
        start=parse_iso_datetime(data.get('start_time')),
        end=parse_iso_datetime(data.get('end_time')),
        status=str(data.get('status') or 'confirmed'),
    )
