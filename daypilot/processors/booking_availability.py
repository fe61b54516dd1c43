# File: daypilot/processors/booking_availability.py
"""
Booking availability.

Generates the start times a booking link can offer on a date, after applying
excluded dates, minimum notice, the daily cap, weekday availability rules and
buffered conflicts with existing bookings. Rejections are never explained;
only the surviving set is returned.
"""

import datetime
from typing import Iterable, List, Optional, Sequence, Union

from daypilot.core.config_manager import Config
from daypilot.models import (
    AvailabilityRule,
    Booking,
    BookingConstraint,
    ScoredSlot,
    Task,
    TimeInterval,
)
from daypilot.models.common import get_timezone, local_time, format_hhmm
from daypilot.processors.slot_finder import score_slot, rank_slots
from daypilot.utils.logger import LoggerMixin

BookingLike = Union[Booking, TimeInterval]


def weekday_index(day: datetime.date) -> int:
    """Sunday-based weekday number (0 = Sunday .. 6 = Saturday)."""
    return day.isoweekday() % 7


def _active_intervals(bookings: Iterable[BookingLike]) -> List[TimeInterval]:
    intervals = []
    for booking in bookings:
        if isinstance(booking, Booking):
            if booking.status == 'cancelled':
                continue
            intervals.append(booking.interval)
        else:
            intervals.append(booking)
    return intervals


def find_rule(rules: Sequence[AvailabilityRule], day: datetime.date) -> Optional[AvailabilityRule]:
    """The available rule for the weekday of `day`, if any."""
    index = weekday_index(day)
    return next((r for r in rules if r.day_of_week == index and r.is_available), None)


def conflicts_with_bookings(slot: TimeInterval, bookings: Iterable[BookingLike],
                            constraint: BookingConstraint) -> bool:
    """
    True when the buffered slot intersects any buffered booking.

    Both the slot and each booking are widened by buffer_before / buffer_after.
    """
    before = constraint.buffer_before_minutes
    after = constraint.buffer_after_minutes
    padded_slot = slot.expanded(before, after)
    for booking in _active_intervals(bookings):
        padded_booking = booking.expanded(before, after)
        if padded_slot.overlaps(padded_booking) or padded_booking.overlaps(padded_slot):
            return True
    return False


def generate_slots(date: datetime.date,
                   rules: Sequence[AvailabilityRule],
                   excluded_dates: Iterable[datetime.date],
                   constraint: BookingConstraint,
                   confirmed_bookings: Sequence[BookingLike],
                   now: datetime.datetime,
                   rank: bool = False) -> Union[List[str], List[ScoredSlot]]:
    """
    Generate bookable start times for `date`.

    Args:
        date: Calendar date in the booking link's timezone.
        rules: Weekly availability rules (0 = Sunday).
        excluded_dates: Dates that are never bookable, merged with constraint.excluded_dates.
        constraint: Duration, buffers, notice, daily cap and timezone of the link.
        confirmed_bookings: Existing bookings (Booking or TimeInterval).
        now: Current instant (timezone-aware).
        rank: When True, return ScoredSlot objects ordered by score.

    Returns:
        'HH:MM' strings in ascending order, or ranked ScoredSlot objects when `rank`.
    """
    tz = get_timezone(constraint.timezone)
    min_notice = datetime.timedelta(minutes=constraint.min_notice_minutes)

    excluded = set(excluded_dates or ()) | set(constraint.excluded_dates)
    if date in excluded:
        return []

    if local_time(date, 0, tz) - now < min_notice:
        return []

    bookings = _active_intervals(confirmed_bookings)
    bookings_for_date = [b for b in bookings if b.start.astimezone(tz).date() == date]
    if (constraint.max_bookings_per_day is not None
            and len(bookings_for_date) >= constraint.max_bookings_per_day):
        return []

    rule = find_rule(rules, date)
    if rule is None:
        return []

    duration = datetime.timedelta(minutes=constraint.slot_duration_minutes)
    window_end = local_time(date, rule.window.end_minute, tz)

    available: List[TimeInterval] = []
    minute = rule.window.start_minute
    while minute < rule.window.end_minute:
        start = local_time(date, minute, tz)
        minute += Config.SLOT_STEP_MINUTES
        end = start + duration
        if end > window_end:
            continue
        if start < now or start - now < min_notice:
            continue
        slot = TimeInterval(start, end)
        if conflicts_with_bookings(slot, bookings, constraint):
            continue
        available.append(slot)

    if not rank:
        return [format_hhmm(slot.start) for slot in available]

    booking_task = Task(id='booking', title='Booking', duration_minutes=constraint.slot_duration_minutes)
    today = now.astimezone(tz).date()
    scored = [
        ScoredSlot(
            start=slot.start,
            end=slot.end,
            score=score_slot(slot, booking_task, bookings_for_date, rule.window, tz=tz, today=today),
        )
        for slot in available
    ]
    return rank_slots(scored)


class BookingAvailabilityGenerator(LoggerMixin):
    """Availability for one booking link across dates."""

    def __init__(self, rules: Sequence[AvailabilityRule], constraint: BookingConstraint):
        self.rules = list(rules)
        self.constraint = constraint

    def slots_for(self, date: datetime.date, bookings: Sequence[BookingLike],
                  now: datetime.datetime, rank: bool = False):
        return generate_slots(date, self.rules, (), self.constraint, bookings, now, rank)

    def available_dates(self, start_date: datetime.date, days: int,
                        bookings: Sequence[BookingLike], now: datetime.datetime) -> List[datetime.date]:
        """
        Dates in [start_date, start_date + days) offering at least one slot.

        Args:
            start_date: First date to check.
            days: Number of consecutive dates to check.
            bookings: Existing bookings for the link.
            now: Current instant.
        """
        dates = []
        for offset in range(days):
            day = start_date + datetime.timedelta(days=offset)
            if self.slots_for(day, bookings, now):
                dates.append(day)
        self.logger.debug(f"{len(dates)} of {days} dates from {start_date} have availability")
        return dates
