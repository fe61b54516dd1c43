# File: tests/unit/test_booking_availability.py
"""
Unit tests for booking availability generation.
"""

import pytest
from datetime import date, timedelta

from daypilot.models import (
    AvailabilityRule,
    Booking,
    BookingConstraint,
    ScoredSlot,
    WorkingWindow,
)
from daypilot.processors.booking_availability import (
    BookingAvailabilityGenerator,
    conflicts_with_bookings,
    find_rule,
    generate_slots,
    weekday_index,
)


@pytest.fixture
def monday_rule():
    """Mondays 09:00-12:00."""
    return AvailabilityRule(day_of_week=1, window=WorkingWindow(540, 720))


@pytest.fixture
def constraint():
    return BookingConstraint(slot_duration_minutes=30, buffer_after_minutes=15)


@pytest.fixture
def yesterday_noon(at, day):
    return at("12:00", on=day - timedelta(days=1))


@pytest.fixture
def booking(at):
    return Booking(id="b1", start=at("10:00"), end=at("10:30"))


class TestWeekdays:
    """Tests for Sunday-based weekday handling."""

    def test_weekday_index_is_sunday_based(self):
        assert weekday_index(date(2024, 3, 10)) == 0  # Sunday
        assert weekday_index(date(2024, 3, 11)) == 1  # Monday
        assert weekday_index(date(2024, 3, 16)) == 6  # Saturday

    def test_find_rule_skips_unavailable_rules(self, day):
        rules = [AvailabilityRule(1, WorkingWindow(540, 720), is_available=False)]
        assert find_rule(rules, day) is None


class TestBufferConflicts:
    """Tests for buffered booking conflicts."""

    def test_slot_inside_buffer_is_rejected(self, booking, constraint, interval):
        assert conflicts_with_bookings(interval("10:40", "11:10"), [booking], constraint) is True

    def test_slot_after_buffer_is_accepted(self, booking, constraint, interval):
        assert conflicts_with_bookings(interval("10:46", "11:16"), [booking], constraint) is False

    def test_buffer_before_applies_to_both_sides(self, booking, interval):
        constraint = BookingConstraint(slot_duration_minutes=30, buffer_before_minutes=10)
        # Slot ends 09:45, booking (widened) starts 09:50, slot (widened) starts 09:05
        assert conflicts_with_bookings(interval("09:15", "09:45"), [booking], constraint) is False
        assert conflicts_with_bookings(interval("09:25", "09:55"), [booking], constraint) is True

    def test_cancelled_bookings_do_not_conflict(self, at, constraint, interval):
        cancelled = Booking(id="b1", start=at("10:00"), end=at("10:30"), status="cancelled")
        assert conflicts_with_bookings(interval("10:00", "10:30"), [cancelled], constraint) is False


class TestGenerateSlots:
    """Tests for slot generation on a single date."""

    def test_free_morning(self, day, monday_rule, constraint, yesterday_noon):
        slots = generate_slots(day, [monday_rule], [], constraint, [], yesterday_noon)

        assert slots[0] == "09:00"
        assert slots[-1] == "11:30"
        assert len(slots) == 11

    def test_existing_booking_and_buffer(self, day, monday_rule, constraint, booking, yesterday_noon):
        slots = generate_slots(day, [monday_rule], [], constraint, [booking], yesterday_noon)
        assert slots == ["09:00", "09:15", "10:45", "11:00", "11:15", "11:30"]

    def test_excluded_date(self, day, monday_rule, constraint, yesterday_noon):
        assert generate_slots(day, [monday_rule], [day], constraint, [], yesterday_noon) == []

    def test_excluded_date_on_constraint(self, day, monday_rule, yesterday_noon):
        constraint = BookingConstraint(slot_duration_minutes=30, excluded_dates={day})
        assert generate_slots(day, [monday_rule], [], constraint, [], yesterday_noon) == []

    def test_no_rule_for_weekday(self, day, monday_rule, constraint, at):
        sunday = day - timedelta(days=1)
        now = at("12:00", on=sunday - timedelta(days=1))
        assert generate_slots(sunday, [monday_rule], [], constraint, [], now) == []

    def test_daily_cap_reached(self, day, monday_rule, booking, yesterday_noon):
        constraint = BookingConstraint(slot_duration_minutes=30, max_bookings_per_day=1)
        assert generate_slots(day, [monday_rule], [], constraint, [booking], yesterday_noon) == []

    def test_daily_cap_ignores_other_dates(self, day, monday_rule, at, yesterday_noon):
        constraint = BookingConstraint(slot_duration_minutes=30, max_bookings_per_day=1)
        other_day = Booking(id="b2", start=at("10:00", on=day + timedelta(days=7)),
                            end=at("10:30", on=day + timedelta(days=7)))

        assert len(generate_slots(day, [monday_rule], [], constraint, [other_day], yesterday_noon)) == 11

    def test_min_notice_rejects_whole_date(self, day, monday_rule, at):
        constraint = BookingConstraint(slot_duration_minutes=30, min_notice_minutes=120)
        now = at("23:00", on=day - timedelta(days=1))

        assert generate_slots(day, [monday_rule], [], constraint, [], now) == []

    def test_same_day_is_not_bookable(self, day, monday_rule, constraint, at):
        assert generate_slots(day, [monday_rule], [], constraint, [], at("07:00")) == []

    def test_slots_follow_link_timezone(self, day, monday_rule, at):
        constraint = BookingConstraint(slot_duration_minutes=60, timezone="America/New_York")
        now = at("12:00", on=day - timedelta(days=2))

        slots = generate_slots(day, [monday_rule], [], constraint, [], now, rank=True)

        assert slots[0].time_string in {"09:00", "09:15", "09:30", "09:45", "10:00", "10:15",
                                        "10:30", "10:45", "11:00"}
        # 09:00 New York is 13:00 UTC (EDT since 2024-03-10)
        assert min(s.start for s in slots) == at("13:00")

    def test_ranked_output(self, day, monday_rule, constraint, booking, yesterday_noon):
        ranked = generate_slots(day, [monday_rule], [], constraint, [booking], yesterday_noon, rank=True)

        assert all(isinstance(s, ScoredSlot) for s in ranked)
        assert len(ranked) == 6
        scores = [s.score for s in ranked]
        assert scores == sorted(scores, reverse=True)


class TestBookingAvailabilityGenerator:
    """Tests for the per-link generator."""

    def test_available_dates(self, day, monday_rule, constraint, at):
        generator = BookingAvailabilityGenerator([monday_rule], constraint)
        now = at("12:00", on=day - timedelta(days=2))

        dates = generator.available_dates(day - timedelta(days=1), 14, [], now)

        assert dates == [day, day + timedelta(days=7)]

    def test_slots_for(self, day, monday_rule, constraint, booking, yesterday_noon):
        generator = BookingAvailabilityGenerator([monday_rule], constraint)
        assert generator.slots_for(day, [booking], yesterday_noon)[:2] == ["09:00", "09:15"]
