# File: tests/unit/test_recurrence_expander.py
"""
Unit tests for recurrence expansion.
"""

import pytest
from datetime import date, timedelta

from daypilot.models import InvalidIntervalError, RecurrenceParseError, RecurrenceSpec
from daypilot.processors.recurrence_expander import (
    expand,
    expand_events,
    expand_recurrence,
    parse_rule,
)


@pytest.fixture
def seed(interval):
    """Monday 2024-03-11 09:00-09:30 UTC."""
    return interval("09:00", "09:30")


@pytest.fixture
def march(at):
    return at("00:00", on=date(2024, 3, 1)), at("00:00", on=date(2024, 4, 1))


class TestParseRule:
    """Tests for RRULE parsing."""

    def test_accepts_rrule_prefix(self, seed):
        rule = parse_rule("RRULE:FREQ=DAILY;COUNT=3", seed.start)
        assert len(list(rule)) == 3

    def test_lowercase_rule_is_accepted(self, seed):
        rule = parse_rule("freq=weekly;count=2", seed.start)
        assert len(list(rule)) == 2

    @pytest.mark.parametrize("text", [
        "",
        "NOT A RULE",
        "FREQ=SOMETIMES",
        "FREQ=HOURLY;COUNT=3",
        "FREQ=DAILY;INTERVAL=abc",
        "FREQ=DAILY\nFREQ=WEEKLY",
    ])
    def test_malformed_rules_raise_parse_error(self, seed, text):
        with pytest.raises(RecurrenceParseError):
            parse_rule(text, seed.start)


class TestExpand:
    """Tests for expanding a single recurrence."""

    def test_count_is_exact(self, seed, march):
        occurrences = expand(RecurrenceSpec("FREQ=DAILY;COUNT=5", seed), *march)

        assert len(occurrences) == 5
        assert all(o.duration == seed.duration for o in occurrences)
        assert occurrences[0].start == seed.start
        assert occurrences[-1].start == seed.start + timedelta(days=4)

    def test_infinite_weekly_rule_is_clipped_to_window(self, seed, at):
        window_start = at("00:00", on=date(2024, 3, 20))
        window_end = window_start + timedelta(days=90)

        occurrences = expand(RecurrenceSpec("FREQ=WEEKLY;BYDAY=MO", seed), window_start, window_end)

        assert len(occurrences) == 13
        assert all(window_start <= o.start <= window_end for o in occurrences)

    def test_window_start_is_inclusive(self, seed):
        occurrences = expand(RecurrenceSpec("FREQ=DAILY", seed), seed.start, seed.start)
        assert [o.start for o in occurrences] == [seed.start]

    def test_utc_until_is_inclusive(self, seed, march):
        occurrences = expand(RecurrenceSpec("FREQ=DAILY;UNTIL=20240313T090000Z", seed), *march)
        assert len(occurrences) == 3

    def test_spec_until_caps_expansion(self, seed, march, at):
        spec = RecurrenceSpec("FREQ=DAILY", seed, until=at("23:59", on=date(2024, 3, 12)))
        assert len(expand(spec, *march)) == 2

    def test_until_before_window_returns_nothing(self, seed, march, at):
        spec = RecurrenceSpec("FREQ=DAILY", seed, until=at("00:00", on=date(2024, 2, 1)))
        assert expand(spec, *march) == []

    def test_inverted_window_raises_error(self, seed, march):
        with pytest.raises(InvalidIntervalError):
            expand(RecurrenceSpec("FREQ=DAILY", seed), march[1], march[0])

    def test_monthly_rule_with_interval(self, interval, at):
        seed = interval("09:00", "09:30", on=date(2024, 1, 15))
        year = at("00:00", on=date(2024, 1, 1)), at("00:00", on=date(2025, 1, 1))

        occurrences = expand(RecurrenceSpec("FREQ=MONTHLY;INTERVAL=2;COUNT=4", seed), *year)

        assert [o.start.month for o in occurrences] == [1, 3, 5, 7]
        assert all(o.start.day == 15 and o.start.hour == 9 for o in occurrences)

    def test_yearly_rule_gives_one_occurrence_per_year(self, seed, at):
        window_start = at("00:00", on=date(2024, 1, 1))
        window_end = at("00:00", on=date(2028, 1, 1))

        occurrences = expand(RecurrenceSpec("FREQ=YEARLY", seed), window_start, window_end)

        assert [o.start.year for o in occurrences] == [2024, 2025, 2026, 2027]
        assert all((o.start.month, o.start.day) == (3, 11) for o in occurrences)

    def test_daily_rule_with_interval(self, seed, march):
        occurrences = expand(RecurrenceSpec("FREQ=DAILY;INTERVAL=3", seed), *march)

        assert [o.start.day for o in occurrences] == [11, 14, 17, 20, 23, 26, 29]

    def test_weekly_meeting_keeps_local_time_across_dst(self, interval, amsterdam, at):
        seed = interval("09:00", "10:00", on=date(2024, 3, 25), tz=amsterdam)
        window_start = at("00:00", on=date(2024, 3, 20))
        window_end = at("00:00", on=date(2024, 4, 12))

        occurrences = expand(RecurrenceSpec("FREQ=WEEKLY", seed), window_start, window_end)

        assert len(occurrences) == 3
        assert [o.start.astimezone(amsterdam).hour for o in occurrences] == [9, 9, 9]
        # Offset changes from +01:00 to +02:00 on 2024-03-31
        assert [o.start.utcoffset() for o in occurrences] == [
            timedelta(hours=1), timedelta(hours=2), timedelta(hours=2),
        ]
        assert all(o.duration_minutes() == 60 for o in occurrences)


class TestExpandRecurrence:
    """Tests for the non-raising expansion result."""

    def test_success(self, seed, march):
        result = expand_recurrence(RecurrenceSpec("FREQ=DAILY;COUNT=2", seed), *march)

        assert result.ok is True
        assert len(result.intervals) == 2
        assert result.error is None

    def test_parse_failure_yields_no_intervals(self, seed, march):
        result = expand_recurrence(RecurrenceSpec("FREQ=SOMETIMES", seed), *march)

        assert result.ok is False
        assert result.intervals == []
        assert "SOMETIMES" in result.error


class TestExpandEvents:
    """Tests for expanding event lists."""

    def test_instances_reference_their_parent(self, create_event, march):
        master = create_event("m1", "09:00", "09:30", recurrence_rule="FREQ=DAILY;COUNT=3")

        instances = expand_events([master], *march)

        assert len(instances) == 3
        assert all(i.parent_event_id == "m1" for i in instances)
        assert all(not i.is_recurring for i in instances)
        assert instances[0].id == f"m1-{int(master.start.timestamp() * 1000)}"
        assert len({i.id for i in instances}) == 3

    def test_single_events_outside_window_are_dropped(self, create_event, at):
        inside = create_event("in", "09:00", "10:00")
        outside = create_event("out", "09:00", "10:00", on=date(2024, 3, 12))

        result = expand_events([inside, outside], at("00:00"), at("23:59"))

        assert [e.id for e in result] == ["in"]

    def test_bad_rule_is_skipped_and_other_events_survive(self, create_event, march):
        broken = create_event("bad", "09:00", "09:30", recurrence_rule="FREQ=NEVER")
        plain = create_event("ok", "11:00", "12:00")

        result = expand_events([broken, plain], *march)

        assert [e.id for e in result] == ["ok"]
