# File: tests/unit/test_slot_finder.py
"""
Unit tests for slot scoring and task placement.
"""

import pytest
from datetime import timedelta

from daypilot.models import Priority, ScoredSlot, TaskStatus
from daypilot.processors.slot_finder import find_best_slots, rank_slots, score_slot


class TestScoreSlot:
    """Tests for the placement heuristic."""

    def test_plain_slot_inside_working_hours(self, create_task, interval, working_window, day, utc):
        score = score_slot(interval("09:00", "10:00"), create_task(), [], working_window, tz=utc, today=day)
        assert score == 135

    def test_overdue_task_prefers_earlier_slots(self, create_task, interval, working_window, day, utc):
        task = create_task(due_date=day - timedelta(days=2))

        early = score_slot(interval("09:00", "10:00"), task, [], working_window, tz=utc, today=day)
        late = score_slot(interval("15:00", "16:00"), task, [], working_window, tz=utc, today=day)

        assert early == 100 + 50 - 54 + 20 + 15
        assert early > late

    def test_due_today_bonus(self, create_task, interval, working_window, day, utc):
        task = create_task(due_date=day)
        score = score_slot(interval("09:00", "10:00"), task, [], working_window, tz=utc, today=day)

        assert score == 100 + 30 - 27 + 20 + 15

    def test_outside_working_hours_loses_bonus(self, create_task, interval, working_window, day, utc):
        score = score_slot(interval("18:00", "19:00"), create_task(), [], working_window, tz=utc, today=day)
        assert score == 115

    def test_nearby_events_are_penalised(self, create_task, create_event, interval, working_window, day, utc):
        events = [create_event("a", "08:00", "09:00"), create_event("b", "10:10", "11:00")]
        score = score_slot(interval("09:05", "10:05"), create_task(), events, working_window, tz=utc, today=day)

        assert score == 100 + 20 - 2 * 5


class TestRankSlots:
    """Tests for ranking."""

    def test_equal_scores_keep_time_order(self, at):
        slots = [
            ScoredSlot(at("09:00"), at("10:00"), 50),
            ScoredSlot(at("10:00"), at("11:00"), 80),
            ScoredSlot(at("11:00"), at("12:00"), 50),
        ]
        ranked = rank_slots(slots, max_slots=2)

        assert [s.start for s in ranked] == [at("10:00"), at("09:00")]


class TestFindBestSlots:
    """Tests for finding placements inside free gaps."""

    def test_gap_one_minute_too_short_yields_nothing(self, create_task, create_event, working_window, day, utc):
        events = [create_event("a", "08:00", "12:00"), create_event("b", "12:59", "17:00")]
        slots = find_best_slots(create_task(duration_minutes=60), events, working_window,
                                day=day, tz=utc, today=day)
        assert slots == []

    def test_exact_gap_yields_one_slot(self, create_task, create_event, working_window, day, utc, at):
        events = [create_event("a", "08:00", "12:00"), create_event("b", "13:00", "17:00")]
        slots = find_best_slots(create_task(duration_minutes=60), events, working_window,
                                day=day, tz=utc, today=day)

        assert len(slots) == 1
        assert slots[0].start == at("12:00")
        assert slots[0].end == at("13:00")
        assert slots[0].time_string == "12:00"

    def test_empty_day_ties_resolve_to_earliest(self, create_task, working_window, day, utc, at):
        slots = find_best_slots(create_task(), [], working_window, day=day, tz=utc, today=day)

        assert [s.start for s in slots] == [at("08:00"), at("08:15"), at("08:30")]
        assert all(s.score == 135 for s in slots)

    def test_results_are_sorted_by_score(self, create_task, scenario_events, working_window, day, utc):
        task = create_task(duration_minutes=30, due_date=day)
        slots = find_best_slots(task, scenario_events, working_window, max_slots=10,
                                day=day, tz=utc, today=day)

        scores = [s.score for s in slots]
        assert scores == sorted(scores, reverse=True)
        # 08:00, 08:15, 08:30, 12:00, 12:15, 12:30
        assert len(slots) == 6

    def test_completed_task_gets_no_slots(self, create_task, working_window, day, utc):
        task = create_task(status=TaskStatus.COMPLETED)
        assert find_best_slots(task, [], working_window, day=day, tz=utc, today=day) == []

    @pytest.mark.parametrize("max_slots", [0, -1])
    def test_non_positive_max_slots(self, create_task, working_window, day, utc, max_slots):
        assert find_best_slots(create_task(), [], working_window, max_slots, day=day, tz=utc, today=day) == []

    def test_all_day_events_do_not_block(self, create_task, create_event, working_window, day, utc):
        events = [create_event("h", "00:00", "23:59", all_day=True)]
        task = create_task(priority=Priority.HIGH)

        assert len(find_best_slots(task, events, working_window, day=day, tz=utc, today=day)) == 3
