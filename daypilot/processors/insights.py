# File: daypilot/processors/insights.py
"""
Day and week time-use insights, composed from the interval merger and gap finder.
"""

import datetime
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from daypilot.core.config_manager import Config
from daypilot.models import (
    CalendarEvent,
    Task,
    WorkingWindow,
    RiskThresholds,
    CategoryMinutes,
    DayInsights,
    WeeklyInsights,
    DayOverview,
)
from daypilot.models.common import get_timezone
from daypilot.processors.interval_merger import merge, merged_duration
from daypilot.processors.gap_finder import find_gaps, total_gap_minutes, average_gap_minutes
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)


def _busy_minutes(events: Sequence[CalendarEvent], bounds) -> float:
    merged = merge((e.interval for e in events), clip_to=bounds)
    return merged_duration(merged).total_seconds() / 60


def start_of_week(day: datetime.date) -> datetime.date:
    """The Sunday on or before `day`."""
    return day - datetime.timedelta(days=day.isoweekday() % 7)


def calculate_day_insights(day: datetime.date,
                           events: Sequence[CalendarEvent],
                           working_window: Optional[WorkingWindow] = None,
                           *,
                           tz=None,
                           thresholds: Optional[RiskThresholds] = None) -> DayInsights:
    """
    Summarise how the working window of `day` is used.

    Meeting, focus and per-category minutes are each merged separately, so
    overlapping events never count twice within one figure.
    """
    tz = get_timezone(tz or Config.TARGET_TIMEZONE)
    working_window = working_window or Config.default_working_window()
    thresholds = thresholds or Config.default_thresholds()

    bounds = working_window.bounds_for(day, tz)
    timed = [e for e in events if not e.all_day and e.start < bounds.end and e.end > bounds.start]
    working_minutes = working_window.duration_minutes

    merged = merge((e.interval for e in timed), clip_to=bounds)
    scheduled = merged_duration(merged).total_seconds() / 60
    gaps = find_gaps(merged, bounds)

    meeting = _busy_minutes([e for e in timed if e.is_meeting], bounds)
    focus = _busy_minutes([e for e in timed if e.is_focus_time], bounds)

    by_category: Dict[Optional[str], List[CalendarEvent]] = defaultdict(list)
    for event in timed:
        by_category[event.category_id].append(event)
    categories = sorted(
        (CategoryMinutes(category_id, round(_busy_minutes(group, bounds)))
         for category_id, group in by_category.items()),
        key=lambda c: -c.minutes,
    )

    busy_ratio = scheduled / working_minutes
    return DayInsights(
        day=day,
        total_scheduled_minutes=round(scheduled),
        meeting_minutes=round(meeting),
        focus_time_minutes=round(focus),
        busy_ratio=busy_ratio,
        meeting_load_percent=meeting / working_minutes * 100,
        avg_gap_minutes=round(average_gap_minutes(gaps)),
        total_gap_minutes=round(total_gap_minutes(gaps)),
        is_overbooked=busy_ratio > thresholds.overbooked_ratio,
        categories=categories,
    )


def calculate_weekly_insights(week_start: datetime.date,
                              events: Sequence[CalendarEvent],
                              working_window: Optional[WorkingWindow] = None,
                              *,
                              tz=None,
                              thresholds: Optional[RiskThresholds] = None) -> WeeklyInsights:
    """Insights for the seven days starting at `week_start`, with averages over all seven."""
    days = [
        calculate_day_insights(
            week_start + datetime.timedelta(days=i), events, working_window,
            tz=tz, thresholds=thresholds,
        )
        for i in range(7)
    ]

    most_overloaded: Optional[DayInsights] = None
    for insight in days:
        if insight.busy_ratio > (most_overloaded.busy_ratio if most_overloaded else 0):
            most_overloaded = insight

    category_totals: Dict[Optional[str], float] = defaultdict(float)
    for insight in days:
        for category in insight.categories:
            category_totals[category.category_id] += category.minutes
    top_categories = sorted(
        (CategoryMinutes(category_id, minutes) for category_id, minutes in category_totals.items()),
        key=lambda c: -c.minutes,
    )[:Config.TOP_CATEGORIES]

    weekly = WeeklyInsights(
        days=days,
        total_scheduled_minutes=sum(d.total_scheduled_minutes for d in days),
        total_meeting_minutes=sum(d.meeting_minutes for d in days),
        total_focus_time_minutes=sum(d.focus_time_minutes for d in days),
        avg_busy_ratio=sum(d.busy_ratio for d in days) / 7,
        avg_meeting_load_percent=sum(d.meeting_load_percent for d in days) / 7,
        avg_gap_minutes=sum(d.avg_gap_minutes for d in days) / 7,
        overbooked_days_count=sum(1 for d in days if d.is_overbooked),
        most_overloaded_day=most_overloaded,
        top_categories=top_categories,
    )
    logger.debug(
        f"Week of {week_start}: {weekly.total_scheduled_minutes} min scheduled, "
        f"{weekly.overbooked_days_count} overbooked day(s)"
    )
    return weekly


def calculate_day_overview(day: datetime.date,
                           events: Sequence[CalendarEvent],
                           tasks: Sequence[Task],
                           working_window: Optional[WorkingWindow] = None,
                           *,
                           tz=None) -> DayOverview:
    """Headline numbers for a day: scheduled and free minutes, event and task counts."""
    tz = get_timezone(tz or Config.TARGET_TIMEZONE)
    working_window = working_window or Config.default_working_window()
    bounds = working_window.bounds_for(day, tz)

    day_events = [e for e in events if e.start.astimezone(tz).date() == day]
    scheduled = _busy_minutes([e for e in day_events if not e.all_day], bounds)
    open_tasks = [t for t in tasks if t.due_date == day and not t.is_completed]

    return DayOverview(
        day=day,
        total_scheduled_minutes=round(scheduled),
        number_of_events=len(day_events),
        number_of_tasks=len(open_tasks),
        free_time_minutes=round(max(0.0, working_window.duration_minutes - scheduled)),
        working_hours_start=working_window.start_minute,
        working_hours_end=working_window.end_minute,
    )
