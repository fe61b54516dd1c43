# File: daypilot/processors/slot_finder.py
"""
Slot scoring and placement for tasks.

Candidates are generated inside the day's free gaps on a fixed grid and ranked
by a weighted heuristic. Scores are only comparable within a single call.
"""

import datetime
from typing import List, Optional, Sequence

from daypilot.core.config_manager import Config
from daypilot.models import CalendarEvent, Task, WorkingWindow, ScoredSlot, TimeInterval
from daypilot.models.common import get_timezone, minute_of_day
from daypilot.processors.interval_merger import merge
from daypilot.processors.gap_finder import find_gaps
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)

BASE_SCORE = 100.0
OVERDUE_BONUS = 50.0
DUE_TODAY_BONUS = 30.0
WORKING_HOURS_BONUS = 20.0
BUFFER_BONUS = 15.0
NEARBY_EVENT_PENALTY = 5.0


def _count_nearby(candidate: TimeInterval, events: Sequence, proximity_minutes: float) -> int:
    """Events ending just before or starting just after the candidate."""
    proximity = datetime.timedelta(minutes=proximity_minutes)
    nearby = 0
    for event in events:
        if getattr(event, 'all_day', False):
            continue
        gap_before = candidate.start - event.end
        gap_after = event.start - candidate.end
        zero = datetime.timedelta(0)
        if zero <= gap_before < proximity or zero <= gap_after < proximity:
            nearby += 1
    return nearby


def score_slot(candidate: TimeInterval,
               task: Task,
               day_events: Sequence,
               working_window: WorkingWindow,
               *,
               tz=None,
               today: Optional[datetime.date] = None) -> float:
    """
    Score a candidate placement for `task`. Higher is better, never below 0.

    Args:
        candidate: Proposed slot.
        task: Task being placed; its due date drives the urgency bonus.
        day_events: Anything with `start`/`end` (events, bookings, intervals).
        working_window: Working hours used for the in-hours bonus.
        tz: Zone the working window and minute-of-day are measured in.
        today: Reference date for due-date urgency.
    """
    tz = get_timezone(tz or Config.TARGET_TIMEZONE)
    local_start = candidate.start.astimezone(tz)
    if today is None:
        today = datetime.datetime.now(tz).date()

    score = BASE_SCORE
    start_minute = minute_of_day(local_start)

    if task.due_date is not None:
        if task.due_date < today:
            score += OVERDUE_BONUS - start_minute / 10
        elif task.due_date == today:
            score += DUE_TODAY_BONUS - start_minute / 20

    if working_window.bounds_for(local_start.date(), tz).contains(candidate):
        score += WORKING_HOURS_BONUS

    nearby = _count_nearby(candidate, day_events, Config.BUFFER_PROXIMITY_MINUTES)
    if nearby == 0:
        score += BUFFER_BONUS
    else:
        score -= NEARBY_EVENT_PENALTY * nearby

    return max(0.0, score)


def rank_slots(slots: List[ScoredSlot], max_slots: Optional[int] = None) -> List[ScoredSlot]:
    """
    Order by score descending; equal scores keep their (ascending time) order.
    """
    ranked = sorted(slots, key=lambda s: -s.score)
    if max_slots is not None:
        ranked = ranked[:max(0, max_slots)]
    return ranked


def find_best_slots(task: Task,
                    day_events: Sequence[CalendarEvent],
                    working_window: WorkingWindow,
                    max_slots: int = Config.DEFAULT_MAX_SLOTS,
                    *,
                    day: Optional[datetime.date] = None,
                    tz=None,
                    today: Optional[datetime.date] = None) -> List[ScoredSlot]:
    """
    Find the best places for `task` on `day`.

    Candidates start every Config.SLOT_STEP_MINUTES inside each free gap that is
    at least as long as the task. An empty list means nothing fits.
    """
    tz = get_timezone(tz or Config.TARGET_TIMEZONE)
    if today is None:
        today = datetime.datetime.now(tz).date()
    if day is None:
        day = today

    if task.is_completed or max_slots <= 0:
        return []

    bounds = working_window.bounds_for(day, tz)
    events = [e for e in day_events if not e.all_day]
    merged = merge((e.interval for e in events), clip_to=bounds)
    gaps = find_gaps(merged, bounds)

    duration = datetime.timedelta(minutes=task.duration_minutes)
    step = datetime.timedelta(minutes=Config.SLOT_STEP_MINUTES)

    candidates: List[ScoredSlot] = []
    for gap in gaps:
        if gap.duration < duration:
            continue
        latest_offset = gap.duration - duration
        offset = datetime.timedelta(0)
        while offset <= latest_offset:
            start = (gap.start + offset).astimezone(tz)
            end = (start + duration).astimezone(tz)
            slot = TimeInterval(start, end)
            score = score_slot(slot, task, events, working_window, tz=tz, today=today)
            candidates.append(ScoredSlot(start=start, end=end, score=score))
            offset += step

    logger.debug(
        f"Task '{task.title}' ({task.duration_minutes} min): {len(gaps)} gaps, "
        f"{len(candidates)} candidates"
    )
    return rank_slots(candidates, max_slots)
