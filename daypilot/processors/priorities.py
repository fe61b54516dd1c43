# File: daypilot/processors/priorities.py
"""
Task prioritisation and day suggestions built on the slot finder.
"""

import datetime
from typing import List, Optional, Sequence

from daypilot.core.config_manager import Config
from daypilot.models import (
    CalendarEvent,
    Task,
    Priority,
    PriorityReason,
    PriorityTask,
    RiskFinding,
    RiskType,
    Suggestion,
    SuggestionType,
    WorkingWindow,
)
from daypilot.models.common import get_timezone
from daypilot.processors.slot_finder import find_best_slots
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)

PRIORITY_BOOST = {Priority.HIGH: 20, Priority.MEDIUM: 10, Priority.LOW: 0}


def _due_score(task: Task, today: datetime.date):
    if task.due_date is None:
        return 0, PriorityReason.HIGH_PRIORITY
    if task.due_date < today:
        return 100, PriorityReason.OVERDUE
    if task.due_date == today:
        return 80, PriorityReason.DUE_TODAY
    days_until_due = (task.due_date - today).days
    return max(0, 60 - days_until_due), PriorityReason.HIGH_PRIORITY


def get_top_priorities(tasks: Sequence[Task], today: datetime.date,
                       max_count: int = 3) -> List[PriorityTask]:
    """
    Rank open tasks by urgency: overdue 100, due today 80, otherwise
    60 minus days until due (floored at 0), plus 20 for high and 10 for medium priority.
    """
    scored = []
    for task in tasks:
        if task.is_completed:
            continue
        score, reason = _due_score(task, today)
        score += PRIORITY_BOOST[task.priority]
        scored.append(PriorityTask(task=task, priority_score=score, reason=reason))

    scored.sort(key=lambda p: -p.priority_score)
    return scored[:max_count]


def _placement_urgency(task: Task, today: datetime.date) -> int:
    """Coarser urgency used to pick which dated tasks get slot suggestions."""
    if task.due_date < today:
        urgency = 100
    elif task.due_date == today:
        urgency = 80
    else:
        urgency = 60
    if task.priority == Priority.HIGH:
        urgency += 20
    return urgency


def _break_suggestion(events: Sequence[CalendarEvent], tz) -> Optional[Suggestion]:
    timed = sorted((e for e in events if not e.all_day), key=lambda e: e.start)
    if len(timed) < 2:
        return None

    break_start = timed[len(timed) // 2].end.astimezone(tz)
    break_end = break_start + datetime.timedelta(minutes=Config.BREAK_MINUTES)
    if any(break_start < e.end and break_end > e.start for e in timed):
        return None

    return Suggestion(
        type=SuggestionType.ADD_BREAK,
        suggested_start=break_start,
        suggested_end=break_end,
        reason="Add a break to avoid burnout",
        duration_minutes=Config.BREAK_MINUTES,
    )


def generate_suggestions(events: Sequence[CalendarEvent],
                         tasks: Sequence[Task],
                         risks: Sequence[RiskFinding],
                         working_window: WorkingWindow,
                         *,
                         day: datetime.date,
                         tz=None,
                         today: Optional[datetime.date] = None,
                         max_tasks: int = 2,
                         slots_per_task: int = 2) -> List[Suggestion]:
    """
    Suggest placements for the most urgent unscheduled tasks, and a short
    break when the day has a no-break risk.

    Task suggestions come first, ordered by slot score.
    """
    tz = get_timezone(tz or Config.TARGET_TIMEZONE)
    today = today or day

    candidates = [
        t for t in tasks
        if not t.is_completed and not t.converted_to_event_id and t.due_date is not None
    ]
    ranked = sorted(candidates, key=lambda t: -_placement_urgency(t, today))[:max_tasks]

    task_suggestions: List[Suggestion] = []
    for task in ranked:
        if task.due_date < today:
            reason = "Overdue task needs scheduling"
        elif task.due_date == today:
            reason = "Task due today"
        else:
            reason = "Available time slot"
        for slot in find_best_slots(task, events, working_window, slots_per_task,
                                    day=day, tz=tz, today=today):
            task_suggestions.append(Suggestion(
                type=SuggestionType.SCHEDULE_TASK,
                suggested_start=slot.start,
                suggested_end=slot.end,
                reason=reason,
                task=task,
                priority_score=slot.score,
                duration_minutes=task.duration_minutes,
            ))
    task_suggestions.sort(key=lambda s: -s.priority_score)

    suggestions = task_suggestions
    if any(r.type == RiskType.NO_BREAK for r in risks):
        break_suggestion = _break_suggestion(events, tz)
        if break_suggestion is not None:
            suggestions.append(break_suggestion)

    logger.debug(f"Generated {len(suggestions)} suggestion(s) for {day}")
    return suggestions
