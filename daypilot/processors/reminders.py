# File: daypilot/processors/reminders.py
"""
Reminder selection. Decides which event reminders are due; delivery is
someone else's job, and so is remembering what was already sent.
"""

import datetime
from typing import AbstractSet, Iterable, List, Tuple

from daypilot.core.config_manager import Config
from daypilot.models import CalendarEvent, Reminder

SentKey = Tuple[str, int]


def due_reminders(events: Iterable[CalendarEvent],
                  now: datetime.datetime,
                  reminder_minutes: int,
                  sent: AbstractSet[SentKey] = frozenset()) -> List[Reminder]:
    """
    Reminders that should go out now.

    An event qualifies when it starts between now and `reminder_minutes` plus a
    small grace period from now, and (event id, reminder_minutes) is not in `sent`.
    """
    reminders = []
    for event in events:
        if event.all_day or (event.id, reminder_minutes) in sent:
            continue
        minutes_until = int((event.start - now).total_seconds() // 60)
        if minutes_until < 0 or minutes_until > reminder_minutes + Config.REMINDER_GRACE_MINUTES:
            continue
        reminders.append(Reminder(
            event_id=event.id,
            event_title=event.title,
            event_start=event.start,
            reminder_minutes=reminder_minutes,
            minutes_until=minutes_until,
        ))
    return sorted(reminders, key=lambda r: r.event_start)
