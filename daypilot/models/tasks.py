# File: daypilot/models/tasks.py

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .enums import Priority, TaskStatus
from .common import parse_iso_date

DEFAULT_DURATION_MINUTES = 60


@dataclass
class Task:
    """Represents a task with priority and due date."""
    id: str
    title: str
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = None
    status: TaskStatus = TaskStatus.PENDING
    description: Optional[str] = None
    category_id: Optional[str] = None
    converted_to_event_id: Optional[str] = None

    def __post_init__(self):
        """Validate task data and auto-convert types."""
        if self.duration_minutes is None:
            self.duration_minutes = DEFAULT_DURATION_MINUTES
        if self.duration_minutes <= 0:
            raise ValueError(f"Duration must be positive: {self.title}")

        if isinstance(self.priority, str):
            try:
                self.priority = Priority(self.priority.lower())
            except ValueError:
                self.priority = Priority.MEDIUM

        if isinstance(self.status, str):
            try:
                self.status = TaskStatus(self.status.lower())
            except ValueError:
                self.status = TaskStatus.PENDING

        # datetime is a date subclass; only the calendar day matters here
        if isinstance(self.due_date, datetime):
            self.due_date = self.due_date.date()
        elif isinstance(self.due_date, str):
            self.due_date = parse_iso_date(self.due_date)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, today: date) -> bool:
        """Check if task is overdue as of `today`."""
        return self.due_date is not None and self.due_date < today

    def is_due_today(self, today: date) -> bool:
        return self.due_date is not None and self.due_date == today

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'duration': self.duration_minutes,
            'priority': self.priority.value,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'status': self.status.value,
            'category_id': self.category_id,
            'converted_to_event_id': self.converted_to_event_id,
        }


def task_from_dict(data: dict) -> Task:
    """Create Task from dictionary with type safety."""
    raw_priority = data.get('priority') or Priority.MEDIUM.value
    try:
        priority = Priority(str(raw_priority).split('.')[-1].lower())
    except ValueError:
        priority = Priority.MEDIUM

    raw_status = data.get('status') or TaskStatus.PENDING.value
    try:
        status = TaskStatus(str(raw_status).split('.')[-1].lower())
    except ValueError:
        status = TaskStatus.PENDING

    raw_duration = data.get('duration', data.get('duration_minutes'))
    duration = int(float(raw_duration)) if raw_duration else DEFAULT_DURATION_MINUTES

    return Task(
        id=str(data.get('id', '')),
        title=str(data.get('title') or 'Untitled Task'),
        duration_minutes=duration,
        priority=priority,
        due_date=parse_iso_date(data.get('due_date')),
        status=status,
        description=data.get('description'),
        category_id=data.get('category_id'),
        converted_to_event_id=data.get('converted_to_event_id'),
    )
