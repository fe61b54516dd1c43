# File: daypilot/models/analysis.py
"""
Derived results produced by the analysis processors.
None of these are persisted; they are recomputed on every call.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from .common import format_hhmm
from .enums import RiskType, Severity, PriorityReason, SuggestionType
from .tasks import Task


@dataclass(frozen=True)
class ScoredSlot:
    """A candidate placement with its heuristic score (comparable within one run only)."""
    start: datetime
    end: datetime
    score: float

    @property
    def time_string(self) -> str:
        """Start time as 24-hour 'HH:MM' in the slot's own zone."""
        return format_hhmm(self.start)

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'time': self.time_string,
            'score': self.score,
        }


@dataclass(frozen=True)
class RiskFinding:
    """A risk pattern found in one day's schedule."""
    type: RiskType
    severity: Severity
    affected_ids: Tuple[str, ...] = ()
    details: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        return {
            'type': self.type.value,
            'severity': self.severity.value,
            'affected_ids': list(self.affected_ids),
            'details': dict(self.details),
        }


@dataclass
class CategoryMinutes:
    category_id: Optional[str]
    minutes: float


@dataclass
class DayInsights:
    """Time-use summary for a single day inside the working window."""
    day: date
    total_scheduled_minutes: int
    meeting_minutes: int
    focus_time_minutes: int
    busy_ratio: float
    meeting_load_percent: float
    avg_gap_minutes: int
    total_gap_minutes: int
    is_overbooked: bool
    categories: List[CategoryMinutes] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'day': self.day.isoformat(),
            'total_scheduled_minutes': self.total_scheduled_minutes,
            'meeting_minutes': self.meeting_minutes,
            'focus_time_minutes': self.focus_time_minutes,
            'busy_ratio': round(self.busy_ratio, 4),
            'meeting_load_percent': round(self.meeting_load_percent, 2),
            'avg_gap_minutes': self.avg_gap_minutes,
            'total_gap_minutes': self.total_gap_minutes,
            'is_overbooked': self.is_overbooked,
            'categories': [
                {'category_id': c.category_id, 'minutes': c.minutes} for c in self.categories
            ],
        }


@dataclass
class WeeklyInsights:
    """Seven consecutive DayInsights and their aggregates."""
    days: List[DayInsights]
    total_scheduled_minutes: int
    total_meeting_minutes: int
    total_focus_time_minutes: int
    avg_busy_ratio: float
    avg_meeting_load_percent: float
    avg_gap_minutes: float
    overbooked_days_count: int
    most_overloaded_day: Optional[DayInsights]
    top_categories: List[CategoryMinutes] = field(default_factory=list)


@dataclass
class DayOverview:
    day: date
    total_scheduled_minutes: int
    number_of_events: int
    number_of_tasks: int
    free_time_minutes: int
    working_hours_start: int
    working_hours_end: int


@dataclass
class PriorityTask:
    task: Task
    priority_score: float
    reason: PriorityReason


@dataclass
class Suggestion:
    """A proposed action for the day: place a task, or take a break."""
    type: SuggestionType
    suggested_start: datetime
    suggested_end: datetime
    reason: str
    task: Optional[Task] = None
    priority_score: float = 0.0
    duration_minutes: Optional[int] = None


@dataclass(frozen=True)
class Reminder:
    """A reminder that is due to be delivered for an event."""
    event_id: str
    event_title: str
    event_start: datetime
    reminder_minutes: int
    minutes_until: int


@dataclass
class DayReport:
    """Everything the analyzer computes for one day."""
    day: date
    overview: DayOverview
    insights: DayInsights
    risks: List[RiskFinding] = field(default_factory=list)
    priorities: List[PriorityTask] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'day': self.day.isoformat(),
            'overview': {
                'total_scheduled_minutes': self.overview.total_scheduled_minutes,
                'number_of_events': self.overview.number_of_events,
                'number_of_tasks': self.overview.number_of_tasks,
                'free_time_minutes': self.overview.free_time_minutes,
                'working_hours': f"{format_hhmm(self.overview.working_hours_start)}-"
                                 f"{format_hhmm(self.overview.working_hours_end)}",
            },
            'insights': self.insights.to_dict(),
            'risks': [r.to_dict() for r in self.risks],
            'priorities': [
                {
                    'task_id': p.task.id,
                    'title': p.task.title,
                    'priority_score': p.priority_score,
                    'reason': p.reason.value,
                }
                for p in self.priorities
            ],
            'suggestions': [
                {
                    'type': s.type.value,
                    'start': s.suggested_start.isoformat(),
                    'end': s.suggested_end.isoformat(),
                    'reason': s.reason,
                    'task_id': s.task.id if s.task else None,
                    'priority_score': s.priority_score,
                }
                for s in self.suggestions
            ],
        }
