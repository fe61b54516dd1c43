from .enums import Priority, TaskStatus, RiskType, Severity, PriorityReason, SuggestionType
from .common import parse_iso_datetime, parse_iso_date, parse_hhmm, format_hhmm
from .intervals import TimeInterval, InvalidIntervalError
from .calendar import CalendarEvent, event_from_dict
from .tasks import Task, task_from_dict
from .recurrence import RecurrenceSpec, RecurrenceExpansion, RecurrenceParseError
from .config import WorkingWindow, RiskThresholds
from .booking import (
    AvailabilityRule,
    BookingConstraint,
    Booking,
    availability_rule_from_dict,
    booking_constraint_from_dict,
    booking_from_dict,
)
from .analysis import (
    ScoredSlot,
    RiskFinding,
    CategoryMinutes,
    DayInsights,
    WeeklyInsights,
    DayOverview,
    PriorityTask,
    Suggestion,
    Reminder,
    DayReport,
)

__all__ = [
    "Priority",
    "TaskStatus",
    "RiskType",
    "Severity",
    "PriorityReason",
    "SuggestionType",
    "parse_iso_datetime",
    "parse_iso_date",
    "parse_hhmm",
    "format_hhmm",
    "TimeInterval",
    "InvalidIntervalError",
    "CalendarEvent",
    "event_from_dict",
    "Task",
    "task_from_dict",
    "RecurrenceSpec",
    "RecurrenceExpansion",
    "RecurrenceParseError",
    "WorkingWindow",
    "RiskThresholds",
    "AvailabilityRule",
    "BookingConstraint",
    "Booking",
    "availability_rule_from_dict",
    "booking_constraint_from_dict",
    "booking_from_dict",
    "ScoredSlot",
    "RiskFinding",
    "CategoryMinutes",
    "DayInsights",
    "WeeklyInsights",
    "DayOverview",
    "PriorityTask",
    "Suggestion",
    "Reminder",
    "DayReport",
]
