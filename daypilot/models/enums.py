# File: daypilot/models/enums.py

from enum import Enum


class Priority(Enum):
    """Task priority as set by the user."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(Enum):
    """Task lifecycle states."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RiskType(Enum):
    """Schedule risk patterns detected for a single day."""
    OVERBOOKED = "overbooked"
    BACK_TO_BACK = "back_to_back"
    NO_BREAK = "no_break"
    OVERLAP = "overlap"
    TASK_RISK = "task_risk"


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PriorityReason(Enum):
    """Why a task made it into the top priorities."""
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    HIGH_PRIORITY = "high_priority"


class SuggestionType(Enum):
    SCHEDULE_TASK = "schedule_task"
    ADD_BREAK = "add_break"
