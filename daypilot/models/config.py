# File: daypilot/models/config.py
"""
Value objects that configure the analysis processors.
"""

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Dict

from .common import parse_hhmm, format_hhmm, local_time
from .intervals import TimeInterval

MINUTES_PER_DAY = 1440


@dataclass(frozen=True)
class WorkingWindow:
    """Working hours as minutes since local midnight, end exclusive."""
    start_minute: int
    end_minute: int

    def __post_init__(self):
        """Validate window bounds."""
        if not 0 <= self.start_minute < MINUTES_PER_DAY:
            raise ValueError(f"Window start must be in [0, 1440): {self.start_minute}")
        if not 0 < self.end_minute <= MINUTES_PER_DAY:
            raise ValueError(f"Window end must be in (0, 1440]: {self.end_minute}")
        if self.start_minute >= self.end_minute:
            raise ValueError(
                f"Window start must be before end: {self.start_minute} >= {self.end_minute}"
            )

    @classmethod
    def from_hhmm(cls, start: str, end: str) -> 'WorkingWindow':
        """Build a window from 'HH:MM' strings, e.g. ('08:00', '17:00')."""
        return cls(parse_hhmm(start), parse_hhmm(end))

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    def bounds_for(self, day: date, tz) -> TimeInterval:
        """Absolute interval this window covers on `day` in timezone `tz`."""
        return TimeInterval(
            local_time(day, self.start_minute, tz),
            local_time(day, self.end_minute, tz),
        )

    def __str__(self) -> str:
        return f"{format_hhmm(self.start_minute)}-{format_hhmm(self.end_minute)}"


@dataclass(frozen=True)
class RiskThresholds:
    """
    Every tunable number used by the risk detector, in one place.

    Defaults reproduce the product's long-standing behaviour.
    """
    overbooked_ratio: float = 0.85
    overbooked_high_ratio: float = 0.95
    back_to_back_gap_minutes: float = 10
    back_to_back_min_count: int = 2
    back_to_back_high_count: int = 4
    no_break_gap_minutes: float = 30
    no_break_min_scheduled_minutes: float = 240
    no_break_high_scheduled_minutes: float = 360
    default_task_minutes: int = 60

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RiskThresholds':
        """Create thresholds from a (possibly partial) mapping; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
