# File: daypilot/processors/risk_detector.py
"""
Schedule risk detection.
Evaluates five independent checks against a single day's events and tasks.
"""

import datetime
from typing import List, Optional, Sequence

from daypilot.core.config_manager import Config
from daypilot.models import (
    CalendarEvent,
    Task,
    WorkingWindow,
    RiskThresholds,
    RiskFinding,
    RiskType,
    Severity,
    TimeInterval,
)
from daypilot.models.common import get_timezone
from daypilot.processors.interval_merger import merge, merged_duration
from daypilot.processors.gap_finder import find_gaps, total_gap_minutes
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)


def _minutes(delta: datetime.timedelta) -> float:
    return delta.total_seconds() / 60


def _unique(ids: Sequence[str]) -> tuple:
    """Deduplicate while keeping first-seen order."""
    return tuple(dict.fromkeys(ids))


class RiskDetector:
    """Detects overbooking, back-to-back runs, missing breaks, overlaps and overdue-task pressure."""

    def __init__(self, thresholds: Optional[RiskThresholds] = None, timezone=None):
        """
        Initialize risk detector.

        Args:
            thresholds: Risk thresholds (default: Config.default_thresholds())
            timezone: Zone name or tzinfo the working window is expressed in
                (default: Config.TARGET_TIMEZONE)
        """
        self.thresholds = thresholds or Config.default_thresholds()
        self.timezone = get_timezone(timezone or Config.TARGET_TIMEZONE)

    def detect(self,
               day_events: Sequence[CalendarEvent],
               day_tasks: Sequence[Task],
               working_window: WorkingWindow,
               day: Optional[datetime.date] = None,
               today: Optional[datetime.date] = None) -> List[RiskFinding]:
        """
        Run every check and return all findings that fire.

        Args:
            day_events: The day's (already expanded) events; all-day events are ignored.
            day_tasks: Tasks to weigh against the day's free time.
            working_window: Working hours for the day.
            day: Calendar day being analysed (default: today in the detector's zone).
            today: Reference date for overdue tasks (default: today in the detector's zone).

        Returns:
            Findings in check order; empty when the day looks healthy.
        """
        if today is None:
            today = datetime.datetime.now(self.timezone).date()
        if day is None:
            day = today

        bounds = working_window.bounds_for(day, self.timezone)
        events = sorted(
            (e for e in day_events if not e.all_day),
            key=lambda e: (e.start, e.end),
        )
        merged = merge((e.interval for e in events), clip_to=bounds)
        scheduled_minutes = _minutes(merged_duration(merged))
        gaps = find_gaps(merged, bounds)

        findings: List[RiskFinding] = []
        for check in (
            self._check_overbooked(events, scheduled_minutes, working_window),
            self._check_back_to_back(events),
            self._check_no_break(events, gaps, scheduled_minutes),
            self._check_overlap(events),
            self._check_task_risk(day_tasks, gaps, today),
        ):
            if check is not None:
                findings.append(check)

        logger.debug(
            f"Risk check for {day}: {len(events)} events, {scheduled_minutes:.0f} min scheduled, "
            f"{len(findings)} finding(s)"
        )
        return findings

    def _check_overbooked(self, events: List[CalendarEvent], scheduled_minutes: float,
                          working_window: WorkingWindow) -> Optional[RiskFinding]:
        ratio = scheduled_minutes / working_window.duration_minutes
        if ratio <= self.thresholds.overbooked_ratio:
            return None
        severity = Severity.HIGH if ratio > self.thresholds.overbooked_high_ratio else Severity.MEDIUM
        return RiskFinding(
            type=RiskType.OVERBOOKED,
            severity=severity,
            affected_ids=_unique([e.id for e in events]),
            details={'busy_ratio': ratio, 'scheduled_minutes': scheduled_minutes},
        )

    def _check_back_to_back(self, events: List[CalendarEvent]) -> Optional[RiskFinding]:
        count = 0
        affected: List[str] = []
        for current, following in zip(events, events[1:]):
            gap = _minutes(following.start - current.end)
            # Overlapping pairs (negative gap) belong to the overlap check only
            if 0 <= gap < self.thresholds.back_to_back_gap_minutes:
                count += 1
                affected.extend([current.id, following.id])

        if count < self.thresholds.back_to_back_min_count:
            return None
        severity = Severity.HIGH if count >= self.thresholds.back_to_back_high_count else Severity.MEDIUM
        return RiskFinding(
            type=RiskType.BACK_TO_BACK,
            severity=severity,
            affected_ids=_unique(affected),
            details={'pair_count': count},
        )

    def _check_no_break(self, events: List[CalendarEvent], gaps: List[TimeInterval],
                        scheduled_minutes: float) -> Optional[RiskFinding]:
        max_gap = max((g.duration_minutes() for g in gaps), default=0.0)
        if max_gap >= self.thresholds.no_break_gap_minutes:
            return None
        if scheduled_minutes <= self.thresholds.no_break_min_scheduled_minutes:
            return None
        severity = (Severity.HIGH
                    if scheduled_minutes > self.thresholds.no_break_high_scheduled_minutes
                    else Severity.MEDIUM)
        return RiskFinding(
            type=RiskType.NO_BREAK,
            severity=severity,
            affected_ids=_unique([e.id for e in events]),
            details={'max_gap_minutes': max_gap, 'scheduled_minutes': scheduled_minutes},
        )

    def _check_overlap(self, events: List[CalendarEvent]) -> Optional[RiskFinding]:
        affected: List[str] = []
        for i, first in enumerate(events):
            for second in events[i + 1:]:
                if first.overlaps_with(second):
                    affected.extend([first.id, second.id])

        if not affected:
            return None
        affected_ids = _unique(affected)
        return RiskFinding(
            type=RiskType.OVERLAP,
            severity=Severity.HIGH,
            affected_ids=affected_ids,
            details={'event_count': len(affected_ids)},
        )

    def _check_task_risk(self, tasks: Sequence[Task], gaps: List[TimeInterval],
                         today: datetime.date) -> Optional[RiskFinding]:
        overdue = [t for t in tasks if not t.is_completed and t.is_overdue(today)]
        if not overdue:
            return None

        required = sum(t.duration_minutes or self.thresholds.default_task_minutes for t in overdue)
        free_minutes = total_gap_minutes(gaps)
        if required <= free_minutes:
            return None
        return RiskFinding(
            type=RiskType.TASK_RISK,
            severity=Severity.HIGH,
            affected_ids=_unique([t.id for t in overdue]),
            details={'required_minutes': required, 'free_minutes': free_minutes},
        )


def detect_risks(day_events: Sequence[CalendarEvent],
                 day_tasks: Sequence[Task],
                 working_window: WorkingWindow,
                 thresholds: Optional[RiskThresholds] = None,
                 *,
                 day: Optional[datetime.date] = None,
                 tz=None,
                 today: Optional[datetime.date] = None) -> List[RiskFinding]:
    """Functional entry point; see RiskDetector.detect."""
    return RiskDetector(thresholds, tz).detect(day_events, day_tasks, working_window, day=day, today=today)
