# File: daypilot/core/orchestrator.py
"""
Main orchestrator module for DayPilot.
Composes the analysis processors into day, week, booking and reminder reports.

The processors stay pure; everything stateful (dismissed risks, sent
reminders) goes through the injected StateStore here.
"""

import datetime
from typing import List, Optional, Sequence

from daypilot.core.config_manager import Config
from daypilot.core.state_store import (
    InMemoryStateStore,
    JsonFileStateStore,
    ReminderLedger,
    RiskDismissals,
    StateStore,
)
from daypilot.models import (
    CalendarEvent,
    DayReport,
    Reminder,
    RiskThresholds,
    RiskType,
    Task,
    WeeklyInsights,
    WorkingWindow,
)
from daypilot.models.common import get_timezone, local_time
from daypilot.processors.booking_availability import generate_slots
from daypilot.processors.classifier import Classifier, classify_events, keyword_classifier
from daypilot.processors.insights import (
    calculate_day_insights,
    calculate_day_overview,
    calculate_weekly_insights,
)
from daypilot.processors.priorities import generate_suggestions, get_top_priorities
from daypilot.processors.recurrence_expander import expand_events
from daypilot.processors.reminders import due_reminders
from daypilot.processors.risk_detector import RiskDetector
from daypilot.services.data_collector import DataCollector
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)


class ScheduleAnalyzer:
    """
    Runs the DayPilot analysis pipeline.

    Events and tasks are either passed in directly or pulled from the
    DataCollector; each call expands recurrences for the requested window,
    classifies the events and hands them to the processors.
    """

    def __init__(self,
                 state_store: Optional[StateStore] = None,
                 data_collector: Optional[DataCollector] = None,
                 working_window: Optional[WorkingWindow] = None,
                 thresholds: Optional[RiskThresholds] = None,
                 timezone=None,
                 classifier: Optional[Classifier] = None):
        """
        Initialize the analyzer.

        Args:
            state_store: Where dismissals and sent reminders are kept (default: in memory)
            data_collector: Source of events and tasks when none are passed in
            working_window: Working hours (default: Config.default_working_window())
            thresholds: Risk thresholds (default: Config.default_thresholds())
            timezone: Zone the analysis days are expressed in (default: Config.TARGET_TIMEZONE)
            classifier: Event classifier; when omitted, the keyword classifier is
                built from the collected category names
        """
        self.state_store = state_store if state_store is not None else InMemoryStateStore()
        self.data_collector = data_collector
        self.working_window = working_window or Config.default_working_window()
        self.thresholds = thresholds or Config.default_thresholds()
        self.timezone = get_timezone(timezone or Config.TARGET_TIMEZONE)
        self.classifier = classifier

        self.risk_detector = RiskDetector(self.thresholds, self.timezone)
        self.dismissals = RiskDismissals(self.state_store)
        self.reminder_ledger = ReminderLedger(self.state_store)

    def _day_window(self, day: datetime.date, days: int = 1):
        start = local_time(day, 0, self.timezone)
        end = local_time(day + datetime.timedelta(days=days), 0, self.timezone)
        return start, end

    def _load(self, window_start: datetime.datetime, window_end: datetime.datetime,
              events: Optional[Sequence[CalendarEvent]],
              tasks: Optional[Sequence[Task]]):
        categories = {}
        if events is None or tasks is None:
            if self.data_collector is None:
                raise ValueError("Pass events and tasks, or configure a DataCollector")
            data = self.data_collector.collect_all_data(window_start, window_end)
            categories = data['categories']
            if events is None:
                events = data['calendar_events']
            if tasks is None:
                tasks = data['tasks']

        classifier = self.classifier or keyword_classifier(categories)
        expanded = expand_events(events, window_start, window_end)
        return classify_events(expanded, classifier), list(tasks)

    def analyze_day(self,
                    day: datetime.date,
                    events: Optional[Sequence[CalendarEvent]] = None,
                    tasks: Optional[Sequence[Task]] = None,
                    today: Optional[datetime.date] = None) -> DayReport:
        """
        Build the full report for one day.

        Args:
            day: Calendar day in the analyzer's timezone
            events: Events to analyse (recurring masters are expanded)
            tasks: Tasks to prioritise
            today: Reference date for overdue / due-today logic (default: `day`)

        Returns:
            DayReport with overview, insights, non-dismissed risks, top
            priorities and suggestions
        """
        today = today or day
        logger.info(f"Analyzing {day.isoformat()}")

        window_start, window_end = self._day_window(day)
        day_events, tasks = self._load(window_start, window_end, events, tasks)
        logger.debug(f"{len(day_events)} event instance(s) and {len(tasks)} task(s) for {day}")

        overview = calculate_day_overview(day, day_events, tasks, self.working_window, tz=self.timezone)
        insights = calculate_day_insights(
            day, day_events, self.working_window, tz=self.timezone, thresholds=self.thresholds
        )

        risks = self.risk_detector.detect(day_events, tasks, self.working_window, day=day, today=today)
        dismissed = self.dismissals.dismissed_for(day)
        if dismissed:
            logger.debug(f"Hiding dismissed risk types for {day}: {sorted(t.value for t in dismissed)}")
        risks = [r for r in risks if r.type not in dismissed]

        priorities = get_top_priorities(tasks, today)
        suggestions = generate_suggestions(
            day_events, tasks, risks, self.working_window,
            day=day, tz=self.timezone, today=today,
        )

        logger.info(
            f"Report for {day}: {insights.total_scheduled_minutes} min scheduled, "
            f"{len(risks)} risk(s), {len(suggestions)} suggestion(s)"
        )
        return DayReport(
            day=day,
            overview=overview,
            insights=insights,
            risks=risks,
            priorities=priorities,
            suggestions=suggestions,
        )

    def analyze_week(self,
                     week_start: datetime.date,
                     events: Optional[Sequence[CalendarEvent]] = None) -> WeeklyInsights:
        """Weekly insights for the seven days starting at `week_start`."""
        logger.info(f"Analyzing week of {week_start.isoformat()}")
        window_start, window_end = self._day_window(week_start, days=7)
        week_events, _ = self._load(window_start, window_end, events, ())
        return calculate_weekly_insights(
            week_start, week_events, self.working_window,
            tz=self.timezone, thresholds=self.thresholds,
        )

    def dismiss_risk(self, day: datetime.date, risk_type: RiskType) -> None:
        """Hide `risk_type` from future reports for `day`."""
        self.dismissals.dismiss(day, risk_type)
        logger.info(f"Dismissed {risk_type.value} for {day.isoformat()}")

    def booking_slots(self, link_id: str, date: datetime.date,
                      now: Optional[datetime.datetime] = None) -> List[str]:
        """Bookable 'HH:MM' start times of a booking link on `date`."""
        if self.data_collector is None:
            raise ValueError("Booking availability needs a DataCollector")
        now = now or datetime.datetime.now(datetime.timezone.utc)

        link = self.data_collector.collect_booking_link(
            link_id, now - datetime.timedelta(days=1), now + datetime.timedelta(days=400)
        )
        slots = generate_slots(date, link['rules'], (), link['constraint'], link['bookings'], now)
        logger.debug(f"Link {link_id} on {date}: {len(slots)} slot(s)")
        return slots

    def send_due_reminders(self,
                           now: datetime.datetime,
                           reminder_minutes: int,
                           events: Optional[Sequence[CalendarEvent]] = None) -> List[Reminder]:
        """
        Reminders due at `now` that were not sent before. They are recorded as
        sent; actually delivering them is the caller's job.
        """
        self.reminder_ledger.prune(now)
        window_end = now + datetime.timedelta(minutes=reminder_minutes + Config.REMINDER_GRACE_MINUTES + 1)
        upcoming, _ = self._load(now, window_end, events, ())

        reminders = due_reminders(upcoming, now, reminder_minutes, self.reminder_ledger.sent_keys())
        for reminder in reminders:
            self.reminder_ledger.record(reminder.event_id, reminder.reminder_minutes, now)

        if reminders:
            logger.info(f"{len(reminders)} reminder(s) due")
        return reminders


class AnalyzerFactory:
    """Factory for creating ScheduleAnalyzer instances with dependency injection."""

    @staticmethod
    def create(data_collector: Optional[DataCollector] = None,
               state_store: Optional[StateStore] = None) -> ScheduleAnalyzer:
        """
        Create a ScheduleAnalyzer from the current configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        logger.info("Creating ScheduleAnalyzer via factory")

        if not Config.validate():
            raise ValueError("Configuration validation failed. Check your .env settings.")

        if state_store is None:
            state_store = JsonFileStateStore(Config.STATE_FILE)

        return ScheduleAnalyzer(state_store=state_store, data_collector=data_collector)
