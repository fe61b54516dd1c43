# File: daypilot/services/data_collector.py

import datetime
from typing import Dict, List, Optional, Tuple, TypedDict

from daypilot.models import (
    AvailabilityRule,
    Booking,
    BookingConstraint,
    CalendarEvent,
    Task,
    availability_rule_from_dict,
    booking_constraint_from_dict,
    booking_from_dict,
    event_from_dict,
    task_from_dict,
)
from daypilot.services.stores import BookingStore, EventStore, TaskStore
from daypilot.utils.logger import setup_logger


logger = setup_logger(__name__)


class CollectedData(TypedDict):
    calendar_events: List[CalendarEvent]
    tasks: List[Task]
    categories: Dict[str, str]


class BookingLinkData(TypedDict):
    rules: List[AvailabilityRule]
    constraint: BookingConstraint
    bookings: List[Booking]


class DataCollector:
    """Collects store records and converts them to typed models."""

    def __init__(
        self,
        event_store: EventStore,
        task_store: TaskStore,
        booking_store: Optional[BookingStore] = None
    ):
        """
        Initialize data collector with stores.

        Args:
            event_store: Source of event records and category names
            task_store: Source of task records
            booking_store: Source of booking-link records (optional)
        """
        self.events = event_store
        self.tasks = task_store
        self.bookings = booking_store
        self.logger = setup_logger(__name__)

    def collect_all_data(self, window_start: datetime.datetime,
                         window_end: datetime.datetime) -> CollectedData:
        """
        Collect events and tasks for a window and convert raw records into models.

        Records that fail conversion are logged and skipped.

        Returns:
            Dictionary containing typed lists of events and tasks, plus category names.
        """
        self.logger.info(f"Collecting data for {window_start.isoformat()} - {window_end.isoformat()}")

        calendar_events, failed_events = self._convert(
            self.events.list_events(window_start, window_end), event_from_dict, 'event'
        )
        tasks, failed_tasks = self._convert(self.tasks.list_tasks(), task_from_dict, 'task')
        categories = self.events.list_categories() or {}

        self.logger.info(
            f"Collection successful: {len(calendar_events)} events, {len(tasks)} valid tasks "
            f"({failed_events + failed_tasks} record(s) skipped)"
        )

        return {
            'calendar_events': calendar_events,
            'tasks': tasks,
            'categories': categories,
        }

    def collect_booking_link(self, link_id: str, window_start: datetime.datetime,
                             window_end: datetime.datetime) -> BookingLinkData:
        """
        Collect availability rules, constraint and existing bookings of a booking link.

        Raises:
            RuntimeError: If no booking store was configured
            KeyError: If the link does not exist
        """
        if self.bookings is None:
            raise RuntimeError("No booking store configured")

        link = self.bookings.get_link(link_id)
        if not link:
            raise KeyError(f"Booking link not found: {link_id}")

        constraint = booking_constraint_from_dict(link, self.bookings.list_excluded_dates(link_id))
        rules, _ = self._convert(
            self.bookings.list_availability(link_id), availability_rule_from_dict, 'availability rule'
        )
        bookings, _ = self._convert(
            self.bookings.list_bookings(link_id, window_start, window_end), booking_from_dict, 'booking'
        )
        bookings = [b for b in bookings if b.status != 'cancelled']

        self.logger.debug(f"Link {link_id}: {len(rules)} rules, {len(bookings)} active bookings")
        return {'rules': rules, 'constraint': constraint, 'bookings': bookings}

    def _convert(self, records, factory, kind: str) -> Tuple[list, int]:
        converted = []
        failed = 0
        for record in records or []:
            try:
                converted.append(factory(record))
            except (KeyError, TypeError, ValueError) as e:
                failed += 1
                self.logger.error(
                    f"Failed to convert {kind} {record.get('id', record.get('title', 'Unknown'))}: {e}"
                )
        return converted, failed
