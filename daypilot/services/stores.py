# File: daypilot/services/stores.py
"""
Read interfaces for the data DayPilot analyses.

Implementations live outside this package (database, API, JSON export...).
Every method returns plain dict records with ISO-8601 timestamps.
"""

import datetime
from typing import Dict, List, Optional, Protocol


class EventStore(Protocol):

    def list_events(self, start: datetime.datetime, end: datetime.datetime) -> List[dict]:
        """Events that may intersect [start, end), including recurring masters."""
        ...

    def list_categories(self) -> Dict[str, str]:
        """Mapping of category id to category name."""
        ...


class TaskStore(Protocol):

    def list_tasks(self) -> List[dict]:
        ...


class BookingStore(Protocol):

    def get_link(self, link_id: str) -> Optional[dict]:
        """Booking-link record (duration, buffers, min_notice, max_per_day, timezone)."""
        ...

    def list_availability(self, link_id: str) -> List[dict]:
        ...

    def list_excluded_dates(self, link_id: str) -> List[dict]:
        ...

    def list_bookings(self, link_id: str, start: datetime.datetime,
                      end: datetime.datetime) -> List[dict]:
        ...


class JsonExportStore:
    """
    Event and task store over an already-loaded JSON export:
    {"events": [...], "tasks": [...], "categories": {id: name}}.
    """

    def __init__(self, data: dict):
        self.data = data or {}

    def list_events(self, start: datetime.datetime, end: datetime.datetime) -> List[dict]:
        # The collector filters by window after expansion
        return list(self.data.get('events', []))

    def list_categories(self) -> Dict[str, str]:
        categories = self.data.get('categories', {})
        if isinstance(categories, list):
            return {str(c['id']): c.get('name', '') for c in categories if 'id' in c}
        return dict(categories)

    def list_tasks(self) -> List[dict]:
        return list(self.data.get('tasks', []))
