# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable test data and factories for all tests.
"""

import os
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Keep test runs from writing log files
os.environ.setdefault("DAYPILOT_LOG_TO_FILE", "false")

import pytest
import pytz

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from daypilot.models import (
    CalendarEvent,
    Task,
    Priority,
    TaskStatus,
    TimeInterval,
    WorkingWindow,
)


# ==================== Date/Time Fixtures ====================

@pytest.fixture
def utc():
    return pytz.utc


@pytest.fixture
def amsterdam():
    return pytz.timezone("Europe/Amsterdam")


@pytest.fixture
def day():
    """A fixed Monday, so weekday-dependent logic is deterministic."""
    return date(2024, 3, 11)


@pytest.fixture
def at(day, utc):
    """Factory: aware datetime for an 'HH:MM' time on `day` (UTC unless a zone is given)."""
    def _at(hhmm: str, on: date = None, tz=None) -> datetime:
        hours, minutes = (int(part) for part in hhmm.split(':'))
        naive = datetime.combine(on or day, datetime.min.time()) + timedelta(hours=hours, minutes=minutes)
        return (tz or utc).localize(naive)

    return _at


@pytest.fixture
def interval(at):
    """Factory: TimeInterval between two 'HH:MM' times on `day`."""
    def _interval(start: str, end: str, on: date = None, tz=None) -> TimeInterval:
        return TimeInterval(at(start, on, tz), at(end, on, tz))

    return _interval


# ==================== Configuration Fixtures ====================

@pytest.fixture
def working_window():
    """Default 08:00-17:00 working window (540 minutes)."""
    return WorkingWindow(480, 1020)


@pytest.fixture
def eight_hour_window():
    """09:00-17:00 working window (480 minutes)."""
    return WorkingWindow(540, 1020)


# ==================== Event Fixtures ====================

@pytest.fixture
def create_event(at):
    """Factory fixture for creating test events."""
    def _create(
        event_id: str,
        start: str,
        end: str,
        title: str = None,
        on: date = None,
        tz=None,
        **kwargs
    ) -> CalendarEvent:
        return CalendarEvent(
            id=event_id,
            title=title or f"Event {event_id}",
            start=at(start, on, tz),
            end=at(end, on, tz),
            **kwargs
        )

    return _create


@pytest.fixture
def scenario_events(create_event):
    """Three events filling 09:00-12:00 and 13:00-17:00."""
    return [
        create_event("a", "09:00", "10:30"),
        create_event("b", "10:30", "12:00"),
        create_event("c", "13:00", "17:00"),
    ]


# ==================== Task Fixtures ====================

@pytest.fixture
def create_task():
    """Factory fixture for creating test tasks."""
    def _create(
        task_id: str = "t1",
        title: str = None,
        duration_minutes: int = 60,
        priority: Priority = Priority.MEDIUM,
        due_date: date = None,
        status: TaskStatus = TaskStatus.PENDING,
        **kwargs
    ) -> Task:
        return Task(
            id=task_id,
            title=title or f"Task {task_id}",
            duration_minutes=duration_minutes,
            priority=priority,
            due_date=due_date,
            status=status,
            **kwargs
        )

    return _create


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
