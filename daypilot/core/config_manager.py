# File: daypilot/core/config_manager.py
"""
Centralized configuration management for DayPilot.
Loads settings from environment variables (and a .env file when present).
"""

import os
from pathlib import Path
from typing import List

import pytz
from dotenv import load_dotenv

from daypilot.models.config import WorkingWindow, RiskThresholds, MINUTES_PER_DAY
from daypilot.utils.logger import setup_logger

# Load environment variables
load_dotenv()

logger = setup_logger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer value for {name}: {raw!r}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from daypilot/core/
    OUTPUT_DIR = BASE_DIR / "output"
    LOGS_DIR = Path(os.getenv("DAYPILOT_LOG_DIR", "logs"))

    # Files
    STATE_FILE = Path(os.getenv("DAYPILOT_STATE_FILE", str(OUTPUT_DIR / "state.json")))

    # Application Settings
    TARGET_TIMEZONE = os.getenv("DAYPILOT_TIMEZONE", "UTC")
    LOG_LEVEL = os.getenv("DAYPILOT_LOG_LEVEL", "INFO")
    LOG_TO_FILE = _env_bool("DAYPILOT_LOG_TO_FILE", True)

    # Working hours (minutes since local midnight)
    WORKING_HOURS_START = _env_int("DAYPILOT_WORKING_HOURS_START", 480)   # 08:00
    WORKING_HOURS_END = _env_int("DAYPILOT_WORKING_HOURS_END", 1020)      # 17:00

    # Engine constants
    SLOT_STEP_MINUTES = 15
    DEFAULT_TASK_DURATION_MINUTES = 60
    BUFFER_PROXIMITY_MINUTES = 15
    DEFAULT_MAX_SLOTS = 3
    TOP_CATEGORIES = 5
    BREAK_MINUTES = 15
    REMINDER_GRACE_MINUTES = 5
    REMINDER_RETENTION_DAYS = 7

    # Default classifier keywords (matched case-insensitively)
    MEETING_KEYWORDS: List[str] = ['meeting', 'call', 'sync']
    FOCUS_KEYWORDS: List[str] = ['focus', 'deep work', 'work block']

    @classmethod
    def default_working_window(cls) -> WorkingWindow:
        """Working window built from the configured working hours."""
        return WorkingWindow(cls.WORKING_HOURS_START, cls.WORKING_HOURS_END)

    @classmethod
    def default_thresholds(cls) -> RiskThresholds:
        return RiskThresholds(default_task_minutes=cls.DEFAULT_TASK_DURATION_MINUTES)

    @classmethod
    def timezone(cls):
        return pytz.timezone(cls.TARGET_TIMEZONE)

    @classmethod
    def validate(cls) -> bool:
        """Validate that the configuration is usable."""
        errors = []

        if cls.TARGET_TIMEZONE not in pytz.all_timezones_set:
            errors.append(f"Unknown timezone: {cls.TARGET_TIMEZONE}")

        if not (0 <= cls.WORKING_HOURS_START < cls.WORKING_HOURS_END <= MINUTES_PER_DAY):
            errors.append(
                f"Invalid working hours: {cls.WORKING_HOURS_START}-{cls.WORKING_HOURS_END}"
            )

        if errors:
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
