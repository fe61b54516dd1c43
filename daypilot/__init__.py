"""DayPilot: availability and schedule-analysis engine."""

__version__ = "0.1.0"
