# File: daypilot/processors/recurrence_expander.py
"""
Recurrence expansion.

Turns an RRULE plus its seed occurrence into the concrete occurrences that
start inside a query window. Expansion runs on the wall clock of the seed's
timezone and every occurrence is localised afterwards, so a weekly 09:00
meeting stays at 09:00 across DST changes.
"""

import re
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, List

import pytz
from dateutil.rrule import rrule, rrulestr

from daypilot.models.common import localize
from daypilot.models.calendar import CalendarEvent
from daypilot.models.intervals import TimeInterval, InvalidIntervalError
from daypilot.models.recurrence import RecurrenceSpec, RecurrenceExpansion, RecurrenceParseError
from daypilot.utils.logger import setup_logger

logger = setup_logger(__name__)

SUPPORTED_FREQUENCIES = ('DAILY', 'WEEKLY', 'MONTHLY', 'YEARLY')

_FREQ_RE = re.compile(r'(?:^|[;:])FREQ=([A-Z]+)')
_UNTIL_UTC_RE = re.compile(r'UNTIL=(\d{8}T\d{6})Z')

# Naive wall-clock bounds are widened by this much; exact filtering happens on aware instants.
_WINDOW_SLACK = timedelta(days=1)


def _to_wall(moment: datetime, tz) -> datetime:
    return moment.astimezone(tz).replace(tzinfo=None)


def _rewrite_utc_until(text: str, tz) -> str:
    """Express a UTC UNTIL as wall-clock time in `tz` to match the naive dtstart."""
    def _convert(match):
        utc_until = pytz.utc.localize(datetime.strptime(match.group(1), '%Y%m%dT%H%M%S'))
        return 'UNTIL=' + _to_wall(utc_until, tz).strftime('%Y%m%dT%H%M%S')
    return _UNTIL_UTC_RE.sub(_convert, text)


def parse_rule(rule: str, dtstart: datetime) -> rrule:
    """
    Parse an RFC-5545 RRULE for the given start.

    Args:
        rule: Rule text, with or without the 'RRULE:' prefix. DTSTART lines are ignored;
            the start always comes from `dtstart`.
        dtstart: Timezone-aware first occurrence.

    Returns:
        A dateutil rrule producing naive wall-clock datetimes in dtstart's zone.

    Raises:
        RecurrenceParseError: If the rule is empty, malformed or uses an unsupported FREQ.
    """
    if not rule or not rule.strip():
        raise RecurrenceParseError("Empty recurrence rule")

    lines = [line.strip() for line in rule.strip().upper().splitlines() if line.strip()]
    rule_lines = [line for line in lines if not line.startswith('DTSTART')]
    if len(rule_lines) != 1:
        raise RecurrenceParseError(f"Expected exactly one RRULE line: {rule!r}")
    text = rule_lines[0]

    match = _FREQ_RE.search(text)
    if not match:
        raise RecurrenceParseError(f"Recurrence rule has no FREQ: {rule!r}")
    if match.group(1) not in SUPPORTED_FREQUENCIES:
        raise RecurrenceParseError(f"Unsupported recurrence frequency {match.group(1)}")

    tz = dtstart.tzinfo
    text = _rewrite_utc_until(text, tz)

    try:
        parsed = rrulestr(text, dtstart=_to_wall(dtstart, tz), ignoretz=True)
    except (ValueError, TypeError) as e:
        raise RecurrenceParseError(f"Invalid recurrence rule {rule!r}: {e}") from e

    if not isinstance(parsed, rrule):
        raise RecurrenceParseError(f"Recurrence rule did not produce a single rule: {rule!r}")
    return parsed


def expand(spec: RecurrenceSpec, window_start: datetime, window_end: datetime) -> List[TimeInterval]:
    """
    Expand a recurrence into the occurrences starting within [window_start, window_end].

    Every occurrence keeps the seed's duration. An occurrence that starts inside the
    window but ends after it is returned whole.

    Raises:
        RecurrenceParseError: If the rule cannot be parsed.
        InvalidIntervalError: If the window is inverted.
    """
    if window_end < window_start:
        raise InvalidIntervalError(
            f"Window end {window_end.isoformat()} is before start {window_start.isoformat()}"
        )

    dtstart = spec.dtstart
    tz = dtstart.tzinfo
    duration = spec.first_occurrence.duration
    rule = parse_rule(spec.rule, dtstart)

    upper = window_end
    if spec.until is not None:
        until = spec.until if spec.until.tzinfo else localize(spec.until, tz)
        upper = min(upper, until)
    if upper < window_start:
        return []

    lower_wall = _to_wall(window_start, tz) - _WINDOW_SLACK
    upper_wall = _to_wall(upper, tz) + _WINDOW_SLACK

    occurrences: List[TimeInterval] = []
    for wall_start in rule.between(lower_wall, upper_wall, inc=True):
        start = localize(wall_start, tz)
        if not (window_start <= start <= upper):
            continue
        end = start + duration
        if hasattr(tz, 'normalize'):
            end = tz.normalize(end)
        occurrences.append(TimeInterval(start, end))

    logger.debug(f"Expanded '{spec.rule}' into {len(occurrences)} occurrences")
    return occurrences


def expand_recurrence(spec: RecurrenceSpec, window_start: datetime,
                      window_end: datetime) -> RecurrenceExpansion:
    """Expand without raising on bad rules; the caller inspects `ok`."""
    try:
        return RecurrenceExpansion.success(expand(spec, window_start, window_end))
    except RecurrenceParseError as e:
        return RecurrenceExpansion.parse_failed(str(e))


def expand_events(events: Iterable[CalendarEvent], window_start: datetime,
                  window_end: datetime) -> List[CalendarEvent]:
    """
    Replace recurring events by their instances inside the window.

    Non-recurring events are kept when they intersect the window. A recurring
    event whose rule cannot be parsed contributes no instances.
    """
    expanded: List[CalendarEvent] = []
    failed = 0

    for event in events:
        if not event.is_recurring:
            if event.start < window_end and event.end > window_start:
                expanded.append(event)
            continue

        spec = RecurrenceSpec(event.recurrence_rule, event.interval, event.recurrence_end_date)
        result = expand_recurrence(spec, window_start, window_end)
        if not result.ok:
            failed += 1
            logger.warning(f"Skipping recurrence of event '{event.title}' ({event.id}): {result.error}")
            continue

        for occurrence in result.intervals:
            instance_ms = int(occurrence.start.timestamp() * 1000)
            expanded.append(replace(
                event,
                id=f"{event.id}-{instance_ms}",
                start=occurrence.start,
                end=occurrence.end,
                recurrence_rule=None,
                recurrence_end_date=None,
                parent_event_id=event.id,
            ))

    if failed:
        logger.info(f"{failed} recurring event(s) had unparsable rules")
    return expanded
