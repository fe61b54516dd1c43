# File: daypilot/processors/classifier.py
"""
Event classification.

The analysis processors never inspect titles; they read the `is_meeting` and
`is_focus_time` flags. Callers resolve those flags with a classifier, either
the keyword classifier below or their own.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from daypilot.core.config_manager import Config
from daypilot.models.calendar import CalendarEvent


@dataclass(frozen=True)
class EventClassification:
    is_meeting: bool = False
    is_focus_time: bool = False


Classifier = Callable[[CalendarEvent], EventClassification]


def _matches(text: str, keywords: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def keyword_classifier(categories: Optional[Dict[str, str]] = None,
                       meeting_keywords: Sequence[str] = None,
                       focus_keywords: Sequence[str] = None) -> Classifier:
    """
    Build a classifier that matches keywords against the category name, or
    against the title when the event has no known category.

    Args:
        categories: Mapping of category id to category name.
        meeting_keywords: Defaults to Config.MEETING_KEYWORDS.
        focus_keywords: Defaults to Config.FOCUS_KEYWORDS.
    """
    categories = categories or {}
    meeting_keywords = [k.lower() for k in (meeting_keywords or Config.MEETING_KEYWORDS)]
    focus_keywords = [k.lower() for k in (focus_keywords or Config.FOCUS_KEYWORDS)]

    def classify(event: CalendarEvent) -> EventClassification:
        text = event.title or ''
        if event.category_id and event.category_id in categories:
            text = categories[event.category_id]
        return EventClassification(
            is_meeting=_matches(text, meeting_keywords),
            is_focus_time=_matches(text, focus_keywords),
        )

    return classify


def classify_events(events: Iterable[CalendarEvent], classifier: Classifier) -> List[CalendarEvent]:
    """Return copies of `events` with classification flags set by `classifier`."""
    classified = []
    for event in events:
        result = classifier(event)
        classified.append(replace(
            event,
            is_meeting=result.is_meeting,
            is_focus_time=result.is_focus_time,
        ))
    return classified
