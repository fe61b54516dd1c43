# File: tests/unit/test_classifier.py
"""
Unit tests for event classification.
"""

from daypilot.processors.classifier import EventClassification, classify_events, keyword_classifier


class TestKeywordClassifier:
    """Tests for the default keyword classifier."""

    def test_title_keywords(self, create_event):
        classify = keyword_classifier()

        assert classify(create_event("1", "09:00", "10:00", title="Weekly Sync")) == \
            EventClassification(is_meeting=True, is_focus_time=False)
        assert classify(create_event("2", "10:00", "12:00", title="Deep Work: parser")) == \
            EventClassification(is_meeting=False, is_focus_time=True)
        assert classify(create_event("3", "12:00", "13:00", title="Lunch")) == EventClassification()

    def test_category_name_wins_over_title(self, create_event):
        classify = keyword_classifier({"c1": "Client Calls"})
        event = create_event("1", "09:00", "10:00", title="Focus on slides", category_id="c1")

        assert classify(event) == EventClassification(is_meeting=True, is_focus_time=False)

    def test_unknown_category_falls_back_to_title(self, create_event):
        classify = keyword_classifier({"c1": "Client Calls"})
        event = create_event("1", "09:00", "10:00", title="Focus block", category_id="missing")

        assert classify(event).is_focus_time is True

    def test_custom_keywords(self, create_event):
        classify = keyword_classifier(meeting_keywords=["Overleg"], focus_keywords=["Concentratie"])

        assert classify(create_event("1", "09:00", "10:00", title="Team overleg")).is_meeting is True
        assert classify(create_event("2", "09:00", "10:00", title="Team meeting")).is_meeting is False


class TestClassifyEvents:
    """Tests for applying a classifier to a list of events."""

    def test_returns_flagged_copies(self, create_event):
        original = create_event("1", "09:00", "10:00", title="Standup")

        classified = classify_events([original], lambda e: EventClassification(is_meeting=True))

        assert classified[0].is_meeting is True
        assert classified[0].id == "1"
        assert original.is_meeting is False

    def test_classifier_overrides_existing_flags(self, create_event):
        event = create_event("1", "09:00", "10:00", is_meeting=True, is_focus_time=True)

        classified = classify_events([event], lambda e: EventClassification())

        assert classified[0].is_meeting is False
        assert classified[0].is_focus_time is False
