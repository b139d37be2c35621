"""Tests for easy_scheduler.core.describe — durations, labels and titles."""

from datetime import date, time

import pytest

from easy_scheduler.core.describe import (
    NO_TITLE,
    REMINDER_CHOICES,
    describe_event,
    display_title,
    format_duration,
    interval_label,
    notification_body,
)
from easy_scheduler.data.models import Event


class TestFormatDuration:
    @pytest.mark.parametrize(
        "minutes, expected",
        [
            (1, "1 minute"),
            (45, "45 minutes"),
            (60, "1 hour"),
            (90, "1 hour 30 minutes"),
            (121, "2 hours 1 minute"),
            (360, "6 hours"),
            (1440, "1 day"),
            (2880, "2 days"),
            (1500, "25 hours"),
            (10080, "1 week"),
            (20160, "2 weeks"),
        ],
    )
    def test_largest_exact_unit(self, minutes, expected):
        assert format_duration(minutes) == expected

    def test_every_reminder_choice_has_a_label(self):
        labels = [interval_label(m) for m in REMINDER_CHOICES]
        assert len(set(labels)) == len(REMINDER_CHOICES)


class TestIntervalLabel:
    def test_zero_is_at_time_of_event(self):
        assert interval_label(0) == "At time of event"

    def test_matches_duration_rule(self):
        assert interval_label(720) == format_duration(720) == "12 hours"


class TestDisplayTitle:
    def test_strips_whitespace(self):
        assert display_title("  Dentist ") == "Dentist"

    def test_blank_uses_default(self):
        assert display_title("   ") == NO_TITLE

    def test_none_uses_default(self):
        assert display_title(None) == NO_TITLE


class TestNotificationBody:
    def test_body_uses_duration(self):
        assert notification_body("Dentist", 60) == "Dentist starts in 1 hour"

    def test_zero_offset(self):
        assert notification_body("Dentist", 0) == "Dentist starts now"

    def test_blank_title(self):
        assert notification_body("", 10) == "(No Title) starts in 10 minutes"


class TestDescribeEvent:
    def test_with_end_time(self):
        event = Event(
            title="Standup",
            event_date=date(2026, 3, 14),
            start_time=time(9, 0),
            end_time=time(9, 15),
            use_end_time=True,
        )
        assert describe_event(event) == "Standup · March 14, 2026 · 09:00–09:15"

    def test_without_end_time(self):
        event = Event(
            title="",
            event_date=date(2026, 3, 14),
            start_time=time(18, 30),
            end_time=time(19, 0),
            use_end_time=False,
        )
        assert describe_event(event) == "(No Title) · March 14, 2026 · 18:30"
