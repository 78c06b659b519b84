"""Tests for display badges."""

from datetime import datetime, timedelta

import pytest

from quickadd.formatter import effort_label, format_for_display, recurrence_label
from quickadd.parser import parse
from quickadd.task import ParsedTask, Priority, ReminderOffset, RepeatType


class TestFormatForDisplay:
    """Test badge generation."""

    def setup_method(self):
        self.now = datetime(2024, 1, 1, 10, 0)

    def badges(self, text, **kwargs):
        return format_for_display(parse(text, self.now), now=self.now, **kwargs)

    def test_relative_and_reminder(self):
        assert self.badges("Check oven in 10 minutes") == ["in 10 min", "🔔 At exact time"]

    def test_relative_hours(self):
        assert self.badges("Call back in an hour")[0] == "in 1 hour"
        assert self.badges("Call back in 2 hours")[0] == "in 2 hours"

    def test_far_due_date_has_no_relative_badge(self):
        assert self.badges("Team sync every monday at 9am remind me 15 min before") == [
            "🔔 15 min before",
            "🔄 Every Mon",
        ]

    def test_advanced_recurrence_labels(self):
        assert self.badges("Submit report every 2nd Tuesday") == ["🔄 Every 2nd Tue"]
        assert self.badges("Water plants every 3 days") == ["🔄 Every 3 days"]
        assert self.badges("Invoice last day of the month") == ["🔄 Last day of month"]

    def test_simple_recurrence_label(self):
        assert self.badges("Journal daily") == ["🔄 Daily"]

    def test_badge_order(self):
        parsed = ParsedTask(
            text="Lunch",
            due_date=self.now + timedelta(minutes=30),
            reminder_offset=ReminderOffset.FIVE_MINUTES,
            repeat_type=RepeatType.CUSTOM,
            repeat_days=(1, 3),
            location="Blue Bottle",
            priority=Priority.LOW,
            estimated_hours=1.5,
            description="bring notes",
        )
        assert format_for_display(parsed, now=self.now) == [
            "in 30 min",
            "🔔 5 min before",
            "🔄 Every Mon, Wed",
            "📍 Blue Bottle",
            "⚡ low priority",
            "⏱ 1h30m",
            "📝 bring notes",
        ]

    def test_without_emoji(self):
        assert self.badges("Finish deck asap", use_emoji=False) == ["high priority"]

    def test_past_due_date_has_no_relative_badge(self):
        parsed = ParsedTask(text="Late", due_date=self.now - timedelta(hours=1))
        assert format_for_display(parsed, now=self.now) == []

    def test_plain_task(self):
        assert format_for_display(ParsedTask(text="Buy groceries"), now=self.now) == []


class TestLabels:
    """Test the label helpers."""

    @pytest.mark.parametrize("hours, label", [
        (2.0, "2h"),
        (1.5, "1h30m"),
        (0.5, "30m"),
        (0.75, "45m"),
    ])
    def test_effort_label(self, hours, label):
        assert effort_label(hours) == label

    def test_recurrence_label_none(self):
        assert recurrence_label(ParsedTask(text="x")) is None
