"""Tests for the pattern tables and their calendar interpreters."""

import dataclasses
import re
from datetime import datetime

import pytest

from quickadd.patterns import (
    ALL_TABLES,
    DATE_RULES,
    PRIORITY_RULES,
    RECURRENCE_RULES,
    PatternRule,
    calendar_date,
    weekday_date,
)
from quickadd.task import ReminderOffset


def rule_names(table):
    return [rule.name for rule in table]


class TestTables:
    """Test table shape and ordering."""

    def test_tables_are_immutable_tuples(self):
        for table in ALL_TABLES:
            assert isinstance(table, tuple)
            assert all(isinstance(rule, PatternRule) for rule in table)

    def test_rules_are_frozen(self):
        rule = DATE_RULES[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            rule.pattern = re.compile("never")

    def test_patterns_are_precompiled(self):
        for table in ALL_TABLES:
            for rule in table:
                assert hasattr(rule.pattern, "search")

    def test_longer_date_phrase_precedes_tomorrow(self):
        names = rule_names(DATE_RULES)
        assert names.index("day_after_tomorrow") < names.index("tomorrow")

    def test_weekday_list_precedes_single_days(self):
        names = rule_names(RECURRENCE_RULES)
        list_index = names.index("every_weekday_list")
        assert list_index < names.index("every_monday")
        assert list_index < names.index("every_sunday")

    def test_priority_table_order(self):
        names = rule_names(PRIORITY_RULES)
        assert names[0] == "high_words"
        assert names.index("triple_bang") < names.index("double_bang")
        assert names.index("double_star") < names.index("single_star")


class TestWeekdayDate:
    """Test weekday name resolution."""

    def setup_method(self):
        self.monday = datetime(2024, 1, 1, 10, 0)

    def test_later_this_week(self):
        assert weekday_date(self.monday, 5, skip_next=False) == datetime(2024, 1, 5)

    def test_same_weekday_means_next_week(self):
        assert weekday_date(self.monday, 1, skip_next=False) == datetime(2024, 1, 8)

    def test_next_starts_search_tomorrow(self):
        thursday = datetime(2024, 1, 4, 9, 0)
        assert weekday_date(thursday, 5, skip_next=False) == datetime(2024, 1, 5)
        assert weekday_date(thursday, 5, skip_next=True) == datetime(2024, 1, 12)


class TestCalendarDate:
    """Test month/day resolution."""

    def setup_method(self):
        self.now = datetime(2024, 1, 1, 10, 0)

    def test_future_date_this_year(self):
        assert calendar_date(self.now, 12, 25) == datetime(2024, 12, 25)

    def test_past_date_rolls_to_next_year(self):
        # Midnight today is already behind 10:00.
        assert calendar_date(self.now, 1, 1) == datetime(2025, 1, 1)

    def test_explicit_year_never_rolls(self):
        assert calendar_date(self.now, 12, 31, 2023) == datetime(2023, 12, 31)

    def test_impossible_date_is_declined(self):
        assert calendar_date(self.now, 2, 30) is None
        assert calendar_date(self.now, 13, 1) is None


class TestReminderOffsetBuckets:
    """Test free-form minute counts snapping to supported offsets."""

    @pytest.mark.parametrize("minutes, expected", [
        (3, ReminderOffset.FIVE_MINUTES),
        (5, ReminderOffset.FIVE_MINUTES),
        (7, ReminderOffset.TEN_MINUTES),
        (15, ReminderOffset.FIFTEEN_MINUTES),
        (20, ReminderOffset.THIRTY_MINUTES),
        (45, ReminderOffset.ONE_HOUR),
    ])
    def test_from_minutes(self, minutes, expected):
        assert ReminderOffset.from_minutes(minutes) == expected

    def test_minutes_property(self):
        assert ReminderOffset.EXACT.minutes == 0
        assert ReminderOffset.ONE_DAY.minutes == 1440
