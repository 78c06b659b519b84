"""Table-driven stage extractors.

Every extractor has the shape ``extract_x(buffer, now) -> Optional[Extraction]``:
it scans ``buffer`` against one pattern table and returns the interpreted
value with the literal text it consumed, or ``None``. Extractors never touch
the caller's buffer; removing the consumed text is the pipeline's job.
"""

from datetime import datetime
from typing import Any, NamedTuple, Optional, Sequence, Tuple, Union

from .patterns import (
    ADVANCED_RECURRENCE_RULES,
    DATE_RULES,
    DUE_PREFIX_PATTERN,
    LOCATION_RULES,
    PRIORITY_RULES,
    RECURRENCE_RULES,
    RELATIVE_TIME_RULES,
    REMINDER_RULES,
    TIME_RULES,
    AdvancedRecurrence,
    ClockTime,
    PatternRule,
    Recurrence,
)


class Extraction(NamedTuple):
    """A stage's result: the derived value and the text span it consumed."""
    value: Any
    matched: Union[str, Tuple[str, ...]]


def first_match(rules: Sequence[PatternRule], buffer: str, now: datetime) -> Optional[Extraction]:
    """Return the first rule in table order that matches and interprets."""
    for rule in rules:
        match = rule.pattern.search(buffer)
        if match is None:
            continue
        value = rule.interpret(match, now)
        if value is not None:
            return Extraction(value, match.group(0))
    return None


def extract_reminder_offset(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find a "remind me ..." phrase; the value is a ``ReminderOffset``."""
    return first_match(REMINDER_RULES, buffer, now)


def extract_advanced_recurrence(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find "every 2nd tuesday", "every 3 days" and the like.

    The value is an ``AdvancedRecurrence`` whose ``first_occurrence`` is set
    when the phrase pins down a concrete first day.
    """
    return first_match(ADVANCED_RECURRENCE_RULES, buffer, now)


def extract_recurrence(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find "daily", "every monday", "every mon, wed and fri"; value is a ``Recurrence``."""
    return first_match(RECURRENCE_RULES, buffer, now)


def extract_relative_time(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find "in 10 minutes" / "in an hour"; value is the due datetime."""
    return first_match(RELATIVE_TIME_RULES, buffer, now)


def extract_date(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find a calendar date phrase; value is the due datetime.

    A ``due`` or ``by`` directly in front of the phrase is consumed with it,
    so "Submit report due friday" leaves "Submit report".
    """
    for rule in DATE_RULES:
        match = rule.pattern.search(buffer)
        if match is None:
            continue
        value = rule.interpret(match, now)
        if value is None:
            continue
        start = match.start()
        prefix = DUE_PREFIX_PATTERN.search(buffer, 0, start)
        if prefix is not None:
            start = prefix.start()
        return Extraction(value, buffer[start:match.end()])
    return None


def extract_time(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find a clock time; value is a ``ClockTime``."""
    return first_match(TIME_RULES, buffer, now)


def extract_priority(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find a priority marker; value is a ``Priority``."""
    return first_match(PRIORITY_RULES, buffer, now)


def extract_location(buffer: str, now: datetime) -> Optional[Extraction]:
    """Find "at the gym" or "at Central Park"; value is the place name."""
    return first_match(LOCATION_RULES, buffer, now)


def apply_clock_time(date: datetime, clock: ClockTime) -> datetime:
    """Put ``clock`` on ``date``'s calendar day."""
    return date.replace(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)

