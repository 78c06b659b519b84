"""Pattern tables for the quick-add grammar.

Each table is an immutable, ordered tuple of ``PatternRule`` entries. A
stage scans its table top to bottom and the first rule whose pattern matches
(and whose interpreter accepts the match) wins, so order is precedence:
specific phrases sit above broader ones. Tables are compiled once at import
and only ever read.

Interpreters are pure functions of ``(match, now)``. They return the derived
value, or ``None`` to decline a match that names an impossible calendar value
such as "Feb 30".
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, NamedTuple, Optional, Pattern, Tuple

from .task import AdvancedRepeat, MonthlyType, Priority, ReminderOffset, RepeatType
from .utils.datetime import (
    add_months,
    day_of_week,
    last_day_of_month,
    next_weekday,
    nth_weekday_of_month,
    start_of_day,
)


@dataclass(frozen=True)
class PatternRule:
    """One trigger pattern and the interpreter that turns a match into a value."""
    name: str
    pattern: Pattern
    interpret: Callable[["re.Match", datetime], Any]


class ClockTime(NamedTuple):
    hour: int
    minute: int


class Recurrence(NamedTuple):
    """A simple recurrence: a repeat type plus weekdays for ``CUSTOM``."""
    repeat_type: RepeatType
    days: Optional[Tuple[int, ...]] = None


class AdvancedRecurrence(NamedTuple):
    advanced_repeat: AdvancedRepeat
    first_occurrence: Optional[datetime] = None


# 0=Sunday .. 6=Saturday
WEEKDAYS = {
    "sun": 0, "sunday": 0,
    "mon": 1, "monday": 1,
    "tue": 2, "tues": 2, "tuesday": 2,
    "wed": 3, "wednesday": 3,
    "thu": 4, "thur": 4, "thurs": 4, "thursday": 4,
    "fri": 5, "friday": 5,
    "sat": 6, "saturday": 6,
}

MONTHS = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6,
    "jul": 7, "july": 7, "aug": 8, "august": 8, "sep": 9, "september": 9,
    "oct": 10, "october": 10, "nov": 11, "november": 11, "dec": 12, "december": 12,
}

ORDINAL_WEEKS = {
    "1st": 1, "first": 1, "2nd": 2, "second": 2, "3rd": 3, "third": 3,
    "4th": 4, "fourth": 4, "last": -1,
}

KNOWN_VENUES = (
    "office", "home", "work", "gym", "school", "store", "market", "mall",
    "hospital", "clinic", "bank", "library", "cafe", "restaurant", "airport",
    "station",
)

_MONTH_NAME = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|jun(?:e)?|jul(?:y)?"
    r"|aug(?:ust)?|sep(?:tember)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
_DAY_NAME = (
    r"mon(?:day)?|tue(?:s(?:day)?)?|wed(?:nesday)?|thu(?:r(?:s(?:day)?)?)?"
    r"|fri(?:day)?|sat(?:urday)?|sun(?:day)?"
)
_REMIND = r"\b(?:remind(?:\s+me)?|notify(?:\s+me)?)"

# "due friday" and "by friday" consume their prefix together with the date
DUE_PREFIX_PATTERN = re.compile(r"\b(?:due|by)\s*$", re.IGNORECASE)

_FULL_DAY_NAMES = (
    ("monday", 1), ("tuesday", 2), ("wednesday", 3), ("thursday", 4),
    ("friday", 5), ("saturday", 6), ("sunday", 0),
)

# Abbreviations accepted after "every", per weekday
_EVERY_DAY_SPELLINGS = (
    ("monday", "mon", 1),
    ("tuesday", "tue|tues", 2),
    ("wednesday", "wed", 3),
    ("thursday", "thu|thurs", 4),
    ("friday", "fri", 5),
    ("saturday", "sat", 6),
    ("sunday", "sun", 0),
)


def _rule(name: str, pattern: str, interpret, flags: int = re.IGNORECASE) -> PatternRule:
    return PatternRule(name, re.compile(pattern, flags), interpret)


def _constant(value):
    return lambda match, now: value


# ─── Calendar interpreters ─────────────────────────────────────────

def weekday_date(now: datetime, weekday: int, skip_next: bool) -> datetime:
    """Resolve a weekday name to a day.

    Plain "friday" is the first Friday after today. When today already is
    that weekday, or the phrase says "next friday", the search starts from
    tomorrow instead, rolling past the coming occurrence.
    """
    base = now
    if skip_next or day_of_week(now) == weekday:
        base = now + timedelta(days=1)
    return start_of_day(next_weekday(base, weekday))


def calendar_date(now: datetime, month: int, day: int, year: Optional[int] = None) -> Optional[datetime]:
    """Build midnight of ``month``/``day``.

    Without an explicit year the current year is used and a date already
    behind ``now`` rolls forward one year.
    """
    try:
        date = start_of_day(now.replace(year=year or now.year, month=month, day=day))
        if year is None and date < now:
            date = date.replace(year=date.year + 1)
    except ValueError:
        return None
    return date


def _month_day(match, now):
    return calendar_date(now, MONTHS[match.group(1).lower()], int(match.group(2)))


def _day_month(match, now):
    return calendar_date(now, MONTHS[match.group(2).lower()], int(match.group(1)))


def _numeric_date(match, now):
    year = None
    if match.group(3):
        year = int(match.group(3))
        if year < 100:
            year += 2000
    return calendar_date(now, int(match.group(1)), int(match.group(2)), year)


def _iso_date(match, now):
    try:
        return start_of_day(now.replace(
            year=int(match.group(1)), month=int(match.group(2)), day=int(match.group(3)),
        ))
    except ValueError:
        return None


def _end_of_week(match, now):
    days_until_friday = (5 - day_of_week(now)) % 7 or 7
    return start_of_day(now + timedelta(days=days_until_friday)).replace(hour=17)


def _this_weekend(match, now):
    return start_of_day(next_weekday(now, 6))


def _weekday_rule(day_name: str, weekday: int) -> PatternRule:
    return _rule(
        day_name,
        r"\b(next\s+)?%s\b" % day_name,
        lambda match, now: weekday_date(now, weekday, bool(match.group(1))),
    )


# ─── Relative time: "in 10 minutes" ───────────────────────────────

RELATIVE_TIME_RULES: Tuple[PatternRule, ...] = (
    _rule("in_minutes", r"\bin\s+(\d+)\s*(?:min(?:ute)?s?)\b",
          lambda m, now: now + timedelta(minutes=int(m.group(1)))),
    _rule("in_hours", r"\bin\s+(\d+)\s*(?:hour?s?|hr?s?)\b",
          lambda m, now: now + timedelta(hours=int(m.group(1)))),
    _rule("in_half_hour", r"\bin\s+(?:half\s+an?\s+hour|30\s*min)",
          lambda m, now: now + timedelta(minutes=30)),
    _rule("in_an_hour", r"\bin\s+an?\s+hour\b",
          lambda m, now: now + timedelta(hours=1)),
)


# ─── Absolute dates ───────────────────────────────────────────────

DATE_RULES: Tuple[PatternRule, ...] = (
    _rule("today", r"\btoday\b", lambda m, now: start_of_day(now)),
    _rule("tonight", r"\btonight\b", lambda m, now: start_of_day(now).replace(hour=21)),
    # Longer phrase first: "day after tomorrow" also contains "tomorrow".
    _rule("day_after_tomorrow", r"\bday after tomorrow\b",
          lambda m, now: start_of_day(now + timedelta(days=2))),
    _rule("tomorrow", r"\btomorrow\b", lambda m, now: start_of_day(now + timedelta(days=1))),
    _rule("tmr", r"\btmr\b", lambda m, now: start_of_day(now + timedelta(days=1))),
    _rule("tmrw", r"\btmrw\b", lambda m, now: start_of_day(now + timedelta(days=1))),
    _rule("yesterday", r"\byesterday\b", lambda m, now: start_of_day(now - timedelta(days=1))),
    _rule("end_of_day", r"\b(?:eod|end of (?:the )?day)\b",
          lambda m, now: start_of_day(now).replace(hour=23)),
    _rule("end_of_week", r"\b(?:eow|end of (?:the )?week)\b", _end_of_week),
    _rule("end_of_month", r"\b(?:eom|end of (?:the )?month)\b",
          lambda m, now: last_day_of_month(now).replace(hour=17)),
    _rule("this_morning", r"\bthis\s+morning\b", lambda m, now: start_of_day(now).replace(hour=9)),
    _rule("this_afternoon", r"\bthis\s+afternoon\b", lambda m, now: start_of_day(now).replace(hour=14)),
    _rule("this_evening", r"\bthis\s+evening\b", lambda m, now: start_of_day(now).replace(hour=18)),
    _rule("this_weekend", r"\bthis weekend\b", _this_weekend),
    _rule("next_week", r"\bnext week\b", lambda m, now: start_of_day(now + timedelta(weeks=1))),
    _rule("next_month", r"\bnext month\b", lambda m, now: start_of_day(add_months(now, 1))),
    _rule("in_days", r"\bin (\d+) days?\b",
          lambda m, now: start_of_day(now + timedelta(days=int(m.group(1))))),
    _rule("in_weeks", r"\bin (\d+) weeks?\b",
          lambda m, now: start_of_day(now + timedelta(weeks=int(m.group(1))))),
    _rule("in_months", r"\bin (\d+) months?\b",
          lambda m, now: start_of_day(add_months(now, int(m.group(1))))),
) + tuple(_weekday_rule(name, weekday) for name, weekday in _FULL_DAY_NAMES) + (
    _rule("month_day", r"\b(%s)\s+(\d{1,2})(?:st|nd|rd|th)?\b" % _MONTH_NAME, _month_day),
    _rule("day_month", r"\b(\d{1,2})(?:st|nd|rd|th)?\s+(%s)\b" % _MONTH_NAME, _day_month),
    _rule("numeric_date", r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b", _numeric_date, 0),
    _rule("iso_date", r"\b(\d{4})-(\d{2})-(\d{2})\b", _iso_date, 0),
)


# ─── Clock times ──────────────────────────────────────────────────

def _twelve_hour(hour: int, minute: int, period: Optional[str]) -> Optional[ClockTime]:
    period = period.lower() if period else None
    if period == "pm" and hour < 12:
        hour += 12
    if period == "am" and hour == 12:
        hour = 0
    if hour > 23 or minute > 59:
        return None
    return ClockTime(hour, minute)


def _clock(match, now):
    return _twelve_hour(int(match.group(1)), int(match.group(2) or 0), match.group(3))


PARTS_OF_DAY = {"morning": 9, "afternoon": 14, "evening": 18, "night": 21}

TIME_RULES: Tuple[PatternRule, ...] = (
    _rule("at_clock", r"\bat\s+(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b", _clock),
    _rule("meridiem_clock", r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", _clock),
    _rule("twenty_four_hour", r"\b(\d{1,2}):(\d{2})\b",
          lambda m, now: _twelve_hour(int(m.group(1)), int(m.group(2)), None), 0),
    _rule("part_of_day", r"\bin the (morning|afternoon|evening|night)\b",
          lambda m, now: ClockTime(PARTS_OF_DAY[m.group(1).lower()], 0)),
)


# ─── Simple recurrence ────────────────────────────────────────────

def _weekday_list(match, now):
    names = re.findall(r"\b(?:%s)\b" % _DAY_NAME, match.group(1), re.IGNORECASE)
    days = sorted({WEEKDAYS[name.lower()] for name in names})
    return Recurrence(RepeatType.CUSTOM, tuple(days))


def _every_day_rule(full: str, abbreviations: str, weekday: int) -> PatternRule:
    return _rule(
        "every_%s" % full,
        r"\bevery\s*(?:%s|%s)\b" % (full, abbreviations),
        _constant(Recurrence(RepeatType.CUSTOM, (weekday,))),
    )


RECURRENCE_RULES: Tuple[PatternRule, ...] = (
    _rule("hourly", r"\b(?:every\s*hour|hourly)\b", _constant(Recurrence(RepeatType.HOURLY))),
    _rule("daily", r"\b(?:every\s*day|daily)\b", _constant(Recurrence(RepeatType.DAILY))),
    _rule("weekly", r"\b(?:every\s*week|weekly)\b", _constant(Recurrence(RepeatType.WEEKLY))),
    _rule("monthly", r"\b(?:every\s*month|monthly)\b", _constant(Recurrence(RepeatType.MONTHLY))),
    _rule("yearly", r"\b(?:every\s*year|yearly|annually)\b", _constant(Recurrence(RepeatType.YEARLY))),
    _rule("weekdays", r"\b(?:every\s*weekday|weekdays|on\s*weekdays)\b",
          _constant(Recurrence(RepeatType.WEEKDAYS))),
    _rule("weekends", r"\b(?:every\s*weekend|weekends|on\s*weekends)\b",
          _constant(Recurrence(RepeatType.WEEKENDS))),
    # A day list has to be tried before the single days it starts with.
    _rule("every_weekday_list",
          r"\bevery\s+((?:(?:%s)\s*(?:,|and|&)\s*)+(?:%s))\b" % (_DAY_NAME, _DAY_NAME),
          _weekday_list),
) + tuple(_every_day_rule(*spelling) for spelling in _EVERY_DAY_SPELLINGS)


# ─── Advanced recurrence ──────────────────────────────────────────

def _nth_weekday(match, now):
    week = ORDINAL_WEEKS[match.group(1).lower()]
    weekday = WEEKDAYS[match.group(2).lower()]
    return AdvancedRecurrence(
        AdvancedRepeat(
            frequency=RepeatType.MONTHLY,
            monthly_type=MonthlyType.WEEKDAY,
            monthly_week=week,
            monthly_day=weekday,
        ),
        nth_weekday_of_month(now, week, weekday),
    )


_INTERVAL_FREQUENCIES = {"day": RepeatType.DAILY, "week": RepeatType.WEEKLY, "month": RepeatType.MONTHLY}


def _last_day_of_month(match, now):
    last = last_day_of_month(now)
    return AdvancedRecurrence(
        AdvancedRepeat(frequency=RepeatType.MONTHLY, monthly_type=MonthlyType.DATE, monthly_day=last.day),
        last,
    )


ADVANCED_RECURRENCE_RULES: Tuple[PatternRule, ...] = (
    _rule("nth_weekday",
          r"\bevery\s+(1st|2nd|3rd|4th|last|first|second|third|fourth)\s+"
          r"(monday|tuesday|wednesday|thursday|friday|saturday|sunday|mon|tue|wed|thu|fri|sat|sun)\b",
          _nth_weekday),
    _rule("every_n_hours", r"\bevery\s+(\d+)\s*(?:hour?s?|hr?s?)\b",
          lambda m, now: AdvancedRecurrence(AdvancedRepeat(RepeatType.HOURLY, interval=int(m.group(1))))),
    _rule("every_n_units", r"\bevery\s+(\d+)\s+(day|week|month)s?\b",
          lambda m, now: AdvancedRecurrence(AdvancedRepeat(
              _INTERVAL_FREQUENCIES[m.group(2).lower()], interval=int(m.group(1)),
          ))),
    _rule("last_day_of_month", r"\b(?:every\s+)?last\s+day\s+(?:of\s+(?:the\s+)?)?month\b",
          _last_day_of_month),
)


# ─── Priority ─────────────────────────────────────────────────────
# Alternate spellings of the same levels; the first listed match wins.

PRIORITY_RULES: Tuple[PatternRule, ...] = (
    _rule("high_words", r"\b(high priority|urgent|important|asap|critical|!{2,})\b",
          _constant(Priority.HIGH)),
    _rule("medium_words", r"\b(medium priority|normal|moderate)\b", _constant(Priority.MEDIUM)),
    _rule("low_words", r"\b(low priority|later|whenever|someday)\b", _constant(Priority.LOW)),
    _rule("triple_bang", r"!{3,}", _constant(Priority.HIGH), 0),
    _rule("double_bang", r"!!", _constant(Priority.MEDIUM), 0),
    _rule("p1", r"\bp1\b", _constant(Priority.HIGH)),
    _rule("p2", r"\bp2\b", _constant(Priority.MEDIUM)),
    _rule("p3", r"\bp3\b", _constant(Priority.LOW)),
    _rule("bang_high", r"!high\b", _constant(Priority.HIGH)),
    _rule("bang_medium", r"!med(?:ium)?\b", _constant(Priority.MEDIUM)),
    _rule("bang_low", r"!low\b", _constant(Priority.LOW)),
    _rule("double_star", r"\*{2,}", _constant(Priority.HIGH), 0),
    _rule("single_star", r"\*(?!\*)", _constant(Priority.MEDIUM), 0),
)


# ─── Reminder offsets ─────────────────────────────────────────────

REMINDER_RULES: Tuple[PatternRule, ...] = (
    _rule("exact_time", _REMIND + r"\s+(?:at\s+)?(?:the\s+)?exact\s+time\b",
          _constant(ReminderOffset.EXACT)),
    _rule("minutes_before", _REMIND + r"\s+(\d+)\s*(?:min(?:ute)?s?)\s*(?:before|earlier)?\b",
          lambda m, now: ReminderOffset.from_minutes(int(m.group(1)))),
    _rule("hour_before", _REMIND + r"\s+(?:1|one|an?)\s*(?:hour?s?|hr?s?)\s*(?:before|earlier)?\b",
          _constant(ReminderOffset.ONE_HOUR)),
    _rule("day_before", _REMIND + r"\s+(?:1|one|a)\s*(?:day)\s*(?:before|earlier)?\b",
          _constant(ReminderOffset.ONE_DAY)),
    _rule("remind_me", _REMIND + r"\b", _constant(ReminderOffset.EXACT)),
)


# ─── Location ─────────────────────────────────────────────────────
# Best effort: any capitalized phrase after "at" counts as a place, which
# over-matches ordinary capitalized words.

def _place(match, now):
    location = match.group(1).strip()
    return location if len(location) > 1 else None


LOCATION_RULES: Tuple[PatternRule, ...] = (
    _rule("known_venue", r"\bat\s+(?:the\s+)?(%s)\b" % "|".join(KNOWN_VENUES), _place),
    _rule("proper_noun", r"\bat\s+([A-Z][a-zA-Z']+(?:\s+[A-Z][a-zA-Z']+)*)\b", _place, 0),
)


ALL_TABLES: Tuple[Tuple[PatternRule, ...], ...] = (
    REMINDER_RULES,
    ADVANCED_RECURRENCE_RULES,
    RECURRENCE_RULES,
    RELATIVE_TIME_RULES,
    DATE_RULES,
    TIME_RULES,
    PRIORITY_RULES,
    LOCATION_RULES,
)
