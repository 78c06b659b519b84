"""Display badges for a parsed quick-add task."""

import math
from datetime import datetime
from typing import List, Optional

from .task import AdvancedRepeat, MonthlyType, ParsedTask, ReminderOffset, RepeatType
from .utils.datetime import now_local

REMINDER_LABELS = {
    ReminderOffset.EXACT: "At exact time",
    ReminderOffset.FIVE_MINUTES: "5 min before",
    ReminderOffset.TEN_MINUTES: "10 min before",
    ReminderOffset.FIFTEEN_MINUTES: "15 min before",
    ReminderOffset.THIRTY_MINUTES: "30 min before",
    ReminderOffset.ONE_HOUR: "1 hour before",
    ReminderOffset.ONE_DAY: "1 day before",
}

DAY_ABBREVIATIONS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
ORDINALS = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", -1: "last"}
INTERVAL_UNITS = {
    RepeatType.HOURLY: "hour",
    RepeatType.DAILY: "day",
    RepeatType.WEEKLY: "week",
    RepeatType.MONTHLY: "month",
    RepeatType.YEARLY: "year",
}


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _relative_label(due_date: datetime, now: datetime) -> Optional[str]:
    seconds = (due_date - now).total_seconds()
    if seconds < 0:
        return None
    minutes = _round(seconds / 60)
    hours = _round(seconds / 3600)
    if minutes < 60:
        return f"in {minutes} min"
    if hours < 24:
        return f"in {hours} hour{'s' if hours > 1 else ''}"
    return None


def _advanced_label(advanced: AdvancedRepeat) -> str:
    if advanced.monthly_type == MonthlyType.WEEKDAY:
        return f"Every {ORDINALS[advanced.monthly_week]} {DAY_ABBREVIATIONS[advanced.monthly_day]}"
    if advanced.monthly_type == MonthlyType.DATE:
        return "Last day of month"
    unit = INTERVAL_UNITS.get(advanced.frequency, advanced.frequency.value)
    if advanced.interval and advanced.interval > 1:
        return f"Every {advanced.interval} {unit}s"
    return f"Every {unit}"


def recurrence_label(parsed: ParsedTask) -> Optional[str]:
    """Describe the task's recurrence, e.g. ``Every Mon, Wed`` or ``Every 2nd Tue``."""
    if parsed.advanced_repeat is not None:
        return _advanced_label(parsed.advanced_repeat)
    if parsed.repeat_type is None:
        return None
    if parsed.repeat_type == RepeatType.CUSTOM and parsed.repeat_days:
        return "Every " + ", ".join(DAY_ABBREVIATIONS[day] for day in parsed.repeat_days)
    return parsed.repeat_type.value.capitalize()


def effort_label(hours: float) -> str:
    """Render fractional hours as ``1h30m``."""
    whole = int(hours)
    minutes = _round((hours - whole) * 60)
    if minutes == 60:
        whole, minutes = whole + 1, 0
    return f"{f'{whole}h' if whole > 0 else ''}{f'{minutes}m' if minutes > 0 else ''}"


def format_for_display(parsed: ParsedTask, now: Optional[datetime] = None,
                       use_emoji: bool = True) -> List[str]:
    """Summarize a parsed task as short badges, in display order.

    Args:
        parsed: The parse result
        now: Reference instant for the "in N min" badge
        use_emoji: Prefix badges with an icon

    Returns:
        Badge strings; empty when nothing but the title was parsed
    """
    def badge(icon: str, label: str) -> str:
        return f"{icon} {label}" if use_emoji else label

    badges: List[str] = []

    if parsed.due_date is not None:
        if now is None:
            now = now_local(parsed.due_date.tzinfo)
        relative = _relative_label(parsed.due_date, now)
        if relative:
            badges.append(relative)

    if parsed.reminder_offset is not None:
        badges.append(badge("🔔", REMINDER_LABELS[parsed.reminder_offset]))

    repeat = recurrence_label(parsed)
    if repeat:
        badges.append(badge("🔄", repeat))

    if parsed.location:
        badges.append(badge("📍", parsed.location))
    if parsed.priority is not None:
        badges.append(badge("⚡", f"{parsed.priority.value} priority"))
    if parsed.estimated_hours:
        badges.append(badge("⏱", effort_label(parsed.estimated_hours)))
    if parsed.description:
        badges.append(badge("📝", parsed.description))

    return badges
