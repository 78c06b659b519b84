"""Data model for parsed quick-add tasks."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .utils.datetime import to_iso_string


class Priority(Enum):
    """Task priority levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RepeatType(Enum):
    """Recurrence kinds understood by task consumers."""
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    CUSTOM = "custom"  # requires repeat_days


class MonthlyType(Enum):
    """How a monthly advanced recurrence picks its day."""
    DATE = "date"  # "on the 31st"
    WEEKDAY = "weekday"  # "on the 2nd Tuesday"


class ReminderOffset(Enum):
    """Lead time before the due moment at which a reminder fires."""
    EXACT = "exact"
    FIVE_MINUTES = "5min"
    TEN_MINUTES = "10min"
    FIFTEEN_MINUTES = "15min"
    THIRTY_MINUTES = "30min"
    ONE_HOUR = "1hour"
    ONE_DAY = "1day"

    @property
    def minutes(self) -> int:
        return _OFFSET_MINUTES[self]

    @classmethod
    def from_minutes(cls, minutes: int) -> "ReminderOffset":
        """Bucket a free-form minute count into the nearest supported tier."""
        if minutes <= 5:
            return cls.FIVE_MINUTES
        if minutes <= 10:
            return cls.TEN_MINUTES
        if minutes <= 15:
            return cls.FIFTEEN_MINUTES
        if minutes <= 30:
            return cls.THIRTY_MINUTES
        return cls.ONE_HOUR


_OFFSET_MINUTES = {
    ReminderOffset.EXACT: 0,
    ReminderOffset.FIVE_MINUTES: 5,
    ReminderOffset.TEN_MINUTES: 10,
    ReminderOffset.FIFTEEN_MINUTES: 15,
    ReminderOffset.THIRTY_MINUTES: 30,
    ReminderOffset.ONE_HOUR: 60,
    ReminderOffset.ONE_DAY: 1440,
}


@dataclass(frozen=True)
class AdvancedRepeat:
    """A recurrence too irregular for a repeat type plus weekday set."""
    frequency: RepeatType
    interval: Optional[int] = None  # every N hours/days/weeks/months
    monthly_type: Optional[MonthlyType] = None
    monthly_week: Optional[int] = None  # 1-4, or -1 for last
    monthly_day: Optional[int] = None  # 0-6 weekday, or 1-31 day of month

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"frequency": self.frequency.value}
        if self.interval is not None:
            data["interval"] = self.interval
        if self.monthly_type is not None:
            data["monthly_type"] = self.monthly_type.value
        if self.monthly_week is not None:
            data["monthly_week"] = self.monthly_week
        if self.monthly_day is not None:
            data["monthly_day"] = self.monthly_day
        return data


@dataclass(frozen=True)
class ParsedTask:
    """Structured result of parsing one line of quick-add text.

    Only ``text`` is always present. ``repeat_days`` uses 0=Sunday and is
    only populated for ``RepeatType.CUSTOM``; ``tags`` keeps first-seen order
    without duplicates.
    """
    text: str
    due_date: Optional[datetime] = None
    reminder_time: Optional[datetime] = None
    reminder_offset: Optional[ReminderOffset] = None
    priority: Optional[Priority] = None
    repeat_type: Optional[RepeatType] = None
    repeat_days: Optional[Tuple[int, ...]] = None
    advanced_repeat: Optional[AdvancedRepeat] = None
    location: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    folder_name: Optional[str] = None
    description: Optional[str] = None
    estimated_hours: Optional[float] = None

    @property
    def has_metadata(self) -> bool:
        """True when anything besides the title was extracted."""
        return any(
            value is not None
            for name, value in self.__dict__.items()
            if name != "text"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to JSON-friendly primitives."""
        return {
            "text": self.text,
            "due_date": to_iso_string(self.due_date),
            "reminder_time": to_iso_string(self.reminder_time),
            "reminder_offset": self.reminder_offset.value if self.reminder_offset else None,
            "priority": self.priority.value if self.priority else None,
            "repeat_type": self.repeat_type.value if self.repeat_type else None,
            "repeat_days": list(self.repeat_days) if self.repeat_days else None,
            "advanced_repeat": self.advanced_repeat.to_dict() if self.advanced_repeat else None,
            "location": self.location,
            "tags": list(self.tags) if self.tags else None,
            "folder_name": self.folder_name,
            "description": self.description,
            "estimated_hours": self.estimated_hours,
        }


@dataclass
class TaskDraft:
    """A finished task record ready to hand to a persistence layer."""

    text: str
    description: str = ""

    # Scheduling
    due_date: Optional[datetime] = None
    reminder_time: Optional[datetime] = None
    repeat_type: Optional[RepeatType] = None
    repeat_days: List[int] = field(default_factory=list)
    advanced_repeat: Optional[AdvancedRepeat] = None

    # Organization
    priority: Optional[Priority] = None
    tags: List[str] = field(default_factory=list)
    folder_id: Optional[str] = None
    location: Optional[str] = None
    estimated_hours: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the draft to a dictionary with ISO datetime strings."""
        return {
            "text": self.text,
            "description": self.description,
            "due_date": to_iso_string(self.due_date),
            "reminder_time": to_iso_string(self.reminder_time),
            "repeat_type": self.repeat_type.value if self.repeat_type else None,
            "repeat_days": self.repeat_days,
            "advanced_repeat": self.advanced_repeat.to_dict() if self.advanced_repeat else None,
            "priority": self.priority.value if self.priority else None,
            "tags": self.tags,
            "folder_id": self.folder_id,
            "location": self.location,
            "estimated_hours": self.estimated_hours,
        }
