"""quickadd - rule-based natural language parser for one-line task entry."""

__version__ = "0.1.0"

from .exceptions import ConfigError, QuickAddError
from .formatter import format_for_display
from .parser import NaturalLanguageParser, TaskBuilder, looks_parseable, parse
from .task import (
    AdvancedRepeat,
    MonthlyType,
    ParsedTask,
    Priority,
    ReminderOffset,
    RepeatType,
    TaskDraft,
)

__all__ = [
    "AdvancedRepeat",
    "ConfigError",
    "MonthlyType",
    "NaturalLanguageParser",
    "ParsedTask",
    "Priority",
    "QuickAddError",
    "ReminderOffset",
    "RepeatType",
    "TaskBuilder",
    "TaskDraft",
    "format_for_display",
    "looks_parseable",
    "parse",
    "__version__",
]
