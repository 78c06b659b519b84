"""Natural language quick-add parser.

Turns one line such as ``"Call mom tomorrow at 5pm remind me 15 min before #family"``
into a ``ParsedTask``. The pipeline runs a fixed sequence of stages over a
shrinking text buffer; each stage looks for one thing, records it, and drops
the consumed words so later, looser stages only see what is left.
"""

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from .extractors import (
    AdvancedRecurrence,
    Extraction,
    Recurrence,
    apply_clock_time,
    extract_advanced_recurrence,
    extract_date,
    extract_location,
    extract_priority,
    extract_recurrence,
    extract_relative_time,
    extract_reminder_offset,
    extract_time,
)
from .patterns import ALL_TABLES
from .quick_syntax import (
    QUICK_SYNTAX_PATTERNS,
    extract_description,
    extract_effort,
    extract_folder,
    extract_tags,
)
from .task import (
    AdvancedRepeat,
    ParsedTask,
    Priority,
    ReminderOffset,
    RepeatType,
    TaskDraft,
)
from .utils.datetime import day_of_week, next_weekday, now_local, start_of_day

logger = logging.getLogger(__name__)

CONNECTIVES = ("at", "on", "by", "in", "every", "due", "for")
_LEADING_CONNECTIVE = re.compile(r"^(?:%s)\s+" % "|".join(CONNECTIVES))
_TRAILING_CONNECTIVE = re.compile(r"\s+(?:%s)\s*$" % "|".join(CONNECTIVES))


@dataclass(frozen=True)
class _ParseState:
    """Accumulator folded through the pipeline stages."""
    buffer: str
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

    def consume(self, matched: Union[str, Iterable[str]], **changes) -> "_ParseState":
        """Record ``changes`` and drop ``matched`` from the current buffer.

        The span is looked up again in the buffer as it is now, never by an
        offset computed against an earlier state.
        """
        buffer = self.buffer
        for span in ((matched,) if isinstance(matched, str) else matched):
            buffer = buffer.replace(span, "", 1)
        return replace(self, buffer=buffer.strip(), **changes)


class _ParseContext(NamedTuple):
    original: str
    now: datetime


Stage = Callable[[_ParseState, _ParseContext], _ParseState]


def first_recurrence_date(recurrence: Recurrence, now: datetime) -> Optional[datetime]:
    """Pick the first due day implied by a simple recurrence.

    Custom weekday sets take the nearest listed weekday after today;
    weekdays take tomorrow unless that falls on a weekend, then Monday;
    weekends take the next Saturday. Other repeat types imply no day.
    """
    today = day_of_week(now)
    if recurrence.days:
        upcoming = next((day for day in recurrence.days if day > today), recurrence.days[0])
        return start_of_day(next_weekday(now, upcoming))
    if recurrence.repeat_type == RepeatType.WEEKDAYS:
        days_until = {5: 3, 6: 2}.get(today, 1)
        return start_of_day(now + timedelta(days=days_until))
    if recurrence.repeat_type == RepeatType.WEEKENDS:
        return start_of_day(next_weekday(now, 6))
    return None


def canonicalize_title(text: str) -> str:
    """Tidy the leftover title after extraction.

    Collapses whitespace, drops stray commas at either end and strips
    connective words ("at", "on", "by", "in", "every", "due", "for") left
    dangling where a phrase was cut out.
    """
    text = " ".join(text.split())
    previous = None
    while text != previous:
        previous = text
        text = text.strip(" ,")
        text = _TRAILING_CONNECTIVE.sub("", text)
        text = _LEADING_CONNECTIVE.sub("", text)
    return text


class NaturalLanguageParser:
    """Rule-based parser for single-line task entry."""

    def __init__(self):
        self.stages: Tuple[Stage, ...] = (
            self._description,
            self._effort,
            self._tags,
            self._folder,
            self._reminder_phrase,
            self._advanced_recurrence,
            self._recurrence,
            self._relative_time,
            self._date,
            self._time,
            self._reminder_time,
            self._priority,
            self._location,
        )

    def parse(self, input_text: str, now: Optional[datetime] = None) -> ParsedTask:
        """Parse one line of text into a ``ParsedTask``.

        Args:
            input_text: Raw quick-add text
            now: Reference instant; captured once here when omitted

        Returns:
            The parsed task. Never raises: unexpected failures degrade to a
            task whose title is the trimmed input.
        """
        input_text = input_text or ""
        if now is None:
            now = now_local()
        try:
            context = _ParseContext(input_text, now)
            state = _ParseState(buffer=input_text.strip())
            for stage in self.stages:
                state = stage(state, context)
            return self._finish(state, input_text)
        except Exception:
            logger.exception("Failed to parse %r; keeping it as plain text", input_text)
            return ParsedTask(text=input_text.strip())

    def _finish(self, state: _ParseState, input_text: str) -> ParsedTask:
        return ParsedTask(
            text=canonicalize_title(state.buffer) or input_text.strip(),
            due_date=state.due_date,
            reminder_time=state.reminder_time,
            reminder_offset=state.reminder_offset,
            priority=state.priority,
            repeat_type=state.repeat_type,
            repeat_days=state.repeat_days,
            advanced_repeat=state.advanced_repeat,
            location=state.location,
            tags=state.tags,
            folder_name=state.folder_name,
            description=state.description,
            estimated_hours=state.estimated_hours,
        )

    @staticmethod
    def _log(stage: str, found: Extraction) -> None:
        logger.debug("%s matched %r -> %r", stage, found.matched, found.value)

    # ─── Quick syntax ───────────────────────────────────────────────

    def _description(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_description(state.buffer)
        if not found:
            return state
        self._log("description", found)
        return state.consume(found.matched, description=found.value)

    def _effort(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_effort(state.buffer)
        if not found:
            return state
        self._log("effort", found)
        return state.consume(found.matched, estimated_hours=found.value)

    def _tags(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_tags(state.buffer)
        if not found:
            return state
        self._log("tags", found)
        return state.consume(found.matched, tags=found.value)

    def _folder(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_folder(state.buffer)
        if not found:
            return state
        self._log("folder", found)
        return state.consume(found.matched, folder_name=found.value)

    # ─── Scheduling ─────────────────────────────────────────────────

    def _reminder_phrase(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_reminder_offset(state.buffer, ctx.now)
        if not found:
            return state
        self._log("reminder", found)
        return state.consume(found.matched, reminder_offset=found.value)

    def _advanced_recurrence(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_advanced_recurrence(state.buffer, ctx.now)
        if not found:
            return state
        self._log("advanced recurrence", found)
        recurrence: AdvancedRecurrence = found.value
        changes = {
            "advanced_repeat": recurrence.advanced_repeat,
            "repeat_type": recurrence.advanced_repeat.frequency,
        }
        if recurrence.first_occurrence is not None:
            changes["due_date"] = recurrence.first_occurrence
        return state.consume(found.matched, **changes)

    def _recurrence(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        if state.advanced_repeat is not None:
            return state
        found = extract_recurrence(state.buffer, ctx.now)
        if not found:
            return state
        self._log("recurrence", found)
        recurrence: Recurrence = found.value
        changes = {"repeat_type": recurrence.repeat_type, "repeat_days": recurrence.days}
        first_due = first_recurrence_date(recurrence, ctx.now)
        if first_due is not None:
            changes["due_date"] = first_due
        return state.consume(found.matched, **changes)

    def _relative_time(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_relative_time(state.buffer, ctx.now)
        if not found:
            return state
        self._log("relative time", found)
        return state.consume(
            found.matched,
            due_date=found.value,
            reminder_time=found.value,
            reminder_offset=state.reminder_offset or ReminderOffset.EXACT,
        )

    def _date(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        if state.due_date is not None:
            return state
        found = extract_date(state.buffer, ctx.now)
        if not found:
            return state
        self._log("date", found)
        return state.consume(found.matched, due_date=found.value)

    def _time(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        # Matched against the untouched input: a clock phrase may straddle
        # text an earlier stage already removed.
        found = extract_time(ctx.original, ctx.now)
        if not found:
            return state
        self._log("time", found)
        due_date = apply_clock_time(state.due_date or ctx.now, found.value)
        return state.consume(
            found.matched,
            due_date=due_date,
            reminder_time=due_date,
            reminder_offset=state.reminder_offset or ReminderOffset.EXACT,
        )

    def _reminder_time(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        if state.reminder_offset is None:
            return state
        if state.due_date is None:
            logger.debug("Dropping reminder %s: nothing to be reminded about", state.reminder_offset.value)
            return replace(state, reminder_offset=None)
        return replace(
            state,
            reminder_time=state.due_date - timedelta(minutes=state.reminder_offset.minutes),
        )

    # ─── Loose matchers ─────────────────────────────────────────────

    def _priority(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_priority(state.buffer, ctx.now)
        if not found:
            return state
        self._log("priority", found)
        return state.consume(found.matched, priority=found.value)

    def _location(self, state: _ParseState, ctx: _ParseContext) -> _ParseState:
        found = extract_location(state.buffer, ctx.now)
        if not found:
            return state
        self._log("location", found)
        return state.consume(found.matched, location=found.value)


def looks_parseable(text: str) -> bool:
    """Cheap check whether ``text`` contains anything the parser would pick up.

    Uses the same compiled patterns as the parse stages, without building a
    result, so callers can skip ``parse`` for plain text.
    """
    if not text:
        return False
    if any(pattern.search(text) for pattern in QUICK_SYNTAX_PATTERNS):
        return True
    return any(rule.pattern.search(text) for table in ALL_TABLES for rule in table)


_default_parser = NaturalLanguageParser()


def parse(text: str, now: Optional[datetime] = None) -> ParsedTask:
    """Parse quick-add text with the shared parser."""
    return _default_parser.parse(text, now)


class TaskBuilder:
    """Builds ``TaskDraft`` records from parsed quick-add text."""

    def __init__(self, folders: Optional[Dict[str, str]] = None):
        """
        Args:
            folders: Mapping of folder id to folder name used to resolve
                ``@folder`` references
        """
        self.folders = folders or {}

    def resolve_folder(self, folder_name: Optional[str]) -> Optional[str]:
        """Return the id of the first folder whose name contains ``folder_name``."""
        if not folder_name:
            return None
        needle = folder_name.lower()
        for folder_id, name in self.folders.items():
            if needle in name.lower():
                return folder_id
        logger.debug("No folder matches @%s", folder_name)
        return None

    def build(self, parsed: ParsedTask, tags: Optional[List[str]] = None,
              folder_id: Optional[str] = None) -> TaskDraft:
        """Build a draft, letting explicit ``tags``/``folder_id`` take precedence."""
        merged_tags = list(tags or [])
        seen = {tag.lower() for tag in merged_tags}
        for tag in parsed.tags or ():
            if tag.lower() not in seen:
                merged_tags.append(tag)
                seen.add(tag.lower())

        return TaskDraft(
            text=parsed.text,
            description=parsed.description or "",
            due_date=parsed.due_date,
            reminder_time=parsed.reminder_time,
            repeat_type=parsed.repeat_type,
            repeat_days=list(parsed.repeat_days or []),
            advanced_repeat=parsed.advanced_repeat,
            priority=parsed.priority,
            tags=merged_tags,
            folder_id=folder_id or self.resolve_folder(parsed.folder_name),
            location=parsed.location,
            estimated_hours=parsed.estimated_hours,
        )
