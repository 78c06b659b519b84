"""Quick-add shorthand markers.

These run before the word grammar because their trigger characters
(``#``, ``@``, ``~``, ``//``) can sit inside phrases the later stages would
otherwise misread. Each extractor returns an ``Extraction`` or ``None``.
"""

import re
from typing import Optional

from .extractors import Extraction

DESCRIPTION_PATTERN = re.compile(r"\s+(?://|--|[|])\s+(.+)$")
EFFORT_HOURS_PATTERN = re.compile(
    r"(?:~|est(?:imate)?:|effort:)\s*(\d+(?:\.\d+)?)\s*h(?:ours?|rs?)?\s*(?:(\d+)\s*m(?:in(?:ute)?s?)?)?",
    re.IGNORECASE,
)
EFFORT_MINUTES_PATTERN = re.compile(r"(?:~|est(?:imate)?:|effort:)\s*(\d+)\s*m(?:in(?:ute)?s?)?", re.IGNORECASE)
QUOTED_TAG_PATTERN = re.compile(r'#"([^"]+)"')
TAG_PATTERN = re.compile(r"#(\w[\w-]*)")
QUOTED_FOLDER_PATTERN = re.compile(r'@"([^"]+)"')
FOLDER_PATTERN = re.compile(r"@(\w[\w-]*)")

QUICK_SYNTAX_PATTERNS = (
    DESCRIPTION_PATTERN,
    EFFORT_HOURS_PATTERN,
    EFFORT_MINUTES_PATTERN,
    QUOTED_TAG_PATTERN,
    TAG_PATTERN,
    QUOTED_FOLDER_PATTERN,
    FOLDER_PATTERN,
)


def extract_description(buffer: str) -> Optional[Extraction]:
    """Split a trailing `` // notes``, `` -- notes`` or `` | notes`` off the line."""
    match = DESCRIPTION_PATTERN.search(buffer)
    if match is None:
        return None
    return Extraction(match.group(1).strip(), match.group(0))


def extract_effort(buffer: str) -> Optional[Extraction]:
    """Parse ``~2h``, ``~1h30m``, ``~45m``, ``est:2h`` or ``effort:30m`` into hours."""
    match = EFFORT_HOURS_PATTERN.search(buffer)
    if match:
        hours = float(match.group(1))
        if match.group(2):
            hours += int(match.group(2)) / 60
        return Extraction(hours, match.group(0))
    match = EFFORT_MINUTES_PATTERN.search(buffer)
    if match:
        return Extraction(int(match.group(1)) / 60, match.group(0))
    return None


def extract_tags(buffer: str) -> Optional[Extraction]:
    """Collect ``#tag`` and ``#"multi word tag"`` tokens.

    Quoted tags are taken first so ``#"deep work"`` never yields a bare
    ``deep``. The value is a tuple of tag names in first-seen order and
    ``matched`` is the tuple of literal tokens, in the order to remove them.
    """
    matches = list(QUOTED_TAG_PATTERN.finditer(buffer))
    remaining = QUOTED_TAG_PATTERN.sub("", buffer)
    matches.extend(TAG_PATTERN.finditer(remaining))
    if not matches:
        return None
    tags = tuple(dict.fromkeys(match.group(1) for match in matches))
    return Extraction(tags, tuple(match.group(0) for match in matches))


def extract_folder(buffer: str) -> Optional[Extraction]:
    """Find a single ``@folder`` or ``@"multi word folder"`` token."""
    match = QUOTED_FOLDER_PATTERN.search(buffer) or FOLDER_PATTERN.search(buffer)
    if match is None:
        return None
    return Extraction(match.group(1), match.group(0))
