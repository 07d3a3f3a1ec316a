"""
Regex patterns and helpers shared by the wiki markup extractors.
"""

import re
from typing import Pattern

from extractors.line_cursor import LineCursor
from parse_errors import PatternNotFound

TITLE_PATTERN = re.compile(r'title="([^"]+)"')
SRC_PATTERN = re.compile(r'src="([^"]+)"')
INTEGER_PATTERN = re.compile(r'[0-9]+')
COUNT_PATTERN = re.compile(r'\(([0-9]+)\)')
ROWSPAN_PATTERN = re.compile(r'rowspan="([0-9]+)"')
TOC_LABEL_PATTERN = re.compile(r"([A-Za-z '-]+)</span>")

APOSTROPHE_ESCAPES = ('&#39;', '%27')


def normalize_text(value: str) -> str:
    """Trim and unescape apostrophes the wiki writes as &#39; or %27"""
    value = value.strip()
    for escape in APOSTROPHE_ESCAPES:
        value = value.replace(escape, "'")
    return value


def require_match(pattern: Pattern, line: str, description: str, cursor: LineCursor) -> str:
    """
    Return the first capture group of pattern in line

    Raises:
        PatternNotFound: if the pattern does not occur in the line
    """
    match = pattern.search(line)
    if not match:
        raise PatternNotFound(description, line, cursor.source, cursor.line_number)
    return match.group(1) if pattern.groups else match.group(0)


def optional_count(line: str, cursor: LineCursor) -> int:
    """
    Parenthesized multiplier such as "(5)", 1 when absent

    Raises:
        PatternNotFound: for a zero multiplier
    """
    match = COUNT_PATTERN.search(line)
    if not match:
        return 1
    count = int(match.group(1))
    if count < 1:
        raise PatternNotFound('positive multiplier', line, cursor.source, cursor.line_number)
    return count


def next_line(cursor: LineCursor, description: str) -> str:
    """Advance the cursor, treating end of page as a missing pattern"""
    if not cursor.has_next():
        raise PatternNotFound(description, '', cursor.source, cursor.line_number)
    return cursor.advance()

