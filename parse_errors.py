"""
Error taxonomy for the Terraria wiki extractors.

Every error carries the page it came from and, where known, the line number
so the caller can decide whether to skip the page or abort the run.
"""

from typing import Optional


class ParseError(Exception):
    """Base class for markup the extractors cannot interpret"""

    def __init__(self, message: str, page: Optional[str] = None, line_number: Optional[int] = None):
        self.page = page
        self.line_number = line_number
        location = page or "<unknown page>"
        if line_number is not None:
            location = f"{location}:{line_number}"
        super().__init__(f"{message} ({location})")


class PatternNotFound(ParseError):
    """A required marker or attribute is missing from a line"""

    def __init__(self, description: str, line: str, page: Optional[str] = None, line_number: Optional[int] = None):
        self.description = description
        self.line = line
        super().__init__(f"Expected {description} in line {line!r}", page, line_number)


class StructuralMismatch(ParseError):
    """Two sections that should enumerate the same sequence disagree in length"""

    def __init__(self, description: str, expected: int, found: int, page: Optional[str] = None):
        self.description = description
        self.expected = expected
        self.found = found
        super().__init__(f"{description}: expected {expected}, found {found}", page)


class UnresolvedReference(ParseError):
    """An item name is not present in the name to id table"""

    def __init__(self, name: str, page: Optional[str] = None, line_number: Optional[int] = None):
        self.name = name
        super().__init__(f"Unknown item name {name!r}", page, line_number)
