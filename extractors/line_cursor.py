"""
Forward-only cursor over the lines of one fetched page.
"""

from typing import Iterable, List, Optional


class LineCursor:
    """Pull-based line reader with one line of pushback"""

    def __init__(self, lines: Iterable[str], source: Optional[str] = None):
        self._lines: List[str] = list(lines)
        self._position = 0
        self.source = source

    @classmethod
    def from_text(cls, text: str, source: Optional[str] = None) -> 'LineCursor':
        # Only \n ends a line; other Unicode line separators stay inside it
        lines = [line.rstrip('\r') for line in text.split('\n')]
        if lines and lines[-1] == '':
            lines.pop()
        return cls(lines, source)

    def has_next(self) -> bool:
        return self._position < len(self._lines)

    def peek(self) -> Optional[str]:
        """Next line without consuming it, None at end of page"""
        if not self.has_next():
            return None
        return self._lines[self._position]

    def advance(self) -> str:
        if not self.has_next():
            raise EOFError(f"No more lines in {self.source or 'page'}")
        line = self._lines[self._position]
        self._position += 1
        return line

    def pushback(self):
        """Un-read the last consumed line"""
        if self._position == 0:
            raise ValueError("Nothing to push back")
        self._position -= 1

    @property
    def current(self) -> Optional[str]:
        """Last consumed line"""
        if self._position == 0:
            return None
        return self._lines[self._position - 1]

    @property
    def line_number(self) -> int:
        """1-based number of the last consumed line (0 before the first advance)"""
        return self._position
