#!/usr/bin/env python3
"""
Self-contained Verbatim Search Feature Module

Provides a small search service for ``\\V`` (very nomagic) patterns, which is
what the visual star actions produce. It keeps the "last search" state and the
list of highlighted matches the way a vim search engine does, and moves the
cursor to the match picked by a repeat count and a direction.

Magic pattern syntax is not supported: a pattern that does not start with
``\\V``, or that uses any backslash escape other than ``\\n``, ``\\/``, ``\\?``
and ``\\\\``, raises PatternError.

Usage:
    from visualstar.search_feature import VerbatimSearchEngine

    engine = VerbatimSearchEngine()
    engine.search(buffer, "\\\\Vuser.name", 1, Direction.FORWARD, True)
    engine.last_search   # '\\\\Vuser.name'
    engine.highlights    # [(0, 0, 0, 9), (1, 31, 1, 40)]
"""

import bisect
import logging
import re
from typing import Protocol, List, Optional, Tuple

from .errors import PatternError
from .pattern_feature import Direction, LITERAL_PREFIX
from .settings import SearchSettings


logger = logging.getLogger(__name__)

# (start_line, start_col, end_line, end_col), end exclusive
Match = Tuple[int, int, int, int]


# ============================================================
#   PROTOCOL DEFINITIONS
# ============================================================

class SearchableBuffer(Protocol):
    """Protocol defining the interface required for search operations"""

    cursor_line: int
    cursor_col: int

    def total(self) -> int:
        """Return total number of lines in buffer"""
        ...

    def get_line(self, line_num: int) -> str:
        """Get text content of a specific line"""
        ...


# ============================================================
#   PATTERN DECODING
# ============================================================

VERBATIM_ESCAPES = {
    'n': '\n',
    '/': '/',
    '?': '?',
    '\\': '\\',
}


def decode_pattern(pattern: str) -> str:
    """
    Turn a ``\\V`` pattern into the literal text it matches.

    Raises:
        PatternError: pattern is not verbatim or uses an unsupported escape
    """
    if not pattern.startswith(LITERAL_PREFIX):
        raise PatternError(pattern, "only \\V verbatim patterns are supported")

    body = pattern[len(LITERAL_PREFIX):]
    chars = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != '\\':
            chars.append(ch)
            i += 1
            continue
        if i + 1 >= len(body):
            raise PatternError(pattern, "trailing backslash")
        escaped = body[i + 1]
        if escaped not in VERBATIM_ESCAPES:
            raise PatternError(pattern, f"unsupported escape \\{escaped}")
        chars.append(VERBATIM_ESCAPES[escaped])
        i += 2
    return ''.join(chars)


def _document(buffer: SearchableBuffer) -> Tuple[str, List[int]]:
    """Join buffer lines into one string and return it with line start offsets"""
    lines = [buffer.get_line(i) for i in range(buffer.total())]
    line_starts = []
    offset = 0
    for line in lines:
        line_starts.append(offset)
        offset += len(line) + 1
    return '\n'.join(lines), line_starts


def _position(line_starts: List[int], offset: int) -> Tuple[int, int]:
    line = bisect.bisect_right(line_starts, offset) - 1
    return line, offset - line_starts[line]


# ============================================================
#   SEARCH ENGINE
# ============================================================

class VerbatimSearchEngine:
    """Search service holding the last search and the highlighted matches"""

    def __init__(self, settings: Optional[SearchSettings] = None):
        self.settings = settings or SearchSettings()
        self.last_search: Optional[str] = None
        self.last_direction: Optional[Direction] = None
        self.highlights: List[Match] = []

    @staticmethod
    def find_all(buffer: SearchableBuffer, pattern: str,
                 case_sensitive: bool = True) -> List[Match]:
        """
        Find every non-overlapping match of a verbatim pattern.

        Matches may span lines when the pattern contains ``\\n``.

        Returns:
            List of matches as tuples: (start_line, start_col, end_line, end_col)
        """
        literal = decode_pattern(pattern)
        if not literal:
            return []

        text, line_starts = _document(buffer)
        flags = 0 if case_sensitive else re.IGNORECASE
        pattern_re = re.compile(re.escape(literal), flags)

        matches = []
        for m in pattern_re.finditer(text):
            matches.append(_position(line_starts, m.start()) + _position(line_starts, m.end()))
        return matches

    def search(self, editor: SearchableBuffer, pattern: str, count: int = 1,
               direction: Direction = Direction.FORWARD,
               move_cursor: bool = True) -> Optional[Tuple[int, int]]:
        """
        Search for pattern from the cursor and remember it as the last search.

        Args:
            editor: Buffer to search in, its cursor is the starting point
            pattern: Verbatim pattern
            count: Number of matches to step over in direction
            direction: Direction to step in
            move_cursor: Put the cursor on the match found

        Returns:
            (line, col) of the match found, or None if there is none

        Raises:
            PatternError: pattern cannot be interpreted
        """
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")

        matches = self.find_all(editor, pattern,
                                case_sensitive=not self.settings.ignore_case)

        self.last_search = pattern
        self.last_direction = direction
        self.highlights = list(matches) if self.settings.hlsearch else []

        if not matches:
            logger.info("Pattern not found: %s", pattern)
            return None

        starts = [m[:2] for m in matches]
        position = (editor.cursor_line, editor.cursor_col)
        for _ in range(count):
            target = self._step(starts, position, direction)
            if target is None:
                logger.info("Search hit %s without match for: %s",
                            "BOTTOM" if direction is Direction.FORWARD else "TOP", pattern)
                return None
            position = target

        if move_cursor:
            editor.cursor_line, editor.cursor_col = position
        return position

    def _step(self, starts: List[Tuple[int, int]], position: Tuple[int, int],
              direction: Direction) -> Optional[Tuple[int, int]]:
        if direction is Direction.FORWARD:
            for start in starts:
                if start > position:
                    return start
            return starts[0] if self.settings.wrapscan else None

        for start in reversed(starts):
            if start < position:
                return start
        return starts[-1] if self.settings.wrapscan else None

    def repeat_last_search(self, editor: SearchableBuffer, count: int = 1,
                           reverse: bool = False) -> Optional[Tuple[int, int]]:
        """Repeat the last search, like vim's ``n`` (or ``N`` with reverse)"""
        if self.last_search is None:
            raise PatternError("", "no previous search pattern")

        direction = self.last_direction or Direction.FORWARD
        if reverse:
            direction = Direction.REVERSE if direction is Direction.FORWARD else Direction.FORWARD

        last_direction = self.last_direction
        found = self.search(editor, self.last_search, count, direction, True)
        # n and N never change the remembered direction
        self.last_direction = last_direction
        return found

    def clear_highlights(self) -> None:
        """Remove match highlighting, like ``:nohlsearch``"""
        self.highlights = []


# ============================================================
#   INSTALLATION / INTEGRATION
# ============================================================

def has_search_support() -> bool:
    """Check if all dependencies are available for search feature"""
    # This module has no external dependencies beyond Python stdlib
    return True


def install_search_feature(buffer_class: type) -> bool:
    """
    Validate that a buffer class has the required interface for searching.

    Args:
        buffer_class: The buffer class to validate

    Returns:
        True if the buffer class has the required interface, False otherwise
    """
    required_methods = ['total', 'get_line']
    for method in required_methods:
        if not hasattr(buffer_class, method):
            print(f"Warning: Buffer class missing required method: {method}")
            return False
    return True


__all__ = [
    'Match',
    'SearchableBuffer',
    'VerbatimSearchEngine',
    'decode_pattern',
    'install_search_feature',
    'has_search_support',
]
