#!/usr/bin/env python3
"""
Self-contained Pattern Feature Module

Turns a selected span of text into a verbatim search pattern.

The pattern always starts with the ``\\V`` (very nomagic) marker so the search
engine treats every character literally, except backslash escapes. The
characters the engine would still interpret are escaped per direction:

- Forward search: newline and ``/`` (the forward search delimiter)
- Reverse search: newline only

Usage:
    from visualstar.pattern_feature import Direction, build_pattern

    build_pattern("a/b", Direction.FORWARD)   # '\\Va\\/b'
    build_pattern("a/b", Direction.REVERSE)   # '\\Va/b'
"""

from enum import Enum
from typing import Tuple


LITERAL_PREFIX = "\\V"


class Direction(Enum):
    """Search direction of a visual star action"""
    FORWARD = "forward"
    REVERSE = "reverse"

    @property
    def delimiter(self) -> str:
        """Command-line delimiter vim uses for this direction"""
        return "/" if self is Direction.FORWARD else "?"


# ============================================================
#   ESCAPE RULES
# ============================================================

# Applied in order, each on the result of the previous one. Newline goes
# first so later rules never see a raw line break.
ESCAPE_RULES = {
    Direction.FORWARD: (
        ("\n", "\\n"),
        ("/", "\\/"),
    ),
    # '?' is left alone, escaping it does not work for reverse searches
    Direction.REVERSE: (
        ("\n", "\\n"),
    ),
}


def escape_rules(direction: Direction) -> Tuple[Tuple[str, str], ...]:
    """Return the ordered (literal, replacement) pairs for a direction"""
    return ESCAPE_RULES[direction]


def escape_text(text: str, direction: Direction) -> str:
    """Apply the direction's escape rules to raw text, without the prefix"""
    for literal, replacement in escape_rules(direction):
        text = text.replace(literal, replacement)
    return text


def build_pattern(selected_text: str, direction: Direction) -> str:
    """
    Build the verbatim search pattern for a selection.

    Escaping is single pass: feeding an already escaped pattern back in
    escapes it again.

    Args:
        selected_text: Raw characters under the selection
        direction: Direction the pattern will be searched in

    Returns:
        ``\\V`` followed by the escaped text
    """
    return LITERAL_PREFIX + escape_text(selected_text, direction)


__all__ = [
    'Direction',
    'LITERAL_PREFIX',
    'ESCAPE_RULES',
    'escape_rules',
    'escape_text',
    'build_pattern',
]
