#!/usr/bin/env python3
"""
Self-contained Selection Feature Module

This module provides the visual mode selection that the visual star actions
read from. It's designed to be:
- Self-contained: All dependencies are minimal (Python stdlib only)
- Reusable: Can be used with TextBuffer or any buffer class
- Vim-like: the selection end is inclusive, and a selection ending past the
  last column of a line takes the line break with it

Usage:
    from visualstar.selection_feature import TextBuffer, VisualModeController

    buf = TextBuffer(["user.name = 1", "print(user.name)"])
    buf.enter_visual_mode()
    buf.manager.select_to_big_word_end()   # vE
    buf.get_selected_text()                # 'user.name'
    VisualModeController().exit_visual_mode(buf)
"""

from typing import Protocol, Iterable, Tuple, Optional


# ============================================================
#   PROTOCOL DEFINITIONS
# ============================================================

class SelectableBuffer(Protocol):
    """Protocol defining the interface required for selection operations"""

    cursor_line: int
    cursor_col: int

    def total(self) -> int:
        """Return total number of lines in buffer"""
        ...

    def get_line(self, line_num: int) -> str:
        """Get text content of a specific line"""
        ...


class VisualBuffer(Protocol):
    """Protocol for buffers that can be put in and out of visual mode"""

    selection: 'Selection'
    visual_mode: bool


# ============================================================
#   SELECTION CLASS
# ============================================================

class Selection:
    """Manages text selection state"""

    def __init__(self):
        self.start_line = -1
        self.start_col = -1
        self.end_line = -1
        self.end_col = -1
        self.active = False

    def clear(self) -> None:
        """Clear the selection"""
        self.start_line = -1
        self.start_col = -1
        self.end_line = -1
        self.end_col = -1
        self.active = False

    def set_start(self, line: int, col: int) -> None:
        """Set selection anchor, selecting the single character under it"""
        self.start_line = line
        self.start_col = col
        self.end_line = line
        self.end_col = col
        self.active = True

    def set_end(self, line: int, col: int) -> None:
        """Set selection end point (the cursor side)"""
        self.end_line = line
        self.end_col = col

    def has_selection(self) -> bool:
        """Check if there's an active selection"""
        # start == end still selects one character in visual mode
        return self.active

    def get_bounds(self) -> Tuple[Optional[int], Optional[int], Optional[int], Optional[int]]:
        """Get normalized selection bounds (start always before end)"""
        if not self.has_selection():
            return None, None, None, None

        if (self.start_line, self.start_col) <= (self.end_line, self.end_col):
            return self.start_line, self.start_col, self.end_line, self.end_col
        return self.end_line, self.end_col, self.start_line, self.start_col

    def contains_position(self, line: int, col: int) -> bool:
        """Check if a position is within the selection, end inclusive"""
        if not self.has_selection():
            return False

        start_line, start_col, end_line, end_col = self.get_bounds()
        return (start_line, start_col) <= (line, col) <= (end_line, end_col)


# ============================================================
#   SELECTION MANAGER
# ============================================================

class SelectionManager:
    """Manages selection operations for any buffer"""

    def __init__(self, buffer: SelectableBuffer, selection: Selection):
        self.buffer = buffer
        self.selection = selection

    def _anchor(self) -> None:
        if not self.selection.active:
            self.selection.set_start(self.buffer.cursor_line, self.buffer.cursor_col)

    def _extend(self) -> None:
        self.selection.set_end(self.buffer.cursor_line, self.buffer.cursor_col)

    # --------------------------------------------------------
    # Cursor Movement with Selection
    # --------------------------------------------------------

    def move_cursor_right(self) -> None:
        """Move cursor right one character, extending selection (l)"""
        self._anchor()
        line_text = self.buffer.get_line(self.buffer.cursor_line)
        if self.buffer.cursor_col < len(line_text) - 1:
            self.buffer.cursor_col += 1
        self._extend()

    def move_cursor_down(self) -> None:
        """Move cursor down one line, extending selection (j)"""
        self._anchor()
        if self.buffer.cursor_line < self.buffer.total() - 1:
            self.buffer.cursor_line += 1
            # Clamp column to line length
            line_text = self.buffer.get_line(self.buffer.cursor_line)
            self.buffer.cursor_col = min(self.buffer.cursor_col, max(0, len(line_text) - 1))
        self._extend()

    def move_to_line_end(self) -> None:
        """Move cursor past the last character, taking the line break ($)"""
        self._anchor()
        self.buffer.cursor_col = len(self.buffer.get_line(self.buffer.cursor_line))
        self._extend()

    # --------------------------------------------------------
    # Selection Operations
    # --------------------------------------------------------

    def select_range(self, start_line: int, start_col: int,
                     end_line: int, end_col: int) -> None:
        """Select from start to end inclusive, leaving the cursor on end"""
        self.selection.set_start(start_line, start_col)
        self.buffer.cursor_line = end_line
        self.buffer.cursor_col = end_col
        self._extend()

    def select_word_at_cursor(self) -> None:
        """Select word at current cursor position (viw)"""
        line_text = self.buffer.get_line(self.buffer.cursor_line)
        if not line_text or self.buffer.cursor_col >= len(line_text):
            return

        start_col = self.buffer.cursor_col
        end_col = self.buffer.cursor_col

        # Expand left to word start
        while start_col > 0 and (line_text[start_col - 1].isalnum() or line_text[start_col - 1] == '_'):
            start_col -= 1

        # Expand right to last word character
        while end_col < len(line_text) - 1 and (line_text[end_col + 1].isalnum() or line_text[end_col + 1] == '_'):
            end_col += 1

        self.select_range(self.buffer.cursor_line, start_col, self.buffer.cursor_line, end_col)

    def select_to_big_word_end(self) -> None:
        """Extend selection to the end of the next WORD (E)"""
        self._anchor()
        line = self.buffer.cursor_line
        col = self.buffer.cursor_col + 1
        total = self.buffer.total()

        # Skip blanks, crossing line ends
        while line < total:
            text = self.buffer.get_line(line)
            while col < len(text) and text[col].isspace():
                col += 1
            if col < len(text):
                break
            line += 1
            col = 0
        else:
            self._extend()
            return

        text = self.buffer.get_line(line)
        while col + 1 < len(text) and not text[col + 1].isspace():
            col += 1

        self.buffer.cursor_line = line
        self.buffer.cursor_col = col
        self._extend()

    def get_selected_text(self) -> Optional[str]:
        """Get the currently selected text, or None when nothing is selected"""
        if not self.selection.has_selection():
            return None

        start_line, start_col, end_line, end_col = self.selection.get_bounds()
        last_line = self.buffer.total() - 1

        parts = []
        for ln in range(start_line, end_line + 1):
            line_text = self.buffer.get_line(ln)
            begin = start_col if ln == start_line else 0
            if ln != end_line or (end_col >= len(line_text) and ln < last_line):
                parts.append(line_text[begin:] + '\n')
            else:
                parts.append(line_text[begin:end_col + 1])

        text = ''.join(parts)
        return text or None


# ============================================================
#   TEXT BUFFER
# ============================================================

class TextBuffer:
    """In-memory line buffer with a cursor and a visual mode selection"""

    def __init__(self, lines: Iterable[str] = ()):
        self.lines = list(lines) or [""]
        self.cursor_line = 0
        self.cursor_col = 0
        self.selection = Selection()
        self.visual_mode = False
        self.manager = SelectionManager(self, self.selection)

    @classmethod
    def from_text(cls, text: str) -> 'TextBuffer':
        return cls(text.split('\n'))

    @property
    def text(self) -> str:
        return '\n'.join(self.lines)

    def total(self) -> int:
        return len(self.lines)

    def get_line(self, line_num: int) -> str:
        if 0 <= line_num < len(self.lines):
            return self.lines[line_num]
        return ""

    def set_cursor(self, line: int, col: int) -> None:
        self.cursor_line = line
        self.cursor_col = col

    def enter_visual_mode(self) -> None:
        """Start a selection on the character under the cursor (v)"""
        self.visual_mode = True
        self.selection.set_start(self.cursor_line, self.cursor_col)

    def get_selected_text(self) -> Optional[str]:
        if not self.visual_mode:
            return None
        return self.manager.get_selected_text()


class VisualModeController:
    """Leaves visual mode the way the host editor does on <Esc>"""

    def exit_visual_mode(self, editor: VisualBuffer) -> None:
        # The cursor stays where it is, only the selection goes
        editor.selection.clear()
        editor.visual_mode = False


# ============================================================
#   INSTALLATION / INTEGRATION
# ============================================================

def has_selection_support() -> bool:
    """Check if all dependencies are available for selection feature"""
    # This module has no external dependencies beyond Python stdlib
    return True


def install_selection_feature(buffer_class: type) -> bool:
    """
    Validate that a buffer class has the required interface for selection.

    Args:
        buffer_class: The buffer class to validate

    Returns:
        True if the buffer class has the required interface, False otherwise
    """
    required_methods = ['total', 'get_line', 'get_selected_text']

    for method in required_methods:
        if not hasattr(buffer_class, method):
            print(f"Warning: Buffer class missing required method: {method}")
            return False

    return True


# Export public API
__all__ = [
    'Selection',
    'SelectionManager',
    'TextBuffer',
    'VisualModeController',
    'install_selection_feature',
    'has_selection_support',
    'SelectableBuffer',
    'VisualBuffer',
]
