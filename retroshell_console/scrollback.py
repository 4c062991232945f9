"""
Scrollback Buffer
=================

The text storage behind the console window.

The buffer is an ordered list of display lines. New output always goes
to the last line. Lines never grow past ``num_cols`` characters: text
that does not fit is wrapped onto a fresh line. The number of retained
lines is capped; when the cap is exceeded the oldest lines are dropped
and the scroll offset is shifted so it keeps pointing at the same text.

    lines[0]            ← oldest retained line
    ...
    lines[offset]       ← first visible row
    ...
    lines[offset + num_rows - 1]  ← last visible row
    ...
    lines[-1]           ← current line (the prompt lives here)

Characters are counted one column each. There is no handling of wide
or combining characters.

The ``dirty`` flag tells the renderer that the visible content changed
and must be redrawn. The renderer clears it with consume_dirty().
"""

from __future__ import annotations

from typing import List

DEFAULT_CAPACITY = 100
DEFAULT_ROWS = 25
DEFAULT_COLS = 80


class ScrollbackBuffer:
    """Bounded, line-wrapping storage for console output."""

    def __init__(self,
                 num_rows: int = DEFAULT_ROWS,
                 num_cols: int = DEFAULT_COLS,
                 capacity: int = DEFAULT_CAPACITY):
        if num_rows < 1 or num_cols < 1:
            raise ValueError(f"Invalid window size: {num_rows}x{num_cols}")
        if capacity < 1:
            raise ValueError(f"Invalid scrollback capacity: {capacity}")

        self.num_rows = num_rows
        self.num_cols = num_cols
        self.capacity = capacity

        self._lines: List[str] = [""]
        self._offset = 0
        self._evicted = 0
        self.dirty = True

    # ─── Inspection ─────────────────────────────────────────────────

    @property
    def lines(self) -> List[str]:
        """A copy of all retained lines."""
        return list(self._lines)

    @property
    def scroll_offset(self) -> int:
        return self._offset

    @property
    def last_line(self) -> str:
        return self._lines[-1]

    @property
    def first_line_number(self) -> int:
        """Absolute number of lines[0], i.e. how many lines were dropped so far."""
        return self._evicted

    def __len__(self) -> int:
        return len(self._lines)

    def visible_lines(self) -> List[str]:
        """The rows currently shown in the window."""
        return self._lines[self._offset:self._offset + self.num_rows]

    def row_of_last_line(self) -> int:
        """Window row of the last line (may lie outside the window)."""
        return len(self._lines) - self._offset - 1

    def last_line_is_visible(self) -> bool:
        return 0 <= self.row_of_last_line() < self.num_rows

    def consume_dirty(self) -> bool:
        """Return the dirty flag and clear it."""
        dirty = self.dirty
        self.dirty = False
        return dirty

    # ─── Appending ──────────────────────────────────────────────────

    def append_char(self, c: str) -> None:
        """Append one character.

        "\\n" starts a new line, "\\r" empties the current line. Any other
        character goes to the current line, which is wrapped first if it
        is already full.
        """
        if c == "\n":
            self._lines.append("")
        elif c == "\r":
            self._lines[-1] = ""
        else:
            if len(self._lines[-1]) >= self.num_cols:
                self._lines.append("")
            self._lines[-1] += c
        self._shorten()
        self.dirty = True

    def append_text(self, text: str) -> None:
        """Append ``text`` to the current line, wrapping at ``num_cols``.

        The text is stored literally; control characters are not
        interpreted here.
        """
        remaining = max(0, self.num_cols - len(self._lines[-1]))
        while len(text) > remaining:
            self._lines[-1] += text[:remaining]
            self._lines.append("")
            text = text[remaining:]
            remaining = self.num_cols
        self._lines[-1] += text
        self._shorten()
        self.dirty = True

    def print(self, text: str) -> None:
        """Append ``text``, starting a new line at every "\\n"."""
        segments = text.split("\n")
        for i, segment in enumerate(segments):
            if i > 0:
                self.append_char("\n")
            if segment:
                self.append_text(segment)

    def tab(self, column: int) -> None:
        """Pad the current line with spaces up to ``column``."""
        delta = column - len(self._lines[-1])
        if delta > 0:
            self.append_text(" " * delta)

    def replace_last_line(self, text: str, prefix: str = "") -> None:
        """Overwrite the current line with ``prefix + text``, cut to ``num_cols``."""
        self._lines[-1] = (prefix + text)[:self.num_cols]
        self.dirty = True

    def clear_line(self) -> None:
        self.append_char("\r")

    def clear(self) -> None:
        """Drop all output and start over with one empty line."""
        self._evicted += len(self._lines)
        self._lines = [""]
        self._offset = 0
        self.dirty = True

    def _shorten(self) -> None:
        excess = len(self._lines) - self.capacity
        if excess > 0:
            del self._lines[:excess]
            self._evicted += excess
            self._offset = max(0, self._offset - excess)

    # ─── Scrolling ──────────────────────────────────────────────────

    def scroll_to(self, line: int) -> None:
        """Make ``line`` the first visible row (clamped to the stored range)."""
        line = max(0, min(line, len(self._lines) - 1))
        if line != self._offset:
            self._offset = line
            self.dirty = True

    def scroll_to_top(self) -> None:
        self.scroll_to(0)

    def scroll_to_bottom(self) -> None:
        self.scroll_to(max(0, len(self._lines) - self.num_rows))

    def scroll_up(self, delta: int) -> None:
        self.scroll_to(self._offset - delta)

    def scroll_down(self, delta: int) -> None:
        self.scroll_to(self._offset + delta)

    def make_last_line_visible(self) -> None:
        if not self.last_line_is_visible():
            self.scroll_to_bottom()

    # ─── Resizing ───────────────────────────────────────────────────

    def set_num_rows(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"Invalid number of rows: {value}")
        self.num_rows = value
        self.dirty = True

    def set_num_cols(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"Invalid number of columns: {value}")
        self.num_cols = value
        self.dirty = True
