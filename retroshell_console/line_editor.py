"""
Line Editor
===========

Editing state of the console's input line.

The editor keeps every line the user has entered in a history list.
The last entry is the line currently being typed; Up and Down move
the active index through older entries, which can be edited in place.
Leaving an edited entry does not discard the edit. Submitting always
appends a fresh empty entry and makes it active.

Input beyond ``max_length`` characters is dropped silently.
"""

from __future__ import annotations

from enum import Enum
from typing import List


class Key(Enum):
    """Special keys understood by the editor."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    BACKSPACE = "backspace"
    ENTER = "enter"


class LineEditor:
    """Cursor-based editor over a navigable input history."""

    def __init__(self, max_length: int):
        if max_length < 0:
            raise ValueError(f"Invalid input length limit: {max_length}")
        self.max_length = max_length
        self.history: List[str] = [""]
        self.active_index = 0
        self.cursor = 0

    @property
    def text(self) -> str:
        """The active history entry."""
        return self.history[self.active_index]

    def _set_text(self, value: str) -> None:
        self.history[self.active_index] = value

    # ─── Editing ────────────────────────────────────────────────────

    def insert(self, c: str) -> bool:
        """Insert the single character ``c`` at the cursor.

        Returns False if the line is full.
        """
        if len(c) != 1:
            raise ValueError(f"Expected a single character, got {c!r}")
        text = self.text
        if len(text) >= self.max_length:
            return False
        self._set_text(text[:self.cursor] + c + text[self.cursor:])
        self.cursor += 1
        return True

    def backspace(self) -> bool:
        """Delete the character left of the cursor."""
        if self.cursor == 0:
            return False
        text = self.text
        self._set_text(text[:self.cursor - 1] + text[self.cursor:])
        self.cursor -= 1
        return True

    def clear(self) -> None:
        """Empty the active entry."""
        self._set_text("")
        self.cursor = 0

    # ─── Cursor movement ────────────────────────────────────────────

    def left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def right(self) -> None:
        self.cursor = min(len(self.text), self.cursor + 1)

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)

    # ─── History ────────────────────────────────────────────────────

    def history_up(self) -> bool:
        return self._recall(self.active_index - 1)

    def history_down(self) -> bool:
        return self._recall(self.active_index + 1)

    def _recall(self, index: int) -> bool:
        index = max(0, min(index, len(self.history) - 1))
        if index == self.active_index:
            return False
        self.active_index = index
        self.cursor = len(self.text)
        return True

    def submit(self) -> str:
        """Finish the active entry and open a new empty one.

        Returns the submitted text.
        """
        submitted = self.text
        self.history.append("")
        self.active_index = len(self.history) - 1
        self.cursor = 0
        return submitted

    # ─── Key handling ───────────────────────────────────────────────

    def press(self, key: Key) -> None:
        """Apply a cursor or history key. ENTER is handled by the console."""
        if key is Key.UP:
            self.history_up()
        elif key is Key.DOWN:
            self.history_down()
        elif key is Key.LEFT:
            self.left()
        elif key is Key.RIGHT:
            self.right()
        elif key is Key.HOME:
            self.home()
        elif key is Key.END:
            self.end()
        elif key is Key.BACKSPACE:
            self.backspace()
        else:
            raise ValueError(f"Key not handled by the line editor: {key}")
