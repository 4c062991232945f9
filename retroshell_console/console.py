"""
Console Controller
==================

Ties the scrollback buffer, the line editor and the dispatcher
together behind one interactive object.

Every keystroke flows one way:

    input event ──► LineEditor ──(Enter)──► Dispatcher ──► ScrollbackBuffer
                                                               │
                                              dirty flag ◄─────┘
                                                  │
                                          renderer reads view()

The last line of the scrollback always mirrors the editor: after any
event the console rewrites it as prompt + active input text. The
renderer (window, terminal, web page) is not part of this module. It
reads view() when consume_dirty() says something changed.

Everything runs synchronously on the caller's thread. A host that
feeds events from one thread and renders from another must serialize
access itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Union

from retroshell_console.dispatcher import Dispatcher, DispatchResult
from retroshell_console.errors import ScriptError
from retroshell_console.line_editor import Key, LineEditor
from retroshell_console.scrollback import (
    DEFAULT_CAPACITY,
    DEFAULT_COLS,
    DEFAULT_ROWS,
    ScrollbackBuffer,
)
from retroshell_console.tokenizer import tokenize
from retroshell_console.tree import CommandTree

DEFAULT_PROMPT = "retro% "

WELCOME = (
    "RetroShell 1.0, an interactive command console.\n"
    "\n"
    "Type 'help' for a list of available commands.\n"
    "\n"
)

# ─── Input events ───────────────────────────────────────────────────


@dataclass(frozen=True)
class CharacterTyped:
    char: str


@dataclass(frozen=True)
class KeyPressed:
    key: Key


@dataclass(frozen=True)
class ScrollWheel:
    delta: float


InputEvent = Union[CharacterTyped, KeyPressed, ScrollWheel]


@dataclass(frozen=True)
class ConsoleView:
    """Read-only snapshot for the renderer.

    Attributes
    ----------
    lines : list[str]
        The visible rows, starting at the scroll offset.
    cursor_column : int
        Column of the text cursor (prompt width + editor cursor).
    cursor_row : int
        Window row of the input line. May lie outside the window when
        the user has scrolled up.
    dirty : bool
        Whether the content changed since the renderer last drew it.
    """
    lines: List[str]
    cursor_column: int
    cursor_row: int
    dirty: bool


class Console:
    """Interactive façade over scrollback, line editor and dispatcher."""

    def __init__(self,
                 tree: CommandTree,
                 num_rows: int = DEFAULT_ROWS,
                 num_cols: int = DEFAULT_COLS,
                 scrollback_lines: int = DEFAULT_CAPACITY,
                 prompt: str = DEFAULT_PROMPT):
        if num_cols <= len(prompt) + 1:
            raise ValueError(
                f"Console needs more than {len(prompt) + 1} columns for prompt '{prompt}'"
            )

        self.logger = logging.getLogger(__name__)
        self.prompt = prompt
        self.buffer = ScrollbackBuffer(num_rows, num_cols, scrollback_lines)
        self.editor = LineEditor(num_cols - len(prompt) - 1)
        self._scroll_remainder = 0.0

        if not tree.frozen:
            if tree.seek(tree.root, "help") is None:
                tree.register(["help"], help="Prints this help message", handler=self._help)
            tree.freeze()

        self.tree = tree
        self.dispatcher = Dispatcher(tree, self.buffer)

    def start(self, show_banner: bool = True) -> None:
        """Print the welcome text and the first prompt."""
        if show_banner:
            self.buffer.print(WELCOME)
        self.refresh()

    # ─── Output ─────────────────────────────────────────────────────

    def print(self, text: str) -> None:
        self.buffer.print(text)

    def println(self, text: str = "") -> None:
        self.buffer.print(text + "\n")

    def write(self, value: Union[str, int]) -> "Console":
        """Stream-style output: characters, strings and integers."""
        if isinstance(value, int):
            self.buffer.append_text(str(value))
        elif len(value) == 1:
            self.buffer.append_char(value)
        else:
            self.buffer.print(value)
        return self

    def tab(self, column: int) -> None:
        self.buffer.tab(column)

    def clear_line(self) -> None:
        self.buffer.clear_line()

    def clear(self) -> None:
        """Wipe the window and show a fresh prompt."""
        self.buffer.clear()
        self.refresh()

    def print_help(self) -> None:
        self.dispatcher.print_usage(self.dispatcher.usage(self.tree.root))

    def _help(self, args: List[str], param: int) -> None:
        self.print_help()

    # ─── Input ──────────────────────────────────────────────────────

    def handle(self, event: InputEvent) -> None:
        """Process one input event from the host."""
        if isinstance(event, CharacterTyped):
            self.type(event.char)
        elif isinstance(event, KeyPressed):
            self.key_pressed(event.key)
        elif isinstance(event, ScrollWheel):
            self.scroll(event.delta)
        else:
            raise TypeError(f"Unknown input event: {event!r}")

    def type(self, c: str) -> None:
        """Process typed text. Newline submits, backspace deletes.

        Strings longer than one character (pastes, IME input) are
        processed one character at a time.
        """
        if len(c) != 1:
            for char in c:
                self.type(char)
            return
        if c in ("\n", "\r"):
            self._submit()
            return
        if c in ("\b", "\x7f"):
            self.editor.backspace()
        elif c.isprintable():
            self.editor.insert(c)
        self.refresh()

    def key_pressed(self, key: Key) -> None:
        if key is Key.ENTER:
            self._submit()
            return
        self.editor.press(key)
        self.refresh()

    def scroll(self, delta: float) -> None:
        """Scroll the window. Positive values move towards older lines.

        Fractions of a row are carried over to the next call.
        """
        total = self._scroll_remainder + delta
        rows = int(total)
        self._scroll_remainder = total - rows
        if rows > 0:
            self.buffer.scroll_up(rows)
        elif rows < 0:
            self.buffer.scroll_down(-rows)

    def _submit(self) -> None:
        self.buffer.replace_last_line(self.editor.text, self.prompt)
        self.buffer.append_char("\n")
        command = self.editor.submit()
        self.dispatcher.dispatch(tokenize(command))
        self.refresh()

    def refresh(self) -> None:
        """Start a new line if output is pending there, then redraw the prompt."""
        if self.buffer.last_line and not self.buffer.last_line.startswith(self.prompt):
            self.buffer.append_char("\n")
        self.buffer.replace_last_line(self.editor.text, self.prompt)
        self.buffer.scroll_to_bottom()
        self.buffer.dirty = True

    # ─── Programmatic execution ─────────────────────────────────────

    def exec(self, command: str, verbose: bool = False) -> bool:
        """Execute ``command`` as if it had been submitted.

        With ``verbose`` the command is echoed after the prompt first.
        Returns True if the command ran.
        """
        if verbose:
            self.buffer.replace_last_line(command, self.prompt)
            self.buffer.append_char("\n")
        else:
            self.buffer.clear_line()
        result: DispatchResult = self.dispatcher.dispatch(tokenize(command))
        self.refresh()
        return not result.is_error

    def exec_script(self, lines: Iterable[str]) -> int:
        """Run a script line by line.

        Blank lines and lines starting with '#' are skipped. Execution
        stops at the first failing command.

        Returns
        -------
        int
            Number of commands executed.

        Raises
        ------
        ScriptError
            If a command fails.
        """
        executed = 0
        for number, line in enumerate(lines, 1):
            command = line.strip()
            if not command or command.startswith("#"):
                continue
            if not self.exec(command, verbose=True):
                self.logger.warning(f"Script stopped at line {number}: {command}")
                raise ScriptError(number, command)
            executed += 1
        return executed

    # ─── Renderer interface ─────────────────────────────────────────

    def view(self) -> ConsoleView:
        return ConsoleView(
            lines=self.buffer.visible_lines(),
            cursor_column=len(self.prompt) + self.editor.cursor,
            cursor_row=self.buffer.row_of_last_line(),
            dirty=self.buffer.dirty,
        )

    def consume_dirty(self) -> bool:
        return self.buffer.consume_dirty()
