"""
Terminal Front End
==================

Line-mode host that mirrors the console scrollback on a text stream.

The terminal reads whole lines, so each line is replayed into the
console one character at a time followed by Enter. Cursor keys and
history recall are handled by the console itself in window hosts;
here the terminal's own line editing takes their place.

Only the scrollback lines added since the last read are printed. The
buffer's first_line_number keeps that bookkeeping correct while old
lines are being dropped.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, TextIO

from retroshell_console.console import Console

EXIT_WORDS = ("quit", "exit")


class TerminalConsoleInterface:
    """Blocking terminal loop that mirrors the console scrollback on stdout."""

    def __init__(self, console: Console, output: TextIO = None):
        self.console = console
        self.output = output or sys.stdout
        self.running = False
        self.shown = console.buffer.first_line_number
        self.logger = logging.getLogger(__name__)

    def run(self, input_func: Callable[[str], str] = input) -> None:
        """Read and execute lines until quit, EOF or Ctrl+C."""
        self.running = True

        while self.running:
            self._show_new_output()

            try:
                line = input_func(self.console.buffer.last_line)
            except (EOFError, KeyboardInterrupt):
                self.output.write("\n")
                break

            if line.strip().lower() in EXIT_WORDS:
                break

            self.submit(line)

        self.running = False
        self.logger.debug("Terminal session ended")

    def stop(self) -> None:
        self.running = False

    def submit(self, line: str) -> None:
        """Replay one input line into the console."""
        for c in line:
            self.console.type(c)
        self.console.type("\n")

        # The terminal already echoed the input line
        self.shown += 1

    def _show_new_output(self) -> None:
        """Print the scrollback lines added since the last call, except the prompt line."""
        buffer = self.console.buffer
        lines = buffer.lines
        start = max(0, self.shown - buffer.first_line_number)

        for line in lines[start:-1]:
            self.output.write(line + "\n")
        self.output.flush()

        self.shown = buffer.first_line_number + len(lines) - 1
        buffer.consume_dirty()
