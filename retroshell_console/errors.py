"""
Shell Errors
============

Exception types raised by the RetroShell command system.

Two families live here. The ParseError kinds describe input that
could not be matched to a command (unknown token, wrong number of
arguments). The dispatcher never lets them escape: it turns them into
a usage block in the scrollback. The remaining kinds are programming
errors that surface at startup (duplicate registration, registering
into a frozen tree) or script failures reported to the caller.
"""

from __future__ import annotations


class ShellError(Exception):
    """Base class for all RetroShell errors."""

    def __init__(self, description: str = ""):
        super().__init__(description)
        self.description = description


# ─── Input errors (reported as usage, never fatal) ──────────────────

class ParseError(ShellError):
    """The input could not be resolved to a runnable command."""


class UnresolvedTokenError(ParseError):
    """No child node matches the next token."""


class TooFewArgumentsError(ParseError):
    """The command requires an argument but none remain."""


class TooManyArgumentsError(ParseError):
    """The command takes no argument but tokens remain."""


# ─── Runtime errors reported by command handlers ────────────────────

class CommandError(ShellError):
    """A handler recognized its input but could not carry it out.

    The dispatcher prints the description as an error line and the
    console stays interactive.
    """


# ─── Startup / programming errors ───────────────────────────────────

class DuplicateRegistrationError(ShellError, ValueError):
    """The same name was registered twice at one tree position."""


class TreeFrozenError(ShellError, RuntimeError):
    """A registration was attempted after the tree was frozen."""


class ScriptError(ShellError):
    """A line of a command script failed to execute.

    Attributes
    ----------
    line_number : int
        1-based line number inside the script.
    command : str
        The offending line as written in the script.
    """

    def __init__(self, line_number: int, command: str):
        super().__init__(f"Script aborted at line {line_number}: {command}")
        self.line_number = line_number
        self.command = command
