"""
Command Dispatcher
==================

Routes a tokenized input line through the command tree to a handler.

Role in the System
------------------
The dispatcher is the interpreter of the shell. It receives the
tokens of one submitted line, walks the command tree greedily, and
either runs the handler it lands on or prints a usage block that
describes where the walk stopped.

    User types: "df0 insert disk.adf"
                  ↓
    Tokens: ["df0", "insert", "disk.adf"]
                  ↓
    Walk: root → df0 → insert    (remaining: ["disk.adf"])
                  ↓
    insert takes <file>, one token remains → arity ok
                  ↓
    handler(["disk.adf"], 0)

    User types: "df9 eject"
                  ↓
    Walk: root    (no child named "df9")
                  ↓
    Root has no handler → usage block for root

Design Decisions
----------------
- Matching is greedy, longest prefix first, without backtracking.
- When the tokens run out the walk still tries a child named "", so a
  command group can carry a default action.
- A handler whose arg1 placeholder is non-empty needs at least one
  remaining token; a handler with an empty arg1 accepts none.
- Arity is checked without exceptions: resolve() returns either a
  Resolved or an Unresolved value and dispatch() matches on it.
- Every failure ends in the same place: a usage block printed to the
  scrollback and a DispatchResult with ``failure`` set. Nothing a user
  types can raise out of dispatch().
- Single-word shortcuts ("clear") bypass the tree, but only when the
  line consists of exactly that one word.

Classes
-------
Failure
    Why a dispatch did not run a handler.
Resolved / Unresolved
    The outcome of walking the tree for one line.
DispatchResult
    What dispatch() returns to the console.
Dispatcher
    Owns the command tree and writes its reports to a ScrollbackBuffer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from retroshell_console.errors import (
    CommandError,
    ParseError,
    TooFewArgumentsError,
    TooManyArgumentsError,
)
from retroshell_console.scrollback import ScrollbackBuffer
from retroshell_console.tree import CommandNode, CommandTree, Handler

# Extra columns added to the widest name in a usage listing
USAGE_PADDING = 7


class Failure(Enum):
    """Reasons a line did not run a command."""
    UNRESOLVED_TOKEN = "unresolved token"
    TOO_FEW_ARGUMENTS = "too few arguments"
    TOO_MANY_ARGUMENTS = "too many arguments"
    HANDLER_ERROR = "handler error"


@dataclass(frozen=True)
class Resolved:
    """The walk reached a handler and the arity matches."""
    node: CommandNode
    prefix: str
    remaining: List[str]

    @property
    def handler(self) -> Handler:
        return self.node.handler

    @property
    def param(self) -> int:
        return self.node.param


@dataclass(frozen=True)
class Unresolved:
    """The walk stopped without a runnable command.

    ``node`` is the last node reached; ``prefix`` holds the tokens
    consumed on the way there.
    """
    node: CommandNode
    prefix: str
    remaining: List[str]
    failure: Failure


Resolution = Union[Resolved, Unresolved]


@dataclass
class DispatchResult:
    """Structured outcome of one dispatch.

    Attributes
    ----------
    command : str
        The matched command prefix, e.g. "df0 insert".
    failure : Failure or None
        Set when no handler ran to completion.
    error : str or None
        Message of a CommandError raised by the handler.
    usage : list[str]
        The usage block printed for a failed dispatch.
    """
    command: str
    failure: Optional[Failure] = None
    error: Optional[str] = None
    usage: List[str] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.failure is not None


def _failure_for(error: ParseError) -> Failure:
    if isinstance(error, TooFewArgumentsError):
        return Failure.TOO_FEW_ARGUMENTS
    if isinstance(error, TooManyArgumentsError):
        return Failure.TOO_MANY_ARGUMENTS
    return Failure.UNRESOLVED_TOKEN


class Dispatcher:
    """Resolves token sequences against a CommandTree and runs handlers.

    Usage
    -----
        dispatcher = Dispatcher(tree, buffer)
        result = dispatcher.dispatch(tokenize("amiga reset"))
        if result.is_error:
            ...  # a usage block is already in the buffer
    """

    def __init__(self, tree: CommandTree, output: ScrollbackBuffer):
        self.tree = tree
        self.output = output
        self.shortcuts: Dict[str, Callable[[], None]] = {
            "clear": output.clear_line,
        }
        self.logger = logging.getLogger(__name__)

    # ─── Resolution ─────────────────────────────────────────────────

    def resolve(self, tokens: Iterable[str]) -> Resolution:
        """Walk the tree for ``tokens`` without running anything."""
        remaining = list(tokens)
        node = self.tree.root
        consumed: List[str] = []

        while True:
            token = remaining[0] if remaining else ""
            child = self.tree.seek(node, token)
            if child is None:
                break
            node = child
            if remaining:
                consumed.append(remaining.pop(0))

        prefix = " ".join(consumed)

        if node.handler is None:
            return Unresolved(node, prefix, remaining, Failure.UNRESOLVED_TOKEN)
        if node.takes_argument and not remaining:
            return Unresolved(node, prefix, remaining, Failure.TOO_FEW_ARGUMENTS)
        if not node.takes_argument and remaining:
            return Unresolved(node, prefix, remaining, Failure.TOO_MANY_ARGUMENTS)
        return Resolved(node, prefix, remaining)

    # ─── Dispatch ───────────────────────────────────────────────────

    def dispatch(self, tokens: Iterable[str]) -> DispatchResult:
        """Execute one tokenized line.

        Returns
        -------
        DispatchResult
            ``failure`` is None if a shortcut or handler ran. Otherwise a
            usage block (or an error line) has been written to the
            output buffer.
        """
        args = list(tokens)
        if not args:
            return DispatchResult(command="")

        self.logger.debug(f"Dispatching: {args}")

        if len(args) == 1 and args[0] in self.shortcuts:
            self.shortcuts[args[0]]()
            return DispatchResult(command=args[0])

        resolution = self.resolve(args)

        if isinstance(resolution, Unresolved):
            return self._report(resolution.node, resolution.prefix, resolution.failure)

        try:
            resolution.handler(list(resolution.remaining), resolution.param)
        except ParseError as e:
            return self._report(resolution.node, resolution.prefix, _failure_for(e))
        except CommandError as e:
            self.logger.warning(f"Command '{resolution.prefix}' failed: {e.description}")
            self.output.print(f"error: {e.description}\n")
            return DispatchResult(
                command=resolution.prefix,
                failure=Failure.HANDLER_ERROR,
                error=e.description,
            )

        return DispatchResult(command=resolution.prefix)

    def _report(self, node: CommandNode, prefix: str, failure: Failure) -> DispatchResult:
        self.logger.info(f"Cannot execute '{prefix}': {failure.value}")
        usage = self.usage(node, prefix)
        self.print_usage(usage)
        return DispatchResult(command=prefix, failure=failure, usage=usage)

    # ─── Usage synthesis ────────────────────────────────────────────

    def usage(self, node: CommandNode, prefix: str = "") -> List[str]:
        """Build the usage block for ``node``.

        The block names the command and its placeholders and, if the
        node has children, lists every child with its help text. Names
        are right-aligned on a common column.

            usage: amiga <command>

                <command> : 2 options

                       on : Switches the Amiga on
                    reset : Performs a hard reset
        """
        head = " ".join(part for part in (prefix, node.arg1, node.arg2) if part)
        lines = [f"usage: {head}"]

        children = self.tree.children(node)
        if children:
            tab = max([len(node.arg1)] + [len(c.display_name) for c in children])
            tab += USAGE_PADDING
            count = len(children)

            lines.append("")
            lines.append(f"{node.arg1:>{tab}} : {count} {'option' if count == 1 else 'options'}")
            lines.append("")
            for child in children:
                lines.append(f"{child.display_name:>{tab}} : {child.help}")
            lines.append("")

        return lines

    def print_usage(self, lines: List[str]) -> None:
        for line in lines:
            self.output.print(line + "\n")
