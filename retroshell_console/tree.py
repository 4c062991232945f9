"""
Command Tree
============

The instruction set of the shell, stored as a prefix tree of tokens.

Each node stands for one token position in the command grammar. A
node may carry a handler (then the path leading to it is a runnable
command) and always carries the argument placeholders and help text
used when the dispatcher has to print a usage block.

    root ("")
    ├── about                       → handler
    ├── amiga
    │   ├── on                      → handler
    │   └── reset                   → handler
    └── df0 .. df3   (from "dfn")
        ├── eject                   → handler, param = 0..3
        └── insert <file>           → handler, param = 0..3

Storage
-------
Nodes live in a flat list (an arena) owned by the CommandTree and
refer to their children by index. Lookups go through the tree, which
keeps ownership in one place and lets registration check name
uniqueness cheaply.

Template Expansion
------------------
The reserved token "dfn" stands for the four floppy drives. A path
containing it is registered four times, once for each of df0, df1,
df2 and df3, with ``param`` set to the drive number:

    tree.register(["dfn", "eject"], help="Ejects a disk", handler=f)

is the same as

    tree.register(["df0", "eject"], help="Ejects a disk", handler=f, param=0)
    ...
    tree.register(["df3", "eject"], help="Ejects a disk", handler=f, param=3)

Lifecycle
---------
The tree is built once at startup and frozen before the console starts
dispatching. After freeze() every registration raises TreeFrozenError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence

from retroshell_console.errors import DuplicateRegistrationError, TreeFrozenError

# A handler receives the remaining arguments and the node's param
Handler = Callable[[List[str], int], None]

TEMPLATE_TOKEN = "dfn"
TEMPLATE_EXPANSION = ("df0", "df1", "df2", "df3")

ROOT_PLACEHOLDER = "<command>"


@dataclass
class CommandNode:
    """One token position in the command grammar.

    Attributes
    ----------
    name : str
        Literal token matched at this position. The root uses "".
    arg1, arg2 : str
        Placeholders for the trailing arguments, e.g. "<file>".
        An empty arg1 means the command takes no argument.
    help : str
        One-line description shown in usage listings.
    handler : callable or None
        Present only on nodes that are runnable commands.
    param : int
        Integer bound at registration time and passed to the handler.
    children : list[int]
        Arena indices of the child nodes, in insertion order.
    """
    name: str
    arg1: str = ""
    arg2: str = ""
    help: str = ""
    handler: Optional[Handler] = None
    param: int = 0
    index: int = 0
    children: List[int] = field(default_factory=list)
    registered: bool = False

    @property
    def takes_argument(self) -> bool:
        return self.arg1 != ""

    @property
    def display_name(self) -> str:
        """Name as shown in listings ("''" for the empty catch-all)."""
        return self.name if self.name else "''"


class CommandTree:
    """Arena-backed prefix tree of CommandNodes."""

    def __init__(self):
        self._nodes: List[CommandNode] = [
            CommandNode(name="", arg1=ROOT_PLACEHOLDER, registered=True)
        ]
        self._frozen = False
        self.logger = logging.getLogger(__name__)

    # ─── Navigation ─────────────────────────────────────────────────

    @property
    def root(self) -> CommandNode:
        return self._nodes[0]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> CommandNode:
        return self._nodes[index]

    def children(self, node: CommandNode) -> List[CommandNode]:
        """Child nodes of ``node`` in registration order."""
        return [self._nodes[i] for i in node.children]

    def seek(self, node: CommandNode, token: str) -> Optional[CommandNode]:
        """Return the child of ``node`` named ``token``, or None."""
        for i in node.children:
            child = self._nodes[i]
            if child.name == token:
                return child
        return None

    def lookup(self, path: Sequence[str]) -> Optional[CommandNode]:
        """Follow ``path`` from the root. Returns None if any step is missing."""
        node = self.root
        for token in path:
            node = self.seek(node, token)
            if node is None:
                return None
        return node

    def walk(self) -> Iterator[tuple[tuple[str, ...], CommandNode]]:
        """Yield (path, node) for every node below the root, depth first."""
        stack = [((), self.root)]
        while stack:
            path, node = stack.pop()
            if node is not self.root:
                yield path, node
            for child in reversed(self.children(node)):
                stack.append((path + (child.name,), child))

    # ─── Building ───────────────────────────────────────────────────

    def register(self,
                 path: Sequence[str],
                 arg1: str = "",
                 arg2: str = "",
                 help: str = "",
                 handler: Optional[Handler] = None,
                 param: int = 0) -> None:
        """Register a command (or a command group) under ``path``.

        Intermediate nodes are created on demand and reused if they
        already exist. The last node receives the descriptor. A path
        containing TEMPLATE_TOKEN fans out into one registration per
        entry of TEMPLATE_EXPANSION.

        Raises
        ------
        TreeFrozenError
            If the tree has been frozen.
        DuplicateRegistrationError
            If any path ``path`` stands for is already registered
            explicitly. The tree is left unchanged.
        ValueError
            If ``path`` is empty.
        """
        if self._frozen:
            raise TreeFrozenError(f"Cannot register '{' '.join(path)}': command tree is frozen")
        if not path:
            raise ValueError("Command path must contain at least one token")

        path = [token.lower() for token in path]
        expansions = list(self._expand(path, param))

        # Nothing is added unless every expanded path is free
        for concrete, _ in expansions:
            existing = self.lookup(concrete)
            if existing is not None and existing.registered:
                raise DuplicateRegistrationError(
                    f"Command collision: '{' '.join(concrete)}' is already registered"
                )

        for concrete, number in expansions:
            node = self.root
            for token in concrete:
                node = self._child(node, token)

            node.arg1 = arg1
            node.arg2 = arg2
            node.help = help
            node.handler = handler
            node.param = number
            node.registered = True
            self.logger.debug(f"Registered command: {' '.join(concrete)} (param={number})")

    def _expand(self, path: List[str], param: int) -> Iterator[tuple[List[str], int]]:
        """Yield (path, param) for every concrete path ``path`` stands for."""
        if TEMPLATE_TOKEN not in path:
            yield path, param
            return
        position = path.index(TEMPLATE_TOKEN)
        for number, token in enumerate(TEMPLATE_EXPANSION):
            yield from self._expand(path[:position] + [token] + path[position + 1:], number)

    def freeze(self) -> None:
        """Make the tree read-only. Called once startup registration is done."""
        self._frozen = True
        self.logger.debug(f"Command tree frozen with {len(self._nodes) - 1} nodes")

    def _child(self, node: CommandNode, token: str) -> CommandNode:
        existing = self.seek(node, token)
        if existing is not None:
            return existing
        return self._append(node, token)

    def _append(self, parent: CommandNode, token: str) -> CommandNode:
        child = CommandNode(name=token, index=len(self._nodes))
        self._nodes.append(child)
        parent.children.append(child.index)
        return child
