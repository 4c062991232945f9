"""
RetroShell Console
==================

The text engine and command interpreter behind RetroShell, a small
interactive shell for driving an emulator from a console window.

Architecture Overview
---------------------
The package knows nothing about windows, fonts or emulation. A host
feeds it input events and draws whatever it reports as visible; an
emulator controller receives the commands it resolves.

    ┌──────────────┐ events ┌───────────────────────────────────────┐
    │ Host         │───────►│ Console                               │
    │ (window,     │        │  LineEditor ──► Dispatcher ──► Buffer │
    │  terminal)   │◄───────│                    │                  │
    └──────────────┘ view() └────────────────────┼──────────────────┘
                                                 │ handler(args, param)
                                          ┌──────▼───────┐
                                          │ EmulatorTarget│
                                          └──────────────┘

Typical wiring:

    from retroshell_console import Console, CommandTree, register_instructions

    tree = register_instructions(CommandTree(), my_target)
    console = Console(tree)
    console.start()

    console.type("a")              # one event per keystroke
    console.key_pressed(Key.LEFT)
    if console.consume_dirty():
        draw(console.view())

Module Structure
----------------
    retroshell_console/
    ├── __init__.py       ← This file.
    ├── tokenizer.py      ← Splits input lines into lowercase tokens.
    ├── tree.py           ← CommandTree / CommandNode, "dfn" templates.
    ├── dispatcher.py     ← Greedy tree walk, arity check, usage blocks.
    ├── errors.py         ← Exception taxonomy.
    ├── scrollback.py     ← Bounded, wrapping output storage.
    ├── line_editor.py    ← Input line and history navigation.
    ├── console.py        ← The controller gluing it all together.
    ├── instructions.py   ← Emulator command set and EmulatorTarget.
    ├── terminal.py       ← Line-mode front end for text terminals.
    └── demo.py           ← Narrating demo target and console builder.

Command Grammar
---------------
    <token> [<token> ...] [arg1] [arg2]

Case-insensitive, space-delimited, no quoting. "clear" alone clears
the input line. "dfn" in a registered path expands to df0 .. df3.

Dependencies
------------
Standard library only.
Uses: abc, dataclasses, enum, functools, logging, typing.

License
-------
GPL 3.0
"""

from retroshell_console.console import (
    CharacterTyped,
    Console,
    ConsoleView,
    KeyPressed,
    ScrollWheel,
)
from retroshell_console.dispatcher import Dispatcher, DispatchResult, Failure
from retroshell_console.errors import (
    CommandError,
    DuplicateRegistrationError,
    ParseError,
    ScriptError,
    ShellError,
)
from retroshell_console.instructions import (
    Action,
    Component,
    EmulatorTarget,
    register_instructions,
)
from retroshell_console.line_editor import Key, LineEditor
from retroshell_console.scrollback import ScrollbackBuffer
from retroshell_console.tokenizer import tokenize
from retroshell_console.tree import CommandNode, CommandTree

__all__ = [
    'Action', 'CharacterTyped', 'CommandError', 'CommandNode', 'CommandTree',
    'Component', 'Console', 'ConsoleView', 'DispatchResult', 'Dispatcher',
    'DuplicateRegistrationError', 'EmulatorTarget', 'Failure', 'Key',
    'KeyPressed', 'LineEditor', 'ParseError', 'ScriptError', 'ScrollWheel',
    'ScrollbackBuffer', 'ShellError', 'register_instructions', 'tokenize',
]
