"""
Instruction Set
===============

The commands RetroShell offers for controlling an emulator.

The console does not know what an emulator does. It only names the
operations and routes them to an EmulatorTarget, which the host
supplies. Every registered handler is a partial application of
EmulatorTarget.execute, so one method on the target receives all
commands, tagged with the component and the action:

    "agnus set revision ecs"
        → target.execute(Component.AGNUS, Action.SET, ["ecs"], 0)

    "df2 insert disk.adf"
        → target.execute(Component.DRIVE, Action.INSERT, ["disk.adf"], 2)

Extending
---------
To add a command, register another path in register_instructions()
and handle the new (component, action) pair in your target. Targets
signal problems by raising CommandError (printed as an error line) or
one of the ParseError kinds (printed as a usage block).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from functools import partial
from typing import List

from retroshell_console.tree import CommandTree


class Component(Enum):
    """Emulator parts a command can address."""
    SHELL = "shell"
    AMIGA = "amiga"
    CPU = "cpu"
    CIA = "cia"
    AGNUS = "agnus"
    DENISE = "denise"
    PAULA = "paula"
    RTC = "rtc"
    DISK_CONTROLLER = "diskcontroller"
    DRIVE = "drive"


class Action(Enum):
    """Operations a command can request."""
    ABOUT = "about"
    EASTER_EGG = "easteregg"
    ON = "on"
    OFF = "off"
    RUN = "run"
    PAUSE = "pause"
    RESET = "reset"
    INSPECT = "inspect"
    EVENTS = "events"
    SET = "set"
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    EJECT = "eject"
    INSERT = "insert"


class EmulatorTarget(ABC):
    """The component that carries out shell commands.

    Implementations receive every command through execute(). The
    console passes the arguments left over after the command path and
    the integer bound at registration (the drive number for df0..df3).
    """

    @abstractmethod
    def execute(self, component: Component, action: Action,
                args: List[str], param: int) -> None:
        """Carry out one command.

        Raises
        ------
        CommandError
            The command was understood but cannot be performed.
        ParseError
            The arguments do not fit the command.
        """
        ...


def register_instructions(tree: CommandTree, target: EmulatorTarget) -> CommandTree:
    """Register the emulator instruction set on ``tree``.

    Returns the tree to allow chaining.
    """

    def bind(component: Component, action: Action):
        return partial(target.execute, component, action)

    group = "<command>"

    tree.register(["about"], help="Prints version information",
                  handler=bind(Component.SHELL, Action.ABOUT))
    tree.register(["easteregg"], help="Prints something funny",
                  handler=bind(Component.SHELL, Action.EASTER_EGG))

    # Amiga
    tree.register(["amiga"], group, help="The virtual Amiga")
    tree.register(["amiga", "on"], help="Switches the Amiga on",
                  handler=bind(Component.AMIGA, Action.ON))
    tree.register(["amiga", "off"], help="Switches the Amiga off",
                  handler=bind(Component.AMIGA, Action.OFF))
    tree.register(["amiga", "run"], help="Starts the emulator thread",
                  handler=bind(Component.AMIGA, Action.RUN))
    tree.register(["amiga", "pause"], help="Halts the emulator thread",
                  handler=bind(Component.AMIGA, Action.PAUSE))
    tree.register(["amiga", "reset"], help="Performs a hard reset",
                  handler=bind(Component.AMIGA, Action.RESET))
    tree.register(["amiga", "inspect"], help="Displays the component state",
                  handler=bind(Component.AMIGA, Action.INSPECT))

    # Chips with an inspect command only
    for component, description in (
        (Component.CPU, "Motorola 68k CPU"),
        (Component.PAULA, "Ports, Audio, Interrupts"),
        (Component.DISK_CONTROLLER, "Disk Controller"),
    ):
        tree.register([component.value], group, help=description)
        tree.register([component.value, "inspect"], help="Displays the component state",
                      handler=bind(component, Action.INSPECT))

    tree.register(["cia"], group, help="Complex Interface Adapters")
    tree.register(["cia", "inspect"], "<a|b>", help="Displays the state of CIA A or B",
                  handler=bind(Component.CIA, Action.INSPECT))

    # Chips with a selectable revision
    for component, description in (
        (Component.AGNUS, "Custom chip"),
        (Component.DENISE, "Custom chip"),
        (Component.RTC, "Real-time clock"),
    ):
        tree.register([component.value], group, help=description)
        tree.register([component.value, "inspect"], help="Displays the component state",
                      handler=bind(component, Action.INSPECT))
        tree.register([component.value, "set"], "<key>", help="Configures the component")
        tree.register([component.value, "set", "revision"], "<value>",
                      help="Selects the emulated chip revision",
                      handler=bind(component, Action.SET))

    tree.register(["agnus", "events"], help="Displays the event scheduler state",
                  handler=bind(Component.AGNUS, Action.EVENTS))

    # Floppy drives (expanded to df0 .. df3)
    tree.register(["dfn"], group, help="Floppy drive n")
    tree.register(["dfn", "connect"], help="Connects the drive",
                  handler=bind(Component.DRIVE, Action.CONNECT))
    tree.register(["dfn", "disconnect"], help="Disconnects the drive",
                  handler=bind(Component.DRIVE, Action.DISCONNECT))
    tree.register(["dfn", "eject"], help="Ejects a floppy disk",
                  handler=bind(Component.DRIVE, Action.EJECT))
    tree.register(["dfn", "insert"], "<file>", help="Inserts a floppy disk",
                  handler=bind(Component.DRIVE, Action.INSERT))
    tree.register(["dfn", "inspect"], help="Displays the component state",
                  handler=bind(Component.DRIVE, Action.INSPECT))

    return tree
