#!/usr/bin/env python3
"""
RetroShell — Interactive Demo

Runs the console against a stand-in emulator that only narrates what
it would do. Try:

    help
    amiga
    amiga on
    df0 insert workbench.adf
    df0 eject
    df9 eject
    agnus set revision ecs
    quit

"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from retroshell_console.console import Console
from retroshell_console.errors import CommandError
from retroshell_console.instructions import (
    Action,
    Component,
    EmulatorTarget,
    register_instructions,
)
from retroshell_console.tree import CommandTree
from retroshell_console.terminal import TerminalConsoleInterface

DRIVE_COUNT = 4
REVISIONS = {
    Component.AGNUS: ("ocs", "ecs", "ecs2mb"),
    Component.DENISE: ("ocs", "ecs"),
    Component.RTC: ("none", "oki", "ricoh"),
}


class DemoTarget(EmulatorTarget):
    """Pretend emulator that keeps just enough state to be convincing."""

    def __init__(self, output: Optional[Callable[[str], None]] = None):
        self.output = output or print
        self.powered = False
        self.running = False
        self.connected = [True] * DRIVE_COUNT
        self.disks: List[Optional[str]] = [None] * DRIVE_COUNT
        self.revisions: Dict[Component, str] = {c: r[0] for c, r in REVISIONS.items()}
        self.logger = logging.getLogger(__name__)

    def attach(self, console: Console) -> None:
        self.output = console.println

    def execute(self, component: Component, action: Action,
                args: List[str], param: int) -> None:
        self.logger.debug(f"execute {component.value} {action.value} {args} {param}")

        if component is Component.SHELL:
            if action is Action.ABOUT:
                self.output("RetroShell demo target, no emulator attached.")
            else:
                self.output("Nothing to see here. Move along.")
        elif component is Component.AMIGA:
            self._amiga(action)
        elif component is Component.DRIVE:
            self._drive(action, args, param)
        elif action is Action.SET:
            self._set_revision(component, args[0])
        elif action is Action.INSPECT and component is Component.CIA:
            if args[0] not in ("a", "b"):
                raise CommandError(f"Unknown CIA '{args[0]}' (expected a or b)")
            self.output(f"CIA {args[0].upper()}: idle")
        elif action is Action.EVENTS:
            self.output("Event scheduler: no pending events")
        else:
            state = self.revisions.get(component, "present")
            self.output(f"{component.value}: {state}")

    def _amiga(self, action: Action) -> None:
        if action is Action.ON:
            self.powered = True
        elif action is Action.OFF:
            self.powered = self.running = False
        elif action in (Action.RUN, Action.PAUSE, Action.RESET) and not self.powered:
            raise CommandError("The Amiga is switched off")
        elif action is Action.RUN:
            self.running = True
        elif action is Action.PAUSE:
            self.running = False

        power = "on" if self.powered else "off"
        state = "running" if self.running else "paused"
        self.output(f"Amiga is {power}, {state}")

    def _drive(self, action: Action, args: List[str], drive: int) -> None:
        name = f"df{drive}"
        if action is Action.CONNECT:
            self.connected[drive] = True
        elif action is Action.DISCONNECT:
            if drive == 0:
                raise CommandError("df0 cannot be disconnected")
            self.connected[drive] = False
        elif not self.connected[drive]:
            raise CommandError(f"{name} is not connected")
        elif action is Action.INSERT:
            self.disks[drive] = args[0]
        elif action is Action.EJECT:
            if self.disks[drive] is None:
                raise CommandError(f"{name} is empty")
            self.disks[drive] = None

        disk = self.disks[drive] or "no disk"
        status = "connected" if self.connected[drive] else "disconnected"
        self.output(f"{name}: {status}, {disk}")

    def _set_revision(self, component: Component, value: str) -> None:
        choices = REVISIONS[component]
        if value not in choices:
            raise CommandError(f"Expected one of: {', '.join(choices)}")
        self.revisions[component] = value
        self.output(f"{component.value} revision set to {value}")


def build_console(target: Optional[EmulatorTarget] = None, **options) -> Console:
    """Create a console wired to ``target`` (a fresh DemoTarget by default).

    ``options`` are passed on to Console (num_rows, num_cols, prompt, ...).
    """
    if target is None:
        target = DemoTarget()
    tree = register_instructions(CommandTree(), target)
    console = Console(tree, **options)
    if hasattr(target, "attach"):
        target.attach(console)
    return console


def main():
    console = build_console()
    console.start()
    TerminalConsoleInterface(console).run()


if __name__ == "__main__":
    main()
