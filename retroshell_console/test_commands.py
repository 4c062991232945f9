"""
Tests for the RetroShell command system.

Run with:  python -m pytest retroshell_console/test_commands.py -v
"""

import pytest

from retroshell_console.dispatcher import (
    Dispatcher,
    Failure,
    Resolved,
    Unresolved,
)
from retroshell_console.errors import (
    CommandError,
    DuplicateRegistrationError,
    TooFewArgumentsError,
    TreeFrozenError,
)
from retroshell_console.instructions import (
    Action,
    Component,
    EmulatorTarget,
    register_instructions,
)
from retroshell_console.scrollback import ScrollbackBuffer
from retroshell_console.tokenizer import tokenize
from retroshell_console.tree import TEMPLATE_EXPANSION, CommandTree


class Recorder:
    """Handler that remembers how it was called."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __call__(self, args, param):
        self.calls.append((list(args), param))
        if self.error is not None:
            raise self.error


class RecordingTarget(EmulatorTarget):
    def __init__(self):
        self.calls = []

    def execute(self, component, action, args, param):
        self.calls.append((component, action, list(args), param))


@pytest.fixture
def buffer():
    return ScrollbackBuffer(num_rows=25, num_cols=80)


@pytest.fixture
def tree():
    return CommandTree()


# ============================================================
# Tokenizer
# ============================================================

class TestTokenize:
    """Tests for splitting input lines."""

    def test_lowercases_tokens(self):
        assert list(tokenize("DF0 Insert Disk.ADF")) == ["df0", "insert", "disk.adf"]

    def test_empty_input(self):
        assert list(tokenize("")) == []
        assert list(tokenize("    ")) == []

    def test_consecutive_spaces_are_dropped(self):
        assert list(tokenize("  amiga   reset ")) == ["amiga", "reset"]

    def test_no_quoting(self):
        assert list(tokenize('df0 insert "my disk.adf"')) == ["df0", "insert", '"my', 'disk.adf"']

    def test_single_use(self):
        tokens = tokenize("a b")
        assert list(tokens) == ["a", "b"]
        assert list(tokens) == []


# ============================================================
# Command tree
# ============================================================

class TestCommandTree:
    """Tests for building the command tree."""

    def test_creates_intermediate_nodes(self, tree):
        handler = Recorder()
        tree.register(["amiga", "reset"], help="Resets", handler=handler)

        group = tree.lookup(["amiga"])
        assert group is not None
        assert group.handler is None
        leaf = tree.lookup(["amiga", "reset"])
        assert leaf.handler is handler
        assert leaf.help == "Resets"

    def test_intermediate_nodes_are_reused(self, tree):
        tree.register(["amiga", "on"], handler=Recorder())
        tree.register(["amiga", "off"], handler=Recorder())
        assert [c.name for c in tree.children(tree.root)] == ["amiga"]
        assert [c.name for c in tree.children(tree.lookup(["amiga"]))] == ["on", "off"]

    def test_group_can_be_described_after_its_children(self, tree):
        tree.register(["amiga", "on"], handler=Recorder())
        tree.register(["amiga"], "<command>", help="The virtual Amiga")
        assert tree.lookup(["amiga"]).help == "The virtual Amiga"

    def test_duplicate_registration_raises(self, tree):
        tree.register(["about"], handler=Recorder())
        with pytest.raises(DuplicateRegistrationError, match="collision"):
            tree.register(["about"], handler=Recorder())

    def test_duplicate_is_a_value_error(self, tree):
        tree.register(["amiga"], help="group")
        with pytest.raises(ValueError):
            tree.register(["amiga"], help="again")

    def test_empty_path_raises(self, tree):
        with pytest.raises(ValueError, match="at least one token"):
            tree.register([])

    def test_names_are_lowercased(self, tree):
        tree.register(["Amiga", "RESET"], handler=Recorder())
        assert tree.lookup(["amiga", "reset"]) is not None

    def test_seek_missing_returns_none(self, tree):
        tree.register(["about"], handler=Recorder())
        assert tree.seek(tree.root, "abou") is None
        assert tree.seek(tree.root, "about").name == "about"

    def test_frozen_tree_rejects_registration(self, tree):
        tree.register(["about"], handler=Recorder())
        tree.freeze()
        with pytest.raises(TreeFrozenError):
            tree.register(["help"], handler=Recorder())


class TestTemplateExpansion:
    """Tests for the dfn placeholder."""

    def test_expands_into_four_drives(self, tree):
        handler = Recorder()
        tree.register(["dfn", "eject"], "", "", "Ejects a disk", handler)

        paths = [path for path, node in tree.walk() if path[-1] == "eject"]
        assert sorted(paths) == [(name, "eject") for name in TEMPLATE_EXPANSION]

        for number, name in enumerate(TEMPLATE_EXPANSION):
            node = tree.lookup([name, "eject"])
            assert node.param == number
            assert node.handler is handler
            assert node.help == "Ejects a disk"
            assert node.arg1 == "" and node.arg2 == ""

    def test_placeholder_node_is_not_created(self, tree):
        tree.register(["dfn"], help="Floppy drive n")
        assert tree.lookup(["dfn"]) is None
        assert [c.name for c in tree.children(tree.root)] == list(TEMPLATE_EXPANSION)

    def test_expands_at_any_position(self, tree):
        tree.register(["drive", "dfn", "eject"], handler=Recorder())
        drive = tree.lookup(["drive"])
        assert [c.name for c in tree.children(drive)] == list(TEMPLATE_EXPANSION)
        assert tree.lookup(["drive", "df3", "eject"]).param == 3

    def test_explicit_param_is_replaced(self, tree):
        tree.register(["dfn", "eject"], handler=Recorder(), param=42)
        assert [tree.lookup([n, "eject"]).param for n in TEMPLATE_EXPANSION] == [0, 1, 2, 3]

    def test_collision_leaves_tree_unchanged(self, tree):
        tree.register(["df2", "eject"], handler=Recorder())
        size = len(tree)

        with pytest.raises(DuplicateRegistrationError, match="df2 eject"):
            tree.register(["dfn", "eject"], handler=Recorder())

        assert len(tree) == size
        assert tree.lookup(["df0"]) is None
        assert tree.lookup(["df2", "eject"]).param == 0

    def test_rightmost_placeholder_sets_param(self, tree):
        tree.register(["dfn", "copy", "dfn"], handler=Recorder())
        assert tree.lookup(["df1", "copy", "df3"]).param == 3
        assert len([p for p, n in tree.walk() if n.handler is not None]) == 16


# ============================================================
# Dispatcher
# ============================================================

class TestDispatch:
    """Tests for resolving and running commands."""

    def test_template_command_receives_drive_number(self, tree, buffer):
        handler = Recorder()
        tree.register(["dfn", "eject"], handler=handler)
        result = Dispatcher(tree, buffer).dispatch(tokenize("df2 eject"))

        assert not result.is_error
        assert result.command == "df2 eject"
        assert handler.calls == [([], 2)]

    def test_unknown_drive_prints_root_usage(self, tree, buffer):
        tree.register(["dfn", "eject"], handler=Recorder())
        result = Dispatcher(tree, buffer).dispatch(tokenize("df9 eject"))

        assert result.is_error
        assert result.failure is Failure.UNRESOLVED_TOKEN
        assert result.usage[0] == "usage: <command>"
        listed = [line.split(" : ")[0].strip() for line in result.usage if " : " in line]
        for name in TEMPLATE_EXPANSION:
            assert name in listed
        assert "usage: <command>" in buffer.lines

    def test_argument_required(self, tree, buffer):
        handler = Recorder()
        tree.register(["dfn", "insert"], "<file>", handler=handler)
        dispatcher = Dispatcher(tree, buffer)

        result = dispatcher.dispatch(tokenize("df0 insert"))
        assert result.failure is Failure.TOO_FEW_ARGUMENTS
        assert handler.calls == []

        result = dispatcher.dispatch(tokenize("df1 insert a.adf b.adf"))
        assert not result.is_error
        assert handler.calls == [(["a.adf", "b.adf"], 1)]

    def test_no_argument_accepted(self, tree, buffer):
        handler = Recorder()
        tree.register(["amiga", "reset"], handler=handler)
        result = Dispatcher(tree, buffer).dispatch(tokenize("amiga reset now"))

        assert result.failure is Failure.TOO_MANY_ARGUMENTS
        assert result.usage[0] == "usage: amiga reset"
        assert handler.calls == []

    def test_group_without_handler_reports_usage(self, tree, buffer):
        tree.register(["amiga"], "<command>", help="Amiga")
        tree.register(["amiga", "on"], help="Switches on", handler=Recorder())
        tree.register(["amiga", "reset"], help="Resets", handler=Recorder())
        result = Dispatcher(tree, buffer).dispatch(tokenize("amiga"))

        assert result.failure is Failure.UNRESOLVED_TOKEN
        assert result.usage == [
            "usage: amiga <command>",
            "",
            "       <command> : 2 options",
            "",
            "              on : Switches on",
            "           reset : Resets",
            "",
        ]

    def test_single_child_usage(self, tree, buffer):
        tree.register(["cpu", "inspect"], help="Shows state", handler=Recorder())
        result = Dispatcher(tree, buffer).dispatch(tokenize("cpu"))
        assert any(line.endswith(": 1 option") for line in result.usage)

    def test_leaf_usage_has_no_listing(self, tree, buffer):
        tree.register(["dfn", "insert"], "<file>", handler=Recorder())
        result = Dispatcher(tree, buffer).dispatch(tokenize("df0 insert"))
        assert result.usage == ["usage: df0 insert <file>"]

    def test_catch_all_child_runs_when_tokens_run_out(self, tree, buffer):
        handler = Recorder()
        tree.register(["amiga", ""], help="Default action", handler=handler)
        result = Dispatcher(tree, buffer).dispatch(tokenize("amiga"))
        assert not result.is_error
        assert handler.calls == [([], 0)]

    def test_catch_all_is_listed_with_quotes(self, tree, buffer):
        tree.register(["amiga", ""], help="Default action", handler=Recorder())
        tree.register(["amiga", "on"], handler=Recorder())
        result = Dispatcher(tree, buffer).dispatch(tokenize("amiga bogus"))
        assert any(line.strip() == "'' : Default action" for line in result.usage)

    def test_empty_input_does_nothing(self, tree, buffer):
        result = Dispatcher(tree, buffer).dispatch(tokenize("   "))
        assert not result.is_error
        assert buffer.lines == [""]

    def test_dispatch_is_repeatable(self, tree, buffer):
        handler = Recorder()
        tree.register(["dfn", "insert"], "<file>", handler=handler)
        dispatcher = Dispatcher(tree, buffer)

        first = dispatcher.dispatch(tokenize("df3 insert x"))
        dispatcher.dispatch(tokenize("df9"))
        second = dispatcher.dispatch(tokenize("df3 insert x"))

        assert first == second
        assert handler.calls == [(["x"], 3), (["x"], 3)]

    def test_resolve_does_not_run_handlers(self, tree, buffer):
        handler = Recorder()
        tree.register(["dfn", "insert"], "<file>", handler=handler)
        dispatcher = Dispatcher(tree, buffer)

        resolved = dispatcher.resolve(["df1", "insert", "a.adf"])
        assert isinstance(resolved, Resolved)
        assert resolved.prefix == "df1 insert"
        assert resolved.remaining == ["a.adf"]
        assert resolved.param == 1

        unresolved = dispatcher.resolve(["df1", "format"])
        assert isinstance(unresolved, Unresolved)
        assert unresolved.node.name == "df1"
        assert unresolved.remaining == ["format"]
        assert handler.calls == []


class TestShortcuts:
    """Tests for single-word commands that bypass the tree."""

    def test_clear_empties_current_line(self, tree, buffer):
        buffer.append_text("half typed")
        result = Dispatcher(tree, buffer).dispatch(tokenize("clear"))
        assert not result.is_error
        assert buffer.last_line == ""

    def test_clear_with_arguments_goes_to_tree(self, tree, buffer):
        tree.register(["about"], handler=Recorder())
        result = Dispatcher(tree, buffer).dispatch(tokenize("clear all"))
        assert result.failure is Failure.UNRESOLVED_TOKEN

    def test_shortcut_wins_over_tree(self, tree, buffer):
        handler = Recorder()
        tree.register(["clear"], handler=handler)
        Dispatcher(tree, buffer).dispatch(tokenize("CLEAR"))
        assert handler.calls == []


class TestHandlerErrors:
    """Tests for failures reported by handlers."""

    def test_command_error_is_printed(self, tree, buffer):
        tree.register(["dfn", "eject"], handler=Recorder(CommandError("df0 is empty")))
        result = Dispatcher(tree, buffer).dispatch(tokenize("df0 eject"))

        assert result.failure is Failure.HANDLER_ERROR
        assert result.error == "df0 is empty"
        assert "error: df0 is empty" in buffer.lines

    def test_parse_error_falls_back_to_usage(self, tree, buffer):
        tree.register(["cia", "inspect"], "<a|b>", handler=Recorder(TooFewArgumentsError()))
        result = Dispatcher(tree, buffer).dispatch(tokenize("cia inspect a"))

        assert result.failure is Failure.TOO_FEW_ARGUMENTS
        assert result.usage == ["usage: cia inspect <a|b>"]

    def test_programming_errors_propagate(self, tree, buffer):
        tree.register(["about"], handler=Recorder(RuntimeError("bug")))
        with pytest.raises(RuntimeError, match="bug"):
            Dispatcher(tree, buffer).dispatch(tokenize("about"))


# ============================================================
# Instruction set
# ============================================================

class TestInstructions:
    """Tests for the emulator command set."""

    @pytest.fixture
    def setup(self, buffer):
        target = RecordingTarget()
        tree = register_instructions(CommandTree(), target)
        return target, Dispatcher(tree, buffer)

    def test_amiga_reset(self, setup):
        target, dispatcher = setup
        dispatcher.dispatch(tokenize("amiga reset"))
        assert target.calls == [(Component.AMIGA, Action.RESET, [], 0)]

    def test_revision_value_is_passed(self, setup):
        target, dispatcher = setup
        dispatcher.dispatch(tokenize("agnus set revision ECS"))
        assert target.calls == [(Component.AGNUS, Action.SET, ["ecs"], 0)]

    def test_drive_insert(self, setup):
        target, dispatcher = setup
        dispatcher.dispatch(tokenize("df3 insert disk.adf"))
        assert target.calls == [(Component.DRIVE, Action.INSERT, ["disk.adf"], 3)]

    def test_cia_needs_selector(self, setup):
        target, dispatcher = setup
        result = dispatcher.dispatch(tokenize("cia inspect"))
        assert result.failure is Failure.TOO_FEW_ARGUMENTS
        assert target.calls == []

    def test_all_drives_registered(self, setup):
        _, dispatcher = setup
        names = [c.name for c in dispatcher.tree.children(dispatcher.tree.root)]
        for name in TEMPLATE_EXPANSION:
            assert name in names
