#!/usr/bin/env python3
"""
RetroShell terminal host
- Line-mode terminal front end for the RetroShell console
- Configuration files in YAML, overridable from the command line
- Optional startup script executed before the first prompt
- Debug/verbose mode for development

Keyboard Input → TerminalConsoleInterface → Console.type() → Dispatcher → EmulatorTarget
Console scrollback → TerminalConsoleInterface._show_new_output() → stdout
"""

import sys
import logging
from pathlib import Path

from config_manager import (
	RetroShellConfig,
	DebugConfig,
	setup_configuration
)

from retroshell_console import demo
from retroshell_console.console import Console
from retroshell_console.errors import ScriptError
from retroshell_console.terminal import TerminalConsoleInterface


# ===================================================================
# 1. CONSOLE CONSTRUCTION
# ===================================================================

def build_console(config: RetroShellConfig, target=None) -> Console:
	"""Create a console for the given configuration

	The target defaults to the narrating DemoTarget; hosts that embed
	a real emulator pass their own EmulatorTarget.
	"""
	return demo.build_console(
		target,
		num_rows=config.display.num_rows,
		num_cols=config.display.num_cols,
		scrollback_lines=config.display.scrollback_lines,
		prompt=config.display.prompt
	)


def run_startup_script(console: Console, script_path: str) -> bool:
	"""Execute a command script, reporting failures in the console"""
	logger = logging.getLogger(__name__)
	path = Path(script_path)

	try:
		with open(path, 'r') as f:
			executed = console.exec_script(f)
		logger.info(f"Startup script {path}: {executed} commands executed")
		return True
	except ScriptError as e:
		logger.error(f"Startup script {path} failed: {e.description}")
		console.clear_line()
		console.println(f"Script {path.name} aborted at line {e.line_number}")
		console.refresh()
		return False
	except OSError as e:
		logger.error(f"Cannot read startup script {path}: {e}")
		return False


# ===================================================================
# 2. MAIN
# ===================================================================

def main(argv=None):
	config, should_exit, _ = setup_configuration(argv)
	if should_exit:
		return 0 if config is None else 1

	DebugConfig.set_mode(
		verbose=config.console.verbose,
		quiet=config.console.quiet,
		log_file=config.console.log_file
	)

	console = build_console(config)
	console.start(show_banner=config.startup.show_banner)

	if config.startup.script:
		run_startup_script(console, config.startup.script)

	interface = TerminalConsoleInterface(console)
	interface.run()

	DebugConfig.user_print("Thank you for using RetroShell!")
	return 0


if __name__ == "__main__":
	sys.exit(main())
