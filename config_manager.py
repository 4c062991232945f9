#!/usr/bin/env python3
"""
Configuration system for RetroShell
Supports YAML files, CLI overrides, and programmatic access for hosts
"""

import yaml
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from copy import deepcopy



@dataclass
class DisplayConfig:
	"""Text window geometry and prompt"""
	num_rows: int = 25
	num_cols: int = 80
	scrollback_lines: int = 100
	prompt: str = "retro% "

	def to_dict(self) -> Dict[str, Any]:
		"""Convert to dictionary for YAML serialization"""
		return {
			'num_rows': self.num_rows,
			'num_cols': self.num_cols,
			'scrollback_lines': self.scrollback_lines,
			'prompt': self.prompt
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'DisplayConfig':
		"""Create from dictionary (YAML loading)"""
		return cls(
			num_rows=data.get('num_rows', 25),
			num_cols=data.get('num_cols', 80),
			scrollback_lines=data.get('scrollback_lines', 100),
			prompt=data.get('prompt', "retro% ")
		)


@dataclass
class ConsoleConfig:
	"""Console messages logging level configuration"""
	verbose: bool = False
	quiet: bool = False
	log_file: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			'verbose': self.verbose,
			'quiet': self.quiet,
			'log_file': self.log_file
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'ConsoleConfig':
		return cls(
			verbose=data.get('verbose', False),
			quiet=data.get('quiet', False),
			log_file=data.get('log_file')
		)


@dataclass
class StartupConfig:
	"""What happens when the shell starts"""
	show_banner: bool = True
	script: Optional[str] = None  # commands executed before the first prompt

	def to_dict(self) -> Dict[str, Any]:
		return {
			'show_banner': self.show_banner,
			'script': self.script
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'StartupConfig':
		return cls(
			show_banner=data.get('show_banner', True),
			script=data.get('script')
		)




class DebugConfig:
	"""Centralized logging setup"""
	VERBOSE = False
	QUIET = False

	@classmethod
	def set_mode(cls, verbose=False, quiet=False, log_file=None):
		cls.VERBOSE = verbose
		cls.QUIET = quiet

		# Set up logging based on mode
		if verbose:
			level, fmt = logging.DEBUG, '%(levelname)s %(name)s: %(message)s'
		elif quiet:
			level, fmt = logging.WARNING, '%(levelname)s: %(message)s'
		else:
			level, fmt = logging.INFO, '%(message)s'

		handlers = []
		if log_file:
			handlers.append(logging.FileHandler(log_file))
		else:
			handlers.append(logging.StreamHandler(sys.stderr))

		logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)

	@classmethod
	def user_print(cls, message):
		"""Print user-facing messages (always shown unless quiet)"""
		if not cls.QUIET:
			print(message)




@dataclass
class RetroShellConfig:
	"""Complete configuration for RetroShell"""
	display: DisplayConfig = field(default_factory=DisplayConfig)
	console: ConsoleConfig = field(default_factory=ConsoleConfig)
	startup: StartupConfig = field(default_factory=StartupConfig)

	# Metadata
	config_version: str = "1.0"
	description: str = "RetroShell Configuration"

	def to_dict(self) -> Dict[str, Any]:
		"""Convert to dictionary for YAML serialization"""
		return {
			'config_version': self.config_version,
			'description': self.description,
			'display': self.display.to_dict(),
			'console': self.console.to_dict(),
			'startup': self.startup.to_dict(),
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'RetroShellConfig':
		"""Create from dictionary (YAML loading)"""
		config = cls()

		# Load metadata
		if 'config_version' in data:
			config.config_version = str(data['config_version'])
		if 'description' in data:
			config.description = data['description']

		if 'display' in data:
			config.display = DisplayConfig.from_dict(data['display'] or {})
		if 'console' in data:
			config.console = ConsoleConfig.from_dict(data['console'] or {})
		# older files called the console section "debug"
		elif 'debug' in data:
			config.console = ConsoleConfig.from_dict(data['debug'] or {})
		if 'startup' in data:
			config.startup = StartupConfig.from_dict(data['startup'] or {})

		return config









class ConfigurationManager:
	"""
	Manages configuration loading, merging, and validation
	"""

	def __init__(self, config_file: str = "retroshell.yaml"):
		self.config_file = config_file
		self.config_file_path: Optional[Path] = None
		self.config = RetroShellConfig()

		self.logger = logging.getLogger(__name__)

		# Standard config file locations (in order of preference)
		self.config_search_paths = [
			Path.cwd() / "retroshell.yaml",  # Current directory
			Path.cwd() / "config" / "retroshell.yaml",  # Config subdirectory
			Path.home() / ".config" / "retroshell" / "config.yaml",  # User config
			Path("/etc/retroshell/config.yaml"),  # System config (Linux)
		]

	def load_config(self, config_file: Optional[str] = None) -> RetroShellConfig:
		"""
		Load configuration from file with fallback chain

		Args:
			config_file: Specific config file path, or None for auto-discovery

		Returns:
			Loaded configuration object (defaults if nothing was found)
		"""
		if config_file:
			# Use specified file
			config_path = Path(config_file)
			if config_path.exists():
				self.config = self._load_yaml_file(config_path)
				self.config_file_path = config_path
				self.logger.info(f"Loaded config from: {config_path}")
			else:
				self.logger.warning(f"Config file not found: {config_path}")
				self.logger.info("Using default configuration")
		else:
			# Auto-discover config file
			for path in self.config_search_paths:
				if path.exists():
					self.config = self._load_yaml_file(path)
					self.config_file_path = path
					self.logger.info(f"Auto-discovered config: {path}")
					break
			else:
				self.logger.info("No config file found, using defaults")

		return self.config

	def _load_yaml_file(self, file_path: Path) -> RetroShellConfig:
		"""Load configuration from YAML file"""
		try:
			with open(file_path, 'r') as f:
				yaml_data = yaml.safe_load(f) or {}

			if not isinstance(yaml_data, dict):
				self.logger.error(f"Config file {file_path} does not contain a mapping")
				return RetroShellConfig()

			return RetroShellConfig.from_dict(yaml_data)

		except (OSError, yaml.YAMLError) as e:
			self.logger.error(f"Error loading config file {file_path}: {e}")
			return RetroShellConfig()

	def merge_cli_args(self, args: argparse.Namespace) -> RetroShellConfig:
		"""
		Merge CLI arguments into configuration (CLI takes precedence)

		Args:
			args: Parsed command line arguments

		Returns:
			Updated configuration
		"""
		# Display settings
		if getattr(args, 'rows', None) is not None:
			self.config.display.num_rows = args.rows
		if getattr(args, 'cols', None) is not None:
			self.config.display.num_cols = args.cols
		if getattr(args, 'scrollback', None) is not None:
			self.config.display.scrollback_lines = args.scrollback
		if getattr(args, 'prompt', None) is not None:
			self.config.display.prompt = args.prompt

		# Startup settings
		if getattr(args, 'script', None):
			self.config.startup.script = args.script
		if getattr(args, 'no_banner', False):
			self.config.startup.show_banner = False

		# Debug settings
		if getattr(args, 'verbose', False):
			self.config.console.verbose = True
		if getattr(args, 'quiet', False):
			self.config.console.quiet = True
		if getattr(args, 'log_file', None):
			self.config.console.log_file = args.log_file

		return self.config

	def save_config(self, file_path: Optional[str] = None) -> bool:
		"""
		Save current configuration to YAML file

		Args:
			file_path: Target file path, or None to use loaded file path

		Returns:
			True if saved successfully
		"""
		if file_path:
			target_path = Path(file_path)
		elif self.config_file_path:
			target_path = self.config_file_path
		else:
			target_path = Path(self.config_file)

		try:
			# Ensure directory exists
			target_path.parent.mkdir(parents=True, exist_ok=True)

			config_dict = self.config.to_dict()

			# Write YAML with comments
			with open(target_path, 'w') as f:
				f.write("# RetroShell Configuration\n")
				f.write("# Generated configuration file\n")
				f.write(f"# Version: {self.config.config_version}\n\n")

				yaml.dump(config_dict, f,
						  default_flow_style=False,
						  sort_keys=False,
						  indent=2)

			self.logger.info(f"Configuration saved to: {target_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error saving config to {target_path}: {e}")
			return False

	def create_sample_config(self, file_path: str = "retroshell_sample.yaml") -> bool:
		"""Create a sample configuration file with comments"""
		try:
			with open(file_path, 'w') as f:
				f.write(self._generate_sample_yaml())

			self.logger.info(f"Sample configuration created: {file_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error creating sample config: {e}")
			return False

	def _generate_sample_yaml(self) -> str:
		"""Generate sample YAML with extensive comments"""
		return """# RetroShell Configuration File

# =============================================================================
# DISPLAY SETTINGS
# =============================================================================
display:
  num_rows: 25                    # Visible text rows
  num_cols: 80                    # Characters per row (longer output wraps)
  scrollback_lines: 100           # Lines kept for scrolling back
  prompt: "retro% "               # Input prompt

# =============================================================================
# CONSOLE MESSAGES LOGGING LEVEL
# =============================================================================
console:
  verbose: false                  # Verbose output (debug logging)
  quiet: false                    # Quiet mode (warnings and errors only)
  log_file: null                  # Write log messages to this file instead of stderr

# =============================================================================
# STARTUP
# =============================================================================
startup:
  show_banner: true               # Print the welcome text
  script: null                    # Command script executed before the first prompt

# =============================================================================
# CONFIGURATION METADATA
# =============================================================================
config_version: "1.0"
description: "RetroShell Configuration"
"""

	def validate_config(self) -> tuple[bool, list[str]]:
		"""
		Validate configuration for common issues

		Returns:
			(is_valid, list_of_errors)
		"""
		errors = []
		display = self.config.display

		if not display.prompt:
			errors.append("Prompt must not be empty")

		if display.num_rows < 1:
			errors.append(f"Invalid number of rows: {display.num_rows}")

		if display.num_cols <= len(display.prompt) + 1:
			errors.append(
				f"Invalid number of columns: {display.num_cols}. "
				f"Must be greater than prompt width + 1 ({len(display.prompt) + 1})"
			)

		if display.scrollback_lines < display.num_rows:
			errors.append(
				f"Invalid scrollback size: {display.scrollback_lines}. "
				f"Must hold at least one screen ({display.num_rows} lines)"
			)

		if self.config.console.verbose and self.config.console.quiet:
			errors.append("Verbose and quiet mode cannot both be enabled")

		script = self.config.startup.script
		if script and not Path(script).is_file():
			errors.append(f"Startup script not found: {script}")

		return len(errors) == 0, errors

	def get_config(self) -> RetroShellConfig:
		"""Get current configuration"""
		return deepcopy(self.config)

	def update_config(self, updates: Dict[str, Any]) -> bool:
		"""
		Update configuration programmatically

		Args:
			updates: Dictionary of configuration updates in dot notation
					e.g., {"display.num_cols": 100, "console.verbose": True}

		Returns:
			True if all updates applied successfully
		"""
		try:
			for key, value in updates.items():
				self._set_nested_attr(self.config, key, value)
			return True
		except AttributeError as e:
			self.logger.error(f"Error updating config: {e}")
			return False

	def _set_nested_attr(self, obj, attr_path: str, value):
		"""Set nested attribute using dot notation"""
		parts = attr_path.split('.')
		for part in parts[:-1]:
			obj = getattr(obj, part)
		if not hasattr(obj, parts[-1]):
			raise AttributeError(f"Unknown config key: {attr_path}")
		setattr(obj, parts[-1], value)









def create_argument_parser():
	"""Argument parser for the RetroShell terminal host"""
	parser = argparse.ArgumentParser(
		description='RetroShell interactive command console',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  %(prog)s                                 # Start with default settings
  %(prog)s --cols 60 --rows 20             # Smaller text window
  %(prog)s --script setup.rsh              # Run commands before the first prompt
  %(prog)s -c my_config.yaml               # Use specific config file
  %(prog)s --create-config sample.yaml     # Create sample config file

Configuration:
  Configuration is loaded in this order (later overrides earlier):
  1. Built-in defaults
  2. Configuration file (YAML)
  3. Command line arguments

  Config file search order:
  - retroshell.yaml (current directory)
  - config/retroshell.yaml
  - ~/.config/retroshell/config.yaml
  - /etc/retroshell/config.yaml
		"""
	)

	# Configuration file handling
	config_group = parser.add_argument_group('Configuration')
	config_group.add_argument(
		'-c', '--config',
		type=str,
		help='Configuration file path (YAML format)'
	)
	config_group.add_argument(
		'--create-config',
		type=str,
		metavar='FILE',
		help='Create sample configuration file and exit'
	)
	config_group.add_argument(
		'--save-config',
		type=str,
		metavar='FILE',
		help='Save current configuration to file'
	)

	# Display settings
	display_group = parser.add_argument_group('Display Settings')
	display_group.add_argument(
		'--rows',
		type=int,
		help='Number of visible text rows'
	)
	display_group.add_argument(
		'--cols',
		type=int,
		help='Number of characters per row'
	)
	display_group.add_argument(
		'--scrollback',
		type=int,
		help='Number of lines kept in the scrollback'
	)
	display_group.add_argument(
		'--prompt',
		type=str,
		help='Input prompt'
	)

	# Startup settings
	startup_group = parser.add_argument_group('Startup')
	startup_group.add_argument(
		'--script',
		type=str,
		metavar='FILE',
		help='Execute a command script before the first prompt'
	)
	startup_group.add_argument(
		'--no-banner',
		action='store_true',
		help='Do not print the welcome text'
	)

	# Debug settings
	debug_group = parser.add_argument_group('Debug Options')
	debug_group.add_argument(
		'-v', '--verbose',
		action='store_true',
		help='Enable verbose debug output'
	)
	debug_group.add_argument(
		'-q', '--quiet',
		action='store_true',
		help='Quiet mode (minimal output)'
	)
	debug_group.add_argument(
		'--log-file',
		type=str,
		help='Log file path'
	)

	return parser




def setup_configuration(argv=None) -> tuple[Optional[RetroShellConfig], bool, Optional[ConfigurationManager]]:
	"""
	Setup configuration system with CLI integration

	Args:
		argv: Command line arguments (None for sys.argv)

	Returns:
		(config_object, should_exit, config_manager)
	"""
	parser = create_argument_parser()
	args = parser.parse_args(argv)

	# Handle special commands first
	if args.create_config:
		manager = ConfigurationManager()
		if manager.create_sample_config(args.create_config):
			DebugConfig.user_print(f"Sample configuration created: {args.create_config}")
			DebugConfig.user_print(f"Edit the file and run again with: -c {args.create_config}")
		return None, True, None

	# Load configuration, then let the command line override it
	manager = ConfigurationManager()
	manager.load_config(args.config)
	config = manager.merge_cli_args(args)

	# Validate configuration
	is_valid, errors = manager.validate_config()
	if not is_valid:
		print("Configuration errors:")
		for error in errors:
			print(f"  ✗ {error}")
		return config, True, None

	# Save config if requested
	if args.save_config:
		if manager.save_config(args.save_config):
			DebugConfig.user_print(f"Configuration saved to: {args.save_config}")

	return config, False, manager




if __name__ == "__main__":
	# Example usage
	config, should_exit, _ = setup_configuration()

	if should_exit:
		sys.exit(0 if config is None else 1)

	print("Configuration loaded successfully!")
	print(f"Window: {config.display.num_cols}x{config.display.num_rows}, "
		  f"{config.display.scrollback_lines} lines of scrollback")
	print(f"Prompt: '{config.display.prompt}'")
