"""
Configuration loader for crate-inspector.

This module provides functionality for loading and managing
configuration settings.

"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml
from xdg.BaseDirectory import xdg_config_home

from crate_inspector.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENV_PREFIX = "CRATE_INSPECTOR_"

# Config files looked up in the working directory, in order
LOCAL_CONFIG_NAMES = (".crate-inspector.yml", ".crate-inspector.yaml")

# Type for configuration values
ConfigValue = str | int | float | bool | dict[str, Any] | list[Any] | None


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


def _coerce_env_value(env_var: str, value: str, default: ConfigValue) -> ConfigValue:
	"""
	Convert an environment override to the type of the default it replaces.

	Keys whose default is a string or ``None`` (toolchain, target, paths) keep
	the raw string, so ``1.80`` stays a toolchain name rather than a number.
	Lists are read as comma-separated values.

	"""
	if isinstance(default, bool):
		lowered = value.strip().lower()
		if lowered in ("true", "yes", "1", "on"):
			return True
		if lowered in ("false", "no", "0", "off"):
			return False
		msg = f"{env_var} must be a boolean, got {value!r}"
		raise ConfigError(msg)
	if isinstance(default, int):
		try:
			return int(value)
		except ValueError:
			msg = f"{env_var} must be an integer, got {value!r}"
			raise ConfigError(msg) from None
	if isinstance(default, float):
		try:
			return float(value)
		except ValueError:
			msg = f"{env_var} must be a number, got {value!r}"
			raise ConfigError(msg) from None
	if isinstance(default, list):
		return [item.strip() for item in value.split(",") if item.strip()]
	return value


class ConfigLoader:
	"""
	Loads and manages configuration for crate-inspector.

	Values come from the built-in defaults, then a YAML config file, then
	``CRATE_INSPECTOR_<SECTION>_<KEY>`` environment variables.

	"""

	def __init__(self, config_file: str | Path | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
		        config_file: Path to configuration file (optional)

		"""
		self.config: dict[str, Any] = {}
		self._explicit_file = config_file is not None
		self.config_file = self._resolve_config_file(config_file)
		self.load_config()

	def _resolve_config_file(self, config_file: str | Path | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. ./.crate-inspector.yml in the current directory
		2. $XDG_CONFIG_HOME/crate-inspector/config.yml

		Args:
		        config_file: Explicitly provided config file path (optional)

		Returns:
		        Optional[Path]: Resolved config file path or None if no suitable file found

		"""
		if config_file:
			return Path(config_file).expanduser().resolve()

		for name in LOCAL_CONFIG_NAMES:
			local_config = Path(name)
			if local_config.exists():
				return local_config

		xdg_config_file = Path(xdg_config_home) / "crate-inspector" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		return None

	def load_config(self) -> dict[str, Any]:
		"""
		Load configuration from file and apply environment variable overrides.

		Returns:
		        Dict[str, Any]: Loaded configuration

		Raises:
		        ConfigError: If the configuration file is missing, unreadable or malformed

		"""
		self.config = copy.deepcopy(DEFAULT_CONFIG)

		if self.config_file:
			if not self.config_file.exists():
				error_msg = f"Config file not found: {self.config_file}"
				if self._explicit_file:
					raise ConfigError(error_msg)
				logger.warning(error_msg)
			else:
				try:
					with self.config_file.open(encoding="utf-8") as f:
						file_config = yaml.safe_load(f)
				except (OSError, yaml.YAMLError) as e:
					error_msg = f"Error loading configuration from {self.config_file}: {e}"
					logger.exception(error_msg)
					raise ConfigError(error_msg) from e

				if file_config is not None and not isinstance(file_config, dict):
					error_msg = f"Configuration in {self.config_file} must be a mapping"
					raise ConfigError(error_msg)
				if file_config:
					self._merge_configs(self.config, file_config)
				logger.info("Loaded configuration from %s", self.config_file)

		self._apply_env_overrides()
		self._validate()

		return self.config

	def _merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> None:
		"""
		Recursively merge two configuration dictionaries.

		Args:
		        base: Base configuration dictionary to merge into
		        override: Override configuration to apply

		"""
		for key, value in override.items():
			if isinstance(value, dict) and key in base and isinstance(base[key], dict):
				self._merge_configs(base[key], value)
			else:
				base[key] = value

	def _apply_env_overrides(self) -> None:
		"""Apply environment variable overrides to configuration."""
		for env_var, value in os.environ.items():
			if not env_var.startswith(ENV_PREFIX):
				continue
			remainder = env_var[len(ENV_PREFIX) :].lower()
			section, _, key = remainder.partition("_")
			if not section or not key:
				continue

			default = DEFAULT_CONFIG.get(section, {}).get(key)
			typed_value = _coerce_env_value(env_var, value, default)

			if not isinstance(self.config.get(section), dict):
				self.config[section] = {}

			self.config[section][key] = typed_value
			logger.debug("Applied environment override %s: %s", env_var, typed_value)

	def _validate(self) -> None:
		"""Check the value types the rest of the tool relies on."""
		max_depth = self.get("render.max_depth")
		if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth < 1:
			msg = "render.max_depth must be a positive integer"
			raise ConfigError(msg)

		dialects = self.get("render.dialects")
		if dialects is None:
			self.set("render.dialects", {})
		elif not isinstance(dialects, dict):
			msg = "render.dialects must be a mapping of dialect names to definitions"
			raise ConfigError(msg)

		features = self.get("build.features")
		if features is None:
			self.set("build.features", [])
		elif not isinstance(features, list):
			msg = "build.features must be a list"
			raise ConfigError(msg)

	def get(self, key: str, default: T | None = None) -> T | None:
		"""
		Get a configuration value, optionally with a section.

		Examples:
		        # Get a top-level key
		        config.get("build")

		        # Get a nested key with dot notation
		        config.get("build.toolchain")

		Args:
		        key: Configuration key, can include dots for nested access
		        default: Default value if key not found

		Returns:
		        T: Configuration value or default

		"""
		current: Any = self.config
		for part in key.split("."):
			if isinstance(current, dict) and part in current:
				current = current[part]
			else:
				return default

		return cast("T", current)

	def set(self, key: str, value: ConfigValue) -> None:
		"""
		Set a configuration value.

		Args:
		        key: Configuration key, can include dots for nested access
		        value: Value to set

		"""
		parts = key.split(".")
		current = self.config
		for part in parts[:-1]:
			if not isinstance(current.get(part), dict):
				current[part] = {}
			current = current[part]

		current[parts[-1]] = value

	def save(self, config_file: str | Path | None = None) -> None:
		"""
		Save the current configuration to a file.

		Args:
		        config_file: Path to save configuration to (optional, defaults to current config_file)

		Raises:
		        ConfigError: If configuration cannot be saved

		"""
		save_path = Path(config_file) if config_file else self.config_file

		if not save_path:
			error_msg = "No configuration file specified for saving"
			logger.error(error_msg)
			raise ConfigError(error_msg)

		save_path.parent.mkdir(parents=True, exist_ok=True)

		try:
			with save_path.open("w", encoding="utf-8") as f:
				yaml.safe_dump(self.config, f, default_flow_style=False)
			logger.info("Configuration saved to %s", save_path)
		except OSError as e:
			error_msg = f"Error saving configuration to {save_path}: {e}"
			logger.exception(error_msg)
			raise ConfigError(error_msg) from e

	def get_build_config(self) -> dict[str, Any]:
		"""
		Get the build section.

		Returns:
		        Dict[str, Any]: Options for running cargo rustdoc

		"""
		return cast("dict[str, Any]", self.get("build", {}))

	def get_render_config(self) -> dict[str, Any]:
		"""
		Get the render section.

		Returns:
		        Dict[str, Any]: Default dialect, depth limit and custom dialects

		"""
		return cast("dict[str, Any]", self.get("render", {}))
