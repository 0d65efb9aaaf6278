"""
Configuration loader for githashprop.

This module provides functionality for loading and managing
configuration settings.

"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from githashprop.config import DEFAULT_CONFIG
from githashprop.resolver import ResolverConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".githashprop.yml"
ENV_PREFIX = "GITHASHPROP_"

# Minimum number of parts in an environment variable name after the prefix
MIN_ENV_VAR_PARTS = 2

TRUE_VALUES = ("true", "yes", "on", "1")
FALSE_VALUES = ("false", "no", "off", "0")


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigLoader:
	"""
	Loads and manages configuration for githashprop.

	Configuration is built from the defaults, a YAML file and environment
	variables, in that order of increasing priority.

	"""

	_instance: ConfigLoader | None = None

	@classmethod
	def get_instance(
		cls, config_file: Path | str | None = None, reload: bool = False, repo_root: Path | None = None
	) -> ConfigLoader:
		"""
		Get the singleton instance of ConfigLoader.

		Args:
		        config_file: Path to configuration file (optional)
		        reload: Whether to reload config even if already loaded
		        repo_root: Repository root path (optional)

		Returns:
		        ConfigLoader: Singleton instance

		"""
		if cls._instance is None or reload:
			cls._instance = cls(config_file, repo_root=repo_root)
		return cls._instance

	def __init__(self, config_file: Path | str | None = None, repo_root: Path | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
		        config_file: Path to configuration file (optional)
		        repo_root: Repository root path (optional)

		"""
		self.config: dict[str, Any] = {}
		self.repo_root = repo_root
		self.config_file = self._resolve_config_file(config_file)
		self.load_config()

	def _resolve_config_file(self, config_file: Path | str | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. .githashprop.yml in the repository root
		2. .githashprop.yml in the current directory
		3. $XDG_CONFIG_HOME/githashprop/config.yml

		Args:
		        config_file: Explicitly provided config file path (optional)

		Returns:
		        Optional[Path]: Resolved config file path or None if no suitable file found

		"""
		if config_file:
			path = Path(config_file).expanduser().resolve()
			if not path.exists():
				logger.warning("Specified config file not found: %s", path)
			return path

		candidates = []
		if self.repo_root is not None:
			candidates.append(Path(self.repo_root) / CONFIG_FILE_NAME)
		candidates.append(Path(CONFIG_FILE_NAME))
		candidates.append(Path(xdg_config_home) / "githashprop" / "config.yml")

		for candidate in candidates:
			if candidate.is_file():
				return candidate
		return None

	def load_config(self) -> dict[str, Any]:
		"""
		Load configuration from file and apply environment variable overrides.

		Returns:
		        Dict[str, Any]: Loaded configuration

		Raises:
		        ConfigError: If configuration file exists but cannot be loaded

		"""
		self.config = copy.deepcopy(DEFAULT_CONFIG)

		if self.config_file and self.config_file.exists():
			try:
				with self.config_file.open(encoding="utf-8") as f:
					file_config = yaml.safe_load(f)
			except (OSError, yaml.YAMLError) as e:
				error_msg = f"Error loading configuration from {self.config_file}: {e}"
				logger.exception(error_msg)
				raise ConfigError(error_msg) from e

			if file_config is not None and not isinstance(file_config, dict):
				msg = f"Configuration in {self.config_file} must be a mapping"
				raise ConfigError(msg)
			if file_config:
				self._merge_configs(self.config, file_config)
			self._validate_sections()
			logger.info("Loaded configuration from %s", self.config_file)

		self._apply_env_overrides()
		return self.config

	def _validate_sections(self) -> None:
		"""
		Check that every known section is a mapping.

		An empty section (``resolver:`` with no keys) falls back to the defaults.

		Raises:
		        ConfigError: If a section holds a scalar or a list

		"""
		for section, defaults in DEFAULT_CONFIG.items():
			value = self.config.get(section)
			if value is None:
				self.config[section] = copy.deepcopy(defaults)
			elif not isinstance(value, dict):
				msg = f"Section '{section}' in {self.config_file} must be a mapping"
				raise ConfigError(msg)

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
		"""Apply GITHASHPROP_SECTION_KEY environment variables to the configuration."""
		for env_var, value in os.environ.items():
			if not env_var.startswith(ENV_PREFIX):
				continue
			parts = env_var[len(ENV_PREFIX) :].lower().split("_")
			if len(parts) < MIN_ENV_VAR_PARTS:
				continue
			section, key = parts[0], "_".join(parts[1:])

			section_config = self.config.setdefault(section, {})
			if not isinstance(section_config, dict):
				logger.warning("Ignoring %s: '%s' is not a configuration section", env_var, section)
				continue

			default = DEFAULT_CONFIG.get(section, {}).get(key)
			section_config[key] = self._coerce_env_value(value, default)
			logger.debug("Applied environment override %s", env_var)

	@staticmethod
	def _coerce_env_value(value: str, default: Any) -> Any:
		"""Convert an environment string to the type of the default value."""
		if isinstance(default, bool):
			lowered = value.strip().lower()
			if lowered in TRUE_VALUES:
				return True
			if lowered in FALSE_VALUES:
				return False
		return value

	def get(self, section: str, key: str, default: Any = None) -> Any:
		"""
		Get a configuration value.

		Args:
		        section: Configuration section
		        key: Configuration key
		        default: Value returned when the key is not set

		Returns:
		        The configured value or the default

		"""
		section_config = self.config.get(section)
		if not isinstance(section_config, dict):
			return default
		return section_config.get(key, default)

	def resolver_config(self, **overrides: Any) -> ResolverConfig:
		"""
		Build the immutable resolver settings.

		Args:
		        **overrides: Values taking priority over the loaded configuration;
		                None values are ignored

		Returns:
		        ResolverConfig: Validated settings

		Raises:
		        ConfigError: If the settings are invalid

		"""
		settings = dict(self.config.get("resolver") or {})
		settings.update({key: value for key, value in overrides.items() if value is not None})
		try:
			return ResolverConfig(**settings)
		except ValidationError as e:
			msg = f"Invalid resolver configuration: {e}"
			raise ConfigError(msg) from e
