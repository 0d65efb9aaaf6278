"""Utility module for githashprop package."""

from .cli_utils import console, exit_with_error, show_error
from .config_loader import ConfigError, ConfigLoader

__all__ = [
	"ConfigError",
	"ConfigLoader",
	"console",
	"exit_with_error",
	"show_error",
]
