"""Shared base definitions for Craft CLI."""

from .errors import (
    BootstrapError,
    CommandExecutionError,
    ConfigLoadError,
    CraftCliError,
    OptionParseError,
    RegistryError,
    UnknownCommandError,
)

__all__ = [
    "CraftCliError",
    "ConfigLoadError",
    "OptionParseError",
    "BootstrapError",
    "RegistryError",
    "CommandExecutionError",
    "UnknownCommandError",
]
