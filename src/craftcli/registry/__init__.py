"""Command registry.

Exports the :class:`Command` interface that user-defined commands extend,
the :class:`ExemptFromBootstrap` marker and the :class:`CommandRegistry`.

    >>> from craftcli.registry import Command, ExemptFromBootstrap
"""

from .base import Command, CommandRegistration, ExemptFromBootstrap, is_runnable_command
from .manager import CommandRegistry

__all__ = [
    "Command",
    "CommandRegistration",
    "CommandRegistry",
    "ExemptFromBootstrap",
    "is_runnable_command",
]
