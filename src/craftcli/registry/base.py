"""Command Interface and Registration Definitions.

This module defines the abstract :class:`Command` interface that every Craft
CLI command implements, the :class:`ExemptFromBootstrap` marker, and the
registration dataclass used to lazily load built-in commands.

A command has three capabilities:

1. a unique ``name`` (and a one-line ``help``),
2. an argument/option schema returned by :meth:`Command.get_params` as
   click parameters,
3. a :meth:`Command.run` body receiving the parsed arguments and the console.

Commands that must run without a bootstrapped Craft environment (setup,
installers, generators) also inherit :class:`ExemptFromBootstrap`.

Examples:
    A user-defined command::

        >>> import click
        >>> from craftcli.registry.base import Command
        >>>
        >>> class HelloCommand(Command):
        ...     name = "hello"
        ...     help = "Say hello."
        ...
        ...     def get_params(self):
        ...         return [click.Argument(["who"], default="world", required=False)]
        ...
        ...     def run(self, args, console):
        ...         console.print(f"Hello {args['who']}")
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import click

if TYPE_CHECKING:
    from rich.console import Console

    from craftcli.cli.main import Application


@dataclass
class CommandRegistration:
    """Registration metadata for lazily imported commands.

    :param name: Command name, used for ordering and error messages
    :type name: str
    :param module_path: Python module path for lazy import
    :type module_path: str
    :param class_name: Class name within the module
    :type class_name: str
    """
    name: str
    module_path: str
    class_name: str


class Command(ABC):
    """Base class for all Craft CLI commands."""

    #: Unique command name, e.g. ``"clear-cache"``
    name: str = ""

    #: One-line description shown by ``list`` and ``help``
    help: str = ""

    #: Owning application, set when the command is registered
    application: "Application | None" = None

    def get_params(self) -> list[click.Parameter]:
        """Return the click arguments and options this command accepts."""
        return []

    @abstractmethod
    def run(self, args: dict[str, Any], console: "Console") -> int | None:
        """Execute the command.

        Args:
            args: Parsed arguments and options keyed by parameter name
            console: Rich console to write output to

        Returns:
            Exit code, or None for success
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class ExemptFromBootstrap:
    """Marker for commands that run without bootstrapping Craft."""

    pass


def is_runnable_command(obj: Any) -> bool:
    """Return True if ``obj`` is a concrete :class:`Command` subclass.

    This is the eligibility predicate for directory discovery: the class must
    be instantiable (not abstract) and must subclass :class:`Command`.
    """
    return (
        inspect.isclass(obj)
        and issubclass(obj, Command)
        and obj is not Command
        and not inspect.isabstract(obj)
    )
