"""Command Registry for Craft CLI.

The registry holds every command the dispatcher can run, keyed by name.
Commands arrive from three places, in this order:

1. **Defaults and built-ins**: ``help``/``list`` and the nine Craft commands,
   imported lazily from :mod:`craftcli.registry.registry`
2. **Explicit references**: the ``commands`` config key, each entry a class,
   a factory called with the application, or a dotted string naming either
3. **Command directories**: the ``command_dirs`` config key, mapping a
   namespace to a directory scanned for one command class per file

Registration is last-write-wins: a later command with an existing name
replaces the earlier one.

Directory discovery is permissive. Files whose module cannot be loaded, that
hold no class of the expected name, or whose class is abstract or not a
:class:`~craftcli.registry.base.Command` are skipped with a debug message.
Explicit references are strict and raise :class:`RegistryError`.

Examples:
    >>> registry = CommandRegistry()
    >>> registry.register_builtins()
    >>> registry.register_from_config(
    ...     ["mycommands.deploy:DeployCommand"],
    ...     {"mycommands.extra": "./commands"},
    ... )
    >>> registry.get("deploy")
    <DeployCommand name='deploy'>
"""

import importlib
import importlib.util
import inspect
import sys
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from craftcli.base.errors import RegistryError
from craftcli.utils.logger import get_logger

from .base import Command, CommandRegistration, is_runnable_command
from .registry import BUILTIN_COMMANDS, DEFAULT_COMMANDS

if TYPE_CHECKING:
    from craftcli.cli.main import Application

logger = get_logger("registry")

# Module names registered in sys.modules by directory discovery
_discovered_modules: set[str] = set()


class CommandRegistry:
    """Name-keyed, insertion-ordered collection of commands.

    :param application: Application passed to factories and attached to
        every registered command
    :param base_dir: Directory that relative ``command_dirs`` resolve
        against, defaults to the working directory
    """

    def __init__(self, application: "Application | None" = None, base_dir: str | Path | None = None):
        self.application = application
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self._commands: dict[str, Command] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, command: Command) -> Command:
        """Add a command, replacing any command with the same name."""
        if not isinstance(command, Command):
            raise RegistryError(f"Expected a Command instance, got {command!r}")
        if not command.name:
            raise RegistryError(f"{type(command).__name__} does not define a command name")

        if self._commands.pop(command.name, None) is not None:
            logger.debug(f"Replacing command '{command.name}' with {type(command).__name__}")

        command.application = self.application
        self._commands[command.name] = command
        return command

    def register_default_commands(self) -> None:
        """Register the universal ``help`` and ``list`` commands."""
        for registration in DEFAULT_COMMANDS:
            self.register(self._load_registration(registration))

    def register_builtins(self) -> None:
        """Register the nine built-in Craft commands."""
        for registration in BUILTIN_COMMANDS:
            self.register(self._load_registration(registration))

    def register_reference(self, reference: Any) -> Command:
        """Register a command from a class, factory or dotted string.

        Classes are instantiated with no arguments. Other callables are
        factories and are called with the application (or this registry when
        there is no application). Strings of the form ``"pkg.module:Name"``
        or ``"pkg.module.Name"`` are imported first.

        Raises:
            RegistryError: If the reference cannot be resolved, or does not
                produce a Command instance
        """
        target = self.resolve_reference(reference) if isinstance(reference, str) else reference

        if inspect.isclass(target):
            if not is_runnable_command(target):
                raise RegistryError(f"{target.__qualname__} is not an instantiable Command")
            command = target()
        elif callable(target):
            owner = self.application if self.application is not None else self
            command = target(owner)
            if not isinstance(command, Command):
                raise RegistryError(
                    f"Command factory {getattr(target, '__qualname__', target)!r} "
                    f"returned {type(command).__name__}, expected a Command"
                )
        else:
            raise RegistryError(f"Invalid command reference: {reference!r}")

        return self.register(command)

    def register_from_config(
        self,
        commands: Sequence[Any] = (),
        command_dirs: Mapping[str, str | Path] | None = None,
    ) -> None:
        """Register explicit references, then everything found in command dirs."""
        for reference in commands:
            self.register_reference(reference)

        for namespace, directory in (command_dirs or {}).items():
            for command_class in self.find_commands_in_dir(directory, namespace):
                self.register(command_class())

    # ------------------------------------------------------------------
    # Resolution and discovery
    # ------------------------------------------------------------------

    def resolve_reference(self, reference: str) -> Any:
        """Import the object named by ``"pkg.module:Name"`` or ``"pkg.module.Name"``."""
        if ":" in reference:
            module_path, _, attribute = reference.partition(":")
        else:
            module_path, _, attribute = reference.rpartition(".")

        if not module_path or not attribute:
            raise RegistryError(f"Invalid command reference: {reference!r}")

        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise RegistryError(f"Failed to import command module {module_path}: {e}") from e

        try:
            return getattr(module, attribute)
        except AttributeError as e:
            raise RegistryError(f"Module {module_path} has no attribute {attribute!r}") from e

    def find_commands_in_dir(self, directory: str | Path, namespace: str | None = None) -> list[type]:
        """Return the eligible command classes found in ``directory``.

        Every ``*.py`` file (not recursive, ``_``-prefixed files excluded) is
        loaded as module ``<namespace>.<stem>``. The class looked up is named
        either exactly like the file stem (``DeployCommand.py``) or its
        CamelCase form (``deploy_command.py`` -> ``DeployCommand``). Files are
        visited in filesystem listing order.
        """
        path = Path(directory).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path

        if not path.is_dir():
            logger.debug(f"Command directory not found: {path}")
            return []

        prefix = f"{namespace.strip('.')}." if namespace else ""
        found = []

        for file in path.glob("*.py"):
            if file.stem.startswith("_"):
                continue

            module = self._load_module_from_file(f"{prefix}{file.stem}", file)
            if module is None:
                continue

            command_class = None
            for class_name in _candidate_class_names(file.stem):
                obj = getattr(module, class_name, None)
                if obj is not None:
                    command_class = obj
                    break

            if command_class is None:
                logger.debug(f"No command class found in {file}")
                continue

            if not is_runnable_command(command_class):
                logger.debug(f"Skipping {prefix}{command_class.__name__}: not a runnable command")
                continue

            found.append(command_class)

        return found

    def _load_module_from_file(self, module_name: str, file: Path):
        """Load ``file`` as ``module_name``, reusing it only if already loaded from that file.

        A module of the same name loaded from elsewhere is never returned. If
        it was not loaded by discovery (a library module such as ``json``),
        it is put back into ``sys.modules`` once the file has executed.
        """
        file = file.resolve()
        cached = sys.modules.get(module_name)
        if cached is not None and _module_file(cached) == file:
            return cached

        spec = importlib.util.spec_from_file_location(module_name, file)
        if spec is None or spec.loader is None:
            logger.debug(f"Could not create module spec for {file}")
            return None

        foreign = cached if cached is not None and module_name not in _discovered_modules else None

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            _restore_module(module_name, cached)
            logger.warning(f"Skipping {file}: {e}")
            return None

        if foreign is not None:
            sys.modules[module_name] = foreign
        else:
            _discovered_modules.add(module_name)
        return module

    def _load_registration(self, registration: CommandRegistration) -> Command:
        try:
            module = importlib.import_module(registration.module_path)
            command_class = getattr(module, registration.class_name)
        except (ImportError, AttributeError) as e:
            raise RegistryError(
                f"Failed to load built-in command '{registration.name}' from "
                f"{registration.module_path}.{registration.class_name}: {e}"
            ) from e
        return command_class()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)


def _module_file(module) -> Path | None:
    path = getattr(module, "__file__", None)
    return Path(path).resolve() if path else None


def _restore_module(module_name: str, previous) -> None:
    if previous is None:
        sys.modules.pop(module_name, None)
    else:
        sys.modules[module_name] = previous


def _candidate_class_names(stem: str) -> list[str]:
    camel = "".join(part[:1].upper() + part[1:] for part in stem.split("_") if part)
    return [stem] if camel == stem else [stem, camel]
