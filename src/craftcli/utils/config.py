"""
Configuration Resolution

Layered configuration for Craft CLI. Two ``.craft-cli.yml`` files are
considered, in this order:

1. ``$HOME/.craft-cli.yml``
2. the nearest ``.craft-cli.yml`` found walking up from the working directory

Each file that evaluates to a mapping is shallow-merged over the previous
result, so top-level keys from the directory file replace those from the
home file wholesale (``commands`` and ``command_dirs`` are never combined).
Files that cannot be read, do not parse, or are not mappings are ignored.

Recognized keys::

    target_path: craft            # path to the Craft folder
    environment: staging          # exported as SERVER_NAME
    commands:                     # explicit command references
      - mycommands.backup:BackupCommand
      - mycommands.factories.make_deploy_command
    command_dirs:                 # namespace -> directory to scan
      mycommands.generated: ./commands
    addon_author_name: Jane Doe
    addon_author_url: https://example.com
"""

import os
import sys
from collections.abc import MutableMapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from craftcli.base.errors import ConfigLoadError, OptionParseError
from craftcli.utils.logger import get_logger

logger = get_logger("config")

CONFIG_FILENAME = ".craft-cli.yml"
DEFAULT_TARGET_PATH = "craft"
DEFAULT_SERVER_NAME = "localhost"
ENVIRONMENT_OPTION = "--environment"


@dataclass
class CliConfig:
    """Effective configuration after merging all sources."""

    raw: dict[str, Any] = field(default_factory=dict)
    target_path: str = DEFAULT_TARGET_PATH
    environment: str | None = None
    commands: list[Any] = field(default_factory=list)
    command_dirs: dict[str, str] = field(default_factory=dict)
    addon_author_name: str = ""
    addon_author_url: str = ""
    sources: list[Path] = field(default_factory=list)


def split_environment_option(argv: Sequence[str]) -> tuple[str | None, list[str]]:
    """Pull ``--environment`` out of an argument list.

    Positional arguments and options other than ``--environment`` are passed
    through untouched rather than rejected, so the option may appear anywhere
    on the command line. Everything after ``--`` is passed through as well.

    Args:
        argv: Raw arguments, without the program name

    Returns:
        Tuple of (environment or None, remaining arguments)

    Raises:
        OptionParseError: If ``--environment`` is given without a value
    """
    environment = None
    remaining: list[str] = []
    tokens = list(argv)

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "--":
            remaining.extend(tokens[i:])
            break
        if token.startswith(ENVIRONMENT_OPTION + "="):
            environment = token.split("=", 1)[1]
        elif token == ENVIRONMENT_OPTION:
            if i + 1 >= len(tokens) or tokens[i + 1].startswith("-"):
                raise OptionParseError(f'The "{ENVIRONMENT_OPTION}" option requires a value.')
            environment = tokens[i + 1]
            i += 1
        else:
            remaining.append(token)
        i += 1

    return environment or None, remaining


def extract_environment_option(argv: Sequence[str]) -> str | None:
    """Return the ``--environment`` value from argv, or None."""
    environment, _ = split_environment_option(argv)
    return environment


class ConfigResolver:
    """
    Locates, loads and merges ``.craft-cli.yml`` files.

    All inputs default to the live process state and can be injected for
    tests: ``home`` (defaults to ``$HOME``), ``cwd`` (defaults to the working
    directory), ``argv`` (defaults to ``sys.argv[1:]``) and ``environ``
    (defaults to ``os.environ``, receives ``SERVER_NAME``).
    """

    def __init__(
        self,
        home: str | Path | None = None,
        cwd: str | Path | None = None,
        argv: Sequence[str] | None = None,
        environ: MutableMapping[str, str] | None = None,
    ):
        if home is None:
            home = os.environ.get("HOME")
        self.home = Path(home) if home else None
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.argv = list(argv) if argv is not None else sys.argv[1:]
        self.environ = environ if environ is not None else os.environ

    def resolve(self) -> CliConfig:
        """Build the effective configuration and export ``SERVER_NAME``."""
        raw: dict[str, Any] = {}
        sources: list[Path] = []

        if self.home is not None:
            home_file = self.home / CONFIG_FILENAME
            if home_file.is_file():
                self._merge_file(raw, home_file, sources)

        project_file = self.find_config_file()
        if project_file is not None:
            self._merge_file(raw, project_file, sources)

        config = CliConfig(raw=raw, sources=sources)

        if raw.get("target_path"):
            config.target_path = str(raw["target_path"])

        if isinstance(raw.get("commands"), list):
            config.commands = list(raw["commands"])

        if isinstance(raw.get("command_dirs"), dict):
            config.command_dirs = {str(k): str(v) for k, v in raw["command_dirs"].items()}

        config.addon_author_name = str(raw.get("addon_author_name") or "")
        config.addon_author_url = str(raw.get("addon_author_url") or "")

        config.environment = self._resolve_environment(raw)
        self._export_environment(config.environment)

        return config

    def find_config_file(self, start: str | Path | None = None) -> Path | None:
        """Walk up from ``start`` (default: cwd) looking for the config file.

        The filesystem root itself is not searched. The walk also ends if a
        directory repeats.
        """
        current = Path(start) if start is not None else self.cwd
        current = current.absolute()
        visited: set[Path] = set()

        while current not in visited:
            visited.add(current)
            parent = current.parent
            if parent == current:
                return None

            candidate = current / CONFIG_FILENAME
            if candidate.is_file():
                return candidate

            current = parent

        return None

    def load_config_file(self, path: Path) -> dict[str, Any]:
        """Load one config file.

        Raises:
            ConfigLoadError: If the file cannot be read, does not parse, or
                is not a mapping
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"Could not load {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigLoadError(f"Configuration file must contain a mapping: {path}")

        return data

    def _merge_file(self, raw: dict[str, Any], path: Path, sources: list[Path]) -> None:
        try:
            data = self.load_config_file(path)
        except ConfigLoadError as e:
            logger.debug(f"Ignoring configuration file: {e}")
            return

        raw.update(data)
        sources.append(path)
        logger.debug(f"Loaded configuration from {path}")

    def _resolve_environment(self, raw: dict[str, Any]) -> str | None:
        environment = raw.get("environment")
        if environment:
            return str(environment)
        return extract_environment_option(self.argv)

    def _export_environment(self, environment: str | None) -> None:
        # The Craft bootstrap requires a SERVER_NAME
        if environment:
            self.environ["SERVER_NAME"] = environment
        self.environ.setdefault("SERVER_NAME", DEFAULT_SERVER_NAME)
