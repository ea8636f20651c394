"""Craft environment bootstrapping.

Most commands need a Craft installation before their body runs. The
:class:`BootstrapGate` decides per command whether that is the case and
bootstraps at most once per gate:

    NOT_BOOTSTRAPPED --ensure_bootstrapped()--> BOOTSTRAPPED

The transition requires the marker file ``<target_path>/app/Craft.php``.
``help``, ``list`` and commands marked :class:`ExemptFromBootstrap` never
trigger it.

The bootstrap itself is a callable ``bootstrapper(target_path, environment)``.
The default one describes the Craft folder layout as a
:class:`CraftEnvironment`, which commands reach through
``self.application.craft``.
"""

import os
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from craftcli.base.errors import BootstrapError
from craftcli.registry.base import Command, ExemptFromBootstrap
from craftcli.utils.logger import get_logger

logger = get_logger("bootstrap")

CRAFT_MARKER = Path("app") / "Craft.php"
EXEMPT_COMMAND_NAMES = frozenset({"help", "list"})


class BootstrapState(Enum):
    NOT_BOOTSTRAPPED = "not_bootstrapped"
    BOOTSTRAPPED = "bootstrapped"


@dataclass
class CraftEnvironment:
    """Paths of a bootstrapped Craft installation."""

    target_path: Path
    environment: str

    @property
    def app_path(self) -> Path:
        return self.target_path / "app"

    @property
    def config_path(self) -> Path:
        return self.target_path / "config"

    @property
    def plugins_path(self) -> Path:
        return self.target_path / "plugins"

    @property
    def storage_path(self) -> Path:
        return self.target_path / "storage"

    @property
    def runtime_path(self) -> Path:
        return self.storage_path / "runtime"

    @property
    def cache_path(self) -> Path:
        return self.runtime_path / "cache"

    @property
    def logs_path(self) -> Path:
        return self.runtime_path / "logs"

    @property
    def backups_path(self) -> Path:
        return self.storage_path / "backups"


def load_craft_environment(target_path: Path, environment: str) -> CraftEnvironment:
    """Default bootstrapper."""
    craft = CraftEnvironment(target_path=target_path.absolute(), environment=environment)
    logger.debug(f"Bootstrapped Craft at {craft.target_path} ({environment})")
    return craft


Bootstrapper = Callable[[Path, str], Any]


class BootstrapGate:
    """Decides whether a command needs Craft and bootstraps it once.

    :param target_path: Path to the Craft folder
    :param bootstrapper: Callable performing the bootstrap, defaults to
        :func:`load_craft_environment`
    :param environ: Mapping holding ``SERVER_NAME``, defaults to ``os.environ``
    """

    def __init__(
        self,
        target_path: str | Path,
        bootstrapper: Bootstrapper | None = None,
        environ: MutableMapping[str, str] | None = None,
    ):
        self.target_path = Path(target_path)
        self.bootstrapper = bootstrapper or load_craft_environment
        self.environ = environ if environ is not None else os.environ
        self.state = BootstrapState.NOT_BOOTSTRAPPED
        self.environment: Any = None

    @property
    def is_bootstrapped(self) -> bool:
        return self.state is BootstrapState.BOOTSTRAPPED

    def should_bootstrap(self, command: Command) -> bool:
        """Return False for ``help``, ``list`` and exempt commands."""
        if command.name in EXEMPT_COMMAND_NAMES:
            return False
        return not isinstance(command, ExemptFromBootstrap)

    def can_be_bootstrapped(self) -> bool:
        """Whether the Craft marker file exists under the target path."""
        return (self.target_path / CRAFT_MARKER).is_file()

    def ensure_bootstrapped(self) -> Any:
        """Bootstrap Craft unless already done.

        Returns:
            The value produced by the bootstrapper

        Raises:
            BootstrapError: If the marker file is missing
        """
        if self.is_bootstrapped:
            return self.environment

        if not self.can_be_bootstrapped():
            raise BootstrapError("Your craft path could not be found.")

        server_name = self.environ.get("SERVER_NAME", "localhost")
        self.environment = self.bootstrapper(self.target_path, server_name)
        self.state = BootstrapState.BOOTSTRAPPED
        return self.environment
