"""Main CLI entry point for Craft CLI.

The :class:`Application` resolves configuration, fills the command registry
and owns the bootstrap gate. Dispatch goes through :class:`DispatchGroup`, a
click group that builds click commands from registry entries on demand and
runs the gate before the command body.

Dispatch sequence for ``craft <command> [args]``:

1. ``--environment`` is stripped from the arguments (it was already applied
   while resolving configuration)
2. click resolves ``<command>`` in the registry and parses its parameters
3. the bootstrap gate runs unless the command is exempt
4. the command runs; its return value becomes the exit code
"""

import os
import sys
from collections.abc import MutableMapping, Sequence
from pathlib import Path
from typing import Any

import click
from rich.markup import escape

from craftcli import __version__
from craftcli.base.errors import (
    BootstrapError,
    CommandExecutionError,
    OptionParseError,
    UnknownCommandError,
)
from craftcli.bootstrap import BootstrapGate, Bootstrapper
from craftcli.registry.base import Command
from craftcli.registry.manager import CommandRegistry
from craftcli.utils.config import ConfigResolver, split_environment_option
from craftcli.utils.logger import get_logger

from .styles import Messages, console as default_console

logger = get_logger("cli")

PROG_NAME = "craft"


class DispatchGroup(click.Group):
    """Click group backed by the application's command registry."""

    def __init__(self, application: "Application"):
        super().__init__(
            name=PROG_NAME,
            invoke_without_command=True,
            callback=click.pass_context(self._invoke_default),
            help=f"{application.NAME} - run commands against a Craft installation.",
            params=[
                click.Option(
                    ["--environment"],
                    metavar="NAME",
                    expose_value=False,
                    help="Environment name exported as SERVER_NAME.",
                )
            ],
        )
        self.application = application
        click.version_option(version=application.VERSION, prog_name=application.NAME)(self)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return self.application.registry.names()

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = self.application.registry.get(cmd_name)
        if command is None:
            return None
        return self._build_click_command(command)

    def resolve_command(self, ctx: click.Context, args: list[str]):
        cmd_name = args[0]
        if (
            not ctx.resilient_parsing
            and not cmd_name.startswith("-")
            and cmd_name not in self.application.registry
        ):
            raise UnknownCommandError(cmd_name, ctx)
        return super().resolve_command(ctx, args)

    def _build_click_command(self, command: Command) -> click.Command:
        application = self.application

        def callback(**kwargs: Any) -> int:
            return application.execute(command, kwargs)

        return click.Command(
            name=command.name,
            params=command.get_params(),
            help=command.help,
            short_help=command.help,
            callback=callback,
        )

    def _invoke_default(self, ctx: click.Context) -> Any:
        # No command given: behave like `craft list`
        if ctx.invoked_subcommand is None:
            list_command = self.get_command(ctx, "list")
            if list_command is not None:
                return ctx.invoke(list_command)
        return None


class Application:
    """Craft CLI application.

    Configuration is resolved and commands are registered at construction,
    before anything is dispatched. All process inputs can be injected for
    tests.

    :param argv: Arguments used for early ``--environment`` extraction,
        defaults to ``sys.argv[1:]``
    :param home: Home directory, defaults to ``$HOME``
    :param cwd: Working directory, defaults to the current one
    :param environ: Environment mapping receiving ``SERVER_NAME``
    :param bootstrapper: Callable bootstrapping Craft
    :param console: Rich console commands write to
    """

    NAME = "Craft CLI"
    VERSION = __version__

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        home: str | Path | None = None,
        cwd: str | Path | None = None,
        environ: MutableMapping[str, str] | None = None,
        bootstrapper: Bootstrapper | None = None,
        console=None,
    ):
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.environ = environ if environ is not None else os.environ
        self.console = console if console is not None else default_console

        self.config = ConfigResolver(home=home, cwd=self.cwd, argv=argv, environ=self.environ).resolve()

        self.gate = BootstrapGate(self.target_path, bootstrapper=bootstrapper, environ=self.environ)

        self.registry = CommandRegistry(self, base_dir=self.cwd)
        self.registry.register_default_commands()
        self.registry.register_builtins()
        self.add_user_defined_commands()

        self.cli = DispatchGroup(self)

    # ------------------------------------------------------------------
    # Configuration accessors
    # ------------------------------------------------------------------

    @property
    def target_path(self) -> Path:
        """Path to the craft folder, relative paths resolved against cwd."""
        path = Path(self.config.target_path).expanduser()
        return path if path.is_absolute() else self.cwd / path

    @property
    def target_folder(self) -> str:
        """Name of the craft folder."""
        return Path(self.config.target_path).name

    @property
    def environment(self) -> str:
        return self.environ.get("SERVER_NAME", "localhost")

    @property
    def addon_author_name(self) -> str:
        return self.config.addon_author_name

    @property
    def addon_author_url(self) -> str:
        return self.config.addon_author_url

    @property
    def craft(self) -> Any:
        """The bootstrapped Craft environment, or None before bootstrap."""
        return self.gate.environment

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(self, command: Command) -> Command:
        return self.registry.register(command)

    def register_command(self, reference: Any) -> Command:
        """Register a command class, factory or dotted reference."""
        return self.registry.register_reference(reference)

    def add_user_defined_commands(self) -> None:
        self.registry.register_from_config(self.config.commands, self.config.command_dirs)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def execute(self, command: Command, args: dict[str, Any]) -> int:
        """Run one command, bootstrapping Craft first unless it is exempt."""
        if self.gate.should_bootstrap(command):
            self.gate.ensure_bootstrapped()

        logger.debug(f"Running command '{command.name}'")
        result = command.run(args, self.console)
        return 0 if result is None else int(result)

    def run(self, argv: Sequence[str] | None = None) -> int:
        """Dispatch ``argv`` and return the exit code."""
        if argv is None:
            argv = sys.argv[1:]

        try:
            _, args = split_environment_option(argv)
            result = self.cli.main(args=args, prog_name=PROG_NAME, standalone_mode=False)
        except click.ClickException as e:
            e.show()
            return e.exit_code
        except click.Abort:
            self.console.print(Messages.error("Aborted!"))
            return 1
        except OptionParseError as e:
            self.console.print(Messages.error(escape(str(e))))
            return 2
        except BootstrapError as e:
            self.console.print(Messages.error(escape(str(e))))
            return 1
        except CommandExecutionError as e:
            self.console.print(Messages.error(escape(str(e))))
            return e.exit_code

        return result if isinstance(result, int) else 0


def main():
    """Entry point for the craft CLI."""
    try:
        app = Application()
        exit_code = app.run()
    except KeyboardInterrupt:
        click.echo("\nGoodbye!", err=True)
        sys.exit(130)
    except OptionParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
