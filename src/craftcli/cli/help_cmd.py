"""Universal help and list commands.

Both run without bootstrapping Craft, so they work anywhere, including
outside a Craft project.
"""

import click
from rich.table import Table

from craftcli.base.errors import UnknownCommandError
from craftcli.registry.base import Command

from .styles import Styles


class HelpCommand(Command):
    """Show help for a command, or for the whole CLI."""

    name = "help"
    help = "Display help for a command."

    def get_params(self):
        return [click.Argument(["command_name"], required=False, default=None)]

    def run(self, args, console):
        group = self.application.cli
        command_name = args.get("command_name")

        with click.Context(group, info_name="craft") as ctx:
            if not command_name:
                console.print(group.get_help(ctx), markup=False, highlight=False)
                return 0

            command = group.get_command(ctx, command_name)
            if command is None:
                raise UnknownCommandError(command_name, ctx)

            sub_ctx = click.Context(command, info_name=command_name, parent=ctx)
            console.print(command.get_help(sub_ctx), markup=False, highlight=False)
        return 0


class ListCommand(Command):
    """List registered commands."""

    name = "list"
    help = "List commands."

    def get_params(self):
        return [
            click.Argument(["namespace"], required=False, default=None),
        ]

    def run(self, args, console):
        app = self.application
        namespace = args.get("namespace")

        console.print(f"[header]{app.NAME}[/header] version [accent]{app.VERSION}[/accent]\n")
        console.print("Usage: craft [--environment=NAME] COMMAND [ARGS]...\n", markup=False)

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Command", style=Styles.COMMAND, no_wrap=True)
        table.add_column("Description")

        for command in app.registry:
            if namespace and not command.name.startswith(f"{namespace}:") and command.name != namespace:
                continue
            table.add_row(command.name, command.help)

        console.print("[label]Available commands:[/label]")
        console.print(table)
        return 0
