"""Show configuration command.

This module provides the 'craft show-config' command which displays the
effective CLI configuration together with the bootstrapped Craft paths.
"""

import json

import click
import yaml
from rich.syntax import Syntax

from craftcli.base.errors import CommandExecutionError
from craftcli.registry.base import Command

from .styles import Messages


class ShowConfigCommand(Command):
    """Display the effective configuration."""

    name = "show-config"
    help = "Show the effective configuration, or a single key."

    def get_params(self):
        return [
            click.Argument(["key"], required=False, default=None),
            click.Option(
                ["--format", "output_format"],
                type=click.Choice(["yaml", "json"]),
                default="yaml",
                show_default=True,
                help="Output format.",
            ),
        ]

    def collect(self) -> dict:
        app = self.application
        config = app.config

        data = {
            "target_path": str(app.target_path),
            "environment": app.environment,
            "commands": [str(ref) for ref in config.commands],
            "command_dirs": dict(config.command_dirs),
            "addon_author_name": config.addon_author_name,
            "addon_author_url": config.addon_author_url,
            "sources": [str(path) for path in config.sources],
        }

        craft = app.craft
        if craft is not None and hasattr(craft, "app_path"):
            data["craft"] = {
                "app_path": str(craft.app_path),
                "config_path": str(craft.config_path),
                "plugins_path": str(craft.plugins_path),
                "storage_path": str(craft.storage_path),
            }
        return data

    def run(self, args, console):
        data = self.collect()
        key = args["key"]

        if key:
            if key not in data:
                raise CommandExecutionError(f"Unknown configuration key: {key}")
            data = {key: data[key]}

        if args["output_format"] == "json":
            console.print_json(json.dumps(data))
            return 0

        console.print(Messages.header("Craft CLI configuration"))
        text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        console.print(Syntax(text, "yaml", theme="monokai", background_color="default"))
        return 0
