"""Command generator.

This module provides the 'craft generate-command' command which writes a
skeleton command class into a command directory, ready to be picked up by
``command_dirs`` discovery.

The generated file name and class name follow the discovery convention:
``craft generate-command cache:warm`` writes ``cache_warm_command.py``
containing ``CacheWarmCommand``.
"""

import re
from pathlib import Path

import click
from jinja2 import Template

from craftcli.base.errors import CommandExecutionError
from craftcli.registry.base import Command, ExemptFromBootstrap

from .styles import Messages

COMMAND_TEMPLATE = Template(
    '''\
"""{{ description }}
{% if author_name or author_url %}
Author: {{ author_name }}{% if author_url %} <{{ author_url }}>{% endif %}
{% endif %}"""

import click

from craftcli.registry import Command


class {{ class_name }}(Command):
    name = "{{ command_name }}"
    help = "{{ description }}"

    def get_params(self):
        return [
            click.Argument(["example"], required=False),
            click.Option(["--flag"], is_flag=True, help="An example flag."),
        ]

    def run(self, args, console):
        craft = self.application.craft
        console.print(f"Running {{ command_name }} in {craft.target_path if craft else 'craft'}")
        return 0
'''
)


def command_class_name(command_name: str) -> str:
    """``cache:warm`` -> ``CacheWarmCommand``"""
    parts = [part for part in re.split(r"[^0-9a-zA-Z]+", command_name) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) + "Command"


def command_file_stem(command_name: str) -> str:
    """``cache:warm`` -> ``cache_warm_command``"""
    parts = [part.lower() for part in re.split(r"[^0-9a-zA-Z]+", command_name) if part]
    return "_".join(parts + ["command"])


class GenerateCommandCommand(ExemptFromBootstrap, Command):
    """Generate a new command class file."""

    name = "generate-command"
    help = "Generate a custom command class."

    def get_params(self):
        return [
            click.Argument(["command_name"]),
            click.Option(
                ["--directory", "-d"],
                type=click.Path(file_okay=False),
                default=None,
                help="Directory to write into (default: first command_dirs entry, or ./commands).",
            ),
            click.Option(
                ["--description"],
                default=None,
                help="Command description.",
            ),
            click.Option(["--force", "-f"], is_flag=True, help="Overwrite an existing file."),
        ]

    def default_directory(self) -> Path:
        command_dirs = self.application.config.command_dirs
        directory = next(iter(command_dirs.values()), "commands")
        return Path(directory)

    def run(self, args, console):
        app = self.application
        command_name = args["command_name"]

        if not re.search(r"[0-9a-zA-Z]", command_name):
            raise CommandExecutionError(f"Invalid command name: {command_name!r}")

        directory = Path(args["directory"]) if args["directory"] else self.default_directory()
        if not directory.is_absolute():
            directory = Path(app.cwd) / directory

        target = directory / f"{command_file_stem(command_name)}.py"
        if target.exists() and not args["force"]:
            raise CommandExecutionError(f"{target} already exists. Use --force to overwrite it.")

        directory.mkdir(parents=True, exist_ok=True)
        target.write_text(
            COMMAND_TEMPLATE.render(
                command_name=command_name,
                class_name=command_class_name(command_name),
                description=args["description"] or f"{command_name} command.",
                author_name=app.addon_author_name,
                author_url=app.addon_author_url,
            )
        )

        console.print(Messages.success(f"Created {target}"))
        if not app.config.command_dirs:
            console.print(
                Messages.info(f"Add the directory to command_dirs in .craft-cli.yml to register it: {directory}")
            )
        return 0
