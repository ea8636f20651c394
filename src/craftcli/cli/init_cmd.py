"""Configuration initialization command.

This module provides the 'craft init' command which writes a starter
``.craft-cli.yml`` into the current directory.
"""

from pathlib import Path

import click
from jinja2 import Template

from craftcli.base.errors import CommandExecutionError
from craftcli.registry.base import Command, ExemptFromBootstrap
from craftcli.utils.config import CONFIG_FILENAME

from .styles import Messages

CONFIG_TEMPLATE = Template(
    """\
# Craft CLI configuration
#
# Settings here override those in ~/{{ filename }}.

# Path to the craft folder
target_path: {{ target_path }}

# Environment name, exported as SERVER_NAME for the Craft bootstrap
{% if environment %}environment: {{ environment }}{% else %}# environment: localhost{% endif %}

# Additional commands, as "package.module:ClassName" or factory references
# commands:
#   - mycommands.deploy:DeployCommand

# Directories to scan for commands, keyed by module namespace
# command_dirs:
#   mycommands: ./commands

# Author details used by generate-command
# addon_author_name: Your Name
# addon_author_url: https://example.com
"""
)


class InitCommand(ExemptFromBootstrap, Command):
    """Create a configuration file in the current directory."""

    name = "init"
    help = "Create a .craft-cli.yml config file in the current directory."

    def get_params(self):
        return [
            click.Option(
                ["--target-path"],
                default="craft",
                show_default=True,
                help="Path to the craft folder.",
            ),
            click.Option(["--environment-name", "environment_name"], default=None, help="Default environment name."),
            click.Option(["--force", "-f"], is_flag=True, help="Overwrite an existing config file."),
        ]

    def run(self, args, console):
        config_file = Path(self.application.cwd) / CONFIG_FILENAME

        if config_file.exists() and not args["force"]:
            raise CommandExecutionError(
                f"{config_file} already exists. Use --force to overwrite it."
            )

        config_file.write_text(
            CONFIG_TEMPLATE.render(
                filename=CONFIG_FILENAME,
                target_path=args["target_path"],
                environment=args["environment_name"],
            )
        )

        console.print(Messages.success(f"Created {config_file}"))
        return 0
