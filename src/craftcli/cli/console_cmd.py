"""Interactive console command.

Opens a Python shell with the bootstrapped Craft environment available
as ``craft`` and the CLI application as ``app``.
"""

import code

import click

from craftcli.registry.base import Command


class ConsoleCommand(Command):
    name = "console"
    help = "Start an interactive shell with Craft bootstrapped."

    def get_params(self):
        return [
            click.Option(
                ["--command", "-c", "source"],
                default=None,
                help="Run this Python source instead of starting a shell.",
            ),
        ]

    def namespace(self) -> dict:
        return {"app": self.application, "craft": self.application.craft}

    def run(self, args, console):
        namespace = self.namespace()

        if args["source"]:
            exec(compile(args["source"], "<console>", "exec"), namespace)
            return 0

        banner = f"{self.application.NAME} {self.application.VERSION} console ({self.application.environment})"
        code.interact(banner=banner, local=namespace, exitmsg="")
        return 0
