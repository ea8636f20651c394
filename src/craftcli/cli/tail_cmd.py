"""Log tail command.

Prints the last lines of a Craft log from ``storage/runtime/logs`` and can
keep following it, like ``tail -f``.
"""

import time
from collections import deque
from pathlib import Path

import click

from craftcli.base.errors import CommandExecutionError
from craftcli.registry.base import Command


class TailCommand(Command):
    name = "tail"
    help = "Show the end of a Craft log file."

    def get_params(self):
        return [
            click.Argument(["log"], required=False, default="craft"),
            click.Option(["--lines", "-n"], type=int, default=20, show_default=True),
            click.Option(["--follow", "-f"], is_flag=True, help="Keep printing appended lines."),
            click.Option(["--interval"], type=float, default=0.5, show_default=True, hidden=True),
        ]

    def log_path(self, log: str) -> Path:
        name = log if log.endswith(".log") else f"{log}.log"
        return self.application.craft.logs_path / name

    def run(self, args, console):
        path = self.log_path(args["log"])
        if not path.is_file():
            raise CommandExecutionError(f"Log file not found: {path}")

        with open(path, errors="replace") as f:
            for line in deque(f, maxlen=max(args["lines"], 0)):
                console.print(line.rstrip("\n"), markup=False, highlight=False)

            if not args["follow"]:
                return 0

            try:
                while True:
                    line = f.readline()
                    if line:
                        console.print(line.rstrip("\n"), markup=False, highlight=False)
                    else:
                        time.sleep(args["interval"])
            except KeyboardInterrupt:
                return 0
