"""Database backup command.

This module provides the 'craft db-backup' command which dumps the Craft
database with ``mysqldump``. Connection settings come from options or the
``CRAFT_DB_*`` environment variables.
"""

import gzip
import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

import click

from craftcli.base.errors import CommandExecutionError
from craftcli.registry.base import Command

from .styles import Messages


class DbBackupCommand(Command):
    """Back up the Craft database to a SQL file."""

    name = "db-backup"
    help = "Back up the Craft database."

    def get_params(self):
        return [
            click.Argument(["path"], required=False, default=None),
            click.Option(["--host"], envvar="CRAFT_DB_SERVER", default="localhost", show_default=True),
            click.Option(["--port"], envvar="CRAFT_DB_PORT", type=int, default=3306, show_default=True),
            click.Option(["--user"], envvar="CRAFT_DB_USER", default="root", show_default=True),
            click.Option(["--password"], envvar="CRAFT_DB_PASSWORD", default=""),
            click.Option(["--database"], envvar="CRAFT_DB_DATABASE", default=None),
            click.Option(["--gzip", "compress"], is_flag=True, help="Compress the dump with gzip."),
        ]

    def backup_path(self, database: str, compress: bool) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        suffix = ".sql.gz" if compress else ".sql"
        return self.application.craft.backups_path / f"{database}-{timestamp}{suffix}"

    def build_command(self, args) -> list[str]:
        return [
            "mysqldump",
            f"--host={args['host']}",
            f"--port={args['port']}",
            f"--user={args['user']}",
            "--single-transaction",
            "--add-drop-table",
            args["database"],
        ]

    def run(self, args, console):
        if not args["database"]:
            raise CommandExecutionError("No database given. Use --database or set CRAFT_DB_DATABASE.")

        if shutil.which("mysqldump") is None:
            raise CommandExecutionError("mysqldump could not be found on PATH.")

        if args["path"]:
            path = Path(args["path"])
        else:
            path = self.backup_path(args["database"], args["compress"])
        path.parent.mkdir(parents=True, exist_ok=True)

        env = dict(os.environ)
        if args["password"]:
            env["MYSQL_PWD"] = args["password"]

        result = subprocess.run(self.build_command(args), capture_output=True, check=False, env=env)
        if result.returncode != 0:
            stderr = result.stderr.decode(errors="replace").strip()
            raise CommandExecutionError(f"mysqldump failed: {stderr}", exit_code=result.returncode)

        if args["compress"]:
            with gzip.open(path, "wb") as f:
                f.write(result.stdout)
        else:
            path.write_bytes(result.stdout)

        console.print(Messages.success(f"Backup saved to {path}"))
        return 0
