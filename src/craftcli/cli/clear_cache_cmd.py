"""Clear cache command.

Removes the contents of Craft's runtime folders. With no arguments every
folder is cleared.
"""

import shutil

import click

from craftcli.registry.base import Command

from .styles import Messages

CACHE_FOLDERS = {
    "cache": "cache",
    "templates": "compiled_templates",
    "state": "state",
    "assets": "assets",
}


class ClearCacheCommand(Command):
    name = "clear-cache"
    help = "Clear Craft runtime caches."

    def get_params(self):
        return [
            click.Argument(
                ["folders"],
                nargs=-1,
                type=click.Choice(sorted(CACHE_FOLDERS)),
            ),
        ]

    def run(self, args, console):
        runtime_path = self.application.craft.runtime_path
        folders = args["folders"] or tuple(CACHE_FOLDERS)

        for key in folders:
            path = runtime_path / CACHE_FOLDERS[key]
            if not path.is_dir():
                console.print(f"[dim]Skipped {key}: {path} does not exist[/dim]")
                continue

            for child in path.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()

            console.print(Messages.success(f"Cleared {key}"))
        return 0
