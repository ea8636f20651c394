"""Installation commands.

This module provides:

    - 'craft install': download Craft and unpack it into the current directory
    - 'craft install-plugin': download a plugin archive into craft/plugins

Both download zip archives with httpx and unpack them with zipfile.
"""

import io
import re
import shutil
import tempfile
import zipfile
from pathlib import Path

import click
import httpx

from craftcli.base.errors import CommandExecutionError
from craftcli.registry.base import Command, ExemptFromBootstrap

from .styles import Messages

CRAFT_DOWNLOAD_URL = "https://craftcms.com/latest-v2.zip?accept_license=yes"
GITHUB_ARCHIVE_URL = "https://github.com/{repo}/archive/refs/heads/{branch}.zip"
DOWNLOAD_TIMEOUT = 60.0


def download_archive(url: str) -> zipfile.ZipFile:
    """Download ``url`` and open it as a zip archive."""
    try:
        response = httpx.get(url, follow_redirects=True, timeout=DOWNLOAD_TIMEOUT)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise CommandExecutionError(f"Download failed: {e}") from e

    try:
        return zipfile.ZipFile(io.BytesIO(response.content))
    except zipfile.BadZipFile as e:
        raise CommandExecutionError(f"{url} is not a zip archive") from e


def single_root(archive: zipfile.ZipFile) -> str | None:
    """Return the only top-level folder of ``archive``, if there is one."""
    roots = {name.split("/", 1)[0] for name in archive.namelist() if name.strip("/")}
    if len(roots) == 1:
        root = roots.pop()
        if any(name.startswith(f"{root}/") for name in archive.namelist()):
            return root
    return None


class InstallCraftCommand(ExemptFromBootstrap, Command):
    """Download and unpack Craft."""

    name = "install"
    help = "Install Craft into the current directory."

    def get_params(self):
        return [
            click.Option(["--url"], default=CRAFT_DOWNLOAD_URL, help="Craft download URL."),
            click.Option(
                ["--public"],
                default="public",
                show_default=True,
                help="Name of the public web folder.",
            ),
            click.Option(["--force", "-f"], is_flag=True, help="Install over an existing craft folder."),
        ]

    def run(self, args, console):
        app = self.application
        target = app.target_path
        base_dir = target.parent

        if target.exists() and not args["force"]:
            raise CommandExecutionError(f"{target} already exists. Use --force to install anyway.")

        console.print(f"Downloading Craft from [path]{args['url']}[/path]")
        archive = download_archive(args["url"])

        with archive, tempfile.TemporaryDirectory() as tmp:
            archive.extractall(tmp)
            extracted = Path(tmp)

            if (extracted / "craft").is_dir():
                shutil.copytree(extracted / "craft", target, dirs_exist_ok=True)
            else:
                raise CommandExecutionError("The downloaded archive does not contain a craft folder.")

            if (extracted / "public").is_dir():
                shutil.copytree(extracted / "public", base_dir / args["public"], dirs_exist_ok=True)

        console.print(Messages.success(f"Craft installed in {target}"))
        return 0


class InstallPluginCommand(Command):
    """Download a plugin archive into the plugins folder."""

    name = "install-plugin"
    help = "Install a plugin from a zip URL or a GitHub owner/repo."

    def get_params(self):
        return [
            click.Argument(["source"]),
            click.Option(["--branch"], default="master", show_default=True, help="GitHub branch."),
            click.Option(["--name"], default=None, help="Plugin folder name."),
            click.Option(["--force", "-f"], is_flag=True, help="Replace an existing plugin."),
        ]

    @staticmethod
    def resolve_source(source: str, branch: str) -> tuple[str, str]:
        """Return (download URL, default plugin name) for ``source``."""
        if re.fullmatch(r"[\w.-]+/[\w.-]+", source):
            repo_name = source.split("/", 1)[1]
            return GITHUB_ARCHIVE_URL.format(repo=source, branch=branch), repo_name.lower()

        stem = source.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0]
        if stem.endswith(".zip"):
            stem = stem[: -len(".zip")]
        return source, stem.lower()

    def run(self, args, console):
        url, default_name = self.resolve_source(args["source"], args["branch"])
        plugin_name = args["name"] or default_name
        destination = self.application.craft.plugins_path / plugin_name

        if destination.exists() and not args["force"]:
            raise CommandExecutionError(f"Plugin {plugin_name} is already installed at {destination}.")

        console.print(f"Downloading [path]{url}[/path]")
        archive = download_archive(url)

        # The existing plugin is only removed once the new one is fully staged
        staging = destination.with_name(f".{plugin_name}.installing")
        with archive, tempfile.TemporaryDirectory() as tmp:
            archive.extractall(tmp)
            root = single_root(archive)
            source_dir = Path(tmp) / root if root else Path(tmp)

            if staging.exists():
                shutil.rmtree(staging)
            shutil.copytree(source_dir, staging)

        if destination.exists():
            shutil.rmtree(destination)
        staging.rename(destination)

        console.print(Messages.success(f"Installed {plugin_name} in {destination}"))
        return 0
