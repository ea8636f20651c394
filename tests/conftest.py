"""
Pytest configuration and shared test utilities.

This module provides shared fixtures for all Craft CLI tests: an isolated
home directory, a project directory with or without a Craft installation,
a capturing console and an application factory.
"""

import io
from pathlib import Path
from unittest.mock import Mock

import pytest
from rich.console import Console

from craftcli.bootstrap import load_craft_environment
from craftcli.cli.main import Application
from craftcli.cli.styles import craft_theme

# ===================================================================
# Test Helpers
# ===================================================================


class CraftTestHelpers:
    """Helper methods for building project trees and reading output."""

    @staticmethod
    def write_config(directory: Path, content: str) -> Path:
        """Write a .craft-cli.yml file into ``directory``."""
        directory.mkdir(parents=True, exist_ok=True)
        config_file = directory / ".craft-cli.yml"
        config_file.write_text(content)
        return config_file

    @staticmethod
    def install_craft(project: Path, folder: str = "craft") -> Path:
        """Create a minimal Craft tree with the bootstrap marker file."""
        target = project / folder
        (target / "app").mkdir(parents=True, exist_ok=True)
        (target / "app" / "Craft.php").write_text("<?php\n")
        return target

    @staticmethod
    def output_of(console: Console) -> str:
        """Return everything printed to a buffered console."""
        return console.file.getvalue()


# ===================================================================
# Pytest Fixtures
# ===================================================================


@pytest.fixture
def helpers():
    """Fixture providing the test helper methods."""
    return CraftTestHelpers


@pytest.fixture
def home_dir(tmp_path):
    """Empty home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def project_dir(tmp_path):
    """Empty project directory, the working directory of the application."""
    project = tmp_path / "work" / "project"
    project.mkdir(parents=True)
    return project


@pytest.fixture
def craft_dir(project_dir):
    """Craft installation inside the project directory."""
    return CraftTestHelpers.install_craft(project_dir)


@pytest.fixture
def console():
    """Rich console writing to a string buffer."""
    return Console(file=io.StringIO(), width=200, theme=craft_theme, color_system=None)


@pytest.fixture
def bootstrapper():
    """Bootstrapper mock that still returns a real CraftEnvironment."""
    return Mock(side_effect=load_craft_environment)


@pytest.fixture
def make_app(home_dir, project_dir, console, bootstrapper):
    """Factory building an Application isolated from the real process state."""

    def _make_app(argv=None, environ=None, cwd=None, **kwargs):
        return Application(
            argv=argv or [],
            home=kwargs.pop("home", home_dir),
            cwd=cwd or project_dir,
            environ=environ if environ is not None else {},
            bootstrapper=kwargs.pop("bootstrapper", bootstrapper),
            console=console,
            **kwargs,
        )

    return _make_app
