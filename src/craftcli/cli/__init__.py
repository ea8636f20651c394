"""Command-line interface for Craft CLI.

This package provides the ``craft`` entry point and the built-in commands.

Commands:
    - init: Create a .craft-cli.yml config file
    - console: Interactive shell with Craft bootstrapped
    - show-config: Display the effective configuration
    - generate-command: Generate a custom command class
    - db-backup: Back up the Craft database
    - install: Install Craft
    - install-plugin: Install a plugin
    - clear-cache: Clear Craft runtime caches
    - tail: Show the end of a Craft log
    - help, list: Universal help and command listing

Architecture:
    Uses Click for command-line parsing. Commands live in a registry and are
    turned into click commands on demand by the dispatch group.
"""

from .main import Application, DispatchGroup, main

__all__ = ["Application", "DispatchGroup", "main"]
