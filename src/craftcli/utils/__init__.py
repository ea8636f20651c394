"""Configuration and logging utilities.

Modules:
    config: Layered ``.craft-cli.yml`` resolution
    logger: Rich component loggers
"""

from . import config, logger

__all__ = ["config", "logger"]
