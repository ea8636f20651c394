"""
Component Logger

Provides colored logging for Craft CLI components with:
- One API for config resolution, registry, bootstrap and dispatch
- Rich terminal output with component-specific colors
- A single RichHandler on the root logger, writing to stderr

Usage:
    logger = get_logger("registry")
    logger.info("Registered command")
    logger.debug("Detailed trace")
    logger.success("Operation completed")
    logger.warning("Something to note")
    logger.error("Something went wrong")

The root level is WARNING so that command output stays clean. Set
``CRAFT_CLI_DEBUG`` to any non-empty value to see debug traces.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

COMPONENT_COLORS = {
    "config": "cyan",
    "registry": "magenta",
    "bootstrap": "green",
    "cli": "blue",
}


class ComponentLogger:
    """
    Rich-formatted logger for Craft CLI components.

    Message Types:
    - info: Normal operational messages
    - debug: Detailed tracing information
    - warning: Warning messages
    - error: Error messages
    - success: Success messages
    """

    def __init__(self, base_logger: logging.Logger, component_name: str, color: str = "white"):
        """
        Initialize component logger.

        Args:
            base_logger: Underlying Python logger
            component_name: Name of the component (e.g., 'config', 'registry')
            color: Rich color name for this component
        """
        self.base_logger = base_logger
        self.component_name = component_name
        self.color = color

    def _format_message(self, message: str, style: str, emoji: str = "") -> str:
        """Format message with Rich markup and emoji prefix."""
        prefix = f"{emoji}{self.component_name.title()}: "
        if style:
            return f"[{style}]{prefix}{message}[/{style}]"
        return f"{prefix}{message}"

    def info(self, message: str) -> None:
        formatted = self._format_message(message, self.color)
        self.base_logger.info(formatted)

    def debug(self, message: str) -> None:
        style = f"dim {self.color}" if self.color != "white" else "dim white"
        formatted = self._format_message(message, style, "🔍 ")
        self.base_logger.debug(formatted)

    def warning(self, message: str) -> None:
        formatted = self._format_message(message, "bold yellow", "⚠️  ")
        self.base_logger.warning(formatted)

    def error(self, message: str, exc_info: bool = False) -> None:
        formatted = self._format_message(message, "bold red", "❌ ")
        self.base_logger.error(formatted, exc_info=exc_info)

    def success(self, message: str) -> None:
        formatted = self._format_message(message, "bold green", "✅ ")
        self.base_logger.info(formatted)

    @property
    def name(self) -> str:
        return self.base_logger.name


def _setup_rich_logging() -> None:
    """Configure Rich logging for the root logger (called once)."""
    root_logger = logging.getLogger()

    # Prevent duplicate handler registration
    for handler in root_logger.handlers:
        if isinstance(handler, RichHandler):
            return

    level = logging.DEBUG if os.getenv("CRAFT_CLI_DEBUG") else logging.WARNING
    root_logger.setLevel(level)

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=True,
        show_path=False,
        show_time=False,
        show_level=True,
        tracebacks_show_locals=False,
    )
    root_logger.addHandler(handler)

    for lib in ["httpx", "httpcore"]:
        logging.getLogger(lib).setLevel(logging.WARNING)


def get_logger(component_name: str) -> ComponentLogger:
    """Get a component logger.

    Args:
        component_name: Component name ('config', 'registry', 'bootstrap', 'cli')

    Returns:
        ComponentLogger writing through the shared Rich handler
    """
    _setup_rich_logging()

    base_logger = logging.getLogger(f"craftcli.{component_name}")
    color = COMPONENT_COLORS.get(component_name, "white")
    return ComponentLogger(base_logger, component_name, color)
