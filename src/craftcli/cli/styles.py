"""Centralized color and style management for Craft CLI.

Commands write through the shared :data:`console` using semantic style
names (success, error, warning) rather than direct colors, so all output
follows one theme.
"""

import sys

from rich.console import Console
from rich.theme import Theme

# ============================================================================
# THEME
# ============================================================================

craft_theme = Theme(
    {
        "success": "green",
        "error": "bold red",
        "warning": "#ffaa00",
        "info": "cyan",
        "primary": "#da5a47",
        "accent": "bold #e5422b",
        "header": "bold #da5a47",
        "label": "bold",
        "value": "white",
        "path": "#a2ae9d",
        "command": "bold cyan",
    }
)

# On Windows, force UTF-8 friendly output for the status symbols
if sys.platform == "win32":
    console = Console(theme=craft_theme, force_terminal=True, legacy_windows=False)
else:
    console = Console(theme=craft_theme)


# ============================================================================
# STYLE HELPERS
# ============================================================================


class Styles:
    """Style names defined in the Rich theme."""

    COMMAND = "command"


class Messages:
    """Pre-formatted message helpers for common patterns."""

    @staticmethod
    def success(text: str) -> str:
        return f"[success]✓ {text}[/success]"

    @staticmethod
    def error(text: str) -> str:
        return f"[error]✗ {text}[/error]"

    @staticmethod
    def info(text: str) -> str:
        return f"[info]ℹ️  {text}[/info]"

    @staticmethod
    def header(text: str) -> str:
        return f"[header]{text}[/header]"
