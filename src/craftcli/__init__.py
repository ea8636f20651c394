"""Craft CLI.

Command-line front end for Craft installations. Commands are registered
from built-ins, from explicit references in ``.craft-cli.yml`` and from
command directories; most of them run only after the Craft environment
has been bootstrapped.
"""

# Version information
__version__ = "0.1.1"

__all__ = ["__version__"]
