"""Exception hierarchy for Craft CLI.

Errors fall in two groups. Configuration loading and directory discovery
problems are recovered where they happen and only logged:

    - ConfigLoadError: a config file could not be read or is not a mapping
    - OptionParseError: early ``--environment`` extraction failed

Bootstrap and dispatch problems always reach the user and abort the run:

    - BootstrapError: the Craft installation could not be found
    - RegistryError: an explicit command reference could not be registered
    - UnknownCommandError: the requested command is not registered
    - CommandExecutionError: a command body failed

.. note::
   There are no retries anywhere; every invocation is a single dispatch.
"""

import click


class CraftCliError(Exception):
    """Base exception for all Craft CLI errors."""

    pass


class ConfigLoadError(CraftCliError):
    """Exception for configuration files that cannot be used.

    Raised when a ``.craft-cli.yml`` file cannot be read, does not parse,
    or does not evaluate to a mapping. The resolver catches it and treats
    the file as contributing no keys.
    """

    pass


class OptionParseError(CraftCliError):
    """Exception for malformed ``--environment`` options.

    Only raised for errors that are not ignored during early option
    extraction, such as the option being given without a value.
    """

    pass


class BootstrapError(CraftCliError):
    """Exception for failed Craft bootstrapping.

    Raised when the marker file ``<target_path>/app/Craft.php`` is missing.
    The dispatch aborts before the command body runs.
    """

    pass


class RegistryError(CraftCliError):
    """Exception for command registration errors.

    Raised when an explicit command reference cannot be resolved or when a
    factory does not return a command instance.
    """

    pass


class CommandExecutionError(CraftCliError):
    """Exception raised by command bodies to fail with a message.

    :param message: Message printed to the user
    :param exit_code: Process exit code, defaults to 1
    """

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class UnknownCommandError(click.UsageError):
    """Exception for command names missing from the registry.

    Subclasses :class:`click.UsageError` so click renders it with the usage
    line and exits with status 2.
    """

    def __init__(self, command_name: str, ctx: click.Context | None = None):
        super().__init__(f'Command "{command_name}" is not defined.', ctx)
        self.command_name = command_name
