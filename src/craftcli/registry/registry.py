"""Built-in command registrations.

Commands are listed by module path and class name so that importing the
registry does not import every command module. The default commands are
registered first, followed by the built-ins in the order below.
"""

from .base import CommandRegistration

DEFAULT_COMMANDS = [
    CommandRegistration(
        name="help",
        module_path="craftcli.cli.help_cmd",
        class_name="HelpCommand",
    ),
    CommandRegistration(
        name="list",
        module_path="craftcli.cli.help_cmd",
        class_name="ListCommand",
    ),
]

BUILTIN_COMMANDS = [
    CommandRegistration(
        name="init",
        module_path="craftcli.cli.init_cmd",
        class_name="InitCommand",
    ),
    CommandRegistration(
        name="console",
        module_path="craftcli.cli.console_cmd",
        class_name="ConsoleCommand",
    ),
    CommandRegistration(
        name="show-config",
        module_path="craftcli.cli.show_config_cmd",
        class_name="ShowConfigCommand",
    ),
    CommandRegistration(
        name="generate-command",
        module_path="craftcli.cli.generate_cmd",
        class_name="GenerateCommandCommand",
    ),
    CommandRegistration(
        name="db-backup",
        module_path="craftcli.cli.db_backup_cmd",
        class_name="DbBackupCommand",
    ),
    CommandRegistration(
        name="install",
        module_path="craftcli.cli.install_cmd",
        class_name="InstallCraftCommand",
    ),
    CommandRegistration(
        name="install-plugin",
        module_path="craftcli.cli.install_cmd",
        class_name="InstallPluginCommand",
    ),
    CommandRegistration(
        name="clear-cache",
        module_path="craftcli.cli.clear_cache_cmd",
        class_name="ClearCacheCommand",
    ),
    CommandRegistration(
        name="tail",
        module_path="craftcli.cli.tail_cmd",
        class_name="TailCommand",
    ),
]
