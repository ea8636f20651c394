"""Tests for the command registry.

Covers last-write-wins registration, built-in seeding, explicit references
(classes, factories, dotted strings) and directory discovery.
"""

import sys
import textwrap
from unittest.mock import Mock

import pytest

from craftcli.base.errors import RegistryError
from craftcli.registry import Command, CommandRegistry, ExemptFromBootstrap, is_runnable_command
from craftcli.registry.registry import BUILTIN_COMMANDS


class FirstCommand(Command):
    name = "deploy"
    help = "First deploy."

    def run(self, args, console):
        return 0


class SecondCommand(Command):
    name = "deploy"
    help = "Second deploy."

    def run(self, args, console):
        return 0


class AbstractCommand(Command):
    name = "abstract"


class PlainClass:
    name = "plain"


def write_module(directory, filename, source):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(textwrap.dedent(source))
    return path


@pytest.fixture
def registry(tmp_path):
    return CommandRegistry(base_dir=tmp_path)


class TestRunnableCommandPredicate:
    def test_concrete_command(self):
        assert is_runnable_command(FirstCommand)

    def test_abstract_command(self):
        assert not is_runnable_command(AbstractCommand)

    def test_base_class(self):
        assert not is_runnable_command(Command)

    def test_unrelated_class(self):
        assert not is_runnable_command(PlainClass)

    def test_instance_is_not_a_class(self):
        assert not is_runnable_command(FirstCommand())


class TestRegister:
    """Test direct registration."""

    def test_second_registration_replaces_first(self, registry):
        registry.register(FirstCommand())
        second = registry.register(SecondCommand())

        assert registry.get("deploy") is second
        assert registry.names().count("deploy") == 1
        assert len(registry) == 1

    def test_register_sets_application(self, tmp_path):
        application = Mock()
        registry = CommandRegistry(application, base_dir=tmp_path)

        command = registry.register(FirstCommand())

        assert command.application is application

    def test_rejects_non_commands(self, registry):
        with pytest.raises(RegistryError):
            registry.register(PlainClass())

    def test_rejects_nameless_commands(self, registry):
        class Nameless(Command):
            def run(self, args, console):
                return 0

        with pytest.raises(RegistryError, match="name"):
            registry.register(Nameless())

    def test_lookup_helpers(self, registry):
        registry.register(FirstCommand())

        assert "deploy" in registry
        assert "missing" not in registry
        assert registry.get("missing") is None
        assert [c.name for c in registry] == ["deploy"]


class TestBuiltins:
    def test_registers_nine_builtins_in_order(self, registry):
        registry.register_builtins()

        assert registry.names() == [
            "init",
            "console",
            "show-config",
            "generate-command",
            "db-backup",
            "install",
            "install-plugin",
            "clear-cache",
            "tail",
        ]
        assert len(BUILTIN_COMMANDS) == 9

    def test_default_commands(self, registry):
        registry.register_default_commands()

        assert registry.names() == ["help", "list"]

    def test_exempt_builtins(self, registry):
        registry.register_builtins()

        exempt = {c.name for c in registry if isinstance(c, ExemptFromBootstrap)}
        assert exempt == {"init", "generate-command", "install"}


class TestRegisterReference:
    """Test explicit command references."""

    def test_class_reference(self, registry):
        command = registry.register_reference(FirstCommand)

        assert isinstance(command, FirstCommand)
        assert registry.get("deploy") is command

    def test_factory_receives_application(self, tmp_path):
        application = Mock()
        registry = CommandRegistry(application, base_dir=tmp_path)
        factory = Mock(return_value=SecondCommand())

        command = registry.register_reference(factory)

        factory.assert_called_once_with(application)
        assert registry.get("deploy") is command

    def test_factory_without_application_receives_registry(self, registry):
        factory = Mock(return_value=FirstCommand())

        registry.register_reference(factory)

        factory.assert_called_once_with(registry)

    def test_factory_must_return_command(self, registry):
        with pytest.raises(RegistryError, match="expected a Command"):
            registry.register_reference(lambda app: "not a command")

    def test_abstract_class_reference_fails(self, registry):
        with pytest.raises(RegistryError):
            registry.register_reference(AbstractCommand)

    def test_string_references(self, registry, tmp_path, monkeypatch):
        write_module(
            tmp_path / "pkgroot",
            "refcommands.py",
            """
            from craftcli.registry import Command


            class HelloCommand(Command):
                name = "hello"

                def run(self, args, console):
                    return 0


            def make_bye(app):
                command = HelloCommand()
                command.name = "bye"
                return command
            """,
        )
        monkeypatch.syspath_prepend(str(tmp_path / "pkgroot"))

        registry.register_reference("refcommands:HelloCommand")
        registry.register_reference("refcommands.make_bye")

        assert registry.names() == ["hello", "bye"]

    @pytest.mark.parametrize(
        "reference",
        ["no_such_module_xyz:Thing", "craftcli.registry.base:Missing", "nodots", ":Name"],
    )
    def test_unresolvable_string_fails(self, registry, reference):
        with pytest.raises(RegistryError):
            registry.register_reference(reference)

    def test_non_callable_reference_fails(self, registry):
        with pytest.raises(RegistryError):
            registry.register_reference(42)


class TestDirectoryDiscovery:
    """Test scanning directories for command classes."""

    @pytest.fixture
    def command_dir(self, tmp_path):
        directory = tmp_path / "commands"
        write_module(
            directory,
            "good_command.py",
            """
            from craftcli.registry import Command


            class GoodCommand(Command):
                name = "good"

                def run(self, args, console):
                    return 0
            """,
        )
        write_module(
            directory,
            "ExactName.py",
            """
            from craftcli.registry import Command


            class ExactName(Command):
                name = "exact"

                def run(self, args, console):
                    return 0
            """,
        )
        write_module(
            directory,
            "abstract_command.py",
            """
            from craftcli.registry import Command


            class AbstractCommand(Command):
                name = "abstract"
            """,
        )
        write_module(
            directory,
            "not_a_command.py",
            """
            class NotACommand:
                name = "nope"

                def run(self, args, console):
                    return 0
            """,
        )
        write_module(directory, "no_class.py", "VALUE = 1\n")
        write_module(directory, "broken_command.py", "raise RuntimeError('boom')\n")
        write_module(directory, "_private.py", "raise RuntimeError('never loaded')\n")
        write_module(directory / "nested", "nested_command.py", "raise RuntimeError('not recursive')\n")
        (directory / "README.txt").write_text("not python")
        return directory

    def test_finds_only_eligible_classes(self, registry, command_dir, tmp_path):
        found = registry.find_commands_in_dir(command_dir, f"ns_{tmp_path.name}")

        assert sorted(cls.__name__ for cls in found) == ["ExactName", "GoodCommand"]

    def test_module_names_use_namespace(self, registry, command_dir, tmp_path):
        namespace = f"ns_{tmp_path.name}"
        found = registry.find_commands_in_dir(command_dir, namespace + ".")

        assert {cls.__module__ for cls in found} == {
            f"{namespace}.good_command",
            f"{namespace}.ExactName",
        }

    def test_missing_directory_returns_empty(self, registry, tmp_path):
        assert registry.find_commands_in_dir(tmp_path / "nowhere", "ns") == []

    def test_relative_directory_uses_base_dir(self, registry, command_dir, tmp_path):
        found = registry.find_commands_in_dir("commands", f"rel_{tmp_path.name}")

        assert len(found) == 2

    def test_rescanning_same_directory_reuses_module(self, registry, command_dir, tmp_path):
        namespace = f"again_{tmp_path.name}"

        first = registry.find_commands_in_dir(command_dir, namespace)
        second = CommandRegistry(base_dir=tmp_path).find_commands_in_dir(command_dir, namespace)

        assert {id(cls) for cls in first} == {id(cls) for cls in second}

    def test_same_namespace_different_directory_loads_new_file(self, tmp_path):
        namespace = f"shared_{tmp_path.name}"
        for directory, name in [("first", "alpha"), ("second", "beta")]:
            write_module(
                tmp_path / directory,
                "hello_command.py",
                f"""
                from craftcli.registry import Command


                class HelloCommand(Command):
                    name = "{name}"

                    def run(self, args, console):
                        return 0
                """,
            )

        first = CommandRegistry(base_dir=tmp_path).find_commands_in_dir("first", namespace)
        second = CommandRegistry(base_dir=tmp_path).find_commands_in_dir("second", namespace)

        assert [cls.name for cls in first] == ["alpha"]
        assert [cls.name for cls in second] == ["beta"]

    def test_stem_shadowing_library_module(self, registry, tmp_path):
        import code as stdlib_code

        write_module(
            tmp_path / "shadow",
            "code.py",
            """
            from craftcli.registry import Command


            class Code(Command):
                name = "code"

                def run(self, args, console):
                    return 0
            """,
        )

        found = registry.find_commands_in_dir(tmp_path / "shadow")

        assert [cls.name for cls in found] == ["code"]
        assert sys.modules["code"] is stdlib_code

    def test_register_from_config_order(self, registry, command_dir, tmp_path):
        registry.register_builtins()

        class GoodOverride(Command):
            name = "good"

            def run(self, args, console):
                return 0

        registry.register_from_config(
            [FirstCommand, GoodOverride],
            {f"cfg_{tmp_path.name}": str(command_dir)},
        )

        names = registry.names()
        assert names[:9] == [r.name for r in BUILTIN_COMMANDS]
        assert names.index("deploy") < names.index("exact")
        # Directory discovery runs after explicit references and wins
        assert type(registry.get("good")).__name__ == "GoodCommand"
