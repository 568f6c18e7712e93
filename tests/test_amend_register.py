import pytest

from recokit.amend_commands import CommandArgumentType, CommandError, CommandRegistry
from recokit.amend_register import register_update_commands, register_update_functions


@pytest.fixture
def registry():
    reg = CommandRegistry()
    register_update_commands(reg)
    register_update_functions(reg)
    return reg


def call(registry, name, *args):
    return registry.call_function(registry.find_function(name), list(args))


def test_assert_is_boolean_command(registry):
    cmd = registry.find_command("assert")
    assert cmd.arg_type is CommandArgumentType.BOOLEAN
    assert registry.call_boolean_command(cmd, True) == 0
    assert registry.call_boolean_command(cmd, False) == 1


@pytest.mark.parametrize("name", ["copy_dir", "format", "mark", "done"])
def test_unsupported_commands_fail(registry, name):
    cmd = registry.find_command(name)
    assert cmd.arg_type is CommandArgumentType.WORDS
    assert registry.call_command(cmd, ["a", "b"]) == -1


def test_update_forced(registry):
    assert call(registry, "update_forced") == "true"


def test_update_forced_rejects_arguments(registry):
    with pytest.raises(CommandError) as info:
        call(registry, "update_forced", "x")
    assert info.value.status == 1


def test_get_mark_is_empty(registry):
    assert call(registry, "get_mark", "resource") == ""
    with pytest.raises(CommandError):
        call(registry, "get_mark")


def test_hash_dir(registry):
    assert call(registry, "hash_dir", "/path") == "hashvalue"
    with pytest.raises(CommandError):
        call(registry, "hash_dir", "/a", "/b")


def test_matches_returns_first_on_match(registry):
    assert call(registry, "matches", "hash2", "hash1", "hash2") == "hash2"


def test_matches_returns_empty_without_match(registry):
    assert call(registry, "matches", "hash3", "hash1", "hash2") == ""


def test_matches_needs_two_arguments(registry):
    with pytest.raises(CommandError) as info:
        call(registry, "matches", "only")
    assert info.value.status == 1


def test_concat(registry):
    assert call(registry, "concat", "a", "b", "c") == "abc"
    assert call(registry, "concat") == ""


def test_double_registration_fails(registry):
    with pytest.raises(CommandError):
        register_update_commands(registry)
    with pytest.raises(CommandError):
        register_update_functions(registry)


def test_commands_and_functions_are_separate():
    reg = CommandRegistry()
    register_update_commands(reg)
    assert reg.find_function("concat") is None
    assert reg.find_command("concat") is None
    register_update_functions(reg)
    assert reg.find_function("concat").name == "concat"
    assert reg.find_function("assert") is None