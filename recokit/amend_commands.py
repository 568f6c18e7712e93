"""Registry of the commands and functions an amend script may call."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Iterable, Optional

from .symtab import DuplicateSymbolError, SymbolTable

log = logging.getLogger(__name__)


class CommandArgumentType(IntEnum):
    """How a command takes its arguments."""

    UNKNOWN = -1
    BOOLEAN = 0
    WORDS = 1


class CommandKind(IntEnum):
    """Whether an entry is a command or a function."""

    COMMAND = 0
    FUNCTION = 1


class CommandError(Exception):
    """Raised on bad registrations, bad calls, or failing functions."""

    def __init__(self, message: str, status: int = -1) -> None:
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class CommandEntry:
    """A registered command or function."""

    name: str
    cookie: Any
    kind: CommandKind
    arg_type: CommandArgumentType
    hook: Callable[..., Any]


def argument_type_of(command: Optional[CommandEntry]) -> CommandArgumentType:
    """Return the argument type of a command, UNKNOWN for None."""
    if command is None:
        return CommandArgumentType.UNKNOWN
    return command.arg_type


def _check_args(args: Optional[Iterable[Optional[str]]]) -> list:
    words = [] if args is None else list(args)
    if any(word is None for word in words):
        raise CommandError("arguments must not be None")
    return words


class CommandRegistry:
    """Holds commands and functions by name.

    Command hooks are called as ``hook(name, cookie, args)`` with a list of
    words, or ``hook(name, cookie, value)`` with a bool for boolean commands,
    and return an integer status where zero means success.  Function hooks
    are called as ``hook(name, cookie, args)`` and return the result string;
    they raise :class:`CommandError` to fail.
    """

    def __init__(self) -> None:
        self._symbols = SymbolTable()

    def _register(
        self,
        name: str,
        kind: CommandKind,
        arg_type: CommandArgumentType,
        hook: Callable[..., Any],
        cookie: Any,
    ) -> CommandEntry:
        if name is None or hook is None:
            raise CommandError("a name and a hook are required")
        if arg_type not in (CommandArgumentType.BOOLEAN, CommandArgumentType.WORDS):
            raise CommandError(f"invalid argument type for {name!r}")
        entry = CommandEntry(name, cookie, kind, CommandArgumentType(arg_type), hook)
        try:
            self._symbols.add(name, kind, entry)
        except DuplicateSymbolError as exc:
            raise CommandError(f"{name!r} is already registered") from exc
        return entry

    def register_command(
        self,
        name: str,
        arg_type: CommandArgumentType,
        hook: Callable[..., int],
        cookie: Any,
    ) -> CommandEntry:
        """Register a command taking words or a boolean."""
        return self._register(name, CommandKind.COMMAND, arg_type, hook, cookie)

    def register_function(
        self, name: str, hook: Callable[..., str], cookie: Any
    ) -> CommandEntry:
        """Register a function taking words and returning a string."""
        return self._register(
            name, CommandKind.FUNCTION, CommandArgumentType.WORDS, hook, cookie
        )

    def find_command(self, name: Optional[str]) -> Optional[CommandEntry]:
        """Return the command with this name, or None."""
        return self._symbols.find(name, CommandKind.COMMAND)

    def find_function(self, name: Optional[str]) -> Optional[CommandEntry]:
        """Return the function with this name, or None."""
        return self._symbols.find(name, CommandKind.FUNCTION)

    def call_command(
        self, command: Optional[CommandEntry], args: Optional[Iterable[str]]
    ) -> int:
        """Call a word command and return its status."""
        if command is None or command.arg_type != CommandArgumentType.WORDS:
            raise CommandError("not a word command")
        words = _check_args(args)
        log.debug("calling command %s", command.name)
        return command.hook(command.name, command.cookie, words)

    def call_boolean_command(
        self, command: Optional[CommandEntry], value: bool
    ) -> int:
        """Call a boolean command and return its status."""
        if command is None or command.arg_type != CommandArgumentType.BOOLEAN:
            raise CommandError("not a boolean command")
        log.debug("calling boolean command %s", command.name)
        return command.hook(command.name, command.cookie, bool(value))

    def call_function(
        self, function: Optional[CommandEntry], args: Optional[Iterable[str]]
    ) -> str:
        """Call a function and return its string result."""
        if function is None or function.arg_type != CommandArgumentType.WORDS:
            raise CommandError("not a callable function")
        words = _check_args(args)
        log.debug("calling function %s", function.name)
        result = function.hook(function.name, function.cookie, words)
        if not isinstance(result, str):
            raise CommandError(f"function {function.name!r} returned no string")
        return result

    def clear(self) -> None:
        """Forget every registered command and function."""
        self._symbols.clear()