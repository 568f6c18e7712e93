"""Evaluation of amend syntax trees against a command registry."""

from __future__ import annotations

from typing import Any, Optional

from .amend_ast import (
    AmendCommand,
    BooleanExpression,
    BooleanOp,
    CommandList,
    FunctionCall,
    LiteralString,
    StringComparison,
    StringOp,
    WordList,
)
from .amend_commands import (
    CommandArgumentType,
    CommandEntry,
    CommandError,
    CommandRegistry,
    argument_type_of,
)


class ExecutionError(Exception):
    """Raised when evaluating or running a script fails.

    ``status`` is the failing status and ``line`` the script line of the
    command that failed, or zero if unknown.
    """

    def __init__(self, message: str, status: int = -1, line: int = 0) -> None:
        super().__init__(message)
        self.status = status
        self.line = line

    @property
    def code(self) -> int:
        """The line that failed when known, otherwise the status."""
        return self.line if self.line > 0 else self.status


def _resolve_function(registry: CommandRegistry, call: FunctionCall) -> CommandEntry:
    fn = call.fn if call.fn is not None else registry.find_function(call.name)
    if fn is None:
        raise ExecutionError(f"unknown function {call.name!r}")
    return fn


def _resolve_command(
    registry: CommandRegistry, command: AmendCommand
) -> Optional[CommandEntry]:
    if command.cmd is not None:
        return command.cmd
    return registry.find_command(command.name)


def evaluate_string(registry: CommandRegistry, value: Any) -> str:
    """Evaluate a literal or a function call to a string."""
    if isinstance(value, LiteralString):
        return value.text
    if isinstance(value, FunctionCall):
        fn = _resolve_function(registry, value)
        args = [evaluate_string(registry, arg) for arg in value.args]
        try:
            return registry.call_function(fn, args)
        except CommandError as exc:
            raise ExecutionError(str(exc), exc.status) from exc
    raise ExecutionError(f"unknown string value {type(value).__name__}")


def _compare(op: StringOp, left: str, right: str) -> bool:
    if op is StringOp.LT:
        return left < right
    if op is StringOp.LE:
        return left <= right
    if op is StringOp.GT:
        return left > right
    if op is StringOp.GE:
        return left >= right
    if op is StringOp.EQ:
        return left == right
    if op is StringOp.NE:
        return left != right
    raise ExecutionError(f"unknown string operator {op!r}")


def evaluate_boolean(registry: CommandRegistry, value: Any) -> bool:
    """Evaluate a boolean expression or string comparison.

    Both operands of a binary operator are always evaluated.
    """
    if isinstance(value, BooleanExpression):
        arg1 = evaluate_boolean(registry, value.arg1)
        if value.op is BooleanOp.NOT:
            return not arg1
        arg2 = evaluate_boolean(registry, value.arg2)
        if value.op is BooleanOp.EQ:
            return arg1 == arg2
        if value.op is BooleanOp.NE:
            return arg1 != arg2
        if value.op is BooleanOp.AND:
            return arg1 and arg2
        if value.op is BooleanOp.OR:
            return arg1 or arg2
        raise ExecutionError(f"unknown boolean operator {value.op!r}")
    if isinstance(value, StringComparison):
        left = evaluate_string(registry, value.arg1)
        right = evaluate_string(registry, value.arg2)
        return _compare(value.op, left, right)
    raise ExecutionError(f"unknown boolean value {type(value).__name__}")


def execute_command(registry: CommandRegistry, command: AmendCommand) -> int:
    """Run one command and return the status its hook reported."""
    cmd = _resolve_command(registry, command)
    arg_type = argument_type_of(cmd)
    try:
        if arg_type is CommandArgumentType.BOOLEAN:
            if not command.boolean_args:
                raise ExecutionError(f"command {command.name!r} needs a boolean")
            value = evaluate_boolean(registry, command.args)
            return registry.call_boolean_command(cmd, value)
        if arg_type is CommandArgumentType.WORDS:
            if not isinstance(command.args, WordList):
                raise ExecutionError(f"command {command.name!r} needs words")
            return registry.call_command(cmd, command.args.words)
    except CommandError as exc:
        raise ExecutionError(str(exc), exc.status) from exc
    raise ExecutionError(f"unknown command {command.name!r}")


def execute_command_list(registry: CommandRegistry, command_list: CommandList) -> None:
    """Run every command in order, stopping at the first failure."""
    for command in command_list:
        try:
            status = execute_command(registry, command)
        except ExecutionError as exc:
            exc.line = command.line
            raise
        if status != 0:
            raise ExecutionError(
                f"command {command.name!r} failed with status {status}",
                status,
                command.line,
            )