"""Expression trees of edify scripts, their evaluation and built-in functions.

Every expression is a function applied to argument expressions; literals are
expressions whose function returns their own name.  Functions receive the
argument expressions unevaluated, so they decide what to evaluate and in
which order (which is how the logical operators short-circuit).
"""

from __future__ import annotations

import re
import sys
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Union

MAX_STRING_LEN = 1024

_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)
_STRICT_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_PREFIX_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


class ValueType(IntEnum):
    """Kinds of value an expression can produce."""

    STRING = 1
    BLOB = 2


@dataclass
class Value:
    """The result of evaluating an expression."""

    type: ValueType
    data: Union[str, bytes]

    @classmethod
    def string(cls, text: str) -> "Value":
        """Wrap a string."""
        return cls(ValueType.STRING, text)

    @classmethod
    def blob(cls, data: bytes) -> "Value":
        """Wrap raw bytes."""
        return cls(ValueType.BLOB, bytes(data))

    @property
    def size(self) -> int:
        """Length of the data in bytes."""
        if isinstance(self.data, bytes):
            return len(self.data)
        return len(self.data.encode("utf-8", "surrogateescape"))


@dataclass
class State:
    """Evaluation state: the script text, an application cookie, the error."""

    script: str = ""
    cookie: Any = None
    errmsg: Optional[str] = None


class EvaluationError(Exception):
    """Raised when evaluation aborts; the message is also kept in the state."""


Function = Callable[[str, State, Sequence["Expr"]], Value]


@dataclass
class Expr:
    """A function applied to argument expressions, spanning script[start:end]."""

    fn: Function
    name: str
    args: List["Expr"] = field(default_factory=list)
    start: int = 0
    end: int = 0


def _fail(state: State, message: str) -> None:
    state.errmsg = message
    raise EvaluationError(message)


def _expect_count(state: State, name: str, args: Sequence[Expr], count: int) -> None:
    if len(args) != count:
        _fail(state, f"{name} expects {count} arguments")


def boolean_string(s: str) -> bool:
    """A string is true unless it is empty."""
    return s != ""


def evaluate_value(state: State, expr: Expr) -> Value:
    """Evaluate an expression to a value of any type."""
    return expr.fn(expr.name, state, expr.args)


def evaluate(state: State, expr: Expr) -> str:
    """Evaluate an expression that must produce a string."""
    value = evaluate_value(state, expr)
    if value.type is not ValueType.STRING:
        _fail(state, f"expecting string, got value type {int(value.type)}")
    return value.data  # type: ignore[return-value]


def read_args(state: State, args: Sequence[Expr]) -> List[str]:
    """Evaluate every argument to a string, in order."""
    return [evaluate(state, arg) for arg in args]


def read_value_args(state: State, args: Sequence[Expr]) -> List[Value]:
    """Evaluate every argument to a value, in order."""
    return [evaluate_value(state, arg) for arg in args]


def literal(name: str, state: State, args: Sequence[Expr]) -> Value:
    """The function of a literal expression: its name is its value."""
    return Value.string(name)


def make_literal(text: str, start: int = 0, end: int = 0) -> Expr:
    """Return a literal expression for ``text``."""
    return Expr(literal, text, [], start, end)


def build(fn: Function, start: int, end: int, *args: Expr) -> Expr:
    """Return an operator expression applying ``fn`` to ``args``."""
    return Expr(fn, "(operator)", list(args), start, end)


def concat_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Concatenate all arguments."""
    return Value.string("".join(read_args(state, args)))


def if_else_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """ifelse(cond, then[, else])."""
    if len(args) not in (2, 3):
        _fail(state, "ifelse expects 2 or 3 arguments")
    cond = evaluate(state, args[0])
    if boolean_string(cond):
        return evaluate_value(state, args[1])
    if len(args) == 3:
        return evaluate_value(state, args[2])
    return Value.string(cond)


def abort_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Abort evaluation with the first argument as the message."""
    message: Optional[str] = None
    if args:
        try:
            message = evaluate(state, args[0])
        except EvaluationError:
            message = None
    _fail(state, message if message is not None else "called abort()")
    raise AssertionError("unreachable")


def assert_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Abort unless every argument is true, quoting the failing source."""
    for arg in args:
        if not boolean_string(evaluate(state, arg)):
            _fail(state, "assert failed: " + state.script[arg.start:arg.end])
    return Value.string("")


def _strtol_prefix(text: str) -> int:
    match = _PREFIX_INT.match(text)
    if match is None:
        return 0
    return max(_LONG_MIN, min(_LONG_MAX, int(match.group(1))))


def sleep_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Sleep for the given number of seconds and return the argument."""
    if not args:
        _fail(state, "sleep expects 1 argument")
    text = evaluate(state, args[0])
    seconds = _strtol_prefix(text)
    if seconds > 0:
        time.sleep(seconds)
    return Value.string(text)


def stdout_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Write every argument to standard output."""
    for arg in args:
        sys.stdout.write(evaluate(state, arg))
    return Value.string("")


def logical_and_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Return the left side if false, otherwise the right side."""
    _expect_count(state, name, args, 2)
    left = evaluate(state, args[0])
    if boolean_string(left):
        return evaluate_value(state, args[1])
    return Value.string(left)


def logical_or_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Return the left side if true, otherwise the right side."""
    _expect_count(state, name, args, 2)
    left = evaluate(state, args[0])
    if not boolean_string(left):
        return evaluate_value(state, args[1])
    return Value.string(left)


def logical_not_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Return "t" for a false argument and "" for a true one."""
    _expect_count(state, name, args, 1)
    value = evaluate(state, args[0])
    return Value.string("" if boolean_string(value) else "t")


def substring_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """is_substring(needle, haystack)."""
    _expect_count(state, name, args, 2)
    needle, haystack = read_args(state, args)
    return Value.string("t" if needle in haystack else "")


def equality_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Return "t" when both strings are equal."""
    _expect_count(state, name, args, 2)
    left, right = read_args(state, args)
    return Value.string("t" if left == right else "")


def inequality_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Return "t" when the strings differ."""
    _expect_count(state, name, args, 2)
    left, right = read_args(state, args)
    return Value.string("t" if left != right else "")


def sequence_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Evaluate the left side, then return the right side."""
    _expect_count(state, name, args, 2)
    evaluate_value(state, args[0])
    return evaluate_value(state, args[1])


def _parse_int(text: str) -> Optional[int]:
    match = _STRICT_INT.fullmatch(text)
    if match is None:
        print(f"[{text}] is not an int", file=sys.stderr)
        return None
    return max(_LONG_MIN, min(_LONG_MAX, int(match.group(1))))


def less_than_int_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Return "t" when the first integer is less than the second.

    Arguments that are not integers make the result false.
    """
    if len(args) != 2:
        _fail(state, "less_than_int expects 2 arguments")
    left, right = read_args(state, args)
    left_int = _parse_int(left)
    if left_int is None:
        return Value.string("")
    right_int = _parse_int(right)
    if right_int is None:
        return Value.string("")
    return Value.string("t" if left_int < right_int else "")


def greater_than_int_fn(name: str, state: State, args: Sequence[Expr]) -> Value:
    """Return "t" when the first integer is greater than the second."""
    if len(args) != 2:
        _fail(state, "greater_than_int expects 2 arguments")
    return less_than_int_fn(name, state, [args[1], args[0]])


class FunctionTable:
    """Named functions that scripts may call."""

    def __init__(self) -> None:
        self._functions: Dict[str, Function] = {}

    def register(self, name: str, fn: Function) -> None:
        """Add a function; a name may be registered only once."""
        if name in self._functions:
            raise ValueError(f"function {name!r} is already registered")
        self._functions[name] = fn

    def find(self, name: str) -> Optional[Function]:
        """Return the function with this name, or None."""
        return self._functions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._functions))


def register_builtins(table: FunctionTable) -> None:
    """Register the built-in functions."""
    table.register("ifelse", if_else_fn)
    table.register("abort", abort_fn)
    table.register("assert", assert_fn)
    table.register("concat", concat_fn)
    table.register("is_substring", substring_fn)
    table.register("stdout", stdout_fn)
    table.register("sleep", sleep_fn)
    table.register("less_than_int", less_than_int_fn)
    table.register("greater_than_int", greater_than_int_fn)