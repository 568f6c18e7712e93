"""Syntax tree of amend scripts and a textual dump of it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Union

_MAX_PAD = 7 * 64


class StringOp(Enum):
    """String comparison operators."""

    LT = "LT"
    LE = "LE"
    GT = "GT"
    GE = "GE"
    EQ = "EQ"
    NE = "NE"


class BooleanOp(Enum):
    """Boolean operators; NOT is the only unary one."""

    NOT = "NOT"
    EQ = "EQ"
    NE = "NE"
    AND = "AND"
    OR = "OR"


@dataclass
class LiteralString:
    """A literal string value."""

    text: str
    line: int = 0


@dataclass
class FunctionCall:
    """A call to a registered function, yielding a string."""

    name: str
    args: List["StringValue"] = field(default_factory=list)
    fn: Optional[Any] = None
    line: int = 0


StringValue = Union[LiteralString, FunctionCall]


@dataclass
class StringComparison:
    """A comparison of two string values."""

    op: StringOp
    arg1: StringValue
    arg2: StringValue
    line: int = 0


@dataclass
class BooleanExpression:
    """A boolean operator applied to one or two boolean values."""

    op: BooleanOp
    arg1: "BooleanValue"
    arg2: Optional["BooleanValue"] = None
    line: int = 0

    def __post_init__(self) -> None:
        if self.op is BooleanOp.NOT:
            if self.arg2 is not None:
                raise ValueError("NOT takes a single argument")
        elif self.arg2 is None:
            raise ValueError(f"{self.op.value} takes two arguments")


BooleanValue = Union[BooleanExpression, StringComparison]


@dataclass
class WordList:
    """The plain word arguments of a command."""

    words: List[str] = field(default_factory=list)
    line: int = 0


@dataclass
class AmendCommand:
    """One command of a script with its arguments."""

    name: str
    args: Union[WordList, BooleanValue]
    cmd: Optional[Any] = None
    line: int = 0

    @property
    def boolean_args(self) -> bool:
        """True when the command takes a boolean expression."""
        return not isinstance(self.args, WordList)


@dataclass
class CommandList:
    """The commands of a script, in order."""

    commands: List[AmendCommand] = field(default_factory=list)

    def append(self, command: AmendCommand) -> None:
        self.commands.append(command)

    def __iter__(self) -> Iterator[AmendCommand]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)


def _pad(level: int) -> str:
    return " " * min(level * 4, _MAX_PAD)


def _string_value_lines(level: int, value: Any) -> Iterator[str]:
    if isinstance(value, LiteralString):
        yield f'{_pad(level)}"{value.text}"'
    elif isinstance(value, FunctionCall):
        yield f"{_pad(level)}FUNCTION {value.name} ("
        for arg in value.args:
            yield from _string_value_lines(level + 1, arg)
        yield f"{_pad(level)})"
    else:
        yield f"{_pad(level)}<UNKNOWN SVAL TYPE {type(value).__name__}>"


def _boolean_value_lines(level: int, value: Any) -> Iterator[str]:
    if isinstance(value, BooleanExpression):
        yield f"{_pad(level)}BOOLEAN {value.op.value} {{"
        yield from _boolean_value_lines(level + 1, value.arg1)
        if value.op is not BooleanOp.NOT:
            yield from _boolean_value_lines(level + 1, value.arg2)
        yield f"{_pad(level)}}}"
    elif isinstance(value, StringComparison):
        yield f"{_pad(level)}STRING {value.op.value} {{"
        yield from _string_value_lines(level + 1, value.arg1)
        yield from _string_value_lines(level + 1, value.arg2)
        yield f"{_pad(level)}}}"
    else:
        yield f"{_pad(1)}<UNKNOWN BVAL TYPE {type(value).__name__}>"


def _command_lines(command: AmendCommand) -> Iterator[str]:
    yield f'command "{command.name}" {{'
    if command.boolean_args:
        yield from _boolean_value_lines(1, command.args)
    else:
        for word in command.args.words:
            yield f'{_pad(1)}"{word}"'
    yield "}"


def dump_command_list(command_list: CommandList) -> str:
    """Return an indented, human-readable dump of the commands."""
    return "".join(
        line + "\n" for command in command_list for line in _command_lines(command)
    )