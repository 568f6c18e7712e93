# recokit

Building blocks for the update scripts run in device recovery environments.
The package provides syntax trees and evaluators for two small script
languages, along with the registry of commands and functions that scripts
call. It is a plain library with no third-party dependencies.

## Symbol table: `recokit.symtab`

`SymbolTable` maps a name and an integer flag to a value, which the code calls
a cookie. A name can be stored once for each flag. If you add a name that is
already present under the same flag, `DuplicateSymbolError` is raised and the
first value stays. A symbol or cookie of `None` raises `ValueError`. Looking
up a missing entry, or `None`, returns `None`.

```python
from recokit.symtab import SymbolTable

table = SymbolTable()
table.add("one", 0, 1)
table.add("one", 333, 11)
assert table.find("one", 0) == 1
assert table.find("one", 333) == 11
assert table.find("onee", 0) is None
```

The table also supports `len()`, `in` with a `(symbol, flags)` pair,
iteration over `(symbol, flags, cookie)` triples, and `clear()`.

## Command registry: `recokit.amend_commands`

`CommandRegistry` holds the commands and functions that a command script may
call.

- `register_command(name, arg_type, hook, cookie)` registers a command.
  `arg_type` is `CommandArgumentType.WORDS` or `CommandArgumentType.BOOLEAN`.
  The hook is called as `hook(name, cookie, words)` or
  `hook(name, cookie, value)`, and returns an integer status where `0` means
  success.
- `register_function(name, hook, cookie)` registers a function. It is called
  as `hook(name, cookie, words)` and must return a string.
- `find_command` and `find_function` return the `CommandEntry`, or `None`.
  A command and a function can share a name.
- `call_command`, `call_boolean_command` and `call_function` invoke an entry.
  A `CommandError` is raised in these cases:
  - the entry is missing;
  - the entry has the wrong argument type;
  - a word is `None`;
  - a function returns something other than a string.
- `argument_type_of(entry)` returns the entry's argument type, or
  `CommandArgumentType.UNKNOWN` for `None`.

Registering without a name or hook, with an invalid argument type, or under a
name that is already taken also raises `CommandError`.

## Command scripts: `recokit.amend_ast`, `recokit.amend_execute`, `recokit.amend_register`

A script is a `CommandList` of `AmendCommand` entries. Each command takes one
of two kinds of argument:

- a `WordList`;
- a boolean value, built from `BooleanExpression` (operators in `BooleanOp`;
  `NOT` is unary) and `StringComparison` (operators in `StringOp`).

String operands are either `LiteralString` or `FunctionCall`.
`dump_command_list` returns an indented text rendering of the tree.

`recokit.amend_execute` runs trees against a registry:

- `evaluate_string` evaluates a literal or a function call.
- `evaluate_boolean` evaluates a boolean value. Both operands of a binary
  operator are always evaluated.
- `execute_command` runs one command and returns its status.
- `execute_command_list` runs the commands in order. It stops at the first
  non-zero status or error and raises `ExecutionError`. The exception's
  `status` and `line` describe the failure, and `code` is the line when it is
  known, otherwise the status.

`recokit.amend_register` provides a standard set of commands and functions.

`register_update_commands(registry)` adds these commands:

- `assert`, which succeeds when its boolean is true.
- `copy_dir`, `format`, `mark` and `done`. These are registered but not
  supported: each one logs an error and returns status `-1`.

`register_update_functions(registry)` adds these functions:

| Function | Returns |
| --- | --- |
| `update_forced()` | always `"true"` |
| `get_mark(resource)` | always `""` |
| `hash_dir(dir)` | the fixed string `"hashvalue"` |
| `matches(str, str1, ...)` | `str` if it equals any later argument, otherwise `""` |
| `concat(...)` | all arguments joined together |

```python
from recokit.amend_ast import (
    AmendCommand, CommandList, FunctionCall, LiteralString,
    StringComparison, StringOp,
)
from recokit.amend_commands import CommandRegistry
from recokit.amend_execute import execute_command_list
from recokit.amend_register import (
    register_update_commands, register_update_functions,
)

registry = CommandRegistry()
register_update_commands(registry)
register_update_functions(registry)

script = CommandList([
    AmendCommand(
        "assert",
        StringComparison(StringOp.EQ, FunctionCall("update_forced"),
                         LiteralString("true")),
        line=1,
    ),
])
execute_command_list(registry, script)  # raises ExecutionError on failure
```

## Expression scripts: `recokit.edify`

In this language everything is an `Expr`, which is a function applied to
unevaluated argument expressions. A literal is an expression whose function
returns its own name.

- Trees are built with `make_literal(text, start, end)` and
  `build(fn, start, end, *args)`.
- Trees are evaluated against a `State` that holds the script text:
  - `evaluate` returns a string;
  - `evaluate_value` returns a `Value` whose type is `ValueType.STRING` or
    `ValueType.BLOB`.
- A string is true unless it is empty (`boolean_string`).

The operator functions give the semantics of the language's operators:

| Function | Operator |
| --- | --- |
| `logical_and_fn` | `&&` |
| `logical_or_fn` | `\|\|` |
| `logical_not_fn` | `!` |
| `equality_fn` | `==` |
| `inequality_fn` | `!=` |
| `sequence_fn` | `;` |
| `concat_fn` | `+` |

`&&` and `||` short-circuit. `read_args` and `read_value_args` evaluate a list
of arguments in order.

`FunctionTable` maps names to functions. `register` raises `ValueError` for a
duplicate name, and `find` returns `None` for an unknown one.

`register_builtins(table)` adds the following functions:

- `ifelse`
- `abort`
- `assert`
- `concat`
- `is_substring`
- `stdout`
- `sleep`
- `less_than_int`
- `greater_than_int`

The integer comparisons return `""` when an argument is not an integer.

Evaluation failures raise `EvaluationError`, and the message is also stored in
`state.errmsg`. The failures include:

- `abort()`;
- a false `assert`, which gives `assert failed: <source text>`;
- a wrong argument count.

```python
from recokit.edify import State, build, evaluate, logical_and_fn, make_literal

state = State(script="a && b")
tree = build(logical_and_fn, 0, 6, make_literal("a", 0, 1), make_literal("b", 5, 6))
assert evaluate(state, tree) == "b"
```

## What the package does not do

The package works on syntax trees that are already built. It has no lexer or
parser for script text in either language, and no command-line program for
running script files. It does not read or write the recovery or bootloader
partitions, and it does not stage firmware images.

## Requirements

Python 3.10 or later. Tests use pytest (`pip install recokit[test]`).