"""The standard set of update commands and functions for amend scripts."""

from __future__ import annotations

import logging
from typing import Any, List

from .amend_commands import CommandArgumentType, CommandError, CommandRegistry

_log = logging.getLogger(__name__)


def _cmd_assert(name: str, cookie: Any, value: bool) -> int:
    """Succeed (0) when the argument is true, fail (1) when it is false."""
    if not isinstance(value, bool):
        raise CommandError(f"{name}: expected a boolean argument, got {value!r}", -1)
    return 0 if value else 1


def _cmd_unsupported(name: str, cookie: Any, args: List[str]) -> int:
    """Check the words of format, copy_dir, mark and done, then fail: none is available."""
    if args is None or any(not isinstance(word, str) for word in args):
        raise CommandError(f"{name}: arguments must be words", -1)
    _log.error("%s %s: command not supported", name, " ".join(args))
    return -1


def _expect_count(name: str, args: List[str], count: int) -> None:
    if len(args) != count:
        raise CommandError(f"{name}: wrong number of arguments ({len(args)})", 1)


def _fn_update_forced(name: str, cookie: Any, args: List[str]) -> str:
    """Return "true": the update is always forced."""
    _expect_count(name, args, 0)
    return "true"


def _fn_get_mark(name: str, cookie: Any, args: List[str]) -> str:
    """Return the mark of a resource; no marks are kept, so it is empty."""
    _expect_count(name, args, 1)
    return ""


def _fn_hash_dir(name: str, cookie: Any, args: List[str]) -> str:
    """Return the hash of a directory."""
    _expect_count(name, args, 1)
    return "hashvalue"


def _fn_matches(name: str, cookie: Any, args: List[str]) -> str:
    """Return the first argument if it equals any later one, else ""."""
    if len(args) < 2:
        raise CommandError(f"{name}: not enough arguments ({len(args)} < 2)", 1)
    first, *candidates = args
    return first if first in candidates else ""


def _fn_concat(name: str, cookie: Any, args: List[str]) -> str:
    """Return all arguments joined together."""
    return "".join(args)


def register_update_commands(registry: CommandRegistry) -> None:
    """Register assert, copy_dir, format, mark and done."""
    registry.register_command("assert", CommandArgumentType.BOOLEAN, _cmd_assert, None)
    for name in ("copy_dir", "format", "mark", "done"):
        registry.register_command(name, CommandArgumentType.WORDS, _cmd_unsupported, None)


def register_update_functions(registry: CommandRegistry) -> None:
    """Register update_forced, get_mark, hash_dir, matches and concat."""
    registry.register_function("update_forced", _fn_update_forced, None)
    registry.register_function("get_mark", _fn_get_mark, None)
    registry.register_function("hash_dir", _fn_hash_dir, None)
    registry.register_function("matches", _fn_matches, None)
    registry.register_function("concat", _fn_concat, None)