"""A small symbol table keyed by name and a flags value."""

from __future__ import annotations

from typing import Any, Iterator, Optional, Tuple


class DuplicateSymbolError(ValueError):
    """Raised when a symbol is added twice with the same flags."""


class SymbolTable:
    """Maps ``(symbol, flags)`` pairs to cookies, keeping insertion order."""

    def __init__(self) -> None:
        self._entries: dict[Tuple[str, int], Any] = {}

    def add(self, symbol: str, flags: int, cookie: Any) -> None:
        """Insert a symbol; the symbol and the cookie must not be None."""
        if symbol is None:
            raise ValueError("symbol must not be None")
        if cookie is None:
            raise ValueError("cookie must not be None")
        key = (symbol, flags)
        if key in self._entries:
            raise DuplicateSymbolError(
                f"symbol {symbol!r} with flags {flags} is already present"
            )
        self._entries[key] = cookie

    def find(self, symbol: Optional[str], flags: int) -> Any:
        """Return the cookie stored for the symbol and flags, or None."""
        if symbol is None:
            return None
        return self._entries.get((symbol, flags))

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Tuple[str, int, Any]]:
        for (symbol, flags), cookie in self._entries.items():
            yield symbol, flags, cookie