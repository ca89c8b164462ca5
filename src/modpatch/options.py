"""Ordered compiler options and their serialization to Java argument files.

Java argument files are passed to ``javac`` with the @-syntax
(``javac @options``). See the COMMAND-LINE ARGUMENT FILES section of
``man 1 javac`` for the quoting rules.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator
from typing import TextIO

logger = logging.getLogger(__name__)

# An argument containing whitespace or a quote must be written in double quotes
_NEEDS_QUOTES = re.compile(r"[\s'\"]")

_QUOTED_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        "'": "\\'",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\f": "\\f",
    }
)


class Options:
    """An ordered list of ``(option, value)`` pairs for the compiler."""

    def __init__(self) -> None:
        self._pairs: list[tuple[str, str]] = []

    @staticmethod
    def quote(arg: str) -> str:
        """Return *arg* as it must appear on a line of an argument file."""
        if not arg:
            return '""'
        if _NEEDS_QUOTES.search(arg) is None:
            return arg
        return '"' + arg.translate(_QUOTED_ESCAPES) + '"'

    def add_if_non_blank(self, option: str, value: str | None) -> bool:
        """Append the option unless *value* is blank. Return True if added."""
        if value is None or not value.strip():
            logger.debug("Omitting %s: no value", option)
            return False
        self._pairs.append((option, value))
        return True

    def extend(self, pairs: Iterable[tuple[str, str]]) -> None:
        for option, value in pairs:
            self.add_if_non_blank(option, value)

    def values(self, option: str) -> list[str]:
        """Return every value recorded for *option*, in insertion order."""
        return [value for name, value in self._pairs if name == option]

    def as_args(self) -> list[str]:
        """Flatten into ``[option, value, option, value, ...]``."""
        args: list[str] = []
        for option, value in self._pairs:
            args.append(option)
            args.append(value)
        return args

    def write_to(self, file: TextIO) -> None:
        """Write the options as a Java argument file, one argument per line."""
        file.writelines(self.quote(arg) + os.linesep for arg in self.as_args())

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Options):
            return self._pairs == other._pairs
        return NotImplemented

    def __repr__(self) -> str:
        return f"Options({self._pairs!r})"
