"""Language-agnostic data model shared by the resolvers and the patch model."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, MutableSet
from dataclasses import dataclass


class Scope(enum.Enum):
    """Dependency scope, following the Maven 4 scope names."""

    NONE = "none"
    COMPILE = "compile"
    COMPILE_ONLY = "compile-only"
    PROVIDED = "provided"
    RUNTIME = "runtime"
    SYSTEM = "system"
    TEST = "test"
    TEST_ONLY = "test-only"
    TEST_RUNTIME = "test-runtime"

    @classmethod
    def parse(cls, text: str | None) -> Scope:
        """Parse a Maven scope string; a missing scope means ``compile``."""
        if text is None or not text.strip():
            return cls.COMPILE
        key = text.strip().lower().replace("_", "-")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown dependency scope: {text!r}") from None

    @property
    def is_test(self) -> bool:
        return self in (Scope.TEST, Scope.TEST_ONLY, Scope.TEST_RUNTIME)


@dataclass(frozen=True)
class Dependency:
    """A resolved dependency, used as the key of a dependency mapping."""

    coordinates: str
    scope: Scope = Scope.COMPILE


@dataclass(frozen=True)
class ModuleDescriptor:
    """The parts of a ``module-info`` that matter for the module graph."""

    name: str
    requires: tuple[str, ...] = ()
    automatic: bool = False


class OrderedSet(MutableSet):
    """A set remembering insertion order, backed by a ``dict``."""

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._items: dict[str, None] = dict.fromkeys(values)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"OrderedSet({list(self._items)!r})"

    def add(self, value: str) -> None:
        self._items[value] = None

    def discard(self, value: str) -> None:
        self._items.pop(value, None)

    def add_new(self, value: str) -> bool:
        """Add *value* and return True if it was not already present."""
        if value in self._items:
            return False
        self._items[value] = None
        return True

    def remove_if_present(self, value: str) -> bool:
        """Remove *value* and return True if it was present."""
        if value in self._items:
            del self._items[value]
            return True
        return False

