"""Dependency view protocol: the results of dependency resolution."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from modpatch.model import Dependency, ModuleDescriptor
from modpatch.resolvers.module_info import describe_module


class DependencyView(Protocol):
    """Protocol for resolved dependencies, as consumed by the classifier."""

    def dependencies(self) -> Mapping[Dependency, Path]:
        """Return the resolved dependencies in resolution order."""
        ...

    def module_name(self, path: Path) -> str | None:
        """Return the module name of *path*, or None for an unnamed artifact."""
        ...

    def module_descriptor(self, path: Path) -> ModuleDescriptor | None:
        """Return the module descriptor of *path*, if it has one."""
        ...


class ResolvedDependencies:
    """A dependency view over an ordered mapping, inspecting artifacts lazily.

    Descriptors registered with :meth:`add` are used as-is. Other artifacts
    are inspected with :func:`describe_module` the first time they are
    queried.
    """

    def __init__(self) -> None:
        self._dependencies: dict[Dependency, Path] = {}
        self._descriptors: dict[Path, ModuleDescriptor | None] = {}

    def add(
        self,
        dependency: Dependency,
        path: Path,
        descriptor: ModuleDescriptor | None = None,
        *,
        inspect: bool = True,
    ) -> None:
        """Record a resolved dependency.

        If *descriptor* is None and *inspect* is False, the artifact is
        recorded as unnamed without looking at it.
        """
        self._dependencies[dependency] = path
        if descriptor is not None or not inspect:
            self._descriptors[path] = descriptor

    def dependencies(self) -> Mapping[Dependency, Path]:
        return self._dependencies

    def module_descriptor(self, path: Path) -> ModuleDescriptor | None:
        if path not in self._descriptors:
            self._descriptors[path] = describe_module(path)
        return self._descriptors[path]

    def module_name(self, path: Path) -> str | None:
        descriptor = self.module_descriptor(path)
        return descriptor.name if descriptor is not None else None

    def __len__(self) -> int:
        return len(self._dependencies)
