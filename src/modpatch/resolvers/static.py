"""Dependency view loaded from a YAML listing of resolved dependencies.

Example::

    dependencies:
      - path: lib/junit-jupiter-api-5.11.jar
        scope: test
        coordinates: org.junit.jupiter:junit-jupiter-api:5.11.0
        module: org.junit.jupiter.api
        requires: [org.opentest4j, org.junit.platform.commons]
      - path: lib/hamcrest-2.2.jar
        scope: test-only

Entries without ``module`` are inspected on disk. Artifacts that do not
exist are treated as unnamed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from modpatch.errors import ConfigError
from modpatch.model import Dependency, ModuleDescriptor, Scope
from modpatch.resolvers.base import ResolvedDependencies

logger = logging.getLogger(__name__)


class StaticDependencyView(ResolvedDependencies):
    """Resolved dependencies listed in a YAML document."""

    @classmethod
    def from_yaml(cls, path: Path) -> StaticDependencyView:
        """Load a dependency listing. Relative paths are resolved against
        the directory containing the listing."""
        import yaml

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e
        return cls.from_data(data, base_dir=path.parent, source=str(path))

    @classmethod
    def from_data(
        cls, data: object, *, base_dir: Path, source: str = "<data>"
    ) -> StaticDependencyView:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{source}: expected a mapping at top level")
        entries = data.get("dependencies", [])
        if not isinstance(entries, list):
            raise ConfigError(f"{source}: 'dependencies' must be a list")

        view = cls()
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict) or "path" not in entry:
                raise ConfigError(f"{source}: dependency #{index + 1} has no 'path'")
            artifact = base_dir / str(entry["path"])
            try:
                scope = Scope.parse(entry.get("scope"))
            except ValueError as e:
                raise ConfigError(f"{source}: {e}") from None
            coordinates = str(entry.get("coordinates") or artifact.name)
            dependency = Dependency(coordinates=coordinates, scope=scope)

            module = entry.get("module")
            if module:
                requires = entry.get("requires") or []
                if not isinstance(requires, list):
                    raise ConfigError(
                        f"{source}: 'requires' of {coordinates} must be a list"
                    )
                descriptor = ModuleDescriptor(
                    name=str(module),
                    requires=tuple(str(r) for r in requires),
                    automatic=bool(entry.get("automatic", False)),
                )
                view.add(dependency, artifact, descriptor)
            elif artifact.exists():
                view.add(dependency, artifact)
            else:
                logger.debug("%s not found, treated as unnamed", artifact)
                view.add(dependency, artifact, inspect=False)

        logger.debug("Loaded %d dependencies from %s", len(view), source)
        return view
