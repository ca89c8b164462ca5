"""Dependency view of a Maven project, resolved via jgo."""

from __future__ import annotations

import logging
from pathlib import Path

from modpatch.errors import ConfigError
from modpatch.model import Dependency, Scope
from modpatch.resolvers.base import ResolvedDependencies

logger = logging.getLogger(__name__)


class MavenDependencyView(ResolvedDependencies):
    """Resolved dependencies of a ``pom.xml``, in jgo resolution order."""

    @classmethod
    def from_pom(cls, pom_path: Path) -> MavenDependencyView:
        try:
            from jgo.maven import POM, MavenContext, Model
        except ImportError:
            raise ConfigError(
                "jgo is not installed, cannot resolve Maven dependencies. "
                "Install with: pip install modpatch[maven]"
            ) from None

        if not pom_path.exists():
            raise FileNotFoundError(f"No such POM: {pom_path}")

        try:
            pom = POM(pom_path)
            model = Model(pom, MavenContext())
            deps, _ = model.dependencies()
        except (ValueError, KeyError) as e:
            raise ConfigError(f"Could not resolve dependencies of {pom_path}: {e}") from e

        view = cls()
        for dep in deps:
            key = f"{dep.groupId}:{dep.artifactId}"
            try:
                scope = Scope.parse(dep.scope)
            except ValueError:
                logger.debug("Skipping %s: unknown scope %r", key, dep.scope)
                continue
            try:
                jar = dep.artifact.resolve()
            except (OSError, ValueError, KeyError) as e:
                logger.debug("Could not resolve artifact %s: %s", key, e)
                continue
            view.add(Dependency(coordinates=key, scope=scope), Path(jar))

        logger.debug("Maven deps: %d resolved from %s", len(view), pom_path)
        return view
