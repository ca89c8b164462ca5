"""Dependency views: where the classifier learns about resolved artifacts."""

from __future__ import annotations

from modpatch.resolvers.base import DependencyView, ResolvedDependencies
from modpatch.resolvers.maven import MavenDependencyView
from modpatch.resolvers.static import StaticDependencyView

__all__ = [
    "DependencyView",
    "MavenDependencyView",
    "ResolvedDependencies",
    "StaticDependencyView",
]
