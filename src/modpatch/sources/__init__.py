"""Source discovery and partitioning by release and module."""

from __future__ import annotations

from modpatch.sources.directory import (
    FileKind,
    SourceDirectory,
    SourceFile,
    discover_sources,
    output_directory_for,
)
from modpatch.sources.partition import (
    NO_RELEASE,
    SourcesForRelease,
    group_by_release_and_module,
)

__all__ = [
    "NO_RELEASE",
    "FileKind",
    "SourceDirectory",
    "SourceFile",
    "SourcesForRelease",
    "discover_sources",
    "group_by_release_and_module",
    "output_directory_for",
]
